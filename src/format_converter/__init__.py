"""In-memory file format conversion engine."""

from __future__ import annotations

from .catalog import AcceptRule, Category, FormatOption, accept_rule_for, find_format, formats_for
from .errors import (
	ConversionError,
	ConversionFailure,
	DecodeError,
	EncodeError,
	GenericConversionFailure,
	ValidationRejected,
)
from .models import ConversionResult, SourceFile
from .session import ConversionSession, SessionState
from .validation import rejection_message, validate

__all__ = [
	"AcceptRule",
	"Category",
	"FormatOption",
	"accept_rule_for",
	"find_format",
	"formats_for",
	"ConversionError",
	"ConversionFailure",
	"DecodeError",
	"EncodeError",
	"GenericConversionFailure",
	"ValidationRejected",
	"ConversionResult",
	"SourceFile",
	"ConversionSession",
	"SessionState",
	"rejection_message",
	"validate",
]
