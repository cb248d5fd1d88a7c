"""Syntactic input checks applied before a file is accepted into a session.

The rules look only at the declared MIME type and the file name. Nothing here
opens or parses the bytes, so a mislabeled file can pass and fail later during
extraction.
"""

from __future__ import annotations

from typing import Callable, Dict

from .catalog import AcceptRule, Category, accept_rule_for
from .models import SourceFile

Rule = Callable[[SourceFile, AcceptRule], bool]


def _mime_matches(file: SourceFile, rule: AcceptRule) -> bool:
    mime = (file.declared_mime_type or "").lower()
    return any(mime.startswith(prefix) for prefix in rule.mime_prefixes)


def _extension_matches(file: SourceFile, rule: AcceptRule) -> bool:
    return any(file.has_extension(ext) for ext in rule.extensions)


def _mime_or_extension(file: SourceFile, rule: AcceptRule) -> bool:
    return _mime_matches(file, rule) or _extension_matches(file, rule)


RULES: Dict[Category, Rule] = {
    Category.DOCUMENT: _extension_matches,
    Category.IMAGE: _mime_matches,
    Category.AUDIO: _mime_matches,
    Category.VIDEO: _mime_matches,
    Category.ARCHIVE: _extension_matches,
    Category.OCR: _mime_or_extension,
}

_missing = [category.value for category in Category if category not in RULES]
if _missing:
    raise RuntimeError(f"No validation rule for: {', '.join(_missing)}")


def validate(file: SourceFile, category: Category | None = None) -> bool:
    category = Category(category or Category.DOCUMENT)
    return RULES[category](file, accept_rule_for(category))


def rejection_message(category: Category | None = None) -> str:
    category = Category(category or Category.DOCUMENT)
    return f"Invalid file type for {category.value}."


__all__ = ["RULES", "validate", "rejection_message"]
