"""Static catalog of conversion categories, accepted inputs and output formats."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple


class Category(str, Enum):
    DOCUMENT = "Document"
    IMAGE = "Image"
    AUDIO = "Audio"
    VIDEO = "Video"
    ARCHIVE = "Archive"
    OCR = "OCR"


@dataclass(frozen=True)
class FormatOption:
    id: str
    label: str
    extension: str


@dataclass(frozen=True)
class AcceptRule:
    mime_prefixes: Tuple[str, ...] = ()
    extensions: Tuple[str, ...] = ()

    @property
    def description(self) -> str:
        parts = [f"{prefix}*" for prefix in self.mime_prefixes]
        parts.extend(f".{ext}" for ext in self.extensions)
        return ",".join(parts)


_PDF = FormatOption("pdf", "PDF", "pdf")
_DOCX = FormatOption("docx", "Word", "docx")
_TXT = FormatOption("txt", "Text", "txt")

FORMATS: Dict[Category, Tuple[FormatOption, ...]] = {
    Category.DOCUMENT: (_PDF, _DOCX, _TXT),
    Category.IMAGE: (
        FormatOption("jpg", "JPEG", "jpg"),
        FormatOption("png", "PNG", "png"),
        FormatOption("webp", "WebP", "webp"),
        FormatOption("svg", "SVG", "svg"),
    ),
    Category.AUDIO: (
        FormatOption("mp3", "MP3", "mp3"),
        FormatOption("wav", "WAV", "wav"),
        FormatOption("aac", "AAC", "aac"),
    ),
    Category.VIDEO: (
        FormatOption("mp4", "MP4", "mp4"),
        FormatOption("mov", "MOV", "mov"),
        FormatOption("avi", "AVI", "avi"),
    ),
    Category.ARCHIVE: (
        FormatOption("zip", "ZIP", "zip"),
        FormatOption("rar", "RAR", "rar"),
        FormatOption("7z", "7Z", "7z"),
    ),
    Category.OCR: (_TXT, _DOCX),
}

ACCEPT_RULES: Dict[Category, AcceptRule] = {
    Category.DOCUMENT: AcceptRule(extensions=("pdf", "doc", "docx", "txt", "ppt", "pptx")),
    Category.IMAGE: AcceptRule(mime_prefixes=("image/",)),
    Category.AUDIO: AcceptRule(mime_prefixes=("audio/",)),
    Category.VIDEO: AcceptRule(mime_prefixes=("video/",)),
    Category.ARCHIVE: AcceptRule(extensions=("zip", "rar", "7z", "tar")),
    Category.OCR: AcceptRule(mime_prefixes=("image/",), extensions=("pdf",)),
}


def _check_complete() -> None:
    for table_name, table in (("FORMATS", FORMATS), ("ACCEPT_RULES", ACCEPT_RULES)):
        missing = [category.value for category in Category if category not in table]
        if missing:
            raise RuntimeError(f"{table_name} has no entry for: {', '.join(missing)}")


_check_complete()


def formats_for(category: Category) -> Tuple[FormatOption, ...]:
    return FORMATS[Category(category)]


def accept_rule_for(category: Category) -> AcceptRule:
    return ACCEPT_RULES[Category(category)]


def find_format(category: Category, format_id: str) -> FormatOption:
    """Return the option ``format_id`` of ``category``.

    Asking for an id the category does not offer is a caller bug, so this
    raises ``KeyError`` instead of returning a sentinel.
    """
    for option in formats_for(category):
        if option.id == format_id:
            return option
    raise KeyError(f"{format_id!r} is not an output format of {Category(category).value}")


__all__ = [
    "Category",
    "FormatOption",
    "AcceptRule",
    "FORMATS",
    "ACCEPT_RULES",
    "formats_for",
    "accept_rule_for",
    "find_format",
]
