"""Domain models shared by the validator, plugins and the session."""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Union

if TYPE_CHECKING:  # pragma: no cover
    from PIL.Image import Image

DEFAULT_MIME_TYPE = "application/octet-stream"


def file_stem(name: str) -> str:
    """Strip the last extension; names without one (or only a leading dot) stay whole."""
    if "." not in name:
        return name
    return name.rsplit(".", 1)[0] or name


@dataclass(frozen=True)
class SourceFile:
    """An uploaded file held in memory for the lifetime of one session."""

    raw_bytes: bytes = field(repr=False)
    file_name: str
    declared_mime_type: str = ""

    @property
    def size_bytes(self) -> int:
        return len(self.raw_bytes)

    @property
    def stem(self) -> str:
        return file_stem(self.file_name)

    def has_extension(self, extension: str) -> bool:
        return self.file_name.lower().endswith(f".{extension.lower()}")

    @classmethod
    def from_path(cls, path: Path, mime_type: str | None = None) -> "SourceFile":
        path = Path(path)
        if mime_type is None:
            mime_type, _ = mimetypes.guess_type(path.name)
        return cls(
            raw_bytes=path.read_bytes(),
            file_name=path.name,
            declared_mime_type=mime_type or "",
        )


@dataclass(frozen=True)
class RasterContent:
    image: "Image" = field(repr=False)
    width: int
    height: int
    source_name: str


@dataclass(frozen=True)
class TextContent:
    text: str
    source_name: str
    page_count: Optional[int] = None


@dataclass(frozen=True)
class PassthroughContent:
    source: SourceFile


ExtractedContent = Union[RasterContent, TextContent, PassthroughContent]


@dataclass(frozen=True)
class ConversionResult:
    output_bytes: bytes = field(repr=False)
    mime_type: str
    suggested_file_name: str
    passthrough: bool = False

    @property
    def size_bytes(self) -> int:
        return len(self.output_bytes)


def suggested_file_name(source_name: str, extension: str) -> str:
    return f"{file_stem(source_name)}_converted.{extension}"


__all__ = [
    "DEFAULT_MIME_TYPE",
    "file_stem",
    "SourceFile",
    "RasterContent",
    "TextContent",
    "PassthroughContent",
    "ExtractedContent",
    "ConversionResult",
    "suggested_file_name",
]
