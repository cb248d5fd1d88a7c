"""Shared plugin utilities."""

from __future__ import annotations

import re
from io import BytesIO

from pypdf import PdfReader

_PAGE_OBJECT = re.compile(rb"/Type\s*/Page(?![A-Za-z])")


def count_pdf_pages(data: bytes) -> int:
    """Return the page count of a PDF byte stream, raising on unreadable input."""
    reader = PdfReader(BytesIO(data))
    return len(reader.pages)


def estimate_pdf_pages(data: bytes) -> int:
    """Count page objects by scanning the raw bytes.

    Used when the document structure cannot be parsed; compressed object
    streams hide their pages from this scan, so the result may be 0.
    """
    return len(_PAGE_OBJECT.findall(data))
