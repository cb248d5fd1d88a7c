"""Shared pytest fixtures for the conversion engine tests."""

from __future__ import annotations

from io import BytesIO

import pytest
from docx import Document
from PIL import Image
from pypdf import PdfWriter

from format_converter.config import ConversionSettings, FileLimitSettings, Settings
from format_converter.models import SourceFile


@pytest.fixture()
def test_settings() -> Settings:
    return Settings(
        service_name="format-conversion-engine-test",
        environment="test",
        file_limits=FileLimitSettings(max_file_size_mb=1),
        conversion=ConversionSettings(progress_interval_sec=0.01),
    )


@pytest.fixture()
def png_bytes() -> bytes:
    image = Image.new("RGBA", (32, 32))
    for x in range(32):
        for y in range(32):
            image.putpixel((x, y), (x * 8, y * 8, (x + y) * 4, 200))
    buffer = BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture()
def pdf_bytes() -> bytes:
    writer = PdfWriter()
    for _ in range(3):
        writer.add_blank_page(width=612, height=792)
    buffer = BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


@pytest.fixture()
def docx_bytes() -> bytes:
    document = Document()
    document.add_paragraph("Quarterly report")
    document.add_paragraph("Revenue grew in every region.")
    buffer = BytesIO()
    document.save(buffer)
    return buffer.getvalue()


@pytest.fixture()
def png_file(png_bytes) -> SourceFile:
    return SourceFile(raw_bytes=png_bytes, file_name="pixel.png", declared_mime_type="image/png")


@pytest.fixture()
def text_file() -> SourceFile:
    return SourceFile(
        raw_bytes="héllo wörld ✓\nsecond line\n".encode("utf-8"),
        file_name="notes.txt",
        declared_mime_type="text/plain",
    )
