"""Plugins that pull text out of documents and render it as txt, pdf or Word markup.

Extraction never fails: unreadable PDF and Word packages degrade to a short
descriptive text so a document conversion always yields a download.
"""

from __future__ import annotations

import html
import logging
from io import BytesIO
from typing import Callable, Dict, List, Sequence, Tuple

import fitz
from docx import Document

from ...catalog import Category, FormatOption
from ...config import ConversionSettings
from ...errors import EncodeError, GenericConversionFailure
from ...models import ConversionResult, ExtractedContent, SourceFile, TextContent, suggested_file_name
from ..base import EncoderPlugin, ExtractorPlugin
from ..registry import ENCODERS, EXTRACTORS
from ..utils import count_pdf_pages, estimate_pdf_pages

logger = logging.getLogger(__name__)

TEXT_MIME = "text/plain"
PDF_MIME = "application/pdf"
WORD_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

PDF_FONT = "helv"
LINE_HEIGHT_FACTOR = 1.15
MM_TO_PT = 72 / 25.4

_WORD_TEMPLATE = """<html xmlns:o='urn:schemas-microsoft-com:office:office'
      xmlns:w='urn:schemas-microsoft-com:office:word'
      xmlns='http://www.w3.org/TR/REC-html40'>
<head><meta charset='utf-8'><title>Converted Document</title></head>
<body>
<h1>Converted Document</h1>
<p><strong>Source:</strong> {source}</p>
<hr/>
<div style="white-space: pre-wrap; font-family: Arial, sans-serif;">{text}</div>
</body>
</html>
"""


def _describe_pdf(source: SourceFile) -> TextContent:
    name = source.file_name
    try:
        page_count = count_pdf_pages(source.raw_bytes)
    except Exception as exc:
        logger.warning("PDF %s could not be parsed, using placeholder: %s", name, exc)
        page_count = estimate_pdf_pages(source.raw_bytes)
        text = (
            f"Could not extract text from PDF. File: {name}\n\n"
            f"Total Pages: {page_count} (estimated)\n"
        )
        return TextContent(text=text, source_name=name, page_count=page_count)

    text = (
        f"Extracted from PDF: {name}\n\n"
        f"Total Pages: {page_count}\n\n"
        "Note: Full text extraction from PDF requires OCR capabilities.\n"
        "This document records that the PDF was opened and its pages counted.\n"
    )
    return TextContent(text=text, source_name=name, page_count=page_count)


def _extract_word(source: SourceFile) -> TextContent:
    name = source.file_name
    try:
        document = Document(BytesIO(source.raw_bytes))
        blocks: List[str] = [paragraph.text for paragraph in document.paragraphs]
        for table in document.tables:
            for row in table.rows:
                blocks.append("\t".join(cell.text for cell in row.cells))
    except Exception as exc:
        logger.warning("Word package %s could not be read, using placeholder: %s", name, exc)
        return TextContent(text=f"Could not extract text from DOCX. File: {name}", source_name=name)

    text = "\n\n".join(block for block in blocks if block.strip())
    return TextContent(text=text or "No text content found", source_name=name)


def _read_plain_text(source: SourceFile) -> TextContent:
    return TextContent(
        text=source.raw_bytes.decode("utf-8", errors="replace"),
        source_name=source.file_name,
    )


# Checked in order against the lowercase file name; anything else is read as text.
TEXT_READERS: Sequence[Tuple[str, Callable[[SourceFile], TextContent]]] = (
    ("pdf", _describe_pdf),
    ("docx", _extract_word),
    ("doc", _extract_word),
    ("txt", _read_plain_text),
)


def wrap_lines(text: str, max_width: float, font_size: float) -> List[str]:
    """Greedy word wrap measured with the Helvetica metrics used for rendering.

    Each distinct character is measured once and widths are summed, so words
    wider than the line are split in a single pass.
    """

    widths: Dict[str, float] = {}

    def measure(chunk: str) -> float:
        total = 0.0
        for char in chunk:
            width = widths.get(char)
            if width is None:
                width = widths[char] = fitz.get_text_length(char, fontname=PDF_FONT, fontsize=font_size)
            total += width
        return total

    space = measure(" ")
    lines: List[str] = []
    for paragraph in text.splitlines() or [""]:
        current, current_width = "", 0.0
        for word in paragraph.expandtabs(4).split(" "):
            word_width = measure(word)
            joined_width = current_width + space + word_width if current else word_width
            if joined_width <= max_width:
                current = f"{current} {word}" if current else word
                current_width = joined_width
                continue
            if current:
                lines.append(current)
            current, current_width = "", 0.0
            if word_width <= max_width:
                current, current_width = word, word_width
                continue
            # Split an over-wide word; every piece keeps at least one character.
            for char in word:
                char_width = widths[char]
                if current and current_width + char_width > max_width:
                    lines.append(current)
                    current, current_width = "", 0.0
                current += char
                current_width += char_width
        lines.append(current)
    return lines


def _render_text(content: TextContent, settings: ConversionSettings) -> Tuple[bytes, str]:
    return content.text.encode("utf-8"), TEXT_MIME


def _render_pdf(content: TextContent, settings: ConversionSettings) -> Tuple[bytes, str]:
    width, height = fitz.paper_size(settings.pdf_page_size)
    if width <= 0 or height <= 0:
        raise EncodeError(f"Unknown PDF page size: {settings.pdf_page_size}")

    margin = settings.pdf_margin_mm * MM_TO_PT
    font_size = settings.pdf_font_size
    line_height = font_size * LINE_HEIGHT_FACTOR
    lines = wrap_lines(content.text, width - 2 * margin, font_size)
    per_page = max(1, int((height - 2 * margin - font_size) // line_height) + 1)

    document = fitz.open()
    try:
        for start in range(0, len(lines), per_page):
            page = document.new_page(width=width, height=height)
            baseline = margin + font_size
            for line in lines[start : start + per_page]:
                if line.strip():
                    page.insert_text((margin, baseline), line, fontname=PDF_FONT, fontsize=font_size)
                baseline += line_height
        data = document.tobytes()
    finally:
        document.close()

    if not data:
        raise EncodeError(f"PDF renderer produced no data for {content.source_name}")
    return data, PDF_MIME


def _render_word(content: TextContent, settings: ConversionSettings) -> Tuple[bytes, str]:
    markup = _WORD_TEMPLATE.format(
        source=html.escape(content.source_name),
        text=html.escape(content.text),
    )
    return markup.encode("utf-8"), WORD_MIME


TEXT_WRITERS: Dict[str, Callable[[TextContent, ConversionSettings], Tuple[bytes, str]]] = {
    "txt": _render_text,
    "pdf": _render_pdf,
    "docx": _render_word,
}


class DocumentTextPlugin(ExtractorPlugin):
    slug = "document-text"
    category = Category.DOCUMENT

    def extract(self, source: SourceFile) -> ExtractedContent:
        for extension, reader in TEXT_READERS:
            if source.has_extension(extension):
                return reader(source)
        return _read_plain_text(source)


class DocumentRenderPlugin(EncoderPlugin):
    slug = "document-render"
    category = Category.DOCUMENT

    def encode(self, content: ExtractedContent, target: FormatOption) -> ConversionResult:
        if not isinstance(content, TextContent):
            raise GenericConversionFailure(f"Document encoder cannot handle {type(content).__name__}")

        writer = TEXT_WRITERS.get(target.id, _render_text)
        data, mime_type = writer(content, self.settings)
        return ConversionResult(
            output_bytes=data,
            mime_type=mime_type,
            suggested_file_name=suggested_file_name(content.source_name, target.extension),
        )


EXTRACTORS.register(DocumentTextPlugin)
ENCODERS.register(DocumentRenderPlugin)
