"""Pass-through plugins for categories without a real transcoder.

Audio, video, archive and OCR uploads come back byte-for-byte under the
requested extension. Results are flagged ``passthrough`` so callers can tell
no format conversion happened.
"""

from __future__ import annotations

from ...catalog import Category, FormatOption
from ...errors import GenericConversionFailure
from ...models import (
    DEFAULT_MIME_TYPE,
    ConversionResult,
    ExtractedContent,
    PassthroughContent,
    SourceFile,
    suggested_file_name,
)
from ..base import EncoderPlugin, ExtractorPlugin
from ..registry import ENCODERS, EXTRACTORS


class _BasePassthroughExtractor(ExtractorPlugin):
    def extract(self, source: SourceFile) -> ExtractedContent:
        return PassthroughContent(source=source)


class _BasePassthroughEncoder(EncoderPlugin):
    def encode(self, content: ExtractedContent, target: FormatOption) -> ConversionResult:
        if not isinstance(content, PassthroughContent):
            raise GenericConversionFailure(f"Pass-through encoder cannot handle {type(content).__name__}")

        source = content.source
        return ConversionResult(
            output_bytes=source.raw_bytes,
            mime_type=source.declared_mime_type or DEFAULT_MIME_TYPE,
            suggested_file_name=suggested_file_name(source.file_name, target.extension),
            passthrough=True,
        )


class AudioPassthroughExtractor(_BasePassthroughExtractor):
    slug = "audio-passthrough"
    category = Category.AUDIO


class VideoPassthroughExtractor(_BasePassthroughExtractor):
    slug = "video-passthrough"
    category = Category.VIDEO


class ArchivePassthroughExtractor(_BasePassthroughExtractor):
    slug = "archive-passthrough"
    category = Category.ARCHIVE


class OcrPassthroughExtractor(_BasePassthroughExtractor):
    slug = "ocr-passthrough"
    category = Category.OCR


class AudioPassthroughEncoder(_BasePassthroughEncoder):
    slug = "audio-passthrough"
    category = Category.AUDIO


class VideoPassthroughEncoder(_BasePassthroughEncoder):
    slug = "video-passthrough"
    category = Category.VIDEO


class ArchivePassthroughEncoder(_BasePassthroughEncoder):
    slug = "archive-passthrough"
    category = Category.ARCHIVE


class OcrPassthroughEncoder(_BasePassthroughEncoder):
    slug = "ocr-passthrough"
    category = Category.OCR


for extractor_cls in (
    AudioPassthroughExtractor,
    VideoPassthroughExtractor,
    ArchivePassthroughExtractor,
    OcrPassthroughExtractor,
):
    EXTRACTORS.register(extractor_cls)

for encoder_cls in (
    AudioPassthroughEncoder,
    VideoPassthroughEncoder,
    ArchivePassthroughEncoder,
    OcrPassthroughEncoder,
):
    ENCODERS.register(encoder_cls)
