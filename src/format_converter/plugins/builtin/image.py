"""Plugins that decode images with Pillow and re-encode them to jpg/png/webp."""

from __future__ import annotations

from io import BytesIO
from typing import Dict, Tuple

from PIL import Image

from ...catalog import Category, FormatOption
from ...errors import DecodeError, EncodeError, GenericConversionFailure
from ...models import ConversionResult, ExtractedContent, RasterContent, SourceFile, suggested_file_name
from ..base import EncoderPlugin, ExtractorPlugin
from ..registry import ENCODERS, EXTRACTORS

# target id -> (Pillow format, MIME type)
IMAGE_TARGETS: Dict[str, Tuple[str, str]] = {
    "jpg": ("JPEG", "image/jpeg"),
    "png": ("PNG", "image/png"),
    "webp": ("WEBP", "image/webp"),
}
FALLBACK_TARGET: Tuple[str, str] = ("PNG", "image/png")
_LOSSY = {"JPEG", "WEBP"}


def _to_eight_bit(image: Image.Image) -> Image.Image:
    """Scale 16-bit, 32-bit integer and float rasters into 8-bit grayscale."""

    if image.mode.startswith("I;16"):
        image = image.convert("I")
        return image.point(lambda value: value * (1 / 256)).convert("L")
    if image.mode not in ("I", "F"):
        return image

    low, high = image.getextrema()
    if low >= 0 and high <= 255:
        return image.convert("L")
    if low >= 0 and high <= 65535:
        return image.point(lambda value: value * (1 / 256)).convert("L")
    scale = 255 / (high - low) if high > low else 0.0
    return image.point(lambda value: value * scale - low * scale).convert("L")


class ImageDecodePlugin(ExtractorPlugin):
    slug = "image-decode"
    category = Category.IMAGE

    def extract(self, source: SourceFile) -> ExtractedContent:
        try:
            image = Image.open(BytesIO(source.raw_bytes))
            # Image.open only reads the header; load() decodes every pixel.
            image.load()
        except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as exc:
            raise DecodeError(f"Failed to decode image {source.file_name}: {exc}") from exc

        return RasterContent(
            image=image,
            width=image.width,
            height=image.height,
            source_name=source.file_name,
        )


class ImageEncodePlugin(EncoderPlugin):
    slug = "image-encode"
    category = Category.IMAGE

    def encode(self, content: ExtractedContent, target: FormatOption) -> ConversionResult:
        if not isinstance(content, RasterContent):
            raise GenericConversionFailure(f"Image encoder cannot handle {type(content).__name__}")

        pil_format, mime_type = IMAGE_TARGETS.get(target.id, FALLBACK_TARGET)
        options = {}
        if pil_format in _LOSSY:
            options["quality"] = round(self.settings.image_quality * 100)

        buffer = BytesIO()
        try:
            surface = _to_eight_bit(content.image).convert("RGBA")
            if pil_format == "JPEG":
                surface = surface.convert("RGB")
            surface.save(buffer, format=pil_format, **options)
        except (OSError, ValueError, KeyError) as exc:
            raise EncodeError(f"Failed to encode {content.source_name} as {pil_format}: {exc}") from exc

        data = buffer.getvalue()
        if not data:
            raise EncodeError(f"{pil_format} encoder produced no data for {content.source_name}")

        return ConversionResult(
            output_bytes=data,
            mime_type=mime_type,
            suggested_file_name=suggested_file_name(content.source_name, target.extension),
        )


EXTRACTORS.register(ImageDecodePlugin)
ENCODERS.register(ImageEncodePlugin)
