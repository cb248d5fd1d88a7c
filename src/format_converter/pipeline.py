"""Suspendable extract and encode stages backed by the plugin registries."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from .catalog import Category, FormatOption, find_format
from .config import Settings, get_settings
from .models import ConversionResult, ExtractedContent, SourceFile
from .plugins import ENCODERS, EXTRACTORS, load_plugins_from_settings

logger = logging.getLogger(__name__)


def _resolve_target(category: Category, target: FormatOption | str) -> FormatOption:
    if isinstance(target, FormatOption):
        return target
    try:
        return find_format(category, target)
    except KeyError:
        # Encoders fall back to their default format for ids they do not know.
        return FormatOption(target, target.upper(), target)


async def extract(
    source: SourceFile,
    category: Category,
    *,
    settings: Optional[Settings] = None,
) -> ExtractedContent:
    settings = settings or get_settings()
    load_plugins_from_settings(settings)
    plugin = EXTRACTORS.get(category, settings.conversion)
    logger.debug("Extracting %s with %s", source.file_name, plugin.slug)
    return await asyncio.to_thread(plugin.extract, source)


async def encode(
    content: ExtractedContent,
    target: FormatOption | str,
    category: Category,
    *,
    settings: Optional[Settings] = None,
) -> ConversionResult:
    settings = settings or get_settings()
    load_plugins_from_settings(settings)
    option = _resolve_target(Category(category), target)
    plugin = ENCODERS.get(category, settings.conversion)
    logger.debug("Encoding to %s with %s", option.id, plugin.slug)
    return await asyncio.to_thread(plugin.encode, content, option)


__all__ = ["extract", "encode"]
