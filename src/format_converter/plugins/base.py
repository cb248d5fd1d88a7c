"""Base classes for extraction and encoding plugins."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar, Dict, Optional

from ..catalog import Category, FormatOption
from ..config import ConversionSettings
from ..models import ConversionResult, ExtractedContent, SourceFile


class CategoryPlugin(ABC):
    slug: str = ""
    category: ClassVar[Category]

    def __init__(self, settings: Optional[ConversionSettings] = None) -> None:
        self.settings = settings or ConversionSettings()
        self.slug = self.slug or f"{self.category.value.lower()}-{type(self).__name__.lower()}"

    def describe(self) -> Dict[str, str]:
        return {
            "slug": self.slug,
            "category": self.category.value,
        }


class ExtractorPlugin(CategoryPlugin):
    @abstractmethod
    def extract(self, source: SourceFile) -> ExtractedContent:
        """Turn the raw upload into the intermediate content for its category."""


class EncoderPlugin(CategoryPlugin):
    @abstractmethod
    def encode(self, content: ExtractedContent, target: FormatOption) -> ConversionResult:
        """Serialize extracted content into ``target``."""
