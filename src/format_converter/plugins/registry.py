"""Plugin registries mapping each category to its extractor and encoder."""

from __future__ import annotations

from importlib import import_module
from pathlib import Path
from typing import Dict, Generic, Iterable, List, Optional, Sequence, Type, TypeVar

import yaml

from ..catalog import Category
from ..config import ConversionSettings
from .base import CategoryPlugin, EncoderPlugin, ExtractorPlugin

PluginT = TypeVar("PluginT", bound=CategoryPlugin)

DEFAULT_PLUGIN_MODULES: Sequence[str] = (
    "format_converter.plugins.builtin.image",
    "format_converter.plugins.builtin.document",
    "format_converter.plugins.builtin.passthrough",
)


class PluginRegistry(Generic[PluginT]):
    def __init__(self, kind: str) -> None:
        self.kind = kind
        self._registry: Dict[Category, Type[PluginT]] = {}

    def register(self, plugin_cls: Type[PluginT]) -> None:
        key = Category(plugin_cls.category)
        if key in self._registry:
            raise ValueError(f"{self.kind} already registered for {key.value}")
        self._registry[key] = plugin_cls

    def get(self, category: Category, settings: Optional[ConversionSettings] = None) -> PluginT:
        key = Category(category)
        if key not in self._registry:
            raise KeyError(f"No {self.kind} registered for {key.value}")
        return self._registry[key](settings)

    def list(self) -> Iterable[PluginT]:
        for plugin_cls in self._registry.values():
            yield plugin_cls()

    def missing(self) -> List[Category]:
        return [category for category in Category if category not in self._registry]

    def ensure_complete(self) -> None:
        missing = self.missing()
        if missing:
            names = ", ".join(category.value for category in missing)
            raise RuntimeError(f"No {self.kind} registered for: {names}")


EXTRACTORS: PluginRegistry[ExtractorPlugin] = PluginRegistry("extractor")
ENCODERS: PluginRegistry[EncoderPlugin] = PluginRegistry("encoder")


def load_plugins(module_names: Iterable[str] | None = None) -> None:
    """Import plugin modules and trigger their registration side-effects."""

    modules = list(module_names or DEFAULT_PLUGIN_MODULES)
    for module in modules:
        import_module(module)


def read_plugin_module_file(path: str | Path) -> List[str]:
    file_path = Path(path)
    if not file_path.exists():
        return []

    with file_path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    modules = data.get("modules", []) if isinstance(data, dict) else []
    return [str(module) for module in modules]


def write_plugin_module_file(path: str | Path, modules: Iterable[str]) -> None:
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    ordered_unique = list(dict.fromkeys(str(module) for module in modules if module))
    payload = {"modules": ordered_unique}

    with file_path.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(payload, handle, allow_unicode=False, sort_keys=False)


__all__ = [
    "EXTRACTORS",
    "ENCODERS",
    "DEFAULT_PLUGIN_MODULES",
    "PluginRegistry",
    "load_plugins",
    "read_plugin_module_file",
    "write_plugin_module_file",
]
