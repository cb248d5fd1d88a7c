"""Centralized settings and configuration loading utilities."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class FileLimitSettings(BaseModel):
    max_file_size_mb: int = Field(100, ge=1)

    @property
    def max_file_size_bytes(self) -> int:
        return self.max_file_size_mb * 1024 * 1024


class LoggingSettings(BaseModel):
    level: str = "INFO"
    log_dir: str | None = None
    max_log_file_size_mb: int = 100
    backup_count: int = 7


class ConversionSettings(BaseModel):
    image_quality: float = Field(0.92, gt=0, le=1)
    progress_interval_sec: float = Field(0.15, gt=0)
    progress_step: int = Field(5, ge=1)
    progress_cap: int = Field(90, ge=0, le=99)
    pdf_margin_mm: float = Field(15.0, ge=0)
    pdf_font_size: float = Field(12.0, gt=0)
    pdf_page_size: str = "a4"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="FORMAT_CONVERTER_", env_nested_delimiter="__", extra="allow"
    )

    service_name: str = "format-conversion-engine"
    environment: str = "dev"

    file_limits: FileLimitSettings = FileLimitSettings()
    logging: LoggingSettings = LoggingSettings()
    conversion: ConversionSettings = ConversionSettings()
    plugin_modules: list[str] = Field(default_factory=list)
    plugin_modules_file: str | None = None

    @staticmethod
    def load_yaml_config_file(file_path: str | Path | None) -> Dict[str, Any]:
        if not file_path:
            return {}
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")
        import yaml

        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
        if not isinstance(data, dict):
            raise ValueError("Configuration YAML must produce a mapping")
        return data

    @classmethod
    def from_source(cls, *, config_file: str | None = None, **overrides: Any) -> "Settings":
        base_data = cls.load_yaml_config_file(config_file)
        base_data.update(overrides)
        return cls(**base_data)


@lru_cache
def get_settings() -> Settings:
    cfg_file = os.getenv("FORMAT_CONVERTER_CONFIG_FILE")
    if cfg_file:
        return Settings.from_source(config_file=cfg_file)

    default_path = Path.cwd() / "config" / "settings.yaml"
    if default_path.exists():
        return Settings.from_source(config_file=str(default_path))

    return Settings()


def reload_settings() -> None:
    get_settings.cache_clear()
