"""Tests for settings loading."""

from __future__ import annotations

import pytest

from format_converter.config import Settings, get_settings, reload_settings


def test_defaults_match_conversion_contract():
    settings = Settings()

    assert settings.conversion.image_quality == pytest.approx(0.92)
    assert settings.conversion.progress_step == 5
    assert settings.conversion.progress_cap == 90
    assert settings.conversion.pdf_margin_mm == pytest.approx(15.0)
    assert settings.file_limits.max_file_size_bytes == 100 * 1024 * 1024


def test_from_source_merges_yaml_and_overrides(tmp_path):
    config_file = tmp_path / "settings.yaml"
    config_file.write_text(
        "environment: staging\n"
        "conversion:\n"
        "  progress_step: 10\n"
        "file_limits:\n"
        "  max_file_size_mb: 5\n",
        encoding="utf-8",
    )

    settings = Settings.from_source(config_file=str(config_file), service_name="custom")

    assert settings.environment == "staging"
    assert settings.service_name == "custom"
    assert settings.conversion.progress_step == 10
    assert settings.file_limits.max_file_size_mb == 5


def test_from_source_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        Settings.from_source(config_file=str(tmp_path / "absent.yaml"))


def test_yaml_must_be_mapping(tmp_path):
    config_file = tmp_path / "list.yaml"
    config_file.write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ValueError):
        Settings.load_yaml_config_file(config_file)


def test_environment_overrides_nested_values(monkeypatch):
    monkeypatch.setenv("FORMAT_CONVERTER_CONVERSION__PROGRESS_CAP", "50")

    assert Settings().conversion.progress_cap == 50


def test_get_settings_reads_config_file_env(monkeypatch, tmp_path):
    config_file = tmp_path / "settings.yaml"
    config_file.write_text("environment: from-file\n", encoding="utf-8")
    monkeypatch.setenv("FORMAT_CONVERTER_CONFIG_FILE", str(config_file))

    reload_settings()
    try:
        assert get_settings().environment == "from-file"
    finally:
        reload_settings()
