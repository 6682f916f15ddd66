# -*- coding: utf-8 -*-
"""Tests for settings loading, env overrides and validation."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from infrasights.config import (
    ConfigurationError,
    get_api_key,
    get_default_config,
    load_config,
    validate_config,
)


def test_default_config_has_all_sections() -> None:
    config = get_default_config()
    assert {"api_keys", "gemini", "image", "export"}.issubset(config.keys())
    assert config["gemini"]["model"] == "gemini-2.5-flash"
    assert config["gemini"]["request_timeout_seconds"] == 0
    assert config["image"]["default_svg_width"] == 1200
    assert config["image"]["default_svg_height"] == 900


def test_default_config_returns_independent_copies() -> None:
    first = get_default_config()
    first["gemini"]["model"] = "changed"
    assert get_default_config()["gemini"]["model"] == "gemini-2.5-flash"


def test_load_config_without_file_uses_defaults(tmp_path: Path) -> None:
    config = load_config(tmp_path / "missing.json", use_process_env=False)
    assert config == get_default_config()


def test_load_config_merges_partial_settings(tmp_path: Path) -> None:
    target = tmp_path / "settings.json"
    target.write_text(json.dumps({"gemini": {"analysis_temperature": 0.5}}), encoding="utf-8")

    config = load_config(target, use_process_env=False)
    assert config["gemini"]["analysis_temperature"] == 0.5
    assert config["gemini"]["estimate_temperature"] == 0.1
    assert config["gemini"]["model"] == "gemini-2.5-flash"


def test_env_file_sets_gemini_key(tmp_path: Path) -> None:
    (tmp_path / ".env").write_text('# keys\nGEMINI_API_KEY="AIza-from-file"\n', encoding="utf-8")
    config = load_config(tmp_path / "settings.json", use_process_env=False)
    assert get_api_key(config) == "AIza-from-file"


def test_api_key_fallback_name_is_accepted(tmp_path: Path) -> None:
    (tmp_path / ".env").write_text("API_KEY=AIza-fallback\n", encoding="utf-8")
    config = load_config(tmp_path / "settings.json", use_process_env=False)
    assert get_api_key(config) == "AIza-fallback"


def test_process_env_overrides_env_file(tmp_path: Path, monkeypatch) -> None:
    (tmp_path / ".env").write_text("GEMINI_API_KEY=AIza-from-file\n", encoding="utf-8")
    monkeypatch.setenv("GEMINI_API_KEY", "AIza-from-process")
    monkeypatch.setenv("GEMINI_MODEL", "gemini-2.5-pro")

    config = load_config(tmp_path / "settings.json")
    assert get_api_key(config) == "AIza-from-process"
    assert config["gemini"]["model"] == "gemini-2.5-pro"


def test_placeholder_key_reads_as_missing(default_config: dict) -> None:
    assert get_api_key(default_config) == ""


@pytest.mark.parametrize(
    ("section", "key", "value"),
    [
        ("gemini", "model", "  "),
        ("gemini", "analysis_temperature", 2.5),
        ("gemini", "estimate_temperature", True),
        ("gemini", "request_timeout_seconds", -1),
        ("image", "default_svg_width", 0),
        ("image", "default_svg_height", 900.5),
    ],
)
def test_validate_config_rejects_invalid_values(default_config: dict, section: str, key: str, value) -> None:
    default_config[section][key] = value
    with pytest.raises(ConfigurationError):
        validate_config(default_config)


def test_configuration_error_is_value_error() -> None:
    assert issubclass(ConfigurationError, ValueError)


@pytest.mark.parametrize("content", ["{not json", "[1, 2]"])
def test_malformed_settings_file_raises_configuration_error(tmp_path: Path, content: str) -> None:
    target = tmp_path / "settings.json"
    target.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigurationError, match="settings.json"):
        load_config(target, use_process_env=False)
