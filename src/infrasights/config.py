# -*- coding: utf-8 -*-
"""Settings loading and validation."""

from __future__ import annotations

import os
from copy import deepcopy
from pathlib import Path
from typing import Any

from infrasights.constants import (
    DEFAULT_GEMINI_BASE_URL,
    DEFAULT_MODEL,
    DEFAULT_SETTINGS_FILE,
    DEFAULT_SVG_HEIGHT,
    DEFAULT_SVG_WIDTH,
)
from infrasights.errors import ConfigurationError
from infrasights.utils.file_utils import read_json_file


DEFAULT_CONFIG: dict[str, Any] = {
    "api_keys": {"gemini": "USE_ENV_FILE"},
    "gemini": {
        "model": DEFAULT_MODEL,
        "base_url": DEFAULT_GEMINI_BASE_URL,
        "analysis_temperature": 0.2,
        "estimate_temperature": 0.1,
        # 0 disables the client-side timeout; a hung request stays in flight until cancelled.
        "request_timeout_seconds": 0,
    },
    "image": {"default_svg_width": DEFAULT_SVG_WIDTH, "default_svg_height": DEFAULT_SVG_HEIGHT},
    "export": {"directory": ""},
}

# Checked in order; the first non-empty value wins.
API_KEY_ENV_NAMES = ("GEMINI_API_KEY", "API_KEY")
PLACEHOLDER_KEY = "USE_ENV_FILE"


def get_default_config() -> dict[str, Any]:
    """Return a deep copy of the default config."""
    return deepcopy(DEFAULT_CONFIG)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _load_env_file(env_path: Path) -> dict[str, str]:
    """Load a simple .env file (KEY=VALUE)."""
    values: dict[str, str] = {}
    if not env_path.exists():
        return values

    for raw_line in env_path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip()
        if not key:
            continue
        if (value.startswith('"') and value.endswith('"')) or (
            value.startswith("'") and value.endswith("'")
        ):
            value = value[1:-1]
        values[key] = value
    return values


def _apply_env_overrides(config: dict[str, Any], env_values: dict[str, str]) -> dict[str, Any]:
    """Apply environment-based overrides to runtime config."""
    merged = deepcopy(config)
    for name in API_KEY_ENV_NAMES:
        gemini_key = env_values.get(name, "").strip()
        if gemini_key:
            merged.setdefault("api_keys", {})
            merged["api_keys"]["gemini"] = gemini_key
            break
    model = env_values.get("GEMINI_MODEL", "").strip()
    if model:
        merged.setdefault("gemini", {})
        merged["gemini"]["model"] = model
    return merged


def validate_config(config: dict[str, Any]) -> None:
    """Validate fields used by the gateway and the image normalizer."""
    gemini = config.get("gemini", {})
    if not str(gemini.get("model", "")).strip():
        raise ConfigurationError("gemini.model must not be empty")

    for key in ("analysis_temperature", "estimate_temperature"):
        value = gemini.get(key)
        if isinstance(value, bool) or not isinstance(value, (float, int)) or not (0 <= float(value) <= 2):
            raise ConfigurationError(f"gemini.{key} must be in range 0..2")

    timeout = gemini.get("request_timeout_seconds")
    if isinstance(timeout, bool) or not isinstance(timeout, (float, int)) or timeout < 0:
        raise ConfigurationError("gemini.request_timeout_seconds must be >= 0")

    image = config.get("image", {})
    for key in ("default_svg_width", "default_svg_height"):
        value = image.get(key)
        if not isinstance(value, int) or isinstance(value, bool) or not (1 <= value <= 10000):
            raise ConfigurationError(f"image.{key} must be an int in range 1..10000")


def load_config(path: str | Path | None = None, *, use_process_env: bool = True) -> dict[str, Any]:
    """Load config from JSON, merge into defaults and apply .env / environment keys.

    Process environment variables take precedence over the ``.env`` file.
    """
    config_path = Path(path or DEFAULT_SETTINGS_FILE)
    env_values = _load_env_file(config_path.parent / ".env")
    if use_process_env:
        env_values.update({name: value for name, value in os.environ.items() if value.strip()})

    if config_path.exists():
        try:
            loaded = read_json_file(config_path)
        except (OSError, ValueError) as exc:
            raise ConfigurationError(f"Could not read {config_path}: {exc}") from exc
        merged = _deep_merge(get_default_config(), loaded)
    else:
        merged = get_default_config()
    merged = _apply_env_overrides(merged, env_values)
    validate_config(merged)
    return merged


def get_api_key(config: dict[str, Any]) -> str:
    """Return the Gemini key, or an empty string when only the placeholder is set."""
    key = str(config.get("api_keys", {}).get("gemini", "") or "").strip()
    return "" if key == PLACEHOLDER_KEY else key
