# -*- coding: utf-8 -*-
"""File helpers with UTF-8 defaults."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any


def ensure_dir(path: str | Path) -> Path:
    """Create a directory if it does not exist."""
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path


def read_json_file(path: str | Path) -> dict[str, Any]:
    """Read a JSON file."""
    file_path = Path(path)
    with file_path.open("r", encoding="utf-8") as handle:
        data = json.load(handle)
    if not isinstance(data, dict):
        raise ValueError(f"Expected JSON object in {file_path}")
    return data


def write_bytes_file(path: str | Path, content: bytes) -> Path:
    """Write bytes to a file, creating parent directories."""
    file_path = Path(path)
    ensure_dir(file_path.parent)
    file_path.write_bytes(content)
    return file_path


def unique_path(path: str | Path) -> Path:
    """Return ``path`` or a ``name-2.ext`` style sibling that does not exist yet."""
    candidate = Path(path)
    if not candidate.exists():
        return candidate
    counter = 2
    while True:
        sibling = candidate.with_name(f"{candidate.stem}-{counter}{candidate.suffix}")
        if not sibling.exists():
            return sibling
        counter += 1
