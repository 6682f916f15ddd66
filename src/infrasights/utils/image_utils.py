# -*- coding: utf-8 -*-
"""Image sniffing helpers."""

from __future__ import annotations

import mimetypes
from pathlib import Path


SVG_MIME_TYPE = "image/svg+xml"

# Formats the model accepts inline without transcoding.
MODEL_ACCEPTED_MIME_TYPES = frozenset(
    {"image/png", "image/jpeg", "image/webp", "image/heic", "image/heif"}
)

# Pillow format name -> MIME type.
PIL_FORMAT_MIME_TYPES = {
    "PNG": "image/png",
    "JPEG": "image/jpeg",
    "WEBP": "image/webp",
    "HEIF": "image/heif",
    "GIF": "image/gif",
    "BMP": "image/bmp",
    "TIFF": "image/tiff",
    "ICO": "image/x-icon",
}


def looks_like_svg(data: bytes) -> bool:
    """Return True if the leading bytes contain an ``<svg`` root element."""
    head = data[:2048].lstrip().lower()
    if head.startswith(b"\xef\xbb\xbf"):
        head = head[3:]
    return b"<svg" in head and (head.startswith(b"<svg") or head.startswith(b"<?xml") or head.startswith(b"<!"))


def guess_mime_type(name: str | Path) -> str:
    """Guess a MIME type from a file name, empty string when unknown."""
    suffix = Path(name).suffix.lower()
    if suffix in {".svg", ".svgz"}:
        return SVG_MIME_TYPE
    return mimetypes.guess_type(str(name))[0] or ""


def png_name(name: str) -> str:
    """Replace the extension of ``name`` with ``.png``."""
    if not name:
        return "image.png"
    return str(Path(name).with_suffix(".png"))
