# -*- coding: utf-8 -*-
"""Uploaded image data model."""

from __future__ import annotations

import base64
from dataclasses import dataclass


@dataclass(frozen=True)
class UploadedImage:
    """Normalized image payload ready to be sent to the model."""

    data: bytes
    mime_type: str
    source_name: str = ""
    width: int | None = None
    height: int | None = None

    def to_base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    @property
    def size_bytes(self) -> int:
        return len(self.data)
