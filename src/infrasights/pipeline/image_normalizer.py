# -*- coding: utf-8 -*-
"""Turn a user-selected diagram into an image payload the model accepts."""

from __future__ import annotations

import io
import logging
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from infrasights.constants import DEFAULT_SVG_HEIGHT, DEFAULT_SVG_WIDTH
from infrasights.errors import DecodeError
from infrasights.models.uploaded_image import UploadedImage
from infrasights.utils.image_utils import (
    MODEL_ACCEPTED_MIME_TYPES,
    PIL_FORMAT_MIME_TYPES,
    SVG_MIME_TYPE,
    guess_mime_type,
    looks_like_svg,
    png_name,
)

logger = logging.getLogger(__name__)


class ImageNormalizer:
    """Rasterize vector input and pass model-compatible raster input through.

    SVG rendering goes through ``QSvgRenderer``; a ``QGuiApplication`` should
    exist before SVG input is normalized so text elements can resolve fonts.
    """

    def __init__(self, default_width: int = DEFAULT_SVG_WIDTH, default_height: int = DEFAULT_SVG_HEIGHT) -> None:
        self.default_width = default_width
        self.default_height = default_height

    def normalize_file(self, path: str | Path) -> UploadedImage:
        file_path = Path(path)
        try:
            data = file_path.read_bytes()
        except OSError as exc:
            raise DecodeError(f"Could not read {file_path.name}: {exc}") from exc
        return self.normalize_bytes(data, file_path.name)

    def normalize_bytes(self, data: bytes, name: str = "") -> UploadedImage:
        if not data:
            raise DecodeError(f"{name or 'Image'} is empty")
        declared = guess_mime_type(name) if name else ""
        if declared == SVG_MIME_TYPE or looks_like_svg(data):
            logger.info("Rasterizing SVG %s", name or "<bytes>")
            return self._rasterize_svg(data, name)
        return self._normalize_raster(data, name)

    def _normalize_raster(self, data: bytes, name: str) -> UploadedImage:
        try:
            with Image.open(io.BytesIO(data)) as probe:
                image_format = str(probe.format or "").upper()
                width, height = probe.size
                probe.verify()
        except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as exc:
            raise DecodeError(f"Could not decode {name or 'image'}: {exc}") from exc

        mime_type = PIL_FORMAT_MIME_TYPES.get(image_format, "")
        if mime_type in MODEL_ACCEPTED_MIME_TYPES:
            logger.debug("Passing %s through unchanged (%s, %dx%d)", name, mime_type, width, height)
            return UploadedImage(data=data, mime_type=mime_type, source_name=name, width=width, height=height)

        logger.info("Transcoding %s (%s) to PNG", name or "<bytes>", image_format or "unknown")
        try:
            with Image.open(io.BytesIO(data)) as source:
                converted = source.convert("RGBA") if source.mode not in {"RGB", "RGBA", "L", "LA"} else source.copy()
            buffer = io.BytesIO()
            converted.save(buffer, format="PNG")
        except (OSError, ValueError) as exc:
            raise DecodeError(f"Could not transcode {name or 'image'} to PNG: {exc}") from exc
        return UploadedImage(
            data=buffer.getvalue(),
            mime_type="image/png",
            source_name=png_name(name),
            width=width,
            height=height,
        )

    def canvas_size(self, intrinsic_width: int, intrinsic_height: int) -> tuple[int, int]:
        """Use the intrinsic size per axis, falling back to the default canvas."""
        width = intrinsic_width if intrinsic_width > 0 else self.default_width
        height = intrinsic_height if intrinsic_height > 0 else self.default_height
        return width, height

    def _rasterize_svg(self, data: bytes, name: str) -> UploadedImage:
        from PyQt6.QtCore import QBuffer, QByteArray, QIODevice
        from PyQt6.QtGui import QColor, QImage, QPainter
        from PyQt6.QtSvg import QSvgRenderer

        renderer = QSvgRenderer(QByteArray(data))
        if not renderer.isValid():
            raise DecodeError(f"Failed to load SVG {name or ''}".strip())

        size = renderer.defaultSize()
        width, height = self.canvas_size(size.width(), size.height())

        image = QImage(width, height, QImage.Format.Format_ARGB32)
        image.fill(QColor("white"))
        painter = QPainter(image)
        try:
            renderer.render(painter)
        finally:
            painter.end()

        payload = QByteArray()
        buffer = QBuffer(payload)
        buffer.open(QIODevice.OpenModeFlag.WriteOnly)
        saved = image.save(buffer, "PNG")
        buffer.close()
        if not saved:
            raise DecodeError(f"Failed to encode {name or 'SVG'} as PNG")

        return UploadedImage(
            data=bytes(payload.data()),
            mime_type="image/png",
            source_name=png_name(name),
            width=width,
            height=height,
        )


def normalize_file(path: str | Path) -> UploadedImage:
    """Normalize a file with the default canvas settings."""
    return ImageNormalizer().normalize_file(path)
