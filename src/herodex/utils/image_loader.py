"""Helpers for decoding catalog images into Qt image primitives with Pillow fallbacks."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from PIL import Image, ImageOps
from PySide6.QtCore import QSize, Qt
from PySide6.QtGui import QImage, QImageReader

_LOGGER = logging.getLogger(__name__)


def load_qimage(source: Path, max_size: tuple[int, int] | None = None) -> Optional[QImage]:
    """Return a :class:`QImage` for *source*, optionally downscaled to fit *max_size*."""

    reader = QImageReader(str(source))
    # Decoded handles live in ImageCache; skip Qt's own decode cache.
    disable_cache = getattr(reader, "setCacheEnabled", None)
    if callable(disable_cache):
        disable_cache(False)
    reader.setAutoTransform(True)
    if max_size is not None:
        target = QSize(*max_size)
        original_size = reader.size()
        if target.isValid() and not target.isEmpty() and original_size.isValid():
            scaled = original_size.scaled(target, Qt.AspectRatioMode.KeepAspectRatio)
            # Only downscale; upscaling small avatars just blurs them.
            if scaled.width() < original_size.width() or scaled.height() < original_size.height():
                reader.setScaledSize(scaled)
    image = reader.read()
    if not image.isNull():
        return image
    return _load_with_pillow(source, max_size)


def _load_with_pillow(source: Path, max_size: tuple[int, int] | None = None) -> Optional[QImage]:
    try:
        from PIL.ImageQt import ImageQt
    except ImportError:  # pragma: no cover - Pillow built without Qt support
        _LOGGER.warning("Pillow has no Qt bridge; cannot decode %s", source)
        return None
    try:
        with Image.open(source) as img:
            img = ImageOps.exif_transpose(img)
            if max_size is not None:
                img.thumbnail(max_size, Image.Resampling.LANCZOS)
            qt_image = ImageQt(img.convert("RGBA"))
    except (OSError, ValueError) as exc:
        _LOGGER.warning("Pillow failed to load image from %s: %s", source, exc)
        return None
    return QImage(qt_image)


__all__ = ["load_qimage"]
