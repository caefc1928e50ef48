"""Tests for decoding catalog images into QImage objects."""

import pytest

pytest.importorskip("PySide6.QtGui", reason="PySide6 is required for image decoding", exc_type=ImportError)

from PIL import Image  # noqa: E402
from PySide6.QtGui import QImage  # noqa: E402

from herodex.errors import ImageLoadError  # noqa: E402
from herodex.infrastructure.services.image_cache import FileImageLoader  # noqa: E402
from herodex.utils.image_loader import load_qimage  # noqa: E402


@pytest.fixture()
def png(tmp_path):
    path = tmp_path / "database" / "avatar.png"
    path.parent.mkdir(parents=True)
    Image.new("RGB", (40, 20), color="red").save(path)
    return path


def test_load_full_size(png):
    image = load_qimage(png)

    assert isinstance(image, QImage)
    assert (image.width(), image.height()) == (40, 20)


def test_downscale_keeps_aspect_ratio(png):
    image = load_qimage(png, (10, 10))
    assert (image.width(), image.height()) == (10, 5)


def test_never_upscales(png):
    image = load_qimage(png, (400, 400))
    assert (image.width(), image.height()) == (40, 20)


def test_undecodable_file_returns_none(tmp_path):
    path = tmp_path / "image.png"
    path.write_bytes(b"definitely not a png")
    assert load_qimage(path) is None


def test_file_loader(png, tmp_path):
    loader = FileImageLoader(tmp_path)

    assert loader("database/avatar.png").width() == 40
    with pytest.raises(ImageLoadError):
        loader("database/missing.png")
