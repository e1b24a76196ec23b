"""
Pytest configuration for stylesprite
"""

import pytest
from PIL import Image


@pytest.fixture
def image_root(tmp_path):
    root = tmp_path / "images"
    root.mkdir()
    return root


@pytest.fixture
def make_image(image_root):
    """Write a solid colour image below image_root and return its name."""

    def make(name, size, color=(255, 0, 0, 255)):
        fmt = {"png": "PNG", "gif": "GIF", "jpg": "JPEG", "jpeg": "JPEG"}[name.rsplit(".", 1)[1]]
        mode = "RGBA" if fmt == "PNG" else "RGB"
        img = Image.new(mode, size, color if mode == "RGBA" else color[:3])
        img.save(image_root / name, fmt)
        return name

    return make
