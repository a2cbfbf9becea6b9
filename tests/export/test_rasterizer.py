"""
Unit tests for the bitmap rasterizer backend.
"""

from unittest.mock import MagicMock

import pytest
from PIL import Image

from brand_export.errors import RasterizationError
from brand_export.export import ImageRasterizer
from brand_export.preload import ImageNode


@pytest.fixture
def rasterizer():
    return ImageRasterizer()


def test_pil_image_scaled(rasterizer, image_factory):
    bitmap = rasterizer.rasterize(image_factory(100, 40), 1.5)

    assert bitmap.size == (150, 60)
    assert bitmap.mode == "RGB"


def test_transparent_image_flattened_on_white(rasterizer):
    bitmap = rasterizer.rasterize(Image.new("RGBA", (4, 4), (0, 0, 0, 0)), 1)

    assert bitmap.getpixel((0, 0)) == (255, 255, 255)


def test_file_path_and_bytes(rasterizer, sample_image, png_bytes):
    assert rasterizer.rasterize(sample_image, 1).size == (200, 100)
    assert rasterizer.rasterize(str(sample_image), 2).size == (400, 200)
    assert rasterizer.rasterize(png_bytes, 1).size == (32, 16)


def test_preloaded_image_node(rasterizer, image_factory):
    node = ImageNode("https://cdn/logo.png", image=image_factory(10, 10))

    assert rasterizer.rasterize(node, 1).size == (10, 10)


def test_renderable_with_render_method(rasterizer, image_factory):
    node = MagicMock()
    node.render.return_value = image_factory(30, 20)

    bitmap = rasterizer.rasterize(node, 2.0)

    node.render.assert_called_once_with(2.0)
    assert bitmap.size == (30, 20)


def test_render_returning_non_image_fails(rasterizer):
    node = MagicMock()
    node.render.return_value = "nope"

    with pytest.raises(RasterizationError):
        rasterizer.rasterize(node, 1)


@pytest.mark.parametrize("node", [42, b"garbage", "/nonexistent/file.png"])
def test_unrenderable_inputs(rasterizer, node):
    with pytest.raises(RasterizationError):
        rasterizer.rasterize(node, 1)


def test_zero_size_rejected(rasterizer):
    with pytest.raises(RasterizationError):
        rasterizer.rasterize(Image.new("RGB", (0, 5)), 1)
