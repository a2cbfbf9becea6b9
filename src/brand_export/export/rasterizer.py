"""
Module: export.rasterizer

Purpose:
    Rendering backend abstraction: turn a section's renderable into a
    bitmap at a given upscaling factor.

Key Classes:
    - Rasterizer: Abstract backend (rasterize(node, scale) -> Image)
    - ImageRasterizer: Backend for renderables that already are bitmaps
      (PIL images, files, encoded bytes, preloaded ImageNodes) or that
      expose a ``render(scale)`` method

Dependencies:
    - PIL: Image decode and resampling

Used By:
    - brand_export.export.layout.compositor: compose_section()
    - brand_export.export.controller: default backend
"""

from __future__ import annotations

import io
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from PIL import Image

from brand_export.errors import RasterizationError
from brand_export.preload.images import ImageNode, decode_source

logger = logging.getLogger(__name__)


class Rasterizer(ABC):
    """
    Abstract rendering backend.

    Implementations raise RasterizationError when a node cannot be
    rendered; the compositor treats any other exception the same way.
    """

    @abstractmethod
    def rasterize(self, node: Any, scale: float) -> Image.Image:
        """
        Render ``node`` to a bitmap.

        Args:
            node: Backend-specific renderable
            scale: Upscaling factor for output sharpness

        Returns:
            RGB bitmap with non-zero width and height

        Raises:
            RasterizationError: If the node cannot be rendered
        """


class ImageRasterizer(Rasterizer):
    """
    Rasterizer for bitmap-like renderables.

    Accepts a PIL Image, a filesystem path, encoded image bytes, a
    preloaded ImageNode, or any object with ``render(scale) -> Image``.
    Bitmaps are upscaled by ``scale`` and flattened onto ``background``.

    Example:
        >>> bitmap = ImageRasterizer().rasterize(Path("palette.png"), 1.5)
    """

    def __init__(self, background: tuple[int, int, int] = (255, 255, 255)) -> None:
        self.background = background

    def rasterize(self, node: Any, scale: float) -> Image.Image:
        if hasattr(node, "render") and callable(node.render):
            bitmap = node.render(scale)
            if not isinstance(bitmap, Image.Image):
                raise RasterizationError(f"render() returned {type(bitmap).__name__}, not an image")
            return self._flatten(bitmap)

        bitmap = self._load(node)
        if bitmap.width == 0 or bitmap.height == 0:
            raise RasterizationError("Renderable has zero size")

        if scale != 1:
            size = (max(1, round(bitmap.width * scale)), max(1, round(bitmap.height * scale)))
            bitmap = bitmap.resize(size, Image.Resampling.LANCZOS)
        return self._flatten(bitmap)

    def _load(self, node: Any) -> Image.Image:
        try:
            if isinstance(node, Image.Image):
                node.load()
                return node
            if isinstance(node, ImageNode):
                return node.image if node.image is not None else decode_source(node.src)
            if isinstance(node, (str, Path)):
                return decode_source(str(node))
            if isinstance(node, (bytes, bytearray)):
                img = Image.open(io.BytesIO(node))
                img.load()
                return img
        except (OSError, ValueError) as exc:
            raise RasterizationError(f"Could not decode renderable: {exc}") from exc

        raise RasterizationError(f"Unsupported renderable type: {type(node).__name__}")

    def _flatten(self, bitmap: Image.Image) -> Image.Image:
        if bitmap.width == 0 or bitmap.height == 0:
            raise RasterizationError("Rendered bitmap has zero size")
        if bitmap.mode == "RGB":
            return bitmap
        rgba = bitmap.convert("RGBA")
        flat = Image.new("RGB", rgba.size, self.background)
        flat.paste(rgba, mask=rgba.getchannel("A"))
        return flat
