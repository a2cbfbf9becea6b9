"""
Module: export.output.guideline_overlay

Purpose:
    Draw a logo with its spacing guidelines for the guideline summary
    page: logo centered on a square canvas, dashed red strokes per
    guideline, and a "name: Npx" label next to each stroke.

Key Functions:
    - render_guideline_overlay(): Logo + guidelines bitmap

Dependencies:
    - PIL: Image drawing

Used By:
    - brand_export.export.controller: guideline summary pages
"""

from __future__ import annotations

import logging
from typing import Sequence, Tuple

from PIL import Image, ImageDraw, ImageFont

from brand_export.core.models import Axis, Guideline

logger = logging.getLogger(__name__)

DEFAULT_CANVAS_SIZE = 400
LOGO_FRACTION = 0.75
LINE_COLOR = (255, 0, 0, 204)
LABEL_COLOR = (255, 0, 0, 230)
DASH = (5, 5)
LINE_WIDTH = 2
LABEL_FONT_SIZE = 12


def render_guideline_overlay(
    logo: Image.Image,
    guidelines: Sequence[Guideline],
    *,
    canvas_size: int = DEFAULT_CANVAS_SIZE,
    background: str = "white",
    unit: str = "px",
) -> Image.Image:
    """
    Render ``logo`` with ``guidelines`` drawn over it.

    Guideline positions are canvas pixels, matching the editing canvas.

    Args:
        logo: Logo bitmap (not modified)
        guidelines: Committed guidelines for one shape
        canvas_size: Square canvas edge in pixels
        background: Canvas fill
        unit: Label unit suffix

    Returns:
        New RGB image of ``canvas_size`` x ``canvas_size``

    Example:
        >>> overlay = render_guideline_overlay(logo, store.get("square-logo"))
        >>> overlay.size
        (400, 400)
    """
    canvas = Image.new("RGBA", (canvas_size, canvas_size), background)

    max_dim = canvas_size * LOGO_FRACTION
    scale = min(max_dim / logo.width, max_dim / logo.height)
    size = (max(1, round(logo.width * scale)), max(1, round(logo.height * scale)))
    placed = logo.convert("RGBA").resize(size, Image.Resampling.LANCZOS)
    offset = ((canvas_size - size[0]) // 2, (canvas_size - size[1]) // 2)
    canvas.alpha_composite(placed, dest=offset)

    layer = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(layer)
    font = _load_font(LABEL_FONT_SIZE)

    for guideline in guidelines:
        pos = round(guideline.position)
        if guideline.axis is Axis.HORIZONTAL:
            _dashed_line(draw, (0, pos), (canvas_size, pos))
            _label(draw, (8, pos - 14), guideline.label(unit), font)
        else:
            _dashed_line(draw, (pos, 0), (pos, canvas_size))
            _label(draw, (pos + 8, 8), guideline.label(unit), font)

    canvas.alpha_composite(layer)
    logger.debug(f"Rendered overlay with {len(guidelines)} guidelines")
    return canvas.convert("RGB")


def _dashed_line(
    draw: ImageDraw.ImageDraw,
    start: Tuple[int, int],
    end: Tuple[int, int],
) -> None:
    """Axis-aligned dashed stroke from ``start`` to ``end``."""
    on, off = DASH
    horizontal = start[1] == end[1]
    length = abs(end[0] - start[0]) if horizontal else abs(end[1] - start[1])

    offset = 0
    while offset < length:
        seg_end = min(offset + on, length)
        if horizontal:
            segment = [(start[0] + offset, start[1]), (start[0] + seg_end, start[1])]
        else:
            segment = [(start[0], start[1] + offset), (start[0], start[1] + seg_end)]
        draw.line(segment, fill=LINE_COLOR, width=LINE_WIDTH)
        offset += on + off


def _label(
    draw: ImageDraw.ImageDraw,
    origin: Tuple[int, int],
    text: str,
    font: ImageFont.ImageFont,
) -> None:
    x, y = origin
    left, top, right, bottom = draw.textbbox((x + 2, y + 2), text, font=font)
    draw.rectangle((x, y, right + 2, bottom + 2), fill=LABEL_COLOR)
    draw.text((x + 2, y + 2), text, fill="white", font=font)


def _load_font(size: int) -> ImageFont.ImageFont:
    """
    Load a sans-serif font for labels.

    Falls back to the default bitmap font if none is installed.
    """
    for font_name in ("arial.ttf", "Arial.ttf", "DejaVuSans.ttf"):
        try:
            return ImageFont.truetype(font_name, size)
        except OSError:
            continue

    logger.debug("Could not load TrueType font, using default")
    return ImageFont.load_default()
