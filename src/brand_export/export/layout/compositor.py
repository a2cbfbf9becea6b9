"""
Module: export.layout.compositor

Purpose:
    Turn one Section into one or more pages. The section is rasterized,
    scaled to the content width, and if it is taller than one page's
    usable height, sliced into equal-height source bands, one per page.

Key Functions:
    - plan_bands(): Band geometry for a bitmap on a page spec
    - compose_section(): Rasterize + paginate one section (never raises
      for rendering failures)

Algorithm:
    1. Rasterize at ``scale``; any failure -> single fallback page
    2. imgHeight = bitmap.height * contentWidth / bitmap.width
    3. imgHeight <= maxContentHeight -> one page, image at content origin
       otherwise n = ceil(imgHeight / maxContentHeight) bands of
       bitmap.height / n source pixels, each placed at imgHeight / n;
       the first band's page carries the section title in the reserved
       header band

    Band boundaries stay floating point; they are rounded to pixel rows
    only when each band is cropped, so rounding never accumulates.

Dependencies:
    - brand_export.export.rasterizer: Rasterizer
    - brand_export.export.layout.page_builder: PageBuilder

Used By:
    - brand_export.export.controller: compose()
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List

from PIL import Image

from brand_export.core.models import Section
from brand_export.export.config import PageSpec
from brand_export.export.rasterizer import Rasterizer

from .models import ImageElement, PageKind, SectionOutcome, TextElement
from .page_builder import PT_TO_MM, PageBuilder

logger = logging.getLogger(__name__)

# Tolerance for float noise when a section is an exact multiple of a page
EPSILON = 1e-9

SECTION_TITLE_SIZE = 16
FALLBACK_NOTICE = "This section could not be rendered."


@dataclass(frozen=True)
class Band:
    """
    One horizontal slice of a section bitmap mapped to one page.

    Attributes:
        index: Band number within the section (0-indexed)
        source_top: First source row (float, unrounded)
        source_bottom: End source row (float, unrounded, exclusive)
        height: Placed height on the page (mm)
    """

    index: int
    source_top: float
    source_bottom: float
    height: float

    def pixel_box(self, width: int) -> tuple[int, int, int, int]:
        """Crop box in device pixels."""
        return (0, round(self.source_top), width, round(self.source_bottom))


def plan_bands(bitmap_width: int, bitmap_height: int, spec: PageSpec) -> List[Band]:
    """
    Compute band geometry for a bitmap.

    Args:
        bitmap_width: Rasterized width in pixels
        bitmap_height: Rasterized height in pixels
        spec: Page geometry

    Returns:
        One band if the scaled image fits one page, else
        ceil(scaled height / max content height) equal bands

    Example:
        >>> spec = PageSpec()  # content 170 x 247 mm
        >>> len(plan_bands(170, 741, spec))
        3
    """
    if bitmap_width <= 0 or bitmap_height <= 0:
        raise ValueError(f"Bitmap must be non-empty: {bitmap_width}x{bitmap_height}")

    img_height = bitmap_height * spec.content_width / bitmap_width
    if img_height <= spec.max_content_height * (1 + EPSILON):
        return [Band(0, 0.0, float(bitmap_height), img_height)]

    pages_needed = math.ceil(img_height / spec.max_content_height - EPSILON)
    source_band = bitmap_height / pages_needed
    placed_band = img_height / pages_needed
    return [
        Band(i, i * source_band, (i + 1) * source_band, placed_band)
        for i in range(pages_needed)
    ]


def compose_section(
    section: Section,
    builder: PageBuilder,
    rasterizer: Rasterizer,
    *,
    scale: float = 1.5,
) -> SectionOutcome:
    """
    Rasterize one section and append its pages to ``builder``.

    Rendering failures are contained: the section gets a single fallback
    page with its title and an error notice, and the caller moves on.

    Args:
        section: Section to compose
        builder: Page sequence to append to
        rasterizer: Rendering backend
        scale: Upscaling factor for sharpness

    Returns:
        SectionOutcome describing the pages produced
    """
    first_page = builder.page_count
    try:
        bitmap = rasterizer.rasterize(section.renderable, scale)
        bands = plan_bands(bitmap.width, bitmap.height, builder.spec)
    except Exception as exc:
        # Any backend failure is contained to this section
        logger.warning(f"Section '{section.title}' failed to render, using fallback page: {exc}")
        _add_fallback_page(section, builder)
        return SectionOutcome(
            section_index=section.index,
            title=section.title,
            first_page=first_page,
            page_count=1,
            failed=True,
            error=f"{type(exc).__name__}: {exc}",
        )

    spec = builder.spec
    for band in bands:
        builder.new_page(PageKind.SECTION, title=section.title, section_index=section.index)
        top = spec.content_top
        if len(bands) > 1 and band.index == 0:
            builder.add(TextElement(
                section.title,
                spec.margin,
                spec.content_top + SECTION_TITLE_SIZE * PT_TO_MM,
                size=SECTION_TITLE_SIZE,
                font=builder.heading_font,
            ))
            top += spec.header_offset

        builder.add(ImageElement(
            image=_crop_band(bitmap, band, len(bands)),
            x=spec.margin,
            y=top,
            width=spec.content_width,
            height=band.height,
        ))

    if len(bands) > 1:
        logger.info(f"Section '{section.title}' split across {len(bands)} pages")
    return SectionOutcome(
        section_index=section.index,
        title=section.title,
        first_page=first_page,
        page_count=len(bands),
    )


def _crop_band(bitmap: Image.Image, band: Band, band_count: int) -> Image.Image:
    if band_count == 1:
        return bitmap
    return bitmap.crop(band.pixel_box(bitmap.width))


def _add_fallback_page(section: Section, builder: PageBuilder) -> None:
    builder.new_page(PageKind.FALLBACK, title=section.title, section_index=section.index)
    builder.advance(8)
    builder.add_text_line(section.title, size=18, font=builder.heading_font)
    builder.add_text_line(FALLBACK_NOTICE, size=11, color=(120, 120, 120))
