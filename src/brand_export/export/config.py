"""
Module: export.config

Purpose:
    Page geometry and export settings. All lengths are millimetres; the
    renderer converts to PDF points at emission time.

Key Classes:
    - PageSpec: Fixed physical page with margins and reserved header band
    - ExportConfig: Brand-level export settings

Used By:
    - brand_export.export.layout: compositor and page builder
    - brand_export.export.controller: compose() / export_brand_guide()
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from brand_export.errors import PageSpecError


# A4 portrait in millimetres
A4_WIDTH_MM = 210.0
A4_HEIGHT_MM = 297.0
DEFAULT_MARGIN_MM = 20.0
DEFAULT_HEADER_OFFSET_MM = 10.0

DEFAULT_RASTER_SCALE = 1.5
DEFAULT_ATTRIBUTION = "Made with Brand Studio"


@dataclass(frozen=True)
class PageSpec:
    """
    Fixed page dimensions (immutable).

    Attributes:
        width: Page width (mm)
        height: Page height (mm)
        margin: Margin on every side (mm)
        header_offset: Band reserved below the top margin for a section
            title on the first page of a multi-page section (mm)

    Raises:
        PageSpecError: If the content area is empty

    Example:
        >>> spec = PageSpec()
        >>> spec.content_width, spec.max_content_height
        (170.0, 247.0)
    """

    width: float = A4_WIDTH_MM
    height: float = A4_HEIGHT_MM
    margin: float = DEFAULT_MARGIN_MM
    header_offset: float = DEFAULT_HEADER_OFFSET_MM

    def __post_init__(self) -> None:
        """Validate geometry on construction."""
        if self.width <= 0 or self.height <= 0:
            raise PageSpecError(f"Page size must be positive: {self.width}x{self.height}")
        if self.margin < 0 or self.header_offset < 0:
            raise PageSpecError("Margins must be non-negative")
        if self.content_width <= 0:
            raise PageSpecError("Margins exceed page width")
        if self.max_content_height <= 0:
            raise PageSpecError("Margins and header leave no content height")

    @property
    def content_width(self) -> float:
        """Width available for content (excluding margins)."""
        return self.width - 2 * self.margin

    @property
    def max_content_height(self) -> float:
        """Usable height of one page for a rasterized section."""
        return self.height - 2 * self.margin - self.header_offset

    @property
    def content_top(self) -> float:
        return self.margin

    @property
    def bottom_limit(self) -> float:
        """Y coordinate (from top) that flowed content must not pass."""
        return self.height - self.margin


@dataclass(frozen=True)
class ExportConfig:
    """
    Configuration for one brand guide export (immutable).

    Attributes:
        brand_name: Brand shown on cover and closing pages
        page_spec: Page geometry
        raster_scale: Upscaling factor passed to the rasterizer
        include_cover: Emit the bordered title page
        include_closing: Emit the bordered closing page
        cover_subtitle: Subtitle under the brand name on the cover
        attribution_text: Product credit on first and last page
        attribution_url: Makes the credit a clickable region when set
        show_page_numbers: Stamp "Page N of Total" on every page
        guideline_unit: Unit suffix on guideline summary lines
        logo_shapes: Shape keys whose guidelines are bundled into the export
    """

    brand_name: str
    page_spec: PageSpec = field(default_factory=PageSpec)
    raster_scale: float = DEFAULT_RASTER_SCALE
    include_cover: bool = True
    include_closing: bool = True
    cover_subtitle: str = "Brand Guide"
    attribution_text: str = DEFAULT_ATTRIBUTION
    attribution_url: Optional[str] = None
    show_page_numbers: bool = True
    guideline_unit: str = "px"
    logo_shapes: tuple[str, ...] = ("square-logo", "rounded-logo", "circle-logo")

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if not self.brand_name.strip():
            raise ValueError("brand_name must not be empty")
        if self.raster_scale <= 0:
            raise ValueError(f"raster_scale must be positive: {self.raster_scale}")
