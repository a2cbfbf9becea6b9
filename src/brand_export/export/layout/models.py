"""
Module: export.layout.models

Purpose:
    Data models for composed pages. A page is a list of drawing elements
    positioned in millimetres from the page's top-left corner; the
    renderer maps them onto a concrete output.

Key Classes:
    - ImageElement / TextElement / RectElement / LinkElement: Drawing ops
    - PageKind: Role of a page in the document
    - Page: One finished page
    - SectionOutcome: Pages produced for one input section
    - ExportArtifact: Final ordered pages plus metadata

Dependencies:
    - PIL: Image type
    - dataclasses (std)

Used By:
    - brand_export.export.layout.page_builder: Creates Pages
    - brand_export.export.layout.compositor: Creates SectionOutcomes
    - brand_export.export.output.renderer: Consumes ExportArtifact
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Tuple, Union

from PIL import Image

from brand_export.export.config import PageSpec

RGB = Tuple[int, int, int]

BLACK: RGB = (0, 0, 0)
WHITE: RGB = (255, 255, 255)


@dataclass(frozen=True)
class ImageElement:
    """
    Bitmap placed on a page.

    Attributes:
        image: Bitmap to draw (already cropped to its band)
        x, y: Top-left corner (mm)
        width, height: Placed size (mm); aspect is the caller's concern
    """

    image: Image.Image
    x: float
    y: float
    width: float
    height: float

    @property
    def bottom(self) -> float:
        return self.y + self.height


@dataclass(frozen=True)
class TextElement:
    """
    Single line of text.

    ``y`` is the baseline, measured from the top of the page. ``x`` is the
    left edge for "left" alignment and the center for "center".
    """

    text: str
    x: float
    y: float
    size: float = 12
    font: str = "Helvetica"
    align: str = "left"
    color: RGB = BLACK


@dataclass(frozen=True)
class RectElement:
    """Rectangle outline and/or fill; ``radius`` > 0 rounds the corners."""

    x: float
    y: float
    width: float
    height: float
    stroke: Optional[RGB] = BLACK
    fill: Optional[RGB] = None
    line_width: float = 0.5
    radius: float = 0.0


@dataclass(frozen=True)
class LinkElement:
    """Clickable region pointing at ``url``."""

    url: str
    x: float
    y: float
    width: float
    height: float


Element = Union[ImageElement, TextElement, RectElement, LinkElement]


class PageKind(str, Enum):
    COVER = "cover"
    SECTION = "section"
    FALLBACK = "fallback"
    GUIDELINES = "guidelines"
    CLOSING = "closing"


@dataclass(frozen=True)
class Page:
    """
    One finished page (immutable).

    Attributes:
        index: Page number (0-indexed)
        kind: Role of the page
        elements: Drawing ops in paint order, footer last
        title: Section or shape title the page belongs to
        section_index: Index of the producing section, if any
        page_label: "Page N of Total" text stamped at finalize
    """

    index: int
    kind: PageKind
    elements: tuple[Element, ...]
    title: Optional[str] = None
    section_index: Optional[int] = None
    page_label: Optional[str] = None

    @property
    def number(self) -> int:
        return self.index + 1

    @property
    def images(self) -> tuple[ImageElement, ...]:
        return tuple(e for e in self.elements if isinstance(e, ImageElement))

    @property
    def texts(self) -> tuple[str, ...]:
        return tuple(e.text for e in self.elements if isinstance(e, TextElement))

    @property
    def links(self) -> tuple[LinkElement, ...]:
        return tuple(e for e in self.elements if isinstance(e, LinkElement))


@dataclass(frozen=True)
class SectionOutcome:
    """
    Pages produced for one input section.

    Attributes:
        section_index: Index of the input section
        title: Section title
        first_page: Index of the first page produced
        page_count: Number of pages produced (bands, or 1 for fallback)
        failed: True if rasterization failed and a fallback page was used
        error: Failure message for failed sections
    """

    section_index: int
    title: str
    first_page: int
    page_count: int
    failed: bool = False
    error: Optional[str] = None

    @property
    def last_page(self) -> int:
        return self.first_page + self.page_count - 1


@dataclass(frozen=True)
class ExportArtifact:
    """
    Final layout output with diagnostics.

    Attributes:
        pages: Finished pages in order
        page_spec: Geometry the pages were laid out for
        sections: One outcome per input section, in input order
        warnings: Recovered problems worth surfacing to the user
        metadata: Brand name, generation time, version...

    Example:
        >>> artifact.page_count
        7
        >>> artifact.failed_sections
        ()
    """

    pages: tuple[Page, ...]
    page_spec: PageSpec
    sections: tuple[SectionOutcome, ...] = ()
    warnings: tuple[str, ...] = ()
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def failed_sections(self) -> tuple[SectionOutcome, ...]:
        return tuple(s for s in self.sections if s.failed)

    @property
    def section_boundaries(self) -> dict[int, tuple[int, int]]:
        """Section index -> (first page index, last page index)."""
        return {s.section_index: (s.first_page, s.last_page) for s in self.sections}
