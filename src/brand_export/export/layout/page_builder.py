"""
Module: export.layout.page_builder

Purpose:
    Sequence fixed-size pages into an export and manage cross-cutting
    layout: a running vertical cursor for flowed content, cover and
    closing pages, guideline summary pages, and page-count-dependent
    footers.

Key Classes:
    - PageBuilder: Page sequence with cursor, check_space() and finalize()

Algorithm:
    Pages are collected as mutable drafts. Nothing that depends on the
    total page count is drawn while drafting; finalize() freezes every
    draft into a Page and appends its footer ("Page N of Total", plus the
    attribution pill on the first and last page) once the total is known.

Dependencies:
    - brand_export.export.layout.models: Page, elements
    - brand_export.export.config: PageSpec

Used By:
    - brand_export.export.layout.compositor: section pages
    - brand_export.export.controller: compose()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Sequence

from PIL import Image

from brand_export.core.models import Guideline
from brand_export.export.config import DEFAULT_ATTRIBUTION, PageSpec

from .models import (
    Element,
    ImageElement,
    LinkElement,
    Page,
    PageKind,
    RectElement,
    TextElement,
    WHITE,
)

logger = logging.getLogger(__name__)

PT_TO_MM = 25.4 / 72
LINE_SPACING = 1.4

BORDER_INSET_MM = 10.0
GRAY: tuple[int, int, int] = (100, 100, 100)
PILL_COLOR: tuple[int, int, int] = (60, 60, 60)
PILL_WIDTH_MM = 50.0
PILL_HEIGHT_MM = 8.0
PILL_CENTER_FROM_BOTTOM_MM = 15.0
FOOTER_FONT_SIZE = 8
OVERLAY_SIZE_MM = 80.0


def line_height(size: float) -> float:
    """Vertical advance (mm) for one line of ``size``-pt text."""
    return size * PT_TO_MM * LINE_SPACING


@dataclass
class _PageDraft:
    kind: PageKind
    title: Optional[str] = None
    section_index: Optional[int] = None
    elements: List[Element] = field(default_factory=list)


class PageBuilder:
    """
    Builds the ordered page list for one export.

    Example:
        >>> builder = PageBuilder(PageSpec())
        >>> builder.add_cover("Acme", "Brand Guide")
        >>> builder.new_page(PageKind.SECTION, title="Colors")
        >>> builder.add_text_line("Primary", size=12)
        >>> pages = builder.finalize()
        >>> pages[-1].page_label
        'Page 2 of 2'
    """

    def __init__(
        self,
        page_spec: PageSpec,
        *,
        attribution_text: str = DEFAULT_ATTRIBUTION,
        attribution_url: Optional[str] = None,
        show_page_numbers: bool = True,
        body_font: str = "Helvetica",
        heading_font: str = "Helvetica-Bold",
    ) -> None:
        self.spec = page_spec
        self.attribution_text = attribution_text
        self.attribution_url = attribution_url
        self.show_page_numbers = show_page_numbers
        self.body_font = body_font
        self.heading_font = heading_font
        self._drafts: List[_PageDraft] = []
        self._cursor = page_spec.content_top
        self._finalized = False

    # ── Page sequence ────────────────────────────────────────────────────

    @property
    def page_count(self) -> int:
        return len(self._drafts)

    @property
    def cursor(self) -> float:
        """Y position (mm from page top) where flowed content continues."""
        return self._cursor

    def new_page(
        self,
        kind: PageKind,
        *,
        title: Optional[str] = None,
        section_index: Optional[int] = None,
    ) -> int:
        """
        Start a page and reset the cursor to the top margin.

        Returns:
            Index of the new page
        """
        if self._finalized:
            raise RuntimeError("PageBuilder already finalized")
        self._drafts.append(_PageDraft(kind=kind, title=title, section_index=section_index))
        self._cursor = self.spec.content_top
        return len(self._drafts) - 1

    def add(self, element: Element) -> None:
        """Add an element to the current page without moving the cursor."""
        if not self._drafts:
            raise RuntimeError("No current page; call new_page() first")
        if self._finalized:
            raise RuntimeError("PageBuilder already finalized")
        self._drafts[-1].elements.append(element)

    def advance(self, height: float) -> None:
        self._cursor += height

    def check_space(self, required: float, *, continuation_title: Optional[str] = None) -> bool:
        """
        Make sure ``required`` mm fit below the cursor.

        If they do not, a new page of the same kind is started and, when
        ``continuation_title`` is given, headed "<title> (continued)".

        Returns:
            True if a new page was started
        """
        if self._drafts and self._cursor + required <= self.spec.bottom_limit:
            return False

        previous = self._drafts[-1] if self._drafts else None
        self.new_page(
            previous.kind if previous else PageKind.SECTION,
            title=previous.title if previous else continuation_title,
            section_index=previous.section_index if previous else None,
        )
        if continuation_title:
            self.add_text_line(f"{continuation_title} (continued)", size=16, font=self.heading_font)
            self.advance(2)
        return True

    # ── Flowed content ───────────────────────────────────────────────────

    def add_text_line(
        self,
        text: str,
        *,
        size: float = 12,
        font: Optional[str] = None,
        color: tuple[int, int, int] = (0, 0, 0),
        indent: float = 0.0,
    ) -> None:
        """Place one line at the cursor and advance past it."""
        advance = line_height(size)
        baseline = self._cursor + size * PT_TO_MM
        self.add(TextElement(
            text=text,
            x=self.spec.margin + indent,
            y=baseline,
            size=size,
            font=font or self.body_font,
            color=color,
        ))
        self.advance(advance)

    def add_image(self, image: Image.Image, width: float, height: float) -> None:
        """Place an image at the cursor's left margin and advance past it."""
        self.add(ImageElement(image, self.spec.margin, self._cursor, width, height))
        self.advance(height)

    # ── Fixed pages ──────────────────────────────────────────────────────

    def add_cover(self, brand_name: str, subtitle: str) -> int:
        """Bordered title page with centered brand name and subtitle."""
        index = self.new_page(PageKind.COVER, title=brand_name)
        middle = self.spec.height / 2
        self._draw_border()
        self.add(TextElement(brand_name, self.spec.width / 2, middle - 10, size=42,
                             font=self.heading_font, align="center"))
        self.add(TextElement(subtitle, self.spec.width / 2, middle + 18, size=24,
                             font=self.body_font, align="center", color=GRAY))
        return index

    def add_closing(self, brand_name: str, timestamp: datetime) -> int:
        """Bordered closing page repeating the brand name and export date."""
        index = self.new_page(PageKind.CLOSING, title=brand_name)
        self._draw_border()
        center = self.spec.width / 2
        self.add(TextElement(f"Brand Guidelines of {brand_name}", center, self.spec.height - 60,
                             size=20, font=self.heading_font, align="center"))
        self.add(TextElement(timestamp.strftime("%B %d, %Y"), center, self.spec.height - 45,
                             size=14, font=self.body_font, align="center"))
        return index

    def add_guideline_summary(
        self,
        title: str,
        guidelines: Sequence[Guideline],
        *,
        unit: str = "px",
        overlay: Optional[Image.Image] = None,
    ) -> int:
        """
        Summary page(s) for one logo shape's guidelines.

        Lists ``name: round(position)unit`` per guideline, continuing on a
        new page (headed "<title> (continued)") when space runs out.

        Returns:
            Index of the first summary page
        """
        first = self.new_page(PageKind.GUIDELINES, title=title)
        self.add_text_line(title, size=20, font=self.heading_font)
        self.advance(4)

        if overlay is not None:
            self.check_space(OVERLAY_SIZE_MM, continuation_title=title)
            self.add_image(overlay, OVERLAY_SIZE_MM, OVERLAY_SIZE_MM)
            self.advance(6)

        self.check_space(line_height(12), continuation_title=title)
        self.add_text_line("Guidelines:", size=12, font=self.heading_font)
        for guideline in guidelines:
            self.check_space(line_height(11), continuation_title=title)
            self.add_text_line(f"• {guideline.label(unit)}", size=11, indent=5)

        logger.debug(
            f"Guideline summary '{title}': {len(guidelines)} lines on "
            f"{self.page_count - first} page(s)"
        )
        return first

    def _draw_border(self) -> None:
        inset = BORDER_INSET_MM
        self.add(RectElement(inset, inset, self.spec.width - 2 * inset,
                             self.spec.height - 2 * inset, line_width=0.5))

    # ── Finalize ─────────────────────────────────────────────────────────

    def finalize(self) -> tuple[Page, ...]:
        """
        Freeze all drafts into Pages and stamp count-dependent footers.

        Returns:
            Pages in order; every label reads "Page N of <final total>"
        """
        total = len(self._drafts)
        pages = []
        for index, draft in enumerate(self._drafts):
            footer = self._footer(index, total)
            pages.append(Page(
                index=index,
                kind=draft.kind,
                elements=tuple(draft.elements) + footer,
                title=draft.title,
                section_index=draft.section_index,
                page_label=f"Page {index + 1} of {total}" if self.show_page_numbers else None,
            ))

        self._finalized = True
        logger.info(f"Finalized {total} pages")
        return tuple(pages)

    def _footer(self, index: int, total: int) -> tuple[Element, ...]:
        elements: List[Element] = []
        baseline = self.spec.height - PILL_CENTER_FROM_BOTTOM_MM + 1

        if self.show_page_numbers:
            elements.append(TextElement(
                f"Page {index + 1} of {total}",
                self.spec.width - self.spec.margin,
                baseline,
                size=FOOTER_FONT_SIZE,
                font=self.body_font,
                align="right",
                color=GRAY,
            ))

        if index in (0, total - 1) and self.attribution_text:
            x = (self.spec.width - PILL_WIDTH_MM) / 2
            y = self.spec.height - PILL_CENTER_FROM_BOTTOM_MM - PILL_HEIGHT_MM / 2
            elements.append(RectElement(x, y, PILL_WIDTH_MM, PILL_HEIGHT_MM, stroke=None,
                                        fill=PILL_COLOR, radius=PILL_HEIGHT_MM / 2))
            elements.append(TextElement(self.attribution_text, self.spec.width / 2, baseline,
                                        size=FOOTER_FONT_SIZE, font=self.body_font,
                                        align="center", color=WHITE))
            if self.attribution_url:
                elements.append(LinkElement(self.attribution_url, x, y, PILL_WIDTH_MM, PILL_HEIGHT_MM))

        return tuple(elements)
