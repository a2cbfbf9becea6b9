"""
Unit tests for PageBuilder: cursor flow, check_space continuation,
fixed pages, guideline summaries and deferred footers.
"""

from datetime import datetime

import pytest

from brand_export.core.models import Axis, Guideline
from brand_export.export.layout import LinkElement, PageBuilder, PageKind, RectElement, TextElement
from brand_export.export.layout.page_builder import line_height


@pytest.fixture
def builder(page_spec):
    return PageBuilder(page_spec)


@pytest.fixture
def guideline_factory():
    """Factory to create n vertical guidelines X1..Xn."""
    def _create(n: int):
        return [Guideline(f"vertical-{i}", Axis.VERTICAL, i * 8 + 0.4, f"X{i}") for i in range(1, n + 1)]
    return _create


def _footer_texts(page):
    return [e.text for e in page.elements if isinstance(e, TextElement) and e.text.startswith("Page ")]


class TestCursor:
    def test_new_page_resets_cursor(self, builder, page_spec):
        builder.new_page(PageKind.SECTION)
        builder.advance(50)
        builder.new_page(PageKind.SECTION)

        assert builder.cursor == page_spec.content_top

    def test_text_line_advances_cursor(self, builder, page_spec):
        builder.new_page(PageKind.SECTION)

        builder.add_text_line("Primary", size=12)

        assert builder.cursor == pytest.approx(page_spec.content_top + line_height(12))

    def test_add_without_page_raises(self, builder):
        with pytest.raises(RuntimeError):
            builder.add(TextElement("x", 0, 0))


class TestCheckSpace:
    def test_when_space_remains_then_same_page(self, builder):
        builder.new_page(PageKind.SECTION, title="Colors")

        assert builder.check_space(100) is False
        assert builder.page_count == 1

    def test_when_space_exhausted_then_new_page_with_continuation(self, builder, page_spec):
        builder.new_page(PageKind.SECTION, title="Colors", section_index=3)
        builder.advance(page_spec.max_content_height)

        started = builder.check_space(20, continuation_title="Colors")

        pages = builder.finalize()
        assert started is True
        assert len(pages) == 2
        assert pages[1].kind is PageKind.SECTION
        assert pages[1].section_index == 3
        assert "Colors (continued)" in pages[1].texts

    def test_exact_fit_stays_on_page(self, builder, page_spec):
        builder.new_page(PageKind.SECTION)
        builder.advance(page_spec.bottom_limit - page_spec.content_top - 10)

        assert builder.check_space(10) is False

    def test_without_title_no_heading(self, builder, page_spec):
        builder.new_page(PageKind.SECTION)
        builder.advance(page_spec.max_content_height + 5)

        builder.check_space(20)

        assert not any("(continued)" in t for t in builder.finalize()[1].texts)


class TestFixedPages:
    def test_cover_is_bordered_with_centered_text(self, builder, page_spec):
        builder.add_cover("Acme", "Brand Guide")

        page = builder.finalize()[0]
        assert page.kind is PageKind.COVER
        border = next(e for e in page.elements if isinstance(e, RectElement) and e.fill is None)
        assert (border.x, border.y) == (10, 10)
        assert border.width == page_spec.width - 20
        name = next(e for e in page.elements if isinstance(e, TextElement) and e.text == "Acme")
        assert name.align == "center"
        assert name.x == page_spec.width / 2

    def test_closing_repeats_brand_and_date(self, builder):
        builder.add_closing("Acme", datetime(2026, 10, 17, 9, 30))

        page = builder.finalize()[0]
        assert page.kind is PageKind.CLOSING
        assert "Brand Guidelines of Acme" in page.texts
        assert "October 17, 2026" in page.texts


class TestGuidelineSummary:
    def test_lists_rounded_positions(self, builder, guideline_factory):
        builder.add_guideline_summary("Square Logo Guidelines", guideline_factory(2))

        page = builder.finalize()[0]
        assert page.kind is PageKind.GUIDELINES
        assert page.texts[:4] == ("Square Logo Guidelines", "Guidelines:", "• X1: 8px", "• X2: 16px")

    def test_long_list_wraps_with_continuation_header(self, builder, guideline_factory, page_spec):
        lines = guideline_factory(120)

        first = builder.add_guideline_summary("Circle Logo Guidelines", lines, unit="pt")

        pages = builder.finalize()
        assert first == 0
        assert len(pages) > 1
        assert all(p.kind is PageKind.GUIDELINES for p in pages)
        assert all("Circle Logo Guidelines (continued)" in p.texts for p in pages[1:])
        listed = [t for p in pages for t in p.texts if t.startswith("• ")]
        assert listed == [f"• {g.label('pt')}" for g in lines]
        for page in pages:
            body = [e for e in page.elements if isinstance(e, TextElement) and e.text.startswith("• ")]
            assert all(e.y <= page_spec.bottom_limit for e in body)

    def test_overlay_image_placed(self, builder, guideline_factory, image_factory):
        overlay = image_factory(400, 400)

        builder.add_guideline_summary("Square Logo Guidelines", guideline_factory(1), overlay=overlay)

        image = builder.finalize()[0].images[0]
        assert image.image is overlay
        assert image.width == image.height == 80


class TestFinalize:
    def test_every_denominator_is_final_total(self, builder, page_spec):
        builder.add_cover("Acme", "Brand Guide")
        for title in ("Colors", "Typography", "Logo"):
            builder.new_page(PageKind.SECTION, title=title)
        # Late pages appended after earlier pages were drafted
        builder.new_page(PageKind.GUIDELINES, title="Square")
        builder.add_closing("Acme", datetime(2026, 1, 1))

        pages = builder.finalize()

        assert len(pages) == 6
        for page in pages:
            assert page.page_label == f"Page {page.number} of 6"
            assert _footer_texts(page) == [f"Page {page.number} of 6"]

    def test_attribution_only_on_first_and_last(self, page_spec):
        builder = PageBuilder(page_spec, attribution_text="Made with Brand Studio",
                              attribution_url="https://brand.example.com")
        for _ in range(4):
            builder.new_page(PageKind.SECTION)

        pages = builder.finalize()

        with_credit = [p.index for p in pages if "Made with Brand Studio" in p.texts]
        with_link = [p.index for p in pages if p.links]
        assert with_credit == [0, 3]
        assert with_link == [0, 3]
        assert pages[0].links[0].url == "https://brand.example.com"

    def test_single_page_gets_one_attribution(self, builder):
        builder.new_page(PageKind.SECTION)

        page = builder.finalize()[0]

        assert page.texts.count("Made with Brand Studio") == 1
        assert not any(isinstance(e, LinkElement) for e in page.elements)

    def test_page_numbers_can_be_disabled(self, page_spec):
        builder = PageBuilder(page_spec, show_page_numbers=False)
        builder.new_page(PageKind.SECTION)

        page = builder.finalize()[0]

        assert page.page_label is None
        assert _footer_texts(page) == []

    def test_no_mutation_after_finalize(self, builder):
        builder.new_page(PageKind.SECTION)
        builder.finalize()

        with pytest.raises(RuntimeError):
            builder.new_page(PageKind.SECTION)
        with pytest.raises(RuntimeError):
            builder.add(TextElement("late", 0, 0))
