"""
Tests for the export pipeline: compose() ordering, failure isolation,
fatal results, guideline bundling and the async preload pipeline.
"""

import asyncio
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from brand_export.core.models import Axis, Guideline, Section
from brand_export.errors import ExportCancelledError, ExportFatalError, GuidelineLockedError
from brand_export.export import ExportConfig, PageKind, compose, export_brand_guide, shape_title
from brand_export.preload import (
    AssetPreloader,
    CancellationToken,
    FontLoadingResult,
    ImageResolution,
    ImageStatus,
    PreloadReport,
)


@pytest.fixture
def config():
    return ExportConfig(brand_name="Acme")


@pytest.fixture
def square_lines():
    return (
        Guideline("vertical-1", Axis.VERTICAL, 40, "X1"),
        Guideline("horizontal-1", Axis.HORIZONTAL, 120, "Y1"),
    )


@pytest.fixture
def mock_preloader():
    """Preloader reporting one degraded image and one failed font."""
    preloader = MagicMock(spec=AssetPreloader)
    preloader.preload = AsyncMock(return_value=PreloadReport(
        images=(ImageResolution("https://cdn/gone.png", ImageStatus.DEGRADED, "gave up"),),
        fonts=FontLoadingResult(loaded=["Inter"], failed=["Ghost Sans"]),
    ))
    return preloader


class TestCompose:
    def test_cover_sections_closing_in_order(self, config, image_factory):
        sections = [
            Section("Colors", image_factory(340, 200)),
            Section("Typography", image_factory(340, 200)),
        ]

        artifact = compose(sections, config=config, now=datetime(2026, 10, 17))

        kinds = [p.kind for p in artifact.pages]
        assert kinds == [PageKind.COVER, PageKind.SECTION, PageKind.SECTION, PageKind.CLOSING]
        assert [p.title for p in artifact.pages[1:3]] == ["Colors", "Typography"]
        assert artifact.section_boundaries == {0: (1, 1), 1: (2, 2)}
        assert artifact.pages[-1].page_label == "Page 4 of 4"

    def test_failed_section_is_isolated(self, config, image_factory):
        sections = [
            Section("Logo", object()),
            Section("Colors", image_factory(340, 200)),
        ]

        artifact = compose(sections, config=config)

        assert [s.failed for s in artifact.sections] == [True, False]
        assert artifact.pages[1].kind is PageKind.FALLBACK
        assert artifact.pages[2].kind is PageKind.SECTION
        assert len(artifact.warnings) == 1
        assert "Logo" in artifact.warnings[0]
        assert artifact.metadata["failed_sections"] == 1

    def test_section_indices_follow_input_order(self, config, image_factory):
        sections = [Section("A", image_factory(10, 10), index=7), Section("B", image_factory(10, 10))]

        artifact = compose(sections, config=config)

        assert [s.section_index for s in artifact.sections] == [0, 1]

    def test_when_every_section_fails_then_fatal(self, config):
        with pytest.raises(ExportFatalError):
            compose([Section("A", None), Section("B", 123)], config=config)

    def test_when_nothing_to_export_then_fatal(self, config):
        with pytest.raises(ExportFatalError):
            compose([], config=config)

    def test_guidelines_alone_make_a_valid_export(self, config, square_lines):
        artifact = compose([], config=config, guidelines={"square-logo": square_lines})

        summary = [p for p in artifact.pages if p.kind is PageKind.GUIDELINES]
        assert len(summary) == 1
        assert summary[0].title == "Square Logo Guidelines"
        assert "• X1: 40px" in summary[0].texts
        assert "• Y1: 120px" in summary[0].texts

    def test_shapes_without_guidelines_skipped(self, config, square_lines, image_factory):
        artifact = compose(
            [Section("Colors", image_factory(10, 10))],
            config=config,
            guidelines={"square-logo": square_lines, "circle-logo": ()},
            logo=image_factory(64, 64, "black"),
        )

        summary = [p for p in artifact.pages if p.kind is PageKind.GUIDELINES]
        assert [p.title for p in summary] == ["Square Logo Guidelines"]
        assert summary[0].images[0].image.size == (400, 400)
        assert artifact.metadata["guideline_pages"] == 1

    def test_optional_pages_disabled(self, image_factory):
        config = ExportConfig(brand_name="Acme", include_cover=False, include_closing=False)

        artifact = compose([Section("Colors", image_factory(10, 10))], config=config)

        assert [p.kind for p in artifact.pages] == [PageKind.SECTION]

    def test_cancel_between_sections(self, config, image_factory):
        token = CancellationToken()

        class CancellingRenderable:
            def render(self, scale):
                token.cancel()
                return image_factory(10, 10)

        sections = [Section("A", CancellingRenderable()), Section("B", image_factory(10, 10))]

        with pytest.raises(ExportCancelledError):
            compose(sections, config=config, cancel_token=token)

    def test_metadata(self, config, image_factory):
        artifact = compose([Section("Colors", image_factory(10, 10))], config=config,
                           now=datetime(2026, 10, 17, 12, 0))

        assert artifact.metadata["brand_name"] == "Acme"
        assert artifact.metadata["generated_at"] == "2026-10-17T12:00:00"
        assert artifact.metadata["page_count"] == 3
        assert "version" in artifact.metadata


def test_shape_title():
    assert shape_title("square-logo") == "Square Logo Guidelines"
    assert shape_title("circle_logo") == "Circle Logo Guidelines"


class TestExportBrandGuide:
    def test_preload_runs_before_compose_and_warnings_merged(
        self, config, mock_preloader, image_factory
    ):
        artifact = asyncio.run(export_brand_guide(
            [Section("Colors", image_factory(10, 10))],
            config,
            preloader=mock_preloader,
            font_families=["Inter", "Ghost Sans"],
        ))

        mock_preloader.preload.assert_awaited_once()
        assert artifact.page_count == 3
        assert any("gone.png" in w for w in artifact.warnings)
        assert any("Ghost Sans" in w for w in artifact.warnings)

    def test_guidelines_read_under_export_lock(self, config, store, square_lines, mock_preloader):
        store.publish("square-logo", square_lines)
        attempts = []

        class Renderable:
            def render(self, scale):
                try:
                    store.publish("square-logo", ())
                except GuidelineLockedError:
                    attempts.append("locked")
                from PIL import Image
                return Image.new("RGB", (10, 10))

        artifact = asyncio.run(export_brand_guide(
            [Section("Colors", Renderable())],
            config,
            preloader=mock_preloader,
            guideline_store=store,
        ))

        assert attempts == ["locked"]
        assert not store.is_locked("square-logo")
        assert store.get("square-logo") == square_lines
        assert any(p.kind is PageKind.GUIDELINES for p in artifact.pages)

    def test_cancelled_before_compose(self, config, image_factory):
        token = CancellationToken()
        token.cancel()
        preloader = AssetPreloader()

        with pytest.raises(ExportCancelledError):
            asyncio.run(export_brand_guide(
                [Section("Colors", image_factory(10, 10))],
                config,
                preloader=preloader,
                font_families=["Inter"],
                cancel_token=token,
            ))
