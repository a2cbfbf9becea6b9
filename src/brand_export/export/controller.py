"""
Module: export.controller

Purpose:
    Orchestrate a complete brand guide export.
    Preload -> Cover -> Sections -> Guideline summaries -> Closing -> Finalize

Key Functions:
    - compose(): Synchronous layout of already-preloaded sections
    - export_brand_guide(): Async pipeline (preload, lock guidelines, compose)

Dependencies:
    - brand_export.preload: AssetPreloader, CancellationToken
    - brand_export.export.layout: PageBuilder, compose_section
    - brand_export.export.output: Guideline overlay bitmaps

Used By:
    - Application code; PDF emission is done with export.output.renderer
"""

from __future__ import annotations

import logging
import time
from datetime import datetime
from typing import Dict, List, Mapping, Optional, Sequence

from PIL import Image

from brand_export import __version__
from brand_export.core.models import Guideline, Section
from brand_export.errors import ExportFatalError
from brand_export.guidelines.store import GuidelineStore
from brand_export.preload import AssetPreloader, CancellationToken, ImageNode

from .config import ExportConfig, PageSpec
from .layout import ExportArtifact, PageBuilder, SectionOutcome, compose_section
from .output.guideline_overlay import render_guideline_overlay
from .rasterizer import ImageRasterizer, Rasterizer

logger = logging.getLogger(__name__)


def compose(
    sections: Sequence[Section],
    page_spec: Optional[PageSpec] = None,
    *,
    config: Optional[ExportConfig] = None,
    rasterizer: Optional[Rasterizer] = None,
    guidelines: Optional[Mapping[str, Sequence[Guideline]]] = None,
    logo: Optional[Image.Image] = None,
    cancel_token: Optional[CancellationToken] = None,
    now: Optional[datetime] = None,
) -> ExportArtifact:
    """
    Lay out sections into a finished page sequence.

    Assets referenced by ``sections`` must already be preloaded. Sections
    are processed strictly in order; a section that fails to rasterize
    gets a fallback page and the export continues.

    Args:
        sections: Sections in document order
        page_spec: Page geometry (defaults to ``config.page_spec``)
        config: Export settings (defaults to an unbranded config)
        rasterizer: Rendering backend (defaults to ImageRasterizer)
        guidelines: Committed guidelines per shape key; shapes with none
            get no summary page
        logo: Logo bitmap drawn with each shape's guidelines
        cancel_token: Checked before each section
        now: Timestamp for the closing page

    Returns:
        ExportArtifact with finalized pages

    Raises:
        ExportFatalError: If every section failed and nothing else was laid out
        ExportCancelledError: If ``cancel_token`` fires

    Example:
        >>> artifact = compose([Section("Colors", palette_png)], PageSpec(),
        ...                    config=ExportConfig(brand_name="Acme"))
        >>> artifact.pages[-1].page_label
        'Page 3 of 3'
    """
    config = config or ExportConfig(brand_name="Brand")
    spec = page_spec or config.page_spec
    rasterizer = rasterizer or ImageRasterizer()
    timestamp = now or datetime.now()
    warnings: List[str] = []
    start_time = time.perf_counter()

    logger.info(f"Composing {len(sections)} sections for '{config.brand_name}'")

    builder = PageBuilder(
        spec,
        attribution_text=config.attribution_text,
        attribution_url=config.attribution_url,
        show_page_numbers=config.show_page_numbers,
    )

    if config.include_cover:
        builder.add_cover(config.brand_name, config.cover_subtitle)

    # 1. Sections, in order
    outcomes: List[SectionOutcome] = []
    for index, section in enumerate(sections):
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()
        if section.index != index:
            section = Section(section.title, section.renderable, index)
        outcome = compose_section(section, builder, rasterizer, scale=config.raster_scale)
        outcomes.append(outcome)
        if outcome.failed:
            warnings.append(f"Section '{section.title}' could not be rendered: {outcome.error}")

    # 2. Guideline summaries
    summary_pages = 0
    for shape_key, shape_guidelines in (guidelines or {}).items():
        if not shape_guidelines:
            continue
        overlay = None
        if logo is not None:
            overlay = render_guideline_overlay(logo, shape_guidelines, unit=config.guideline_unit)
        before = builder.page_count
        builder.add_guideline_summary(
            shape_title(shape_key),
            shape_guidelines,
            unit=config.guideline_unit,
            overlay=overlay,
        )
        summary_pages += builder.page_count - before

    succeeded = [o for o in outcomes if not o.failed]
    if not succeeded and summary_pages == 0:
        if outcomes:
            raise ExportFatalError(f"All {len(outcomes)} sections failed to render")
        raise ExportFatalError("Nothing to export: no sections and no guidelines")

    if config.include_closing:
        builder.add_closing(config.brand_name, timestamp)

    pages = builder.finalize()

    elapsed = time.perf_counter() - start_time
    logger.info(
        f"Composed {len(pages)} pages ({len(succeeded)}/{len(outcomes)} sections ok) "
        f"in {elapsed:.2f}s"
    )

    return ExportArtifact(
        pages=pages,
        page_spec=spec,
        sections=tuple(outcomes),
        warnings=tuple(warnings),
        metadata=_build_metadata(config, timestamp, pages, outcomes, summary_pages),
    )


async def export_brand_guide(
    sections: Sequence[Section],
    config: ExportConfig,
    *,
    rasterizer: Optional[Rasterizer] = None,
    preloader: Optional[AssetPreloader] = None,
    image_nodes: Sequence[ImageNode] = (),
    font_families: Sequence[str] = (),
    guideline_store: Optional[GuidelineStore] = None,
    logo: Optional[Image.Image] = None,
    cancel_token: Optional[CancellationToken] = None,
) -> ExportArtifact:
    """
    Run the full export: preload assets, then compose under guideline locks.

    Guidelines for ``config.logo_shapes`` are read from ``guideline_store``
    while an export lock is held, so no engine can mutate them mid-export.

    Args:
        sections: Sections in document order
        config: Export settings
        rasterizer: Rendering backend (defaults to ImageRasterizer)
        preloader: Asset preloader (defaults to a fresh AssetPreloader)
        image_nodes: Images referenced by the sections
        font_families: Type families referenced by the sections
        guideline_store: Source of guidelines to bundle
        logo: Logo bitmap for guideline overlays
        cancel_token: Abandons the export when fired

    Returns:
        ExportArtifact; emission is the caller's concern

    Raises:
        ExportFatalError: If nothing usable was produced
        ExportCancelledError: If ``cancel_token`` fires
    """
    preloader = preloader or AssetPreloader()

    report = await preloader.preload(image_nodes, font_families, cancel_token)
    warnings = [
        f"Image '{_short(r.source)}' {r.status.value}: {r.detail}" for r in report.degraded_images
    ]
    warnings.extend(f"Font '{family}' could not be loaded" for family in report.fonts.failed)
    if warnings:
        logger.warning(f"Preload finished with {len(warnings)} degraded assets")

    if guideline_store is None:
        artifact = compose(sections, config=config, rasterizer=rasterizer, logo=logo,
                           cancel_token=cancel_token)
    else:
        with guideline_store.export_lock(*config.logo_shapes) as snapshot:
            artifact = compose(sections, config=config, rasterizer=rasterizer,
                               guidelines=snapshot, logo=logo, cancel_token=cancel_token)

    if not warnings:
        return artifact
    return ExportArtifact(
        pages=artifact.pages,
        page_spec=artifact.page_spec,
        sections=artifact.sections,
        warnings=tuple(warnings) + artifact.warnings,
        metadata=artifact.metadata,
    )


def shape_title(shape_key: str) -> str:
    """
    Heading for a shape's guideline summary page.

    Example:
        >>> shape_title("rounded-logo")
        'Rounded Logo Guidelines'
    """
    words = shape_key.replace("_", "-").split("-")
    return " ".join(w.capitalize() for w in words if w) + " Guidelines"


def _short(source: str, limit: int = 60) -> str:
    return source if len(source) <= limit else source[: limit - 3] + "..."


def _build_metadata(
    config: ExportConfig,
    timestamp: datetime,
    pages: Sequence,
    outcomes: Sequence[SectionOutcome],
    summary_pages: int,
) -> Dict[str, object]:
    return {
        "brand_name": config.brand_name,
        "generated_at": timestamp.isoformat(),
        "version": __version__,
        "page_count": len(pages),
        "section_count": len(outcomes),
        "failed_sections": sum(1 for o in outcomes if o.failed),
        "guideline_pages": summary_pages,
    }
