"""
Module: export

Purpose:
    Brand guide export: rasterize sections, paginate onto fixed pages,
    bundle guideline summaries, and render the result to PDF.

Key Functions:
    - compose(): Lay out preloaded sections into an ExportArtifact
    - export_brand_guide(): Async preload + compose pipeline
    - render_to_pdf(): Emit an artifact as PDF

Key Classes:
    - ExportConfig / PageSpec: Settings and page geometry
    - Rasterizer / ImageRasterizer: Rendering backend
"""

from .config import ExportConfig, PageSpec
from .controller import compose, export_brand_guide, shape_title
from .layout import ExportArtifact, Page, PageKind, SectionOutcome
from .output import render_guideline_overlay, render_pdf_bytes, render_to_pdf
from .rasterizer import ImageRasterizer, Rasterizer

__all__ = [
    "ExportArtifact",
    "ExportConfig",
    "ImageRasterizer",
    "Page",
    "PageKind",
    "PageSpec",
    "Rasterizer",
    "SectionOutcome",
    "compose",
    "export_brand_guide",
    "render_guideline_overlay",
    "render_pdf_bytes",
    "render_to_pdf",
    "shape_title",
]
