"""
Module: export.layout

Purpose:
    Page composition for brand guide exports. Converts rasterized
    sections into fixed-size pages and assembles the page sequence.

Key Functions:
    - compose_section(): Rasterize and paginate one section
    - plan_bands(): Band geometry for tall sections

Key Classes:
    - PageBuilder: Page sequence, cursor, finalize()
    - Page / ExportArtifact / SectionOutcome: Layout results
"""

from .compositor import Band, compose_section, plan_bands
from .models import (
    ExportArtifact,
    ImageElement,
    LinkElement,
    Page,
    PageKind,
    RectElement,
    SectionOutcome,
    TextElement,
)
from .page_builder import PageBuilder

__all__ = [
    # Models
    "ExportArtifact",
    "ImageElement",
    "LinkElement",
    "Page",
    "PageKind",
    "RectElement",
    "SectionOutcome",
    "TextElement",
    # Builders
    "Band",
    "PageBuilder",
    "compose_section",
    "plan_bands",
]
