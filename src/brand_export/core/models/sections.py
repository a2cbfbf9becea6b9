"""
Module: core.models.sections

Purpose:
    The caller-produced unit of an export: one titled block of the brand
    guide (Colors, Typography, Logo...) with a renderable the rasterizer
    understands.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Section:
    """
    One logical block of the exported document (immutable).

    Attributes:
        title: Heading shown on fallback and first-band pages
        renderable: Anything the configured rasterizer accepts
        index: Position of the section in the document

    Example:
        >>> Section("Color Palette", palette_image, index=0)
    """

    title: str
    renderable: Any
    index: int = 0
