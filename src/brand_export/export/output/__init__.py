"""
Module: export.output

Purpose:
    PDF rendering for finished exports and the logo-with-guidelines
    bitmap used on guideline summary pages.

Key Functions:
    - render_to_pdf(): Render artifact to a PDF file or stream
    - render_pdf_bytes(): Render artifact to bytes
    - render_guideline_overlay(): Logo with dashed guideline strokes
"""

from .guideline_overlay import render_guideline_overlay
from .renderer import render_pdf_bytes, render_to_pdf

__all__ = [
    "render_guideline_overlay",
    "render_pdf_bytes",
    "render_to_pdf",
]
