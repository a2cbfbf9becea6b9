"""
Module: export.output.renderer

Purpose:
    Render an ExportArtifact to PDF using ReportLab. Each Page becomes one
    PDF page; elements are drawn in order at their millimetre positions.

Key Functions:
    - render_to_pdf(): Write a PDF file
    - render_pdf_bytes(): Return the PDF as bytes (download/stream)

Dependencies:
    - reportlab: PDF generation
    - PIL: Image handling
    - brand_export.export.layout.models: ExportArtifact, elements

Used By:
    - Callers persisting or streaming an export
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import BinaryIO, Optional, Union

from PIL import Image
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen import canvas

from brand_export import __version__
from brand_export.export.layout.models import (
    Element,
    ExportArtifact,
    ImageElement,
    LinkElement,
    Page,
    RectElement,
    TextElement,
)

logger = logging.getLogger(__name__)

FALLBACK_FONT = "Helvetica"


def render_to_pdf(artifact: ExportArtifact, output: Union[Path, BinaryIO]) -> None:
    """
    Render artifact to a PDF file or binary stream.

    Args:
        artifact: Finished export
        output: Path to write, or a writable binary file object

    Raises:
        IOError: If the PDF cannot be written

    Example:
        >>> render_to_pdf(artifact, Path("out/acme_brand_guide.pdf"))
    """
    if artifact.page_count == 0:
        logger.warning("Empty artifact, creating empty PDF")

    if isinstance(output, Path):
        output.parent.mkdir(parents=True, exist_ok=True)
        target: Union[str, BinaryIO] = str(output)
    else:
        target = output

    spec = artifact.page_spec
    page_size = (spec.width * mm, spec.height * mm)
    c = canvas.Canvas(target, pagesize=page_size)
    c.setTitle(_document_title(artifact))
    c.setCreator(f"brand_export {__version__}")

    for page in artifact.pages:
        _render_page(c, page, spec.height)
        c.showPage()

    c.save()
    logger.info(f"Rendered {artifact.page_count} pages to PDF")


def render_pdf_bytes(artifact: ExportArtifact) -> bytes:
    """Render artifact and return the PDF bytes."""
    buf = io.BytesIO()
    render_to_pdf(artifact, buf)
    return buf.getvalue()


def _document_title(artifact: ExportArtifact) -> str:
    brand: Optional[str] = artifact.metadata.get("brand_name")
    return f"{brand} Brand Guide" if brand else "Brand Guide"


def _render_page(c: canvas.Canvas, page: Page, page_height_mm: float) -> None:
    for element in page.elements:
        _draw_element(c, element, page_height_mm)


def _draw_element(c: canvas.Canvas, element: Element, page_height_mm: float) -> None:
    if isinstance(element, ImageElement):
        c.drawImage(
            _pil_to_reader(element.image),
            element.x * mm,
            _flip(page_height_mm, element.y + element.height),
            width=element.width * mm,
            height=element.height * mm,
        )
    elif isinstance(element, TextElement):
        _draw_text(c, element, page_height_mm)
    elif isinstance(element, RectElement):
        _draw_rect(c, element, page_height_mm)
    elif isinstance(element, LinkElement):
        x1 = element.x * mm
        y1 = _flip(page_height_mm, element.y + element.height)
        c.linkURL(
            element.url,
            (x1, y1, x1 + element.width * mm, y1 + element.height * mm),
            relative=0,
            thickness=0,
        )
    else:
        raise TypeError(f"Unknown page element: {type(element).__name__}")


def _draw_text(c: canvas.Canvas, text: TextElement, page_height_mm: float) -> None:
    c.saveState()
    c.setFont(_resolve_font(text.font), text.size)
    c.setFillColorRGB(*(channel / 255 for channel in text.color))

    x = text.x * mm
    y = _flip(page_height_mm, text.y)
    if text.align == "center":
        c.drawCentredString(x, y, text.text)
    elif text.align == "right":
        c.drawRightString(x, y, text.text)
    else:
        c.drawString(x, y, text.text)
    c.restoreState()


def _draw_rect(c: canvas.Canvas, rect: RectElement, page_height_mm: float) -> None:
    c.saveState()
    if rect.stroke is not None:
        c.setStrokeColorRGB(*(channel / 255 for channel in rect.stroke))
        c.setLineWidth(rect.line_width * mm)
    if rect.fill is not None:
        c.setFillColorRGB(*(channel / 255 for channel in rect.fill))

    x = rect.x * mm
    y = _flip(page_height_mm, rect.y + rect.height)
    stroke = 1 if rect.stroke is not None else 0
    fill = 1 if rect.fill is not None else 0
    if rect.radius > 0:
        c.roundRect(x, y, rect.width * mm, rect.height * mm, rect.radius * mm,
                    stroke=stroke, fill=fill)
    else:
        c.rect(x, y, rect.width * mm, rect.height * mm, stroke=stroke, fill=fill)
    c.restoreState()


def _resolve_font(name: str) -> str:
    """Registered font name, or Helvetica if ``name`` never loaded."""
    try:
        pdfmetrics.getFont(name)
    except KeyError:
        logger.debug(f"Font {name} not registered, using {FALLBACK_FONT}")
        return FALLBACK_FONT
    return name


def _pil_to_reader(img: Image.Image) -> ImageReader:
    """
    Convert PIL image to ReportLab ImageReader.

    Args:
        img: PIL Image object

    Returns:
        ImageReader for use with ReportLab
    """
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    buf.seek(0)
    return ImageReader(buf)


def _flip(page_height_mm: float, y_mm_from_top: float) -> float:
    """Convert a top-down millimetre Y to bottom-up PDF points."""
    return (page_height_mm - y_mm_from_top) * mm
