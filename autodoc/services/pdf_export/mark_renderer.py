"""
Mark Renderer

Draws one annotation mark onto a page of the working document: a bordered
rectangle with a semi-transparent fill in the annotation color, plus an
optional black caption below it.

All geometry passed in and reported back is in PDF drawing space (origin
bottom-left, Y up). PyMuPDF addresses pages top-left/Y-down, so the drawing
rectangle is mapped through ``page.transformation_matrix`` right before the
PyMuPDF calls.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import fitz  # PyMuPDF

from .color_resolver import RGB
from .coordinate_transformer import DrawingRect

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportStyle:
    """Appearance of rendered marks."""

    # Rectangle outline width in points
    border_width: float = 2.0

    # Fill opacity (0.0-1.0); the outline stays fully opaque
    fill_opacity: float = 0.2

    # Caption text
    font_size: float = 10.0
    font_name: str = "helv"
    caption_color: RGB = (0.0, 0.0, 0.0)

    # Distance of the caption baseline below the rectangle anchor
    caption_offset: float = 12.0


@dataclass(frozen=True)
class MarkGeometry:
    """Where a mark ended up, in drawing space."""

    rect: DrawingRect
    caption_origin: Optional[tuple[float, float]] = None


class MarkRenderer:
    """Renders annotation marks with a fixed style."""

    def __init__(self, style: Optional[ExportStyle] = None):
        self.style = style or ExportStyle()

    def render(
        self,
        page: fitz.Page,
        rect: DrawingRect,
        color: RGB,
        comment: Optional[str] = None,
    ) -> MarkGeometry:
        """
        Draw a mark onto the page.

        Args:
            page: Page of the working document
            rect: Rectangle in drawing space
            color: Resolved RGB color for outline and fill
            comment: Caption text; nothing is drawn when empty

        Returns:
            MarkGeometry describing the drawn mark
        """
        to_page = page.transformation_matrix

        # Normalized first, so negative extents cover the same area as in PDF space
        page_rect = fitz.Rect(
            min(rect.x, rect.right), min(rect.y, rect.top),
            max(rect.x, rect.right), max(rect.y, rect.top),
        ) * to_page

        shape = page.new_shape()
        shape.draw_rect(page_rect)
        shape.finish(
            color=color,
            fill=color,
            width=self.style.border_width,
            stroke_opacity=1,
            fill_opacity=self.style.fill_opacity,
        )
        shape.commit()

        caption_origin = None
        if comment:
            caption_origin = (rect.x, rect.y - self.style.caption_offset)
            page.insert_text(
                fitz.Point(*caption_origin) * to_page,
                comment,
                fontsize=self.style.font_size,
                fontname=self.style.font_name,
                color=self.style.caption_color,
            )

        logger.debug(
            f"Rendered mark on page {page.number + 1} at "
            f"({rect.x:.1f}, {rect.y:.1f}) {rect.width:.1f}x{rect.height:.1f}"
        )

        return MarkGeometry(rect=rect, caption_origin=caption_origin)
