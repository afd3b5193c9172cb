"""
Coordinate Transformer

Converts annotation rectangles captured in screen space (origin top-left,
Y down) into PDF drawing space (origin bottom-left, Y up).
"""

from dataclasses import dataclass

from .models import BoxCoords


@dataclass(frozen=True)
class DrawingRect:
    """Rectangle in drawing space, anchored at its bottom-left corner."""

    x: float
    y: float
    width: float
    height: float

    @property
    def top(self) -> float:
        """Y of the edge opposite the anchor."""
        return self.y + self.height

    @property
    def right(self) -> float:
        return self.x + self.width


def to_drawing_space(page_height: float, coords: BoxCoords) -> DrawingRect:
    """
    Flip the rectangle anchor from screen space into drawing space.

    Only the anchor moves; width and height are unchanged. No clamping is
    applied, so rectangles reaching past the page edges stay as they are.

    Args:
        page_height: Height of the target page in points
        coords: Rectangle in screen space

    Returns:
        DrawingRect anchored at ``(x, page_height - y - height)``
    """
    return DrawingRect(
        x=coords.x,
        y=page_height - coords.y - coords.height,
        width=coords.width,
        height=coords.height,
    )
