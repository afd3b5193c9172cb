"""
Color Resolver

Maps symbolic annotation colors onto normalized RGB triples.
"""

from typing import Optional

RGB = tuple[float, float, float]

YELLOW: RGB = (1.0, 1.0, 0.0)
GREEN: RGB = (0.0, 1.0, 0.0)
RED: RGB = (1.0, 0.0, 0.0)

COLOR_MAP: dict[str, RGB] = {
    "yellow": YELLOW,
    "green": GREEN,
    "red": RED,
}

DEFAULT_COLOR: RGB = YELLOW


def resolve_color(name: Optional[str]) -> RGB:
    """
    Resolve a color name to an RGB triple with channels in [0, 1].

    Unknown, empty or missing names resolve to yellow.
    """
    if not isinstance(name, str) or not name:
        return DEFAULT_COLOR
    return COLOR_MAP.get(name, DEFAULT_COLOR)
