"""
Export Input Models

Immutable views of annotation records as the export engine consumes them.
Screen-space coordinates: origin at the top-left of the page, Y increasing
downward, units in PDF points.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class BoxCoords:
    """Annotation rectangle in screen space."""

    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "BoxCoords":
        """Create coords from a ``{x, y, width, height}`` mapping."""
        return cls(
            x=float(data["x"]),
            y=float(data["y"]),
            width=float(data["width"]),
            height=float(data["height"]),
        )


@dataclass(frozen=True)
class AnnotationRecord:
    """One annotation to burn into the exported document."""

    page: int  # 1-based
    coords: BoxCoords
    comment: Optional[str] = None
    color: Optional[str] = None

    @property
    def has_caption(self) -> bool:
        """True when the comment carries text to draw."""
        return bool(self.comment)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "AnnotationRecord":
        """
        Create a record from the JSON shape used by the API.

        Args:
            data: ``{"page": 1, "coords": {...}, "comment": "...", "color": "red"}``

        Returns:
            AnnotationRecord
        """
        return cls(
            page=int(data["page"]),
            coords=BoxCoords.from_mapping(data["coords"]),
            comment=data.get("comment"),
            color=data.get("color"),
        )
