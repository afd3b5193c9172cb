"""
PDF Export Service

Burns user annotations (colored rectangles with optional captions) into a new
copy of a PDF document.

Components:
- resolve_page_index: Maps 1-based page numbers to page indexes or skips
- to_drawing_space: Flips screen-space rectangles into PDF drawing space
- resolve_color: Maps color names to RGB with a yellow fallback
- MarkRenderer: Draws the rectangle and caption onto a page
- serialize_document: Writes the working document back to bytes
- AnnotationExporter: Main orchestrator that coordinates all components
"""

from .models import AnnotationRecord, BoxCoords
from .page_resolver import resolve_page_index
from .coordinate_transformer import DrawingRect, to_drawing_space
from .color_resolver import COLOR_MAP, DEFAULT_COLOR, resolve_color
from .mark_renderer import ExportStyle, MarkGeometry, MarkRenderer
from .serializer import open_working_document, serialize_document
from .errors import (
    ExportError,
    DocumentNotFoundError,
    MalformedDocumentError,
    SerializationError,
)
from .export_engine import (
    AnnotationExporter,
    ExportResult,
    MarkOutcome,
    Rendered,
    Skipped,
    export_annotated_file,
    export_annotated_pdf,
)

__all__ = [
    "AnnotationRecord",
    "BoxCoords",
    "resolve_page_index",
    "DrawingRect",
    "to_drawing_space",
    "COLOR_MAP",
    "DEFAULT_COLOR",
    "resolve_color",
    "ExportStyle",
    "MarkGeometry",
    "MarkRenderer",
    "open_working_document",
    "serialize_document",
    "ExportError",
    "DocumentNotFoundError",
    "MalformedDocumentError",
    "SerializationError",
    "AnnotationExporter",
    "ExportResult",
    "MarkOutcome",
    "Rendered",
    "Skipped",
    "export_annotated_file",
    "export_annotated_pdf",
]
