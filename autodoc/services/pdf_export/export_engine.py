"""
Export Engine

Main orchestrator that burns annotation marks into a copy of a source PDF.

Runs a single linear pass over the annotation list: each record is either
rendered onto its page or skipped (page out of range), and the working
document is serialized once at the end. Fatal problems (missing or malformed
source, serialization failure) raise ExportError subclasses; nothing partial
is ever returned.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional, Union

from .color_resolver import RGB, resolve_color
from .coordinate_transformer import to_drawing_space
from .errors import DocumentNotFoundError
from .mark_renderer import ExportStyle, MarkGeometry, MarkRenderer
from .models import AnnotationRecord
from .page_resolver import resolve_page_index
from .serializer import open_working_document, serialize_document

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Rendered:
    """Annotation drawn onto its page."""

    annotation_index: int
    page_index: int
    geometry: MarkGeometry
    color: RGB


@dataclass(frozen=True)
class Skipped:
    """Annotation left out of the export."""

    annotation_index: int
    page: int
    reason: str


MarkOutcome = Union[Rendered, Skipped]


@dataclass
class ExportResult:
    """Result of exporting one annotated document."""

    pdf_bytes: bytes
    page_count: int
    outcomes: tuple = field(default_factory=tuple)

    @property
    def rendered_count(self) -> int:
        return sum(1 for o in self.outcomes if isinstance(o, Rendered))

    @property
    def skipped_count(self) -> int:
        return sum(1 for o in self.outcomes if isinstance(o, Skipped))


class AnnotationExporter:
    """
    Produces annotated PDFs.

    Components:
    1. Page resolution (1-based page number -> page index, or skip)
    2. Coordinate transformation (screen space -> drawing space)
    3. Color resolution (symbolic name -> RGB, yellow fallback)
    4. Mark rendering (rectangle + optional caption)
    5. Serialization (working document -> bytes)

    Every call works on its own freshly parsed copy of the source, so one
    exporter may be shared between threads.
    """

    def __init__(self, style: Optional[ExportStyle] = None):
        self.renderer = MarkRenderer(style=style)

    def export(
        self,
        source: Optional[bytes],
        annotations: Iterable[AnnotationRecord],
    ) -> ExportResult:
        """
        Burn annotations into a copy of the source PDF.

        Args:
            source: Raw bytes of the source PDF; None when it could not be found
            annotations: Records for this document, in drawing order

        Returns:
            ExportResult with the new PDF bytes and one outcome per annotation

        Raises:
            DocumentNotFoundError: if source is None
            MalformedDocumentError: if source does not parse as a PDF
            SerializationError: if the annotated document cannot be written
        """
        if source is None:
            raise DocumentNotFoundError()

        doc = open_working_document(source)
        try:
            page_count = doc.page_count
            outcomes = []

            for index, annotation in enumerate(annotations):
                page_index = resolve_page_index(annotation.page, page_count)
                if page_index is None:
                    logger.warning(
                        f"Skipping annotation {index}: page {annotation.page} "
                        f"out of range (document has {page_count} pages)"
                    )
                    outcomes.append(Skipped(
                        annotation_index=index,
                        page=annotation.page,
                        reason=f"Page {annotation.page} out of range",
                    ))
                    continue

                page = doc[page_index]
                rect = to_drawing_space(page.mediabox.height, annotation.coords)
                color = resolve_color(annotation.color)
                comment = annotation.comment if annotation.has_caption else None
                geometry = self.renderer.render(page, rect, color, comment)

                outcomes.append(Rendered(
                    annotation_index=index,
                    page_index=page_index,
                    geometry=geometry,
                    color=color,
                ))

            pdf_bytes = serialize_document(doc)
        finally:
            doc.close()

        result = ExportResult(
            pdf_bytes=pdf_bytes,
            page_count=page_count,
            outcomes=tuple(outcomes),
        )
        logger.info(
            f"Exported {page_count} pages: {result.rendered_count} marks rendered, "
            f"{result.skipped_count} skipped"
        )
        return result


def export_annotated_pdf(
    source: Optional[bytes],
    annotations: Iterable[AnnotationRecord],
    style: Optional[ExportStyle] = None,
) -> ExportResult:
    """Convenience wrapper around AnnotationExporter.export()."""
    return AnnotationExporter(style=style).export(source, annotations)


def export_annotated_file(
    pdf_path: Union[Path, str],
    annotations: Iterable[AnnotationRecord],
    style: Optional[ExportStyle] = None,
) -> ExportResult:
    """
    Export annotations onto a PDF read from disk.

    Raises:
        DocumentNotFoundError: if the file does not exist
    """
    pdf_path = Path(pdf_path)
    try:
        source = pdf_path.read_bytes()
    except FileNotFoundError as e:
        raise DocumentNotFoundError(f"document not found: {pdf_path}") from e

    return export_annotated_pdf(source, annotations, style=style)
