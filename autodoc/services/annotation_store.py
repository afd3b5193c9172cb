"""
Annotation Store

Database access for annotation records: CRUD for the API and the read
contract consumed by the export engine.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from autodoc.db import Annotation, PDFDocument
from autodoc.services.pdf_export import AnnotationRecord, BoxCoords

logger = logging.getLogger(__name__)

COORD_FIELDS = ("x", "y", "width", "height")


def to_record(annotation: Annotation) -> AnnotationRecord:
    """Convert a stored annotation into the export engine's input shape."""
    return AnnotationRecord(
        page=annotation.page,
        coords=BoxCoords(
            x=annotation.x,
            y=annotation.y,
            width=annotation.width,
            height=annotation.height,
        ),
        comment=annotation.comment,
        color=annotation.color,
    )


def _clean_comment(comment: Optional[str]) -> Optional[str]:
    return comment.strip() if comment is not None else None


class AnnotationStore:
    """Annotation persistence scoped to a database session."""

    def __init__(self, db: Session):
        self.db = db

    def get_owned_document(self, pdf_id: UUID, user_id: UUID) -> Optional[PDFDocument]:
        """Return the document if it exists and belongs to the user."""
        document = self.db.query(PDFDocument).filter(PDFDocument.id == pdf_id).first()
        if document is None or document.user_id != user_id:
            return None
        return document

    def create(
        self,
        user_id: UUID,
        pdf_id: UUID,
        page: int,
        coords: Dict[str, float],
        comment: Optional[str] = None,
        color: Optional[str] = None,
    ) -> Annotation:
        """Create an annotation on a document."""
        annotation = Annotation(
            user_id=user_id,
            pdf_id=pdf_id,
            page=page,
            comment=_clean_comment(comment),
            color=color or "yellow",
            **{name: coords[name] for name in COORD_FIELDS},
        )
        self.db.add(annotation)
        self.db.commit()
        self.db.refresh(annotation)

        logger.info(f"Created annotation {annotation.id} on PDF {pdf_id} page {page}")
        return annotation

    def list_for_document(self, pdf_id: UUID) -> List[Annotation]:
        """All annotations of a document, sorted by page."""
        return (
            self.db.query(Annotation)
            .filter(Annotation.pdf_id == pdf_id)
            .order_by(Annotation.page, Annotation.created_at)
            .all()
        )

    def records_for_export(self, pdf_id: UUID) -> List[AnnotationRecord]:
        """Point-in-time snapshot of a document's annotations for export."""
        return [to_record(a) for a in self.list_for_document(pdf_id)]

    def get_owned(self, annotation_id: UUID, user_id: UUID) -> Optional[Annotation]:
        """Return the annotation if it exists and belongs to the user."""
        annotation = self.db.query(Annotation).filter(Annotation.id == annotation_id).first()
        if annotation is None or annotation.user_id != user_id:
            return None
        return annotation

    def update(self, annotation: Annotation, changes: Dict[str, Any]) -> Annotation:
        """
        Apply a partial update.

        Only keys present in ``changes`` are touched. ``coords`` replaces the
        whole rectangle; an empty ``color`` keeps the current color.
        """
        if changes.get("page") is not None:
            annotation.page = changes["page"]
        if changes.get("coords"):
            for name in COORD_FIELDS:
                setattr(annotation, name, changes["coords"][name])
        if "comment" in changes:
            annotation.comment = _clean_comment(changes["comment"])
        if changes.get("color"):
            annotation.color = changes["color"]

        annotation.updated_at = datetime.utcnow()
        self.db.commit()
        self.db.refresh(annotation)

        logger.info(f"Updated annotation {annotation.id}")
        return annotation

    def delete_owned(self, annotation_id: UUID, user_id: UUID) -> bool:
        """Delete the annotation if it belongs to the user."""
        deleted = (
            self.db.query(Annotation)
            .filter(Annotation.id == annotation_id, Annotation.user_id == user_id)
            .delete()
        )
        self.db.commit()

        if deleted:
            logger.info(f"Deleted annotation {annotation_id}")
        return bool(deleted)
