"""
Annotation router for CRUD on page-anchored rectangle annotations.

Endpoints:
- POST /{pdf_id} - Create an annotation on a PDF
- GET /{pdf_id} - List annotations of a PDF (sorted by page)
- PUT /{annotation_id} - Update an annotation
- DELETE /{annotation_id} - Delete an annotation
"""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from autodoc.db import Annotation, User, get_db
from autodoc.routers.auth import get_current_user
from autodoc.services.annotation_store import AnnotationStore

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Request / Response Models
# =============================================================================

class Coords(BaseModel):
    """Rectangle in screen space (origin top-left, Y down)."""
    x: float
    y: float
    width: float
    height: float


class AnnotationCreate(BaseModel):
    page: int = Field(ge=1)
    coords: Coords
    comment: Optional[str] = None
    color: Optional[str] = None


class AnnotationUpdate(BaseModel):
    page: Optional[int] = Field(default=None, ge=1)
    coords: Optional[Coords] = None
    comment: Optional[str] = None
    color: Optional[str] = None


class AnnotationResponse(BaseModel):
    id: str
    pdf: str
    user: str
    page: int
    coords: Coords
    comment: Optional[str] = None
    color: str
    createdAt: str
    updatedAt: Optional[str] = None


def to_response(annotation: Annotation) -> AnnotationResponse:
    return AnnotationResponse(
        id=str(annotation.id),
        pdf=str(annotation.pdf_id),
        user=str(annotation.user_id),
        page=annotation.page,
        coords=Coords(
            x=annotation.x,
            y=annotation.y,
            width=annotation.width,
            height=annotation.height,
        ),
        comment=annotation.comment,
        color=annotation.color,
        createdAt=annotation.created_at.isoformat(),
        updatedAt=annotation.updated_at.isoformat() if annotation.updated_at else None,
    )


@router.post("/{pdf_id}", response_model=AnnotationResponse)
def create_annotation(
    pdf_id: UUID,
    request: AnnotationCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Create a new annotation on a PDF owned by the caller."""
    store = AnnotationStore(db)
    if store.get_owned_document(pdf_id, user.id) is None:
        raise HTTPException(status_code=404, detail="PDF not found")

    annotation = store.create(
        user_id=user.id,
        pdf_id=pdf_id,
        page=request.page,
        coords=request.coords.model_dump(),
        comment=request.comment,
        color=request.color,
    )
    return to_response(annotation)


@router.get("/{pdf_id}", response_model=list[AnnotationResponse])
def list_annotations(
    pdf_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """List all annotations for a PDF, sorted by page."""
    store = AnnotationStore(db)
    if store.get_owned_document(pdf_id, user.id) is None:
        raise HTTPException(status_code=404, detail="PDF not found")

    return [to_response(a) for a in store.list_for_document(pdf_id)]


@router.put("/{annotation_id}", response_model=AnnotationResponse)
def update_annotation(
    annotation_id: UUID,
    request: AnnotationUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update the fields present in the request body."""
    store = AnnotationStore(db)
    annotation = store.get_owned(annotation_id, user.id)
    if annotation is None:
        raise HTTPException(status_code=404, detail="Annotation not found")

    annotation = store.update(annotation, request.model_dump(exclude_unset=True))
    return to_response(annotation)


@router.delete("/{annotation_id}")
def delete_annotation(
    annotation_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Delete an annotation owned by the caller."""
    if not AnnotationStore(db).delete_owned(annotation_id, user.id):
        raise HTTPException(status_code=404, detail="Annotation not found or not yours")

    return {"msg": "Annotation deleted"}
