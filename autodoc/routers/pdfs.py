"""
PDF router for upload, listing, download and annotated export.

Endpoints:
- POST /upload - Upload a PDF
- GET / - List the caller's PDFs (newest first)
- GET /{pdf_id}/download - Download the original PDF
- GET /{pdf_id}/export - Download the PDF with annotations burned in
"""

import logging
import random
import time
from pathlib import Path
from typing import Optional
from urllib.parse import quote
from uuid import UUID

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from fastapi.responses import Response
from pydantic import BaseModel
from sqlalchemy.orm import Session

from autodoc.config import settings
from autodoc.db import PDFDocument, User, get_db
from autodoc.routers.auth import get_current_user
from autodoc.services.annotation_store import AnnotationStore
from autodoc.services.pdf_export import (
    AnnotationExporter,
    DocumentNotFoundError,
    ExportError,
    MalformedDocumentError,
)

logger = logging.getLogger(__name__)

router = APIRouter()

exporter = AnnotationExporter()

PDF_CONTENT_TYPE = "application/pdf"


# =============================================================================
# Response Models
# =============================================================================

class PDFResponse(BaseModel):
    """Response model for an uploaded PDF."""
    id: str
    filename: str
    originalName: str
    size: Optional[int] = None
    uploadDate: str


def to_response(document: PDFDocument) -> PDFResponse:
    return PDFResponse(
        id=str(document.id),
        filename=document.filename,
        originalName=document.original_name,
        size=document.size,
        uploadDate=document.upload_date.isoformat(),
    )


def generate_storage_name(original_name: str) -> str:
    """Unique storage name: ``<epoch-ms>-<random>.<ext>``."""
    unique = f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}"
    return f"{unique}{Path(original_name).suffix.lower() or '.pdf'}"


def attachment_header(filename: str) -> str:
    """
    Content-Disposition value for a download of ``filename``.

    Names that need percent-encoding get an ASCII ``filename`` fallback plus
    the RFC 5987 ``filename*`` form, the way Starlette's FileResponse does.
    """
    quoted = quote(filename, safe="")
    if quoted == filename:
        return f'attachment; filename="{filename}"'
    fallback = "".join(
        c if " " <= c <= "~" and c not in '"\\' else "_" for c in filename
    )
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quoted}"


def get_owned_document_or_404(pdf_id: UUID, user: User, db: Session) -> PDFDocument:
    document = AnnotationStore(db).get_owned_document(pdf_id, user.id)
    if document is None:
        raise HTTPException(status_code=404, detail="PDF not found")
    return document


@router.post("/upload", response_model=PDFResponse)
async def upload_pdf(
    file: UploadFile = File(...),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Upload a PDF file.

    Only PDF content is accepted, up to the configured size limit. The file
    binary data is stored in the database.
    """
    filename = file.filename or "document.pdf"
    if file.content_type != PDF_CONTENT_TYPE and not filename.lower().endswith(".pdf"):
        raise HTTPException(status_code=400, detail="Only PDF files are allowed")

    try:
        file_data = await file.read()
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to read file: {e}")

    file_size = len(file_data)
    if file_size > settings.max_upload_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File exceeds {settings.max_upload_bytes} bytes",
        )

    document = PDFDocument(
        user_id=user.id,
        filename=generate_storage_name(filename),
        original_name=filename,
        size=file_size,
        file_data=file_data,
        content_type=PDF_CONTENT_TYPE,
    )
    db.add(document)
    db.commit()
    db.refresh(document)

    logger.info(f"Uploaded PDF: {document.id} ({filename}, {file_size} bytes)")

    return to_response(document)


@router.get("", response_model=list[PDFResponse])
def list_pdfs(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """List all PDFs uploaded by the caller, newest first."""
    documents = (
        db.query(PDFDocument)
        .filter(PDFDocument.user_id == user.id)
        .order_by(PDFDocument.upload_date.desc())
        .all()
    )
    return [to_response(d) for d in documents]


@router.get("/{pdf_id}/download")
def download_pdf(
    pdf_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Download the original PDF."""
    document = get_owned_document_or_404(pdf_id, user, db)

    if not document.file_data:
        raise HTTPException(status_code=404, detail="PDF data not found")

    return Response(
        content=document.file_data,
        media_type=document.content_type or PDF_CONTENT_TYPE,
        headers={
            "Content-Disposition": attachment_header(document.original_name),
        }
    )


@router.get("/{pdf_id}/export")
def export_pdf(
    pdf_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Export the PDF with all of its annotations burned into the pages.

    Annotations on pages outside the document are skipped. Runs in the
    threadpool since rendering is CPU-bound.
    """
    document = get_owned_document_or_404(pdf_id, user, db)
    annotations = AnnotationStore(db).records_for_export(document.id)

    try:
        result = exporter.export(document.file_data, annotations)
    except DocumentNotFoundError as e:
        logger.error(f"Export of PDF {pdf_id} failed: {e}")
        raise HTTPException(status_code=404, detail="PDF data not found")
    except MalformedDocumentError as e:
        logger.error(f"Export of PDF {pdf_id} failed: {e}")
        raise HTTPException(status_code=422, detail="Stored PDF could not be parsed")
    except ExportError as e:
        logger.error(f"Export of PDF {pdf_id} failed: {e}")
        raise HTTPException(status_code=500, detail="Export failed")

    logger.info(
        f"Exported PDF {pdf_id}: {result.rendered_count} rendered, "
        f"{result.skipped_count} skipped"
    )

    return Response(
        content=result.pdf_bytes,
        media_type=document.content_type or PDF_CONTENT_TYPE,
        headers={
            "Content-Disposition": f"attachment; filename=annotated_{document.id}.pdf",
        }
    )
