"""
Serializer

Opens source PDF bytes as an in-memory working document and flattens the
working document back into bytes once all marks are drawn.
"""

import logging

import fitz  # PyMuPDF

from .errors import MalformedDocumentError, SerializationError

logger = logging.getLogger(__name__)


def open_working_document(source: bytes) -> fitz.Document:
    """
    Parse source bytes into a fresh, independently owned working document.

    Args:
        source: Raw bytes of a complete PDF file

    Returns:
        Open fitz.Document; the caller is responsible for closing it

    Raises:
        MalformedDocumentError: if the bytes are empty, unparseable,
            encrypted or contain no pages
    """
    if not source:
        raise MalformedDocumentError("Source document is empty")

    try:
        doc = fitz.open(stream=source, filetype="pdf")
    except (RuntimeError, ValueError) as e:
        raise MalformedDocumentError(f"Source document is not a valid PDF: {e}") from e

    if not doc.is_pdf or doc.needs_pass:
        doc.close()
        raise MalformedDocumentError("Source document is encrypted or not a PDF")

    if doc.page_count == 0:
        doc.close()
        raise MalformedDocumentError("Source document has no pages")

    return doc


def serialize_document(doc: fitz.Document) -> bytes:
    """
    Write the whole working document (every page, original order) to bytes.

    Raises:
        SerializationError: if PyMuPDF fails to write the document
    """
    try:
        data = doc.tobytes(garbage=0, deflate=True, no_new_id=True)
    except (RuntimeError, ValueError) as e:
        logger.error(f"Failed to serialize annotated document: {e}")
        raise SerializationError(f"Failed to serialize document: {e}") from e

    logger.debug(f"Serialized {doc.page_count} pages ({len(data)} bytes)")
    return data
