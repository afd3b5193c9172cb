"""
Shared fixtures for AutoDoc tests.

The database is an in-memory SQLite instance; it must be configured before
autodoc.config is first imported.
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("LOG_LEVEL", "WARNING")

import fitz  # PyMuPDF
import pytest


def build_pdf(page_sizes, label_pages=True) -> bytes:
    """Create a PDF with one page per (width, height) entry."""
    doc = fitz.open()
    for number, (width, height) in enumerate(page_sizes, start=1):
        page = doc.new_page(width=width, height=height)
        if label_pages:
            page.insert_text((72, 72), f"Page {number}", fontsize=12)
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def make_pdf():
    """Factory fixture: make_pdf(count, width=612, height=792) -> bytes."""
    def _make(count: int = 1, width: float = 612, height: float = 792, label_pages: bool = True) -> bytes:
        return build_pdf([(width, height)] * count, label_pages=label_pages)
    return _make


@pytest.fixture
def client():
    """TestClient against a freshly created schema."""
    from fastapi.testclient import TestClient

    from autodoc.db import drop_schema, init_schema
    from autodoc.main import app

    drop_schema()
    init_schema()
    with TestClient(app) as test_client:
        yield test_client
    drop_schema()
