"""
AutoDoc - PDF annotation backend.

This package provides:
- JWT-authenticated REST API (FastAPI)
- PDF upload and storage (SQLAlchemy)
- Rectangle annotations with comment and color
- Annotated PDF export with marks burned into the pages (PyMuPDF)
"""

__version__ = "1.0.0"
