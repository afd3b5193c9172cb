"""
SQLAlchemy models and session management for the AutoDoc backend.

Tables: users, pdf_documents, annotations. Uses portable column types so the
same models run on SQLite (development, tests) and PostgreSQL.
"""

import uuid
from datetime import datetime

from sqlalchemy import (
    Column, String, Text, Integer, Float, DateTime, ForeignKey, Index,
    LargeBinary, BigInteger, Uuid, create_engine
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session
from sqlalchemy.pool import QueuePool, StaticPool

from autodoc.config import settings


Base = declarative_base()


class User(Base):
    """Registered account that owns documents and annotations."""

    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    password_hash = Column(String(255), nullable=False)  # bcrypt
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    documents = relationship("PDFDocument", back_populates="user", cascade="all, delete-orphan")


class PDFDocument(Base):
    """Uploaded PDF with its binary content."""

    __tablename__ = "pdf_documents"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False)
    filename = Column(String(255), nullable=False)  # Generated storage name
    original_name = Column(String(255), nullable=False)
    size = Column(BigInteger, nullable=True)
    file_data = Column(LargeBinary, nullable=True)  # PDF binary data
    content_type = Column(String(100), nullable=True, default="application/pdf")
    upload_date = Column(DateTime, default=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="documents")
    annotations = relationship("Annotation", back_populates="document", cascade="all, delete-orphan")


class Annotation(Base):
    """Rectangular, page-anchored annotation captured in screen space."""

    __tablename__ = "annotations"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False)
    pdf_id = Column(Uuid, ForeignKey("pdf_documents.id"), nullable=False)
    page = Column(Integer, nullable=False)  # 1-based
    x = Column(Float, nullable=False)
    y = Column(Float, nullable=False)
    width = Column(Float, nullable=False)
    height = Column(Float, nullable=False)
    comment = Column(Text, nullable=True)
    color = Column(String(50), nullable=False, default="yellow")
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=True)  # Set on update only

    # Relationships
    document = relationship("PDFDocument", back_populates="annotations")


# Indexes
Index("idx_pdf_documents_user_id", PDFDocument.user_id)
Index("idx_annotations_pdf_id_page", Annotation.pdf_id, Annotation.page)
Index("idx_annotations_user_id", Annotation.user_id)


# Database engine and session factory
_engine = None
_SessionLocal = None


def get_engine():
    """Get or create the database engine."""
    global _engine
    if _engine is None:
        url = settings.database_url
        if settings.is_sqlite:
            kwargs = {"connect_args": {"check_same_thread": False}}
            if url in ("sqlite://", "sqlite:///:memory:"):
                # One shared connection keeps the in-memory database alive
                kwargs["poolclass"] = StaticPool
            _engine = create_engine(url, echo=settings.debug, **kwargs)
        else:
            _engine = create_engine(
                url,
                poolclass=QueuePool,
                pool_size=5,
                max_overflow=10,
                pool_timeout=30,
                pool_recycle=300,
                pool_pre_ping=True,  # Test connection before using (auto-reconnect)
                echo=settings.debug,
            )
    return _engine


def get_session_factory():
    """Get or create session factory."""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=get_engine()
        )
    return _SessionLocal


def get_db() -> Session:
    """Get database session (dependency injection)."""
    SessionLocal = get_session_factory()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_schema():
    """Initialize database schema (create tables if not exist)."""
    Base.metadata.create_all(bind=get_engine())


def drop_schema():
    """Drop all tables (use with caution)."""
    Base.metadata.drop_all(bind=get_engine())
