"""
FastAPI application entry point for the AutoDoc backend.

Provides REST API for:
- User registration and login
- PDF upload, listing and download
- Annotation CRUD
- Annotated PDF export
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from autodoc import __version__
from autodoc.config import settings
from autodoc.db import init_schema


# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[
        logging.StreamHandler(),
    ]
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info("Starting AutoDoc API...")

    try:
        init_schema()
        logger.info("Database schema initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize database schema: {e}")
        raise

    yield

    logger.info("Shutting down AutoDoc API...")


# Create FastAPI application
app = FastAPI(
    title="AutoDoc API",
    description="PDF upload, annotation and annotated export",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/", response_class=PlainTextResponse)
async def root():
    return "AutoDoc API is running"


# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": __version__,
    }


# Import and include routers
from autodoc.routers import auth, pdfs, annotations
app.include_router(auth.router, prefix="/api/v1/auth", tags=["auth"])
app.include_router(pdfs.router, prefix="/api/v1/pdfs", tags=["pdfs"])
app.include_router(annotations.router, prefix="/api/v1/annotations", tags=["annotations"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "autodoc.main:app",
        host="0.0.0.0",
        port=5000,
        reload=settings.debug,
    )
