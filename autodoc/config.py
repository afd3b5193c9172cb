"""
Configuration settings for the AutoDoc backend.

Reads settings from the environment and an optional .env file in the
project root and provides typed access to them.
"""

from pathlib import Path
from typing import List
from functools import lru_cache

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Resolve paths
PACKAGE_DIR = Path(__file__).parent
PROJECT_ROOT = PACKAGE_DIR.parent
ENV_FILE = PROJECT_ROOT / ".env"

DEFAULT_DATABASE_URL = f"sqlite:///{PROJECT_ROOT / 'autodoc.db'}"


class Settings(BaseSettings):
    """Application settings loaded from the environment / .env file."""

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Database - SQLite by default, PostgreSQL in production
    database_url: str = Field(
        default=DEFAULT_DATABASE_URL,
        alias="DATABASE_URL",
        description="SQLAlchemy database URL"
    )

    # Authentication
    jwt_secret: str = Field(
        default="autodoc-development-secret-key-change-me-2024",
        alias="JWT_SECRET",
        description="HMAC secret used to sign access tokens"
    )
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    jwt_expiration_minutes: int = Field(
        default=60,
        alias="JWT_EXPIRATION_MINUTES",
        description="Lifetime of issued access tokens"
    )

    # Uploads
    max_upload_bytes: int = Field(
        default=10 * 1024 * 1024,
        alias="MAX_UPLOAD_BYTES",
        description="Largest accepted PDF upload in bytes"
    )

    # Application settings
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    cors_origins: List[str] = Field(default=["*"], alias="CORS_ORIGINS")

    @computed_field
    @property
    def is_sqlite(self) -> bool:
        """True when the configured database is SQLite."""
        return self.database_url.startswith("sqlite")


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Convenience accessors
settings = get_settings()
