"""
SiteList Backend: Application Configuration
==============================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading with validation on startup.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by every module that needs configuration values.
When:  Loaded once at module import time.

Only the store binding is part of the external contract; everything else here
has a default that reproduces the stock behavior (collection under "websites",
API under /api/ or POST to worker.js, index document at /index.html).
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes are grouped by concern for readability.
    """

    # ── Store ─────────────────────────────────────────────────────────────
    # What: Which key-value backend holds the collection and the assets
    # memory:     process-local dict, lost on restart (tests, demos)
    # sql:        one kv_entries table through async SQLAlchemy
    # filesystem: one file per key under storage_root
    store_backend: Literal["memory", "sql", "filesystem"] = Field(default="sql")

    # What: Async SQLAlchemy connection string for the sql backend
    # Format: sqlite+aiosqlite:///path or postgresql+asyncpg://user:pw@host/db
    database_url: str = Field(
        default="sqlite+aiosqlite:///./sitelist.db",
        description="Async SQLAlchemy URL used by the sql store backend",
    )

    # Pool sizing, ignored for SQLite (single-file database, no server pool)
    db_pool_size: int = Field(default=20, ge=5, le=100)
    db_max_overflow: int = Field(default=10, ge=0, le=50)
    db_pool_pre_ping: bool = Field(default=True)

    # What: Run metadata.create_all() on startup for the sql backend
    # Disable when the schema is managed by `alembic upgrade head`
    db_auto_create: bool = Field(default=True)

    # What: Root directory for the filesystem backend
    storage_root: str = Field(default="./storage")

    # ── Collection ────────────────────────────────────────────────────────
    collection_key: str = Field(default="websites", min_length=1)

    # ── Routing ───────────────────────────────────────────────────────────
    # POST requests whose path starts with api_prefix, or ends with
    # "/" + api_script_name, are API calls
    api_prefix: str = Field(default="/api/")
    api_script_name: str = Field(default="worker.js", min_length=1)
    index_document: str = Field(default="/index.html")

    # ── CORS ──────────────────────────────────────────────────────────────
    # Sent verbatim on every API-path response, with or without an Origin header
    cors_allow_origin: str = Field(default="*")

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8000, ge=1024, le=65535)

    # What: Echo the correlation id back as X-Request-ID
    # Off by default: responses carry only CORS and content-type headers
    expose_request_id: bool = Field(default=False)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    @field_validator("api_prefix", "index_document")
    @classmethod
    def validate_leading_slash(cls, v: str) -> str:
        """Paths are matched against request.url.path, which always starts with '/'."""
        if not v.startswith("/"):
            raise ValueError(f"'{v}' must start with '/'")
        return v

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


# Singleton instance: imported throughout the application
settings = Settings()
