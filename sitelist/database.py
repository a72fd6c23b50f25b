"""
SiteList Backend: Database Engine Management
===============================================

What:  Async SQLAlchemy engine, session factory, and declarative base.
Why:   Centralizes all database connection logic for the sql store backend.
How:   The engine is built on first use (not at import) so the memory and
       filesystem backends never load a database driver.
Who:   Used by SQLStore, the application lifespan, and Alembic.

Connection Pooling Strategy:
    Server databases (PostgreSQL via asyncpg) get an explicit pool:
        pool_size / max_overflow / pool_pre_ping from settings,
        pool_recycle=3600 to drop long-lived stale connections.
    SQLite (aiosqlite) keeps SQLAlchemy's default pool for the dialect;
    the queue-pool arguments do not apply to a file database.
"""

from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from sitelist.config import settings


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object, which Alembic reads for autogenerate and
    init_models() uses for create_all.
    """
    pass


def build_engine(database_url: Optional[str] = None) -> AsyncEngine:
    """
    Create an async engine for `database_url` (defaults to settings.database_url).

    SQL statements are echoed only when LOG_LEVEL is DEBUG.
    """
    url = database_url or settings.database_url
    options: Dict[str, Any] = {"echo": settings.log_level == "DEBUG"}
    if not url.startswith("sqlite"):
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return create_async_engine(url, **options)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False: values stay readable after the write transaction
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_models(engine: AsyncEngine) -> None:
    """
    Create any missing tables.

    When:  Application startup, if DB_AUTO_CREATE is on.
    Why:   Lets a fresh SQLite file work without running Alembic first.
           Existing tables are left untouched (CREATE TABLE IF NOT EXISTS).
    """
    # Import models so they register with Base.metadata
    from sitelist.models.kv_entry import KVEntry  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine(engine: AsyncEngine) -> None:
    """Close all pooled connections. Called during application shutdown."""
    await engine.dispose()
