"""
SiteList Backend: Key-Value Entry SQLAlchemy Model
=====================================================

What:  ORM model representing the `kv_entries` table.
Why:   Gives the sql store backend a one-row-per-key layout that matches the
       key-value contract exactly.
Who:   Used by SQLStore and by Alembic for schema management.

Table Design Rationale:
    - key:        The store key, verbatim ("websites", "index.html", "css/app.css")
    - value:      Raw bytes. The collection is JSON text; assets may be binary
    - updated_at: Last write time, for operators only (never read by the app)

    Column types are dialect-neutral so the same model runs on SQLite and
    PostgreSQL.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, LargeBinary, String
from sqlalchemy.orm import Mapped, mapped_column

from sitelist.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class KVEntry(Base):
    """One key and its current value."""

    __tablename__ = "kv_entries"

    key: Mapped[str] = mapped_column(
        String(512),
        primary_key=True,
        comment="Store key, used verbatim",
    )

    value: Mapped[bytes] = mapped_column(
        LargeBinary,
        nullable=False,
        comment="Raw value bytes (JSON text for the collection, file bytes for assets)",
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        comment="When this key was last written (UTC)",
    )

    def __repr__(self) -> str:
        return f"<KVEntry(key='{self.key}', size={len(self.value or b'')})>"
