"""Create kv_entries table

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates the single table behind the sql store backend.
How:   Dialect-neutral column types, so the same revision runs on SQLite and
       PostgreSQL.

Rollback: downgrade() drops the table (destroys the collection and all assets).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create kv_entries. See sitelist/models/kv_entry.py for column docs."""
    op.create_table(
        "kv_entries",
        sa.Column(
            "key",
            sa.String(512),
            nullable=False,
            comment="Store key, used verbatim",
        ),
        sa.Column(
            "value",
            sa.LargeBinary(),
            nullable=False,
            comment="Raw value bytes (JSON text for the collection, file bytes for assets)",
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="When this key was last written (UTC)",
        ),
        sa.PrimaryKeyConstraint("key"),
    )


def downgrade() -> None:
    op.drop_table("kv_entries")
