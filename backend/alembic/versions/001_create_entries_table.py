"""Create entries table

Revision ID: 001
Revises: None
Create Date: 2024-03-02 00:00:00.000000+00:00

What:  Creates the first shape of the `entries` table: url, required note,
       derived hostname, JSON tags, and the archival flags.
How:   Plain TEXT columns so the same migration runs on PostgreSQL and SQLite;
       created_at is fixed-width ISO-8601 text.

Rollback: downgrade() drops the table (destructive).
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
    op.create_table(
        "entries",
        sa.Column("id", sa.Text(), nullable=False, comment="UUID4 assigned by the application"),
        sa.Column("url", sa.Text(), nullable=False, comment="Normalized absolute URL"),
        sa.Column("note", sa.Text(), nullable=False),
        sa.Column("hostname", sa.Text(), nullable=False, comment="Derived from url at write time"),
        sa.Column(
            "tags",
            sa.Text(),
            nullable=False,
            server_default=sa.text("'[]'"),
            comment="JSON array of up to 5 strings",
        ),
        sa.Column("created_at", sa.Text(), nullable=False, comment="ISO-8601 UTC, e.g. 2024-03-02T10:00:00.000Z"),

        # Written by the archival job only
        sa.Column("synced_to_notion", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("synced_at", sa.Text(), nullable=True),

        sa.PrimaryKeyConstraint("id"),
    )

    # Listing: ORDER BY created_at DESC LIMIT 100
    op.create_index("idx_entries_created_at", "entries", [sa.text("created_at DESC")])
    # Archival job: WHERE synced_to_notion = 0 ORDER BY created_at
    op.create_index("idx_entries_synced", "entries", ["synced_to_notion", "created_at"])


def downgrade() -> None:
    """Drop the entries table. All entries are lost."""
    op.drop_index("idx_entries_synced", table_name="entries")
    op.drop_index("idx_entries_created_at", table_name="entries")
    op.drop_table("entries")
