"""Add context and slide_url, make note optional

Revision ID: 002
Revises: 001
Create Date: 2024-04-10 00:00:00.000000+00:00

What:  Moves `entries` to the current shape: `note` nullable, `context`
       (NOT NULL DEFAULT '') and `slide_url` added.
How:   Create-copy-drop-rename, which SQLite needs to relax a NOT NULL
       constraint and which PostgreSQL runs just as well. Existing rows get
       context '' and no slide URL. Indexes are recreated on the new table.

Rollback: downgrade() rebuilds the old shape; context and slide_url are
          discarded and blank notes become ''.
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

COPIED_COLUMNS = "id, url, note, hostname, tags, created_at, synced_to_notion, synced_at"


def _create_indexes() -> None:
    op.create_index("idx_entries_created_at", "entries", [sa.text("created_at DESC")])
    op.create_index("idx_entries_synced", "entries", ["synced_to_notion", "created_at"])


def _drop_indexes() -> None:
    op.drop_index("idx_entries_synced", table_name="entries")
    op.drop_index("idx_entries_created_at", table_name="entries")


def upgrade() -> None:
    op.create_table(
        "entries_new",
        sa.Column("id", sa.Text(), nullable=False),
        sa.Column("url", sa.Text(), nullable=False),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("context", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column("slide_url", sa.Text(), nullable=True),
        sa.Column("hostname", sa.Text(), nullable=False),
        sa.Column("tags", sa.Text(), nullable=False, server_default=sa.text("'[]'")),
        sa.Column("created_at", sa.Text(), nullable=False),
        sa.Column("synced_to_notion", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("synced_at", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )

    op.execute(
        f"INSERT INTO entries_new ({COPIED_COLUMNS}, context, slide_url) "
        f"SELECT {COPIED_COLUMNS}, '', NULL FROM entries"
    )

    _drop_indexes()
    op.drop_table("entries")
    op.rename_table("entries_new", "entries")
    _create_indexes()


def downgrade() -> None:
    op.create_table(
        "entries_old",
        sa.Column("id", sa.Text(), nullable=False),
        sa.Column("url", sa.Text(), nullable=False),
        sa.Column("note", sa.Text(), nullable=False),
        sa.Column("hostname", sa.Text(), nullable=False),
        sa.Column("tags", sa.Text(), nullable=False, server_default=sa.text("'[]'")),
        sa.Column("created_at", sa.Text(), nullable=False),
        sa.Column("synced_to_notion", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("synced_at", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )

    op.execute(
        "INSERT INTO entries_old (id, url, note, hostname, tags, created_at, synced_to_notion, synced_at) "
        "SELECT id, url, COALESCE(note, ''), hostname, tags, created_at, synced_to_notion, synced_at "
        "FROM entries"
    )

    _drop_indexes()
    op.drop_table("entries")
    op.rename_table("entries_old", "entries")
    _create_indexes()
