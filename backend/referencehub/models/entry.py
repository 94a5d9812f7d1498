"""
ReferenceHub Backend — Entry SQLAlchemy Model
=============================================

What:  ORM model representing the `entries` table.
How:   Inherits from the shared DeclarativeBase; Alembic migrations in
       alembic/versions/ define the same shape for deployed databases.
Who:   Used by the SQL entry store and the search clause builder.

Table Design:
    - id: UUID4 rendered as text, generated by the repository
    - note: nullable since migration 002 (required before)
    - context / slide_url: added by migration 002
    - tags: JSON-encoded array of strings (non-ASCII kept verbatim)
    - created_at: ISO-8601 UTC text with a fixed width, so text ordering
      equals chronological ordering
    - synced_to_notion / synced_at: owned by the external archival job;
      this application only ever writes the defaults
    - tweet_embed_html: added by migration 003, written once at creation
"""

from typing import Optional

from sqlalchemy import Index, Integer, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from referencehub.database import Base


class Entry(Base):
    """
    A submitted URL reference.

    Lifecycle:
        Created once by the entry repository; never updated or deleted by
        this application.

    Query Patterns:
        - Recent entries: ORDER BY created_at DESC LIMIT 100
          → idx_entries_created_at
        - Unsynced entries (archival job): WHERE synced_to_notion = 0
          ORDER BY created_at → idx_entries_synced
    """

    __tablename__ = "entries"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    context: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        server_default=text("''"),
    )
    slide_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    hostname: Mapped[str] = mapped_column(Text, nullable=False)
    tags: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="[]",
        server_default=text("'[]'"),
    )
    created_at: Mapped[str] = mapped_column(Text, nullable=False)

    # ── Archival Flags ────────────────────────────────────────────────────
    synced_to_notion: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default=text("0"),
    )
    synced_at: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # ── Embed Cache ───────────────────────────────────────────────────────
    tweet_embed_html: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<Entry(id={self.id}, hostname='{self.hostname}', created_at='{self.created_at}')>"


# ── Indexes ───────────────────────────────────────────────────────────────
# Declared against the mapped attributes so the DESC ordering binds to the table
Index("idx_entries_created_at", Entry.created_at.desc())
Index("idx_entries_synced", Entry.synced_to_notion, Entry.created_at)
