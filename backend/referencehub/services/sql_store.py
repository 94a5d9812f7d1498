"""
ReferenceHub Backend — SQL Entry Store
======================================

What:  Durable entry store backed by the `entries` table.
How:   Each operation opens its own transactional session (session_scope).
       Searching narrows rows with the SQL clause from the search filter and
       then applies entry_matches() to every candidate, newest first, until
       `limit` entries are collected.
Who:   Primary side of FallbackEntryStore.

Errors are NOT handled here: connection failures and query errors propagate
so the fallback wrapper can decide what to do with them.

Query plan (listing):
    SELECT ... FROM entries [WHERE ... ILIKE ...]
    ORDER BY created_at DESC, id LIMIT :batch OFFSET :n
    → idx_entries_created_at
"""

import json
import logging
from typing import Any, List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from referencehub.database import session_scope
from referencehub.models.entry import Entry
from referencehub.schemas.entry import MAX_TAG_LENGTH, MAX_TAGS, EntryResponse
from referencehub.services.search import entry_matches, search_clause
from referencehub.services.store_base import EntryStore

logger = logging.getLogger(__name__)

# Rows fetched per round trip while filtering a search
SCAN_BATCH_SIZE = 200


# ── Row Mapping ───────────────────────────────────────────────────────────

def encode_tags(tags: List[str]) -> str:
    """JSON text for the tags column; non-ASCII is stored verbatim for LIKE."""
    return json.dumps(list(tags), ensure_ascii=False)


def decode_tags(raw: Any) -> List[str]:
    """
    Tag list from the stored JSON text.

    Malformed JSON, a non-list value, or unusable items never fail a
    read: the first two decode to [], non-strings and over-long tags are
    dropped, and at most five tags are kept.
    """
    if not isinstance(raw, str):
        return []
    try:
        value = json.loads(raw)
    except ValueError:
        logger.warning("Malformed tags column value: %r", raw[:100])
        return []
    if not isinstance(value, list):
        return []
    tags = [tag for tag in value if isinstance(tag, str) and len(tag) <= MAX_TAG_LENGTH]
    return tags[:MAX_TAGS]


def row_to_entry(row: Entry) -> EntryResponse:
    """Map an ORM row to the immutable entry value."""
    return EntryResponse(
        id=str(row.id),
        url=row.url,
        note=row.note or None,
        context=row.context or None,
        slide_url=row.slide_url or None,
        hostname=row.hostname or "",
        tags=decode_tags(row.tags),
        created_at=row.created_at,
        tweet_embed_html=row.tweet_embed_html or None,
    )


def entry_to_row(entry: EntryResponse) -> Entry:
    """Map an entry value to a new ORM row (archival flags left at defaults)."""
    return Entry(
        id=entry.id,
        url=entry.url,
        note=entry.note,
        context=entry.context or "",
        slide_url=entry.slide_url,
        hostname=entry.hostname,
        tags=encode_tags(entry.tags),
        created_at=entry.created_at,
        synced_to_notion=0,
        tweet_embed_html=entry.tweet_embed_html,
    )


# ── Store ─────────────────────────────────────────────────────────────────

class SQLEntryStore(EntryStore):
    """Entry store over an async SQLAlchemy session factory."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        batch_size: int = SCAN_BATCH_SIZE,
    ):
        self.session_factory = session_factory
        self.batch_size = batch_size

    async def insert(self, entry: EntryResponse) -> None:
        async with session_scope(self.session_factory) as session:
            session.add(entry_to_row(entry))
        logger.info("Entry %s stored (host=%s)", entry.id, entry.hostname)

    async def query(self, search: Optional[str], limit: int) -> List[EntryResponse]:
        stmt = select(Entry).order_by(Entry.created_at.desc(), Entry.id)

        if not search:
            async with session_scope(self.session_factory) as session:
                result = await session.execute(stmt.limit(limit))
                return [row_to_entry(row) for row in result.scalars().all()]

        clause = search_clause(search)
        if clause is not None:
            stmt = stmt.where(clause)

        matches: List[EntryResponse] = []
        offset = 0
        async with session_scope(self.session_factory) as session:
            while len(matches) < limit:
                result = await session.execute(stmt.offset(offset).limit(self.batch_size))
                rows = list(result.scalars().all())
                if not rows:
                    break
                offset += len(rows)
                for row in rows:
                    entry = row_to_entry(row)
                    if entry_matches(entry, search):
                        matches.append(entry)
                        if len(matches) == limit:
                            break
        return matches

    async def count(self) -> int:
        async with session_scope(self.session_factory) as session:
            result = await session.execute(select(func.count()).select_from(Entry))
            return result.scalar() or 0
