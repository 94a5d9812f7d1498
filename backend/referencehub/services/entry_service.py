"""
ReferenceHub Backend — Entry Repository
=======================================

What:  The only writer of entries and the gateway every route reads through.
How:   Composes the URL normalizer, the embed fetcher and an EntryStore.
Who:   Called by the HTML and JSON route handlers.

Write Flow:
    ┌────────────┐   ┌──────────────┐   ┌──────────────┐   ┌──────────┐
    │ Normalize  │──▶│ Assign id &  │──▶│ Embed lookup │──▶│  Store   │
    │ url/slides │   │ created_at   │   │ (best-effort)│   │ (w/ fallback)
    └────────────┘   └──────────────┘   └──────────────┘   └──────────┘

    The URL is re-normalized here even though the validator already
    accepted it: `url` and `hostname` always come from the same parse.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from referencehub.config import settings
from referencehub.schemas.entry import EntryInput, EntryResponse
from referencehub.services.embed_service import EmbedService
from referencehub.services.store_base import EntryStore
from referencehub.services.url_normalizer import normalize_url
from referencehub.services.validation import validate_tags

logger = logging.getLogger(__name__)


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """
    ISO-8601 UTC timestamp with millisecond precision and a `Z` suffix.

    Fixed width, so lexical order equals chronological order.
    """
    moment = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class EntryRepository:
    """
    Entry operations over an injected store.

    Args:
        store: Storage capability (normally a FallbackEntryStore).
        embed_service: Embed fetcher used once per insert.
        recent_limit: Maximum number of entries returned by query().
    """

    def __init__(
        self,
        store: EntryStore,
        embed_service: EmbedService,
        recent_limit: Optional[int] = None,
    ):
        self.store = store
        self.embed_service = embed_service
        self.recent_limit = recent_limit or settings.recent_limit

    async def insert(
        self,
        url: str,
        note: Optional[str] = None,
        context: Optional[str] = None,
        slide_url: Optional[str] = None,
        tags: Iterable[str] = (),
    ) -> EntryResponse:
        """
        Create and store a new entry.

        Returns:
            The fully populated entry. Store outages do not surface here:
            the entry is kept in process memory instead.

        Raises:
            ValidationError: One of the first five tags is over 20
                             characters (tags past the fifth are dropped).
            UrlParseError: `url` or `slide_url` is not a valid URL (the
                           validator should have rejected it first).
            StorageError: Neither the durable nor the in-process store
                          accepted the entry.
        """
        checked_tags = validate_tags(list(tags))
        normalized = normalize_url(url)
        normalized_slides = normalize_url(slide_url).url if slide_url else None

        embed_html = await self.embed_service.fetch_embed_html(normalized.url)

        entry = EntryResponse(
            id=str(uuid.uuid4()),
            url=normalized.url,
            note=note or None,
            context=context or None,
            slide_url=normalized_slides,
            hostname=normalized.hostname,
            tags=checked_tags,
            created_at=utc_timestamp(),
            tweet_embed_html=embed_html,
        )
        await self.store.insert(entry)
        logger.info(
            "Entry %s created for %s (%d tags, embed=%s)",
            entry.id,
            entry.hostname,
            len(entry.tags),
            embed_html is not None,
        )
        return entry

    async def insert_input(self, data: EntryInput) -> EntryResponse:
        """Insert a validated submission."""
        return await self.insert(
            url=data.url,
            note=data.note,
            context=data.context,
            slide_url=data.slide_url,
            tags=data.tags,
        )

    async def query(self, search: Optional[str] = None) -> List[EntryResponse]:
        """Most recent entries (newest first) matching `search`."""
        return await self.store.query(search, self.recent_limit)

    async def count(self) -> int:
        """Grand total of stored entries, independent of any search."""
        return await self.store.count()
