"""
ReferenceHub Backend — Entry Repository Tests
=============================================

What:  Tests for EntryRepository insert/query/count.
How:   In-memory and SQLite-backed repositories from conftest; the embed
       provider is a MockTransport that records its requests.

What we test:
    ✅ Inserted entries are fully populated and come back first
    ✅ hostname always matches the stored URL
    ✅ Embed lookup only for status-post URLs, failures tolerated
    ✅ Durable-store outage keeps entries visible in the same process
"""

import re
from datetime import datetime, timezone
from unittest.mock import patch

import httpx
import pytest
from pydantic import ValidationError as PydanticValidationError

from referencehub.exceptions import UrlParseError, ValidationError
from referencehub.schemas.entry import EntryInput
from referencehub.services.entry_service import EntryRepository, utc_timestamp
from referencehub.services.fallback_store import FallbackEntryStore
from referencehub.services.memory_store import InMemoryEntryStore
from referencehub.services.url_normalizer import normalize_url

TIMESTAMP_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")
UUID_RE = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$")


def test_utc_timestamp_format():
    moment = datetime(2024, 1, 2, 3, 4, 5, 678901, tzinfo=timezone.utc)
    assert utc_timestamp(moment) == "2024-01-02T03:04:05.678Z"


class TestInsert:
    @pytest.mark.asyncio
    async def test_populates_derived_fields(self, memory_repository):
        entry = await memory_repository.insert(
            url="HTTPS://Docs.Example.com/guide",
            context="Linked from the style guide",
            tags=["docs", "style"],
        )

        assert UUID_RE.match(entry.id)
        assert TIMESTAMP_RE.match(entry.created_at)
        assert entry.url == "https://docs.example.com/guide"
        assert entry.hostname == "docs.example.com"
        assert entry.hostname == normalize_url(entry.url).hostname
        assert entry.note is None
        assert entry.tags == ["docs", "style"]

    @pytest.mark.asyncio
    async def test_new_entry_comes_first(self, memory_repository):
        await memory_repository.insert(url="https://old.example/", context="c")
        created = await memory_repository.insert(url="https://new.example/", context="c")

        entries = await memory_repository.query()
        assert entries[0].id == created.id

    @pytest.mark.asyncio
    async def test_slide_url_normalized(self, memory_repository):
        entry = await memory_repository.insert(
            url="https://example.com/a",
            context="c",
            slide_url="https://Slides.Example.com",
        )
        assert entry.slide_url == "https://slides.example.com/"

    @pytest.mark.asyncio
    async def test_invalid_url_raises_and_stores_nothing(self, memory_repository):
        with pytest.raises(UrlParseError):
            await memory_repository.insert(url="not a url", context="c")
        assert await memory_repository.count() == 0

    @pytest.mark.asyncio
    async def test_insert_input(self, memory_repository):
        data = EntryInput(url="https://example.com/x", context="ctx", note="n", tags=["a", "a"])
        entry = await memory_repository.insert_input(data)

        assert entry.note == "n"
        assert entry.context == "ctx"
        assert entry.tags == ["a", "a"]

    @pytest.mark.asyncio
    async def test_more_than_five_tags_are_cut(self, memory_repository):
        entry = await memory_repository.insert(
            url="https://example.com/tags",
            context="c",
            tags=[f"t{i}" for i in range(1, 8)],
        )
        assert entry.tags == ["t1", "t2", "t3", "t4", "t5"]

    @pytest.mark.asyncio
    async def test_over_long_tags_rejected_before_anything_happens(self, memory_repository, oembed_requests):
        with pytest.raises(ValidationError) as exc_info:
            await memory_repository.insert(
                url="https://twitter.com/jack/status/20",
                context="c",
                tags=["x" * 30] * 7,
            )

        assert exc_info.value.field == "tags"
        assert await memory_repository.count() == 0
        assert oembed_requests == []


class TestEmbedEnrichment:
    @pytest.mark.asyncio
    async def test_status_url_gets_embed(self, memory_repository, oembed_requests):
        entry = await memory_repository.insert(url="https://twitter.com/jack/status/20", context="c")

        assert entry.tweet_embed_html is not None
        assert "twitter-tweet" in entry.tweet_embed_html
        assert len(oembed_requests) == 1

    @pytest.mark.asyncio
    async def test_other_url_never_calls_provider(self, memory_repository, oembed_requests):
        entry = await memory_repository.insert(url="https://example.com/post", context="c")

        assert entry.tweet_embed_html is None
        assert oembed_requests == []

    @pytest.mark.asyncio
    async def test_provider_failure_does_not_block_insert(self, embedder_factory):
        embedder = embedder_factory(lambda request: httpx.Response(500))
        repository = EntryRepository(FallbackEntryStore(primary=None), embedder)

        entry = await repository.insert(url="https://x.com/jack/status/20", context="c")

        assert entry.tweet_embed_html is None
        assert await repository.count() == 1


class TestQuery:
    @pytest.mark.asyncio
    async def test_count_ignores_search(self, memory_repository):
        await memory_repository.insert(url="https://a.example/", context="alpha")
        await memory_repository.insert(url="https://b.example/", context="beta")

        assert await memory_repository.query("nomatch") == []
        assert await memory_repository.count() == 2

    @pytest.mark.asyncio
    async def test_recent_limit(self, embedder):
        repository = EntryRepository(
            FallbackEntryStore(primary=None, fallback=InMemoryEntryStore(capacity=10)),
            embedder,
            recent_limit=2,
        )
        for i in range(3):
            await repository.insert(url=f"https://example.com/{i}", context="c")

        entries = await repository.query()
        assert [e.url for e in entries] == ["https://example.com/2", "https://example.com/1"]
        assert await repository.count() == 3


class TestSqlBackedRepository:
    @pytest.mark.asyncio
    async def test_round_trip_through_sqlite(self, sql_repository):
        stamps = iter(["2024-05-01T10:00:00.000Z", "2024-05-01T10:00:00.001Z"])
        with patch("referencehub.services.entry_service.utc_timestamp", side_effect=lambda: next(stamps)):
            await sql_repository.insert(url="https://example.com/first", context="c", tags=["x"])
            created = await sql_repository.insert(
                url="https://twitter.com/jack/status/20",
                context="Quoted on slide 3",
                tags=["quote"],
            )

        entries = await sql_repository.query()
        assert entries[0] == created
        assert entries[0].tweet_embed_html == created.tweet_embed_html
        assert await sql_repository.count() == 2
        assert len(sql_repository.store.fallback) == 0

    @pytest.mark.asyncio
    async def test_outage_keeps_entry_visible(self, broken_store, embedder):
        repository = EntryRepository(
            FallbackEntryStore(primary=broken_store, fallback=InMemoryEntryStore(capacity=10)),
            embedder,
        )

        entry = await repository.insert(url="https://example.com/outage", context="during outage")

        assert entry.url == "https://example.com/outage"
        assert [e.id for e in await repository.query("outage")] == [entry.id]
        assert await repository.count() == 1


@pytest.mark.parametrize(
    "tags",
    [["t"] * 6, ["x" * 21]],
)
def test_entry_values_refuse_tags_over_the_limits(make_entry, tags):
    with pytest.raises(PydanticValidationError):
        make_entry(tags=tags)
