"""
ReferenceHub Backend — Test Configuration (conftest.py)
=======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── oembed_requests: Requests the fake oEmbed provider received
    ├── embedder_factory / embedder: EmbedService over httpx.MockTransport
    ├── memory_repository: Repository with no durable store
    ├── sqlite_engine / sql_repository: Repository over a temporary SQLite file
    ├── broken_store: EntryStore whose every operation raises
    ├── make_entry: Builds EntryResponse values
    ├── client_factory: HTTPX AsyncClient for any repository
    └── test_client: HTTPX AsyncClient over memory_repository
"""

import os

# Override settings for testing BEFORE any referencehub imports
os.environ["DATABASE_URL"] = ""  # No durable store unless a test builds one
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests
os.environ["ENTRY_SCHEMA_VERSION"] = "2"

import uuid
from contextlib import asynccontextmanager
from typing import Callable, List, Optional
from unittest.mock import AsyncMock

import httpx
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from referencehub.database import create_engine_for, create_tables, dispose_engine
from referencehub.dependencies import build_entry_repository
from referencehub.schemas.entry import EntryResponse
from referencehub.services.embed_service import EmbedService
from referencehub.services.entry_service import EntryRepository
from referencehub.services.fallback_store import FallbackEntryStore
from referencehub.services.memory_store import InMemoryEntryStore
from referencehub.services.store_base import EntryStore

OEMBED_ENDPOINT = "https://publish.example.test/oembed"
EMBED_HTML = '<blockquote class="twitter-tweet"><p>hello world</p></blockquote>'
STATUS_URL = "https://twitter.com/jack/status/20"


def _default_oembed_handler(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"html": EMBED_HTML, "type": "rich"})


# ══════════════════════════════════════════════════════════════════════════
# Embed Fetcher
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def oembed_requests() -> List[httpx.Request]:
    """Every request the fake oEmbed provider has answered, in order."""
    return []


@pytest.fixture
def embedder_factory(oembed_requests) -> Callable[..., EmbedService]:
    """
    Builds an EmbedService whose HTTP calls go to an httpx.MockTransport.

    Usage:
        def test_x(embedder_factory):
            embedder = embedder_factory(lambda request: httpx.Response(503))
    """

    def factory(handler: Optional[Callable[[httpx.Request], httpx.Response]] = None) -> EmbedService:
        respond = handler or _default_oembed_handler

        def recording_handler(request: httpx.Request) -> httpx.Response:
            oembed_requests.append(request)
            return respond(request)

        return EmbedService(
            endpoint=OEMBED_ENDPOINT,
            max_width=550,
            timeout=1.0,
            client_factory=lambda: httpx.AsyncClient(transport=httpx.MockTransport(recording_handler)),
        )

    return factory


@pytest.fixture
def embedder(embedder_factory) -> EmbedService:
    """EmbedService whose provider always answers with EMBED_HTML."""
    return embedder_factory()


# ══════════════════════════════════════════════════════════════════════════
# Stores & Repositories
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def make_entry() -> Callable[..., EntryResponse]:
    """Builds an EntryResponse with sensible defaults; override any field."""

    def factory(**overrides) -> EntryResponse:
        values = {
            "id": str(uuid.uuid4()),
            "url": "https://example.com/article",
            "note": None,
            "context": "Cited in the onboarding talk",
            "slide_url": None,
            "hostname": "example.com",
            "tags": ["design"],
            "created_at": "2024-05-01T10:00:00.000Z",
            "tweet_embed_html": None,
        }
        values.update(overrides)
        return EntryResponse(**values)

    return factory


@pytest.fixture
def broken_store() -> EntryStore:
    """
    An EntryStore whose insert, query and count all raise.

    Stands in for an unreachable database.
    """
    store = AsyncMock(spec=EntryStore)
    store.insert.side_effect = ConnectionError("database unreachable")
    store.query.side_effect = ConnectionError("database unreachable")
    store.count.side_effect = ConnectionError("database unreachable")
    return store


@pytest.fixture
def memory_repository(embedder) -> EntryRepository:
    """Repository without a durable store (DATABASE_URL empty)."""
    store = FallbackEntryStore(primary=None, fallback=InMemoryEntryStore(capacity=100))
    return EntryRepository(store=store, embed_service=embedder)


@pytest_asyncio.fixture
async def sqlite_engine(tmp_path):
    """Async engine over a fresh SQLite file with the entries table created."""
    engine = create_engine_for(f"sqlite+aiosqlite:///{tmp_path / 'entries.db'}")
    await create_tables(engine)
    yield engine
    await dispose_engine(engine)


@pytest.fixture
def sql_repository(sqlite_engine, embedder) -> EntryRepository:
    """Repository over SQLite with the in-process fallback behind it."""
    return build_entry_repository(sqlite_engine, embedder=embedder)


# ══════════════════════════════════════════════════════════════════════════
# HTTP Clients
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def client_factory():
    """
    Async context manager yielding a client for an app built around
    `repository`.

    Usage:
        async with client_factory(repository) as client:
            response = await client.get("/api/entries")
    """
    from referencehub.main import create_app

    @asynccontextmanager
    async def factory(repository: EntryRepository, engine=None):
        app = create_app(repository=repository, engine=engine)
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client

    return factory


@pytest_asyncio.fixture
async def test_client(client_factory, memory_repository):
    """
    Provides an async HTTP test client for endpoint testing.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    async with client_factory(memory_repository) as client:
        yield client
