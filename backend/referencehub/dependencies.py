"""
ReferenceHub Backend — Repository Factory & FastAPI Dependencies
================================================================

What:  Builds the entry repository for an app instance and exposes it to
       route handlers through FastAPI's dependency injection.
How:   create_app() calls build_entry_repository() once and stores the result
       on `app.state`; get_entry_repository() reads it back per request.
Who:   main.create_app(), route handlers, tests (which inject their own
       repositories into create_app()).
"""

from typing import Optional

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine

from referencehub.database import create_session_factory
from referencehub.services.embed_service import EmbedService, embed_service
from referencehub.services.entry_service import EntryRepository
from referencehub.services.fallback_store import FallbackEntryStore
from referencehub.services.memory_store import InMemoryEntryStore
from referencehub.services.sql_store import SQLEntryStore


def build_entry_repository(
    engine: Optional[AsyncEngine],
    embedder: Optional[EmbedService] = None,
) -> EntryRepository:
    """
    Repository over SQL (when `engine` is given) with an in-process fallback.
    """
    primary = SQLEntryStore(create_session_factory(engine)) if engine is not None else None
    store = FallbackEntryStore(primary=primary, fallback=InMemoryEntryStore())
    return EntryRepository(store=store, embed_service=embedder or embed_service)


def get_entry_repository(request: Request) -> EntryRepository:
    """FastAPI dependency: the repository owned by the running app."""
    return request.app.state.entry_repository


def get_embed_service(request: Request) -> EmbedService:
    """FastAPI dependency: the embed fetcher used by the running app."""
    return request.app.state.entry_repository.embed_service
