"""
ReferenceHub Backend — Database Engine & Session Management
===========================================================

What:  Async SQLAlchemy engine, session factory, and a transactional scope.
How:   `create_engine_for()` builds an async engine for the configured URL;
       `session_scope()` commits on success and rolls back on error.
Who:   Used by the SQL entry store, Alembic's env.py, and the health route.
When:  Engine is created lazily by the repository factory; sessions per operation.

Connection Pooling:
    Server databases (PostgreSQL) get a QueuePool sized from settings with
    pre-ping and hourly recycling. SQLite URLs keep SQLAlchemy's default
    pool for the dialect, which rejects pool sizing arguments.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from referencehub.config import settings

logger = logging.getLogger(__name__)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Registers models with a single metadata object, which Alembic reads
    for autogenerate and `create_tables()` uses for SQLite development.
    """
    pass


# ── Engine Configuration ──────────────────────────────────────────────────
def engine_options(database_url: str) -> Dict[str, Any]:
    """
    Keyword arguments for `create_async_engine` appropriate to the URL.

    SQLite engines only get `echo`; everything else also gets pool sizing.
    """
    options: Dict[str, Any] = {"echo": settings.log_level == "DEBUG"}
    if database_url.startswith("sqlite"):
        return options
    options.update(
        pool_size=settings.db_pool_size,          # Persistent connections (default: 20)
        max_overflow=settings.db_max_overflow,     # Extra connections for spikes (default: 10)
        pool_pre_ping=settings.db_pool_pre_ping,   # Validate before use (default: True)
        pool_recycle=3600,                         # Recycle after 1 hour
    )
    return options


def create_engine_for(database_url: Optional[str] = None) -> Optional[AsyncEngine]:
    """
    Create the async engine, or None when no database is configured.

    Creating an engine does not open a connection; an unreachable server
    only surfaces on the first query.
    """
    url = (database_url if database_url is not None else settings.database_url).strip()
    if not url:
        logger.info("No DATABASE_URL configured; durable store disabled")
        return None
    return create_async_engine(url, **engine_options(url))


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Session factory bound to `engine`.

    expire_on_commit=False keeps loaded attributes readable after commit.
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


# ── Session Scope ─────────────────────────────────────────────────────────
@asynccontextmanager
async def session_scope(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """
    Provide a transactional session around a single store operation.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the caller
        3. On success: commits
        4. On error: rolls back and re-raises
        5. Always: closes the session (returns connection to pool)

    Example:
        async with session_scope(factory) as session:
            session.add(row)
    """
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def create_tables(engine: AsyncEngine) -> None:
    """
    Create all registered tables if they do not exist.

    Used for SQLite development and tests; deployed databases are migrated
    with Alembic instead.
    """
    # Import registers the model with Base.metadata
    from referencehub.models import entry  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine(engine: Optional[AsyncEngine]) -> None:
    """
    Gracefully close all pooled connections.

    Called during application shutdown (lifespan handler).
    """
    if engine is not None:
        await engine.dispose()
