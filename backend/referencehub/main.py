"""
ReferenceHub Backend — FastAPI Application Factory
==================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() wires the engine, the entry repository,
       middleware, exception handlers and routers into a FastAPI instance.
Who:   uvicorn (`uvicorn referencehub.main:app`) and the test suite, which
       passes its own repository to create_app().

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware: Request ID → Logging → GZip → CORS     │
    │                                                     │
    │  Routes:                                            │
    │  GET /  POST /entries  GET|POST /api/entries        │
    │  GET /api/oembed  GET /health                       │
    │                                                     │
    │  Exception Handlers:                                │
    │  Validation→400 │ Embed→502 │ Storage/URL→500       │
    │                                                     │
    │  app.state: engine, entry_repository                │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, optionally create tables (DB_CREATE_TABLES)
    Shutdown: dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncEngine

from referencehub import __version__
from referencehub.config import settings
from referencehub.database import create_engine_for, create_tables, dispose_engine
from referencehub.dependencies import build_entry_repository
from referencehub.exceptions import (
    MSG_STORAGE_FAILURE,
    EmbedServiceError,
    ReferenceHubError,
    StorageError,
    UrlParseError,
    ValidationError,
)
from referencehub.middleware.logging import RequestLoggingMiddleware
from referencehub.middleware.request_id import RequestIDMiddleware, request_id_var
from referencehub.routes import entries, health, oembed, pages
from referencehub.services.entry_service import EntryRepository

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure application-wide logging.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s, to stdout.
    Called once during app startup.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Docker captures stdout
        ],
        force=True,
    )

    # Third-party libraries log every operation at DEBUG/INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: logging, optional table creation.
    Shutdown: dispose the engine's connection pool.
    """
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("ReferenceHub Backend starting up (entry schema v%d)...", settings.entry_schema_version)

    engine: Optional[AsyncEngine] = app.state.engine
    if engine is None:
        logger.warning("Durable store disabled; entries are kept in memory only")
    elif settings.db_create_tables:
        try:
            await create_tables(engine)
            logger.info("Entries table ready")
        except Exception as e:
            # The fallback store keeps the app usable while the database is down
            logger.error("Could not create tables: %s", str(e))

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield  # Application runs here

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("ReferenceHub Backend shutting down...")
    await dispose_engine(engine)
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map application exceptions to JSON error responses.

    Handler hierarchy:
        ValidationError         → 400 Bad Request
        EmbedServiceError       → 502 Bad Gateway
        UrlParseError           → 500 (validator was bypassed)
        StorageError            → 500
        ReferenceHubError       → 500 (catch-all for custom)
        Exception (fallback)    → 500

    Responses never include stack traces or SQL; details are logged.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        """Client sent invalid input; tell them what to fix."""
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s", rid, exc.message)
        return JSONResponse(
            status_code=400,
            content={"error": exc.message, "field": exc.field, "request_id": rid},
        )

    @app.exception_handler(EmbedServiceError)
    async def handle_embed_error(request: Request, exc: EmbedServiceError):
        rid = request_id_var.get("")
        logger.warning("[%s] Embed provider error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=502,
            content={"error": exc.message, "request_id": rid},
        )

    @app.exception_handler(UrlParseError)
    async def handle_url_parse_error(request: Request, exc: UrlParseError):
        rid = request_id_var.get("")
        logger.error("[%s] URL failed to parse after validation: %s", rid, exc.context)
        return JSONResponse(
            status_code=500,
            content={"error": MSG_STORAGE_FAILURE, "request_id": rid},
        )

    @app.exception_handler(StorageError)
    async def handle_storage_error(request: Request, exc: StorageError):
        rid = request_id_var.get("")
        logger.error("[%s] Storage error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={"error": exc.message, "request_id": rid},
        )

    @app.exception_handler(ReferenceHubError)
    async def handle_app_error(request: Request, exc: ReferenceHubError):
        rid = request_id_var.get("")
        logger.error("[%s] Application error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={"error": MSG_STORAGE_FAILURE, "request_id": rid},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all: generic 500 with the request ID, stack trace logged."""
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "An unexpected error occurred. Please try again.", "request_id": rid},
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    repository: Optional[EntryRepository] = None,
    engine: Optional[AsyncEngine] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        repository: Entry repository to serve from. Built from DATABASE_URL
                    (SQL store plus in-process fallback) when omitted.
        engine: Engine behind `repository`, used by the health check and
                disposed on shutdown. Ignored when `repository` is omitted.
    """
    if repository is None:
        engine = create_engine_for()
        repository = build_entry_repository(engine)

    app = FastAPI(
        title="ReferenceHub API",
        description=(
            "Guest-facing URL reference sharing: submit a URL with context, notes "
            "and tags, and search what others have shared."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.engine = engine
    app.state.entry_repository = repository

    # ── Register Middleware ───────────────────────────────────────────────
    # Executes in reverse order of addition: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(pages.router)
    app.include_router(entries.router)
    app.include_router(oembed.router)
    app.include_router(health.router)

    return app


# ── Application Instance ─────────────────────────────────────────────────
app = create_app()
