"""
ReferenceHub Backend — Health Check Route
=========================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Runs `SELECT 1` against the configured database and reports how many
       entries are currently held only in process memory.
Who:   Docker health checks, load balancers, monitoring.

Status levels:
    - healthy:   database reachable, or no database configured
    - degraded:  database configured but unreachable; the app keeps serving
                 from the in-process fallback, so the probe still answers 200
"""

import logging
import time

from fastapi import APIRouter, Request
from sqlalchemy import text

from referencehub import __version__
from referencehub.schemas.entry import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(request: Request) -> HealthResponse:
    """Probe the database and report fallback usage and uptime."""
    engine = request.app.state.engine
    repository = request.app.state.entry_repository
    overall = "healthy"

    if engine is None:
        db_status = "disabled"
    else:
        db_status = "connected"
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception as e:
            db_status = "disconnected"
            overall = "degraded"
            logger.warning("Health check: database unreachable: %s", str(e))

    fallback = getattr(repository.store, "fallback", None)
    fallback_entries = len(fallback) if fallback is not None else 0

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        fallback_entries=fallback_entries,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
