"""
ReferenceHub Backend — Request Logging Middleware
=================================================

What:  One access-log line per HTTP request with status and duration.
How:   Measures time around call_next() and logs on the
       `referencehub.access` logger; the level follows the status code
       (5xx → ERROR, 4xx → WARNING, otherwise INFO).
When:  Runs inside RequestIDMiddleware, so the request ID is available.

Logged: method, path, status, duration, client IP, request ID.
Not logged: request bodies (submitted notes may contain personal data).
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from referencehub.middleware.request_id import request_id_var

logger = logging.getLogger("referencehub.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs structured information about each HTTP request and response."""

    # Probes hit these every few seconds
    SKIPPED_PATHS = {"/health"}

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start_time = time.perf_counter()

        client_ip = getattr(request.client, "host", "unknown") if request.client else "unknown"
        method = request.method
        path = request.url.path
        rid = request_id_var.get("")

        if path in self.SKIPPED_PATHS:
            return await call_next(request)

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000

        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )

        return response
