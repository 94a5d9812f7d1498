# Middleware package init
"""
ReferenceHub Backend — Middleware Package
=========================================

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID: correlation ID for logging and error responses
    2. Logging: method, path, status, duration with the request ID
    3. GZip / CORS: FastAPI-provided
"""
