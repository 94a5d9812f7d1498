"""
ReferenceHub Backend — Entries JSON API
=======================================

What:  GET /api/entries (search) and POST /api/entries (create).
How:   Thin handlers; validation errors and storage failures are raised as
       application exceptions and formatted by the global handlers in main.py.
Who:   Scripts and API clients.

Response shapes:
    GET  → 200 {"total": N, "count": n, "entries": [...]}
    POST → 201 entry | 400 {"error": ...} | 500 {"error": ...}
"""

import json
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, Request

from referencehub.config import settings
from referencehub.dependencies import get_entry_repository
from referencehub.exceptions import ValidationError
from referencehub.schemas.entry import (
    EntryListResponse,
    EntryResponse,
    ErrorResponse,
    SchemaVersion,
)
from referencehub.services.entry_service import EntryRepository
from referencehub.services.search import sanitize_query
from referencehub.services.validation import validate_entry_input

router = APIRouter(prefix="/api", tags=["Entries"])

MSG_INVALID_JSON = "Could not parse the JSON body."


@router.get(
    "/entries",
    response_model=EntryListResponse,
    summary="List or search entries",
    description=(
        "Returns up to 100 of the most recent entries, optionally filtered by a "
        "case-insensitive substring match over url, note, context, hostname, "
        "slide URL and tags. `total` is always the grand total."
    ),
)
async def list_entries(
    q: Optional[str] = Query(default=None, description="Free-text search (max 200 characters)"),
    repository: EntryRepository = Depends(get_entry_repository),
) -> EntryListResponse:
    query = sanitize_query(q)
    entries = await repository.query(query)
    total = await repository.count()
    return EntryListResponse(total=total, count=len(entries), entries=entries)


@router.post(
    "/entries",
    status_code=201,
    response_model=EntryResponse,
    responses={
        201: {"description": "Entry created", "model": EntryResponse},
        400: {"description": "Invalid JSON or invalid fields", "model": ErrorResponse},
        500: {"description": "Entry could not be stored", "model": ErrorResponse},
    },
    summary="Create an entry",
)
async def create_entry(
    request: Request,
    repository: EntryRepository = Depends(get_entry_repository),
) -> EntryResponse:
    try:
        payload: Any = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValidationError(message=MSG_INVALID_JSON, field="body")

    record: Dict[str, Any] = payload if isinstance(payload, dict) else {}
    data = validate_entry_input(record, SchemaVersion(settings.entry_schema_version))
    return await repository.insert_input(data)
