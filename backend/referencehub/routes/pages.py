"""
ReferenceHub Backend — HTML Page Routes
=======================================

What:  GET / (listing + search) and POST /entries (form submission).
How:   Delegates to the validator and the entry repository; renders HTML via
       referencehub.views.
Who:   Browsers.

Submission outcomes:
    valid input   → 303 redirect to /?submitted=1
    invalid input → 400, page re-rendered with the error and the typed values
    other failure → 500, page re-rendered with a generic error
"""

import logging
from typing import Dict, Optional

from fastapi import APIRouter, Depends, Form, Query
from fastapi.responses import HTMLResponse, RedirectResponse

from referencehub.config import settings
from referencehub.dependencies import get_entry_repository
from referencehub.exceptions import ValidationError
from referencehub.middleware.request_id import request_id_var
from referencehub.schemas.entry import SchemaVersion
from referencehub.services.entry_service import EntryRepository
from referencehub.services.search import sanitize_query
from referencehub.services.validation import validate_entry_input
from referencehub.views import render_home_page

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Pages"])

MSG_SAVE_FAILED = "Something went wrong while saving your entry. Please try again shortly."


async def _render_with_error(
    repository: EntryRepository,
    error: str,
    defaults: Dict[str, str],
    status_code: int,
) -> HTMLResponse:
    entries = await repository.query()
    total = await repository.count()
    html = render_home_page(
        entries,
        total,
        error=error,
        defaults=defaults,
        open_form=True,
        version=SchemaVersion(settings.entry_schema_version),
    )
    return HTMLResponse(html, status_code=status_code)


@router.get("/", response_class=HTMLResponse, summary="Listing and search page")
async def home(
    q: Optional[str] = Query(default=None, description="Free-text search"),
    submitted: Optional[str] = Query(default=None, description="Set to 1 after a submission"),
    repository: EntryRepository = Depends(get_entry_repository),
) -> HTMLResponse:
    query = sanitize_query(q)
    entries = await repository.query(query)
    total = await repository.count()
    html = render_home_page(
        entries,
        total,
        query=query,
        submitted=submitted == "1",
        version=SchemaVersion(settings.entry_schema_version),
    )
    return HTMLResponse(html)


@router.post("/entries", response_class=HTMLResponse, summary="Submit an entry from the form")
async def submit_entry_form(
    url: str = Form(default=""),
    note: str = Form(default=""),
    context: str = Form(default=""),
    slide_url: str = Form(default="", alias="slideUrl"),
    tags: str = Form(default=""),
    repository: EntryRepository = Depends(get_entry_repository),
):
    defaults = {
        "url": url,
        "note": note,
        "context": context,
        "slideUrl": slide_url,
        "tags": tags,
    }

    try:
        data = validate_entry_input(defaults, SchemaVersion(settings.entry_schema_version))
    except ValidationError as e:
        logger.info("Form submission rejected (%s): %s", e.field, e.message)
        return await _render_with_error(repository, e.message, defaults, status_code=400)

    try:
        await repository.insert_input(data)
    except Exception:
        logger.error(
            "[%s] Failed to store form submission",
            request_id_var.get(""),
            exc_info=True,
        )
        return await _render_with_error(repository, MSG_SAVE_FAILED, defaults, status_code=500)

    return RedirectResponse(url="/?submitted=1", status_code=303)
