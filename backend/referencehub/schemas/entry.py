"""
ReferenceHub Backend — Pydantic Request/Response Schemas
========================================================

What:  Pydantic models for validated input, entry values, and API payloads.
How:   FastAPI serializes response models by alias, so the JSON API speaks
       camelCase (`slideUrl`, `createdAt`, `tweetEmbedHtml`) while Python
       code uses snake_case attributes.
Who:   Returned by the entry repository and the route handlers.

Schemas are separate from the SQLAlchemy model: the archival flags
(`synced_to_notion`, `synced_at`) exist only in the table and are never
exposed here.
"""

from enum import IntEnum
from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

MAX_TAGS = 5
MAX_TAG_LENGTH = 20


class SchemaVersion(IntEnum):
    """
    Released shapes of an entry submission.

    LEGACY:  url + required note + tags
    CURRENT: url + optional note + required context + optional slideUrl + tags
    """
    LEGACY = 1
    CURRENT = 2


# ══════════════════════════════════════════════════════════════════════════
# Domain Values: immutable records passed between services
# ══════════════════════════════════════════════════════════════════════════


class EntryInput(BaseModel):
    """
    What:  A submission that passed validation.
    Who:   Produced by `validate_entry_input`, consumed by the repository.

    Strings are trimmed; optional fields that were empty are None.
    """
    url: str
    note: Optional[str] = None
    context: Optional[str] = None
    slide_url: Optional[str] = None
    tags: List[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class EntryResponse(BaseModel):
    """
    What:  A stored entry as seen by every caller.
    Who:   Returned by the repository, GET/POST /api/entries, and the page view.

    `note`, `context`, `slide_url` and `tweet_embed_html` are None when
    absent, never an empty string.
    """
    id: str = Field(description="Unique entry identifier (UUID4)")
    url: str = Field(description="Normalized absolute URL")
    note: Optional[str] = Field(default=None, description="Free-text annotation")
    context: Optional[str] = Field(default=None, description="How or where the URL was used")
    slide_url: Optional[str] = Field(default=None, description="Normalized URL of related slides")
    hostname: str = Field(description="Hostname derived from url")
    tags: List[Annotated[str, Field(max_length=MAX_TAG_LENGTH)]] = Field(
        default_factory=list,
        max_length=MAX_TAGS,
        description="Up to 5 tags, each ≤20 characters",
    )
    created_at: str = Field(description="Creation time, ISO 8601 UTC")
    tweet_embed_html: Optional[str] = Field(
        default=None,
        description="Embed snippet fetched once at creation for status-post URLs",
    )

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


# ══════════════════════════════════════════════════════════════════════════
# API Payloads
# ══════════════════════════════════════════════════════════════════════════


class EntryListResponse(BaseModel):
    """
    What:  Response of GET /api/entries.

    `total` is the grand total of stored entries regardless of the search;
    `count` is the number of entries in this response.
    """
    total: int = Field(description="Total number of stored entries")
    count: int = Field(description="Number of entries returned")
    entries: List[EntryResponse] = Field(description="Entries, newest first")


class OEmbedResponse(BaseModel):
    """Response of GET /api/oembed."""
    url: str = Field(description="Normalized status-post URL")
    html: str = Field(description="Embed HTML returned by the provider")


class ErrorResponse(BaseModel):
    """
    What:  Error body shared by every JSON endpoint.

    Example:
        {"error": "Please enter a URL.", "field": "url", "request_id": "a1b2c3d4"}
    """
    error: str = Field(description="Human-readable error description")
    field: Optional[str] = Field(default=None, description="Offending input field")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """
    What:  Health check response showing service and dependency status.
    Who:   Returned by GET /health for monitoring and load balancer checks.
    """
    status: str = Field(description="Overall service status: healthy, degraded")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected, disabled")
    fallback_entries: int = Field(description="Entries held only in process memory")
    uptime_seconds: float = Field(description="Seconds since service started")
