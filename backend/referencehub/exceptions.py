"""
ReferenceHub Backend — Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions for the different failure scenarios.
How:   Each exception carries a user-facing message and an optional context
       dict. Global handlers (registered in main.py) turn them into JSON
       error responses with the matching HTTP status code.
Who:   Raised by services; caught by global handlers or by the HTML routes.

Exception Hierarchy:
    ReferenceHubError (base)
    ├── ValidationError     → 400 Bad Request (client can fix)
    ├── UrlParseError       → 500 Internal Server Error (after validation)
    ├── EmbedServiceError   → 502 Bad Gateway (oEmbed provider failed)
    └── StorageError        → 500 Internal Server Error
"""

from typing import Any, Dict, Optional

# Generic 500 text for failures the client cannot fix
MSG_STORAGE_FAILURE = "Saving failed. Please try again later."


class ReferenceHubError(Exception):
    """
    Base exception for all ReferenceHub application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(ReferenceHubError):
    """
    Raised when submitted entry fields fail validation.

    What:    The first violated rule for a submission, with the offending field.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "Please enter the URL in a valid format.",
            "field": "url",
            "request_id": "a1b2c3d4"
        }
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class UrlParseError(ReferenceHubError):
    """
    Raised by the URL normalizer for input that is not a valid absolute URL.

    At the request boundary the validator turns this into a ValidationError.
    If it escapes from the repository the validator was bypassed, so the
    global handler answers with a generic 500.
    """

    def __init__(
        self,
        raw_url: str = "",
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["raw_url"] = raw_url[:200]
        super().__init__(message=f"Could not parse URL: {raw_url[:200]!r}", context=ctx)
        self.raw_url = raw_url


class EmbedServiceError(ReferenceHubError):
    """
    Raised when the oEmbed provider call fails.

    What:    Non-2xx response, network failure, or an unreadable JSON body.
    HTTP:    502 Bad Gateway (only reachable through /api/oembed; entry
             creation collapses this error to "no embed").
    """

    def __init__(
        self,
        message: str = "The embed provider is currently unavailable.",
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if status_code is not None:
            ctx["status_code"] = status_code
        super().__init__(message=message, context=ctx)
        self.status_code = status_code


class StorageError(ReferenceHubError):
    """
    Raised when both the durable store and its fallback fail.

    The message returned to the client is always generic; details are
    logged server-side only.
    """

    def __init__(
        self,
        message: str = MSG_STORAGE_FAILURE,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
