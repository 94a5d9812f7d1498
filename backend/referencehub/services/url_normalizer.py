"""
ReferenceHub Backend — URL Normalizer
=====================================

What:  Canonicalizes a raw URL string and extracts its hostname.
How:   Parses with pydantic's `AnyUrl`, which follows the WHATWG URL rules:
       scheme and host are lowercased, default ports dropped, and an empty
       path on http(s) URLs becomes "/".
Who:   Called by the validator (to screen input) and by the entry repository
       (as the single source of truth for `url` and `hostname`).

Examples:
    "  HTTPS://Example.COM:443/a?b=1 " → ("https://example.com/a?b=1", "example.com")
    "https://a.com"                    → ("https://a.com/", "a.com")
    "not a url"                        → UrlParseError
"""

from typing import NamedTuple

from pydantic import AnyUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from referencehub.exceptions import UrlParseError

_URL_ADAPTER = TypeAdapter(AnyUrl)


class NormalizedUrl(NamedTuple):
    """Canonical URL string plus its hostname ("" for host-less schemes)."""
    url: str
    hostname: str


def normalize_url(raw: str) -> NormalizedUrl:
    """
    Trim, parse, and canonicalize `raw`.

    Raises:
        UrlParseError: `raw` is not a syntactically valid absolute URL.
    """
    candidate = raw.strip() if isinstance(raw, str) else ""
    try:
        parsed = _URL_ADAPTER.validate_python(candidate)
    except PydanticValidationError as exc:
        raise UrlParseError(raw_url=candidate) from exc
    return NormalizedUrl(url=str(parsed), hostname=parsed.host or "")


def is_valid_url(raw: str) -> bool:
    """True when `raw` parses as an absolute URL."""
    try:
        normalize_url(raw)
    except UrlParseError:
        return False
    return True
