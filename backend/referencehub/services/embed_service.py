"""
ReferenceHub Backend — Embed Fetcher (oEmbed)
=============================================

What:  Looks up an embeddable HTML snippet for social-media status posts.
How:   URLs are matched against a fixed pattern (http/https, allow-listed
       host, `/<handle>/status/<numeric-id>` path). Matching URLs trigger a
       single GET to the configured oEmbed endpoint; anything else returns
       immediately without network access.
Who:   Entry repository (best-effort enrichment at creation time) and the
       GET /api/oembed proxy route.

Failure Handling:
    fetch_oembed()      raises EmbedServiceError on any provider failure
    fetch_embed_html()  collapses every failure to None and logs a warning;
                        entry creation never fails because of the provider
"""

import logging
import re
import time
import uuid
from typing import Any, Callable, Dict, Iterable, Optional
from urllib.parse import urlsplit

import httpx

from referencehub.config import settings
from referencehub.exceptions import EmbedServiceError

logger = logging.getLogger(__name__)

# /<handle>/status/<numeric-id>, optionally followed by a single slash
STATUS_PATH_PATTERN = re.compile(r"^/[A-Za-z0-9_]{1,50}/status/\d+/?$")


class EmbedService:
    """
    oEmbed client for status-post URLs.

    Args:
        endpoint: oEmbed endpoint URL.
        max_width: Value sent as the `maxwidth` parameter.
        timeout: Request timeout in seconds.
        hosts: Lowercase hostnames whose status URLs are embeddable.
        client_factory: Builds the httpx.AsyncClient per call; tests pass one
                        wired to an `httpx.MockTransport`.
    """

    def __init__(
        self,
        endpoint: Optional[str] = None,
        max_width: Optional[int] = None,
        timeout: Optional[float] = None,
        hosts: Optional[Iterable[str]] = None,
        client_factory: Optional[Callable[[], httpx.AsyncClient]] = None,
    ):
        self.endpoint = endpoint or settings.oembed_endpoint
        self.max_width = max_width or settings.oembed_max_width
        self.timeout = timeout or settings.oembed_timeout
        self.hosts = frozenset(
            host.lower() for host in (hosts if hosts is not None else settings.embed_hosts_list)
        )
        self._client_factory = client_factory or self._default_client

    def _default_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout)

    def is_embeddable(self, url: str) -> bool:
        """True when `url` is a status-post URL on an allow-listed host."""
        try:
            parts = urlsplit(url)
        except ValueError:
            return False
        if parts.scheme not in ("http", "https"):
            return False
        if (parts.hostname or "") not in self.hosts:
            return False
        return bool(STATUS_PATH_PATTERN.match(parts.path))

    async def fetch_oembed(self, url: str) -> Dict[str, Any]:
        """
        Call the oEmbed endpoint once for `url`.

        Returns:
            The decoded JSON object from the provider.

        Raises:
            EmbedServiceError: Network failure, non-2xx status, or a body that
                               is not a JSON object.
        """
        request_id = str(uuid.uuid4())[:8]
        start_time = time.perf_counter()
        params = {"url": url, "maxwidth": str(self.max_width)}

        try:
            async with self._client_factory() as client:
                response = await client.get(self.endpoint, params=params)
        except httpx.HTTPError as e:
            logger.warning("[%s] oEmbed request failed: %s", request_id, str(e))
            raise EmbedServiceError(
                context={"request_id": request_id, "error_type": type(e).__name__},
            ) from e

        duration_ms = (time.perf_counter() - start_time) * 1000

        if not response.is_success:
            logger.warning(
                "[%s] oEmbed provider returned %d after %.0fms",
                request_id,
                response.status_code,
                duration_ms,
            )
            raise EmbedServiceError(
                status_code=response.status_code,
                context={"request_id": request_id},
            )

        try:
            payload = response.json()
        except ValueError as e:
            logger.warning("[%s] oEmbed response was not JSON", request_id)
            raise EmbedServiceError(context={"request_id": request_id}) from e

        if not isinstance(payload, dict):
            raise EmbedServiceError(context={"request_id": request_id, "payload_type": type(payload).__name__})

        logger.info("[%s] oEmbed lookup completed in %.0fms", request_id, duration_ms)
        return payload

    async def fetch_embed_html(self, url: str) -> Optional[str]:
        """
        Best-effort embed snippet for `url`.

        Returns:
            The provider's `html` field, or None when the URL is not
            embeddable, the provider failed, or the field is missing.
        """
        if not self.is_embeddable(url):
            return None
        try:
            payload = await self.fetch_oembed(url)
        except EmbedServiceError as e:
            logger.warning("Embed lookup skipped for %s: %s", url, e.message)
            return None
        html = payload.get("html")
        if isinstance(html, str) and html.strip():
            return html
        return None


# ── Singleton Instance ────────────────────────────────────────────────────
embed_service = EmbedService()
