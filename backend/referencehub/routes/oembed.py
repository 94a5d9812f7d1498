"""
ReferenceHub Backend — oEmbed Proxy Route
=========================================

What:  GET /api/oembed?url=... returns the embed HTML for a status-post URL.
How:   The URL is normalized and checked against the embed pattern before
       any outbound call; provider failures surface as 502.
Who:   Front-end code that previews an embed before submission.
"""

from fastapi import APIRouter, Depends, Query

from referencehub.dependencies import get_embed_service
from referencehub.exceptions import EmbedServiceError, UrlParseError, ValidationError
from referencehub.schemas.entry import ErrorResponse, OEmbedResponse
from referencehub.services.embed_service import EmbedService
from referencehub.services.url_normalizer import normalize_url

router = APIRouter(prefix="/api", tags=["oEmbed"])

MSG_NOT_EMBEDDABLE = "Only status-post URLs can be embedded."


@router.get(
    "/oembed",
    response_model=OEmbedResponse,
    responses={
        400: {"description": "URL is missing or not embeddable", "model": ErrorResponse},
        502: {"description": "The oEmbed provider failed", "model": ErrorResponse},
    },
    summary="Fetch embed HTML for a status-post URL",
)
async def oembed_proxy(
    url: str = Query(default="", description="Status-post URL"),
    embedder: EmbedService = Depends(get_embed_service),
) -> OEmbedResponse:
    try:
        normalized = normalize_url(url).url
    except UrlParseError:
        raise ValidationError(message=MSG_NOT_EMBEDDABLE, field="url")

    if not embedder.is_embeddable(normalized):
        raise ValidationError(message=MSG_NOT_EMBEDDABLE, field="url")

    payload = await embedder.fetch_oembed(normalized)
    html = payload.get("html")
    if not isinstance(html, str) or not html.strip():
        raise EmbedServiceError(
            message="The embed provider returned no HTML.",
            context={"url": normalized},
        )
    return OEmbedResponse(url=normalized, html=html)
