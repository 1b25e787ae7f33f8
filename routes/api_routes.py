"""
JSON API for link management.

POST   /api/shorten               — create a short link
GET    /api/stats/{short_code}    — aggregated click analytics
GET    /api/links                 — paginated listing, newest first
DELETE /api/links/{short_code}    — delete a link
GET    /api/platforms             — supported platform names
"""

from __future__ import annotations

import math
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from config import AppSettings
from dependencies import get_link_service, get_settings
from schemas.dto.requests.link import ListLinksQuery, ShortenRequest, StatsQuery
from schemas.dto.responses.common import ErrorResponse, MessageResponse, PaginationMeta
from schemas.dto.responses.link import (
    LinkListResponse,
    LinkSummary,
    PlatformListResponse,
    ShortenResponse,
)
from schemas.dto.responses.stats import StatsResponse
from services.link_service import LinkService

router = APIRouter(prefix="/api", tags=["links"])

_ERRORS = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
}


def build_short_url(settings: AppSettings, request: Request, short_code: str) -> str:
    base = settings.domain or str(request.base_url).rstrip("/")
    return f"{base}/{short_code}"


@router.post("/shorten", response_model=ShortenResponse, responses=_ERRORS)
async def shorten(
    body: ShortenRequest,
    request: Request,
    service: LinkService = Depends(get_link_service),
    settings: AppSettings = Depends(get_settings),
) -> ShortenResponse:
    """
    Create a shortened link for a supported platform URL.

    ## Request Body (JSON)
    - **url** (string, required): a YouTube or Instagram URL

    ## Errors
    - **400 validation_error**: `url` missing or empty
    - **400 unsupported_platform**: no platform recognises the URL
    - **409 conflict**: no unique short code could be generated
    """
    link = await service.shorten(body.url)
    return ShortenResponse(
        short_url=build_short_url(settings, request, link.short_code),
        original_url=link.original_url,
        platform=link.platform,
        short_code=link.short_code,
    )


@router.get("/stats/{short_code}", response_model=StatsResponse, responses=_ERRORS)
async def link_stats(
    short_code: str,
    query: Annotated[StatsQuery, Query()],
    service: LinkService = Depends(get_link_service),
    settings: AppSettings = Depends(get_settings),
) -> StatsResponse:
    """Click analytics for one link, optionally limited to ``start``..``end``."""
    result = await service.get_stats(short_code, query.start, query.end)
    return StatsResponse.build(result, settings.top_n, query.start, query.end)


@router.get("/links", response_model=LinkListResponse, responses=_ERRORS)
async def list_links(
    query: Annotated[ListLinksQuery, Query()],
    service: LinkService = Depends(get_link_service),
    settings: AppSettings = Depends(get_settings),
) -> LinkListResponse:
    limit = min(query.limit or settings.default_page_size, settings.max_page_size)
    links, total = await service.list_links(query.page, limit)
    return LinkListResponse(
        links=[LinkSummary.from_doc(link) for link in links],
        pagination=PaginationMeta(
            page=query.page,
            limit=limit,
            total=total,
            pages=math.ceil(total / limit),
        ),
    )


@router.delete("/links/{short_code}", response_model=MessageResponse, responses=_ERRORS)
async def delete_link(
    short_code: str,
    service: LinkService = Depends(get_link_service),
) -> MessageResponse:
    await service.delete(short_code)
    return MessageResponse(success=True, message="Link deleted successfully")


@router.get("/platforms", response_model=PlatformListResponse)
async def list_platforms(
    service: LinkService = Depends(get_link_service),
) -> PlatformListResponse:
    return PlatformListResponse(platforms=service.platforms())
