"""
Response DTOs for link endpoints.

Field names are exposed in camelCase (``shortUrl``, ``originalUrl``, ...).
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from schemas.dto.responses.common import PaginationMeta
from schemas.models.link import ShortLinkDoc


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ShortenResponse(CamelModel):
    """Response body for POST /api/shorten."""

    success: bool = True
    short_url: str
    original_url: str
    platform: str
    short_code: str


class LinkSummary(CamelModel):
    """A link as shown in listings (no embedded visits)."""

    short_code: str
    original_url: str
    platform: str
    clicks: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_doc(cls, doc: ShortLinkDoc) -> "LinkSummary":
        return cls(
            short_code=doc.short_code,
            original_url=doc.original_url,
            platform=doc.platform,
            clicks=doc.clicks,
            created_at=doc.created_at,
            updated_at=doc.updated_at,
        )


class LinkListResponse(CamelModel):
    """Response body for GET /api/links."""

    success: bool = True
    links: list[LinkSummary]
    pagination: PaginationMeta


class PlatformListResponse(CamelModel):
    """Response body for GET /api/platforms."""

    success: bool = True
    platforms: list[str]
