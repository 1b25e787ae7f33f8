"""
Request DTOs for link shortening, listing and stats endpoints.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from shared.datetime_utils import parse_datetime


class ShortenRequest(BaseModel):
    """Request body for POST /api/shorten.

    ``url`` is optional at the schema level so that a missing value reaches the
    service and produces the standard "URL is required" error.
    """

    model_config = ConfigDict(populate_by_name=True)

    url: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("url", "originalUrl", "long_url")
    )


class ListLinksQuery(BaseModel):
    """Query parameters for GET /api/links."""

    page: int = Field(default=1, ge=1)
    limit: Optional[int] = Field(default=None, ge=1)


class StatsQuery(BaseModel):
    """Query parameters for GET /api/stats/{short_code}.

    ``start`` / ``end`` accept ISO 8601 strings or Unix epoch seconds.
    """

    start: Optional[datetime] = None
    end: Optional[datetime] = None

    @field_validator("start", "end", mode="before")
    @classmethod
    def _parse_bound(cls, v: Any) -> Any:
        if v is None or v == "":
            return None
        if isinstance(v, str) and v.isdigit():
            v = int(v)
        parsed = parse_datetime(v)
        if parsed is None:
            raise ValueError("must be an ISO 8601 date/time or epoch seconds")
        return parsed
