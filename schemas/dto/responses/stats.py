"""
Response DTO for the statistics endpoint.

StatsResponse — GET /api/stats/{short_code}  (200)

Breakdowns are label → count mappings. ``top`` holds ranked
``[label, count]`` pairs per breakdown, capped at the configured top-N.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from services.link_service import LinkStats


class StatsTimeRange(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    start: Optional[datetime] = None
    end: Optional[datetime] = None


class StatsResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    short_code: str
    original_url: str
    platform: str
    total_clicks: int
    created_at: datetime
    time_range: StatsTimeRange

    total: int
    clicks_by_day: dict[str, int]
    device_breakdown: dict[str, int]
    browser_breakdown: dict[str, int]
    os_breakdown: dict[str, int]
    country_breakdown: dict[str, int]
    hourly_distribution: list[int]
    app_open_rate: float
    top: dict[str, list[tuple[str, int]]]

    @classmethod
    def build(
        cls,
        result: LinkStats,
        top_n: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> "StatsResponse":
        link, stats = result.link, result.stats
        return cls(
            short_code=link.short_code,
            original_url=link.original_url,
            platform=link.platform,
            total_clicks=link.clicks,
            created_at=link.created_at,
            time_range=StatsTimeRange(start=start, end=end),
            total=stats.total,
            clicks_by_day=stats.clicks_by_day,
            device_breakdown=stats.device_breakdown,
            browser_breakdown=stats.browser_breakdown,
            os_breakdown=stats.os_breakdown,
            country_breakdown=stats.country_breakdown,
            hourly_distribution=list(stats.hourly_distribution),
            app_open_rate=stats.app_open_rate,
            top=stats.top(top_n),
        )
