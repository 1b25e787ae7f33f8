"""
Click analytics aggregation.

``aggregate`` folds a sequence of visit records into ``AggregatedStats`` in a
single pass. Day buckets use the UTC calendar date; hour buckets use the hour
of the timestamp as stored (records are written in UTC).

``app_open_rate`` is always a float percentage rounded to two decimals, and
``0.0`` when there are no records.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Mapping, Sequence

from schemas.models.link import VisitRecord
from shared.datetime_utils import ensure_utc

HOURS_PER_DAY = 24


@dataclass(frozen=True)
class AggregatedStats:
    total: int = 0
    clicks_by_day: dict[str, int] = field(default_factory=dict)
    device_breakdown: dict[str, int] = field(default_factory=dict)
    browser_breakdown: dict[str, int] = field(default_factory=dict)
    os_breakdown: dict[str, int] = field(default_factory=dict)
    country_breakdown: dict[str, int] = field(default_factory=dict)
    hourly_distribution: tuple[int, ...] = (0,) * HOURS_PER_DAY
    app_open_rate: float = 0.0

    def top(self, n: int = 5) -> dict[str, list[tuple[str, int]]]:
        """Top-*n* rankings for every categorical breakdown."""
        return {
            "browsers": get_top_n(self.browser_breakdown, n),
            "os": get_top_n(self.os_breakdown, n),
            "devices": get_top_n(self.device_breakdown, n),
            "countries": get_top_n(self.country_breakdown, n),
        }


def _bump(counts: dict[str, int], key: str) -> None:
    counts[key] = counts.get(key, 0) + 1


def aggregate(records: Iterable[VisitRecord]) -> AggregatedStats:
    total = 0
    app_opens = 0
    clicks_by_day: dict[str, int] = {}
    devices: dict[str, int] = {}
    browsers: dict[str, int] = {}
    systems: dict[str, int] = {}
    countries: dict[str, int] = {}
    hourly = [0] * HOURS_PER_DAY

    for record in records:
        total += 1
        ts = record.timestamp

        day = ensure_utc(ts).date().isoformat()
        _bump(clicks_by_day, day)

        _bump(devices, record.device)
        if record.browser:
            _bump(browsers, record.browser)
        if record.os:
            _bump(systems, record.os)
        if record.country:
            _bump(countries, record.country)

        hourly[ts.hour] += 1

        if record.app_opened:
            app_opens += 1

    rate = round(app_opens / total * 100, 2) if total else 0.0

    return AggregatedStats(
        total=total,
        clicks_by_day=clicks_by_day,
        device_breakdown=devices,
        browser_breakdown=browsers,
        os_breakdown=systems,
        country_breakdown=countries,
        hourly_distribution=tuple(hourly),
        app_open_rate=rate,
    )


def get_top_n(counts: Mapping[str, int], n: int = 5) -> list[tuple[str, int]]:
    """Rank *counts* by value, highest first.

    Ties keep the mapping's insertion order. Returns at most *n* pairs; a
    non-positive *n* returns an empty list.
    """
    if n <= 0:
        return []
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return ranked[:n]


def filter_by_date_range(
    records: Sequence[VisitRecord], start: datetime, end: datetime
) -> AggregatedStats:
    """Aggregate only the records with ``start <= timestamp <= end``.

    Naive bounds are treated as UTC.
    """
    start_utc = ensure_utc(start)
    end_utc = ensure_utc(end)
    return aggregate(
        r for r in records if start_utc <= ensure_utc(r.timestamp) <= end_utc
    )
