"""
Link service — shorten, visit, stats, list and delete.

Sits between the HTTP routes and the repository. Platform resolution and
analytics are delegated to the pure helpers in ``services.platform_resolver``
and ``services.analytics``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from errors import ConflictError, NotFoundError, UnsupportedPlatformError, ValidationError
from repositories.link_repository import LinkRepository
from schemas.models.link import ShortLinkDoc
from services.analytics import AggregatedStats, aggregate, filter_by_date_range
from services.platform_resolver import PlatformRegistry, ResolvedLink
from services.visit_recorder import build_visit_record
from shared.bot_detection import get_bot_name
from shared.generators import generate_short_code
from shared.logging import get_logger, hash_ip, should_sample

log = get_logger(__name__)


@dataclass(frozen=True)
class VisitOutcome:
    link: ShortLinkDoc
    # None when the stored URL no longer matches a registered platform
    resolved: Optional[ResolvedLink]


@dataclass(frozen=True)
class LinkStats:
    link: ShortLinkDoc
    stats: AggregatedStats


class LinkService:
    def __init__(
        self,
        repository: LinkRepository,
        registry: PlatformRegistry,
        *,
        code_generator: Callable[[int], str] = generate_short_code,
        short_code_length: int = 7,
        max_attempts: int = 5,
    ) -> None:
        self._repo = repository
        self._registry = registry
        self._generate = code_generator
        self._code_length = short_code_length
        self._max_attempts = max(1, max_attempts)

    async def shorten(self, url: Optional[str]) -> ShortLinkDoc:
        """Create a short link for a supported platform URL.

        Raises:
            ValidationError: *url* is missing or blank.
            UnsupportedPlatformError: no platform rule matches.
            ConflictError: every generated code collided.
        """
        if url is None or not url.strip():
            raise ValidationError("URL is required", field="url")
        url = url.strip()

        resolved = self._registry.resolve(url)
        if resolved is None:
            supported = ", ".join(self._registry.names())
            raise UnsupportedPlatformError(
                f"Unsupported platform. Currently supporting: {supported}.",
                field="url",
            )

        for attempt in range(1, self._max_attempts + 1):
            link = ShortLinkDoc(
                short_code=self._generate(self._code_length),
                original_url=url,
                platform=resolved.platform,
            )
            try:
                created = await self._repo.create(link)
            except ConflictError:
                log.warning(
                    "short_code_collision",
                    short_code=link.short_code,
                    attempt=attempt,
                )
                continue
            log.info(
                "link_created",
                short_code=created.short_code,
                platform=created.platform,
            )
            return created

        log.error("short_code_attempts_exhausted", attempts=self._max_attempts)
        raise ConflictError("Could not generate a unique short code, please retry")

    async def record_visit(
        self, short_code: str, user_agent: Optional[str], ip: str
    ) -> VisitOutcome:
        """Record one visit and resolve the link's deep link.

        Raises:
            NotFoundError: no link has *short_code*.
        """
        link = await self._repo.find_by_short_code(short_code)
        if link is None:
            raise NotFoundError("Link not found")

        visit = build_visit_record(user_agent, ip)
        if not await self._repo.append_visit_and_increment(short_code, visit):
            # Deleted between the lookup and the update
            raise NotFoundError("Link not found")

        if should_sample("url_redirect"):
            log.info(
                "link_visit_recorded",
                short_code=short_code,
                browser=visit.browser,
                os=visit.os,
                bot_name=get_bot_name(user_agent),
                ip_hash=hash_ip(ip),
            )

        return VisitOutcome(link=link, resolved=self._registry.resolve(link.original_url))

    async def get_stats(
        self,
        short_code: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> LinkStats:
        """Aggregate a link's visits, optionally restricted to [start, end].

        A missing bound leaves that side of the range open.
        """
        link = await self._repo.find_by_short_code(short_code)
        if link is None:
            raise NotFoundError("Link not found")

        if start is None and end is None:
            stats = aggregate(link.visits)
        else:
            stats = filter_by_date_range(
                link.visits,
                start or datetime.min,
                end or datetime.max,
            )

        if should_sample("stats_query"):
            log.info("stats_query", short_code=short_code, total=stats.total)
        return LinkStats(link=link, stats=stats)

    async def list_links(
        self, page: int, page_size: int
    ) -> tuple[list[ShortLinkDoc], int]:
        if page < 1 or page_size < 1:
            raise ValidationError("page and limit must be positive integers")
        return await self._repo.list_page(page, page_size)

    async def delete(self, short_code: str) -> None:
        if not await self._repo.delete(short_code):
            raise NotFoundError("Link not found")
        log.info("link_deleted", short_code=short_code)

    def platforms(self) -> list[str]:
        return self._registry.names()
