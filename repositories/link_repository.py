"""
MongoDB repository for short links.

Wraps an async pymongo collection. Every method either returns a typed result
or raises; driver errors other than duplicate keys propagate to the caller.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pymongo import ASCENDING, DESCENDING
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import DuplicateKeyError

from errors import ConflictError
from schemas.models.link import ShortLinkDoc, VisitRecord
from shared.datetime_utils import utcnow
from shared.logging import get_logger

log = get_logger(__name__)


class LinkRepository:
    def __init__(self, collection: AsyncCollection) -> None:
        self._col = collection

    async def ensure_indexes(self) -> None:
        await self._col.create_index([("short_code", ASCENDING)], unique=True)
        await self._col.create_index([("created_at", DESCENDING)])
        await self._col.create_index([("platform", ASCENDING)])

    async def find_by_short_code(self, short_code: str) -> Optional[ShortLinkDoc]:
        doc = await self._col.find_one({"short_code": short_code})
        return ShortLinkDoc.from_mongo(doc)

    async def create(self, link: ShortLinkDoc) -> ShortLinkDoc:
        """Insert *link*; raises ``ConflictError`` if the short code is taken."""
        try:
            result = await self._col.insert_one(link.to_mongo())
        except DuplicateKeyError as e:
            log.info("short_code_taken", short_code=link.short_code)
            raise ConflictError(
                "Short code already exists", field="short_code"
            ) from e
        return link.model_copy(update={"id": result.inserted_id})

    async def append_visit_and_increment(
        self,
        short_code: str,
        visit: VisitRecord,
        *,
        now: Optional[datetime] = None,
    ) -> bool:
        """Push *visit* and bump ``clicks`` in one update.

        Returns False when no link has *short_code*.
        """
        result = await self._col.update_one(
            {"short_code": short_code},
            {
                "$push": {"visits": visit.model_dump()},
                "$inc": {"clicks": 1},
                "$set": {"updated_at": now or utcnow()},
            },
        )
        return result.matched_count > 0

    async def delete(self, short_code: str) -> bool:
        result = await self._col.delete_one({"short_code": short_code})
        return result.deleted_count > 0

    async def list_page(
        self, page: int, page_size: int
    ) -> tuple[list[ShortLinkDoc], int]:
        """Return one page of links, newest first, without embedded visits.

        ``page`` is 1-based.
        """
        skip = (page - 1) * page_size
        cursor = (
            self._col.find({}, {"visits": 0})
            .sort("created_at", DESCENDING)
            .skip(skip)
            .limit(page_size)
        )
        docs = await cursor.to_list(length=page_size)
        total = await self._col.count_documents({})
        return [ShortLinkDoc.from_mongo(d) for d in docs], total
