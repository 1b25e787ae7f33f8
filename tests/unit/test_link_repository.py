"""Unit tests for the MongoDB link repository (collection mocked)."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import DuplicateKeyError

from errors import ConflictError
from factories import make_visit, utc
from repositories.link_repository import LinkRepository
from schemas.models.link import ShortLinkDoc


def _raw_link(**overrides) -> dict:
    base = {
        "_id": ObjectId(),
        "short_code": "abc1234",
        "original_url": "https://youtu.be/abc",
        "platform": "youtube",
        "clicks": 0,
        "created_at": utc(2024, 1, 1),
        "updated_at": utc(2024, 1, 1),
        "visits": [],
    }
    base.update(overrides)
    return base


def _fake_collection() -> MagicMock:
    col = MagicMock()
    col.find_one = AsyncMock(return_value=None)
    col.insert_one = AsyncMock()
    col.update_one = AsyncMock()
    col.delete_one = AsyncMock()
    col.count_documents = AsyncMock(return_value=0)
    col.create_index = AsyncMock()
    return col


@pytest.fixture
def col():
    return _fake_collection()


@pytest.fixture
def repo(col):
    return LinkRepository(col)


class TestEnsureIndexes:
    async def test_creates_unique_short_code_index(self, repo, col):
        await repo.ensure_indexes()
        col.create_index.assert_any_await([("short_code", ASCENDING)], unique=True)
        col.create_index.assert_any_await([("created_at", DESCENDING)])
        col.create_index.assert_any_await([("platform", ASCENDING)])


class TestFindByShortCode:
    async def test_returns_none_when_missing(self, repo, col):
        assert await repo.find_by_short_code("nope") is None
        col.find_one.assert_awaited_once_with({"short_code": "nope"})

    async def test_returns_model(self, repo, col):
        raw = _raw_link(
            clicks=1,
            visits=[make_visit(utc(2024, 1, 2, 9)).model_dump()],
        )
        col.find_one.return_value = raw
        link = await repo.find_by_short_code("abc1234")
        assert isinstance(link, ShortLinkDoc)
        assert link.id == raw["_id"]
        assert link.clicks == 1
        assert link.visits[0].browser == "Mobile Safari"

    async def test_naive_dates_from_driver_become_utc(self, repo, col):
        from datetime import datetime

        col.find_one.return_value = _raw_link(created_at=datetime(2024, 1, 1, 5))
        link = await repo.find_by_short_code("abc1234")
        assert link.created_at == utc(2024, 1, 1, 5)


class TestCreate:
    async def test_inserts_and_sets_id(self, repo, col):
        new_id = ObjectId()
        col.insert_one.return_value = MagicMock(inserted_id=new_id)
        link = ShortLinkDoc(
            short_code="abc1234", original_url="https://youtu.be/abc", platform="youtube"
        )
        created = await repo.create(link)
        assert created.id == new_id
        inserted = col.insert_one.call_args[0][0]
        assert "_id" not in inserted
        assert inserted["short_code"] == "abc1234"
        assert inserted["clicks"] == 0
        assert inserted["visits"] == []

    async def test_duplicate_key_raises_conflict(self, repo, col):
        col.insert_one.side_effect = DuplicateKeyError("E11000 duplicate key")
        link = ShortLinkDoc(
            short_code="taken", original_url="https://youtu.be/abc", platform="youtube"
        )
        with pytest.raises(ConflictError) as exc:
            await repo.create(link)
        assert exc.value.field == "short_code"

    async def test_other_errors_propagate(self, repo, col):
        col.insert_one.side_effect = RuntimeError("connection lost")
        link = ShortLinkDoc(
            short_code="x", original_url="https://youtu.be/abc", platform="youtube"
        )
        with pytest.raises(RuntimeError):
            await repo.create(link)


class TestAppendVisitAndIncrement:
    async def test_single_atomic_update(self, repo, col):
        col.update_one.return_value = MagicMock(matched_count=1)
        visit = make_visit(utc(2024, 1, 2, 9))
        now = utc(2024, 1, 2, 9, 0, 1)

        assert await repo.append_visit_and_increment("abc1234", visit, now=now) is True

        col.update_one.assert_awaited_once()
        query, update = col.update_one.call_args[0]
        assert query == {"short_code": "abc1234"}
        assert update["$push"] == {"visits": visit.model_dump()}
        assert update["$inc"] == {"clicks": 1}
        assert update["$set"] == {"updated_at": now}

    async def test_returns_false_when_missing(self, repo, col):
        col.update_one.return_value = MagicMock(matched_count=0)
        assert await repo.append_visit_and_increment("nope", make_visit(utc(2024, 1, 1))) is False


class TestDelete:
    @pytest.mark.parametrize("deleted, expected", [(1, True), (0, False)])
    async def test_delete(self, repo, col, deleted, expected):
        col.delete_one.return_value = MagicMock(deleted_count=deleted)
        assert await repo.delete("abc1234") is expected
        col.delete_one.assert_awaited_once_with({"short_code": "abc1234"})


class TestListPage:
    async def test_paginates_newest_first_without_visits(self, repo, col):
        cursor = MagicMock()
        cursor.sort.return_value = cursor
        cursor.skip.return_value = cursor
        cursor.limit.return_value = cursor
        cursor.to_list = AsyncMock(
            return_value=[_raw_link(short_code="b"), _raw_link(short_code="a")]
        )
        col.find.return_value = cursor
        col.count_documents.return_value = 12

        items, total = await repo.list_page(page=2, page_size=5)

        col.find.assert_called_once_with({}, {"visits": 0})
        cursor.sort.assert_called_once_with("created_at", DESCENDING)
        cursor.skip.assert_called_once_with(5)
        cursor.limit.assert_called_once_with(5)
        assert [i.short_code for i in items] == ["b", "a"]
        assert total == 12
