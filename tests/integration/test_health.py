"""Integration tests for GET /health."""

from unittest.mock import AsyncMock, MagicMock

from fastapi.testclient import TestClient

from factories import build_test_app


def _mock_db(mongo_ok: bool = True) -> MagicMock:
    """Async database stub; no real network connections are made."""
    mock_db = MagicMock()
    if mongo_ok:
        mock_db.client.admin.command = AsyncMock(return_value={"ok": 1})
    else:
        mock_db.client.admin.command = AsyncMock(
            side_effect=Exception("connection refused")
        )
    return mock_db


class TestHealthEndpoint:
    def test_healthy(self, repository, registry, settings):
        db = _mock_db(mongo_ok=True)
        app = build_test_app(repository, registry, settings, db=db)
        with TestClient(app) as client:
            resp = client.get("/health")
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "healthy"
        assert body["checks"] == {"mongodb": "ok"}
        db.client.admin.command.assert_awaited_once_with("ping")

    def test_unhealthy_when_mongo_fails(self, repository, registry, settings):
        app = build_test_app(repository, registry, settings, db=_mock_db(mongo_ok=False))
        with TestClient(app) as client:
            resp = client.get("/health")
        assert resp.status_code == 503
        body = resp.json()
        assert body["status"] == "unhealthy"
        assert body["checks"]["mongodb"] == "error"

    def test_has_timestamp(self, repository, registry, settings):
        app = build_test_app(repository, registry, settings, db=_mock_db())
        with TestClient(app) as client:
            body = client.get("/health").json()
        assert body["timestamp"].startswith("20")

    def test_not_treated_as_short_code(self, repository, registry, settings):
        app = build_test_app(repository, registry, settings, db=_mock_db())
        with TestClient(app) as client:
            resp = client.get("/health")
        assert resp.headers["content-type"].startswith("application/json")
        assert repository.links == {}
