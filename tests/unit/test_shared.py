"""
Unit tests for the shared/ utility modules.

Covers:
- shared.generators      (generate_short_code)
- shared.bot_detection   (is_bot_request, get_bot_name)
- shared.ip_utils        (get_client_ip)
- shared.datetime_utils  (parse_datetime, ensure_utc)
- shared.logging         (should_sample, hash_ip, redact_sensitive_fields)
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

import shared.logging as shared_logging
from shared.bot_detection import get_bot_name, is_bot_request
from shared.datetime_utils import ensure_utc, parse_datetime
from shared.generators import SHORT_CODE_ALPHABET, generate_short_code
from shared.ip_utils import get_client_ip


def _make_request(headers: dict, client_host: str | None = "10.0.0.1") -> MagicMock:
    """Minimal mock of a FastAPI Request."""
    req = MagicMock()
    req.headers = headers
    if client_host is None:
        req.client = None
    else:
        req.client = MagicMock()
        req.client.host = client_host
    return req


# ---------------------------------------------------------------------------
# shared.generators
# ---------------------------------------------------------------------------


class TestGenerateShortCode:
    def test_default_length(self):
        assert len(generate_short_code()) == 7

    @pytest.mark.parametrize("length", [1, 6, 12])
    def test_custom_length(self, length):
        assert len(generate_short_code(length)) == length

    def test_alphanumeric(self):
        assert set(generate_short_code(200)) <= set(SHORT_CODE_ALPHABET)

    def test_rejects_non_positive(self):
        with pytest.raises(ValueError):
            generate_short_code(0)

    def test_mostly_unique(self):
        codes = {generate_short_code() for _ in range(500)}
        assert len(codes) == 500


# ---------------------------------------------------------------------------
# shared.bot_detection
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "ua, expected",
    [
        ("Mozilla/5.0 (compatible; Googlebot/2.1)", True),
        ("Mozilla/5.0 (compatible; bingbot/2.0)", True),
        ("Baiduspider+(+http://www.baidu.com/search/spider.htm)", True),
        ("AhrefsCrawler", True),
        ("Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X)", False),
        ("", False),
        (None, False),
    ],
    ids=["googlebot", "bingbot", "spider", "crawler", "iphone", "empty", "none"],
)
def test_is_bot_request(ua, expected):
    assert is_bot_request(ua) is expected


class TestGetBotName:
    def test_returns_matched_word(self):
        assert get_bot_name("Twitterbot/1.0") == "bot"
        assert get_bot_name("SomeSPIDER") == "spider"

    def test_none_for_humans(self):
        assert get_bot_name("Mozilla/5.0 (Windows NT 10.0)") is None
        assert get_bot_name(None) is None


# ---------------------------------------------------------------------------
# shared.ip_utils
# ---------------------------------------------------------------------------


class TestGetClientIp:
    def test_cloudflare_header_first(self):
        req = _make_request({"CF-Connecting-IP": "1.1.1.1", "X-Forwarded-For": "2.2.2.2"})
        assert get_client_ip(req) == "1.1.1.1"

    def test_forwarded_for_first_entry(self):
        req = _make_request({"X-Forwarded-For": "3.3.3.3, 10.0.0.2, 10.0.0.3"})
        assert get_client_ip(req) == "3.3.3.3"

    def test_falls_back_to_peer(self):
        assert get_client_ip(_make_request({})) == "10.0.0.1"

    def test_no_client(self):
        assert get_client_ip(_make_request({}, client_host=None)) == ""

    def test_skips_blank_header(self):
        req = _make_request({"X-Forwarded-For": " ,", "X-Real-IP": "4.4.4.4"})
        assert get_client_ip(req) == "4.4.4.4"

    def test_custom_header_list(self):
        req = _make_request({"CF-Connecting-IP": "1.1.1.1"})
        assert get_client_ip(req, proxy_headers=()) == "10.0.0.1"


# ---------------------------------------------------------------------------
# shared.datetime_utils
# ---------------------------------------------------------------------------


class TestParseDatetime:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("2024-01-15T10:30:00Z", datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)),
            ("2024-01-15T10:30:00+02:00", datetime(2024, 1, 15, 8, 30, tzinfo=timezone.utc)),
            ("2024-01-15", datetime(2024, 1, 15, tzinfo=timezone.utc)),
            (0, datetime(1970, 1, 1, tzinfo=timezone.utc)),
            (datetime(2024, 1, 1, 12), datetime(2024, 1, 1, 12, tzinfo=timezone.utc)),
        ],
        ids=["zulu", "offset", "date_only", "epoch", "naive_datetime"],
    )
    def test_parses(self, value, expected):
        assert parse_datetime(value) == expected

    @pytest.mark.parametrize("value", [None, "yesterday", ""])
    def test_returns_none(self, value):
        assert parse_datetime(value) is None


def test_ensure_utc_converts_offset():
    aware = datetime(2024, 1, 1, 5, tzinfo=timezone(timedelta(hours=5)))
    assert ensure_utc(aware) == datetime(2024, 1, 1, 0, tzinfo=timezone.utc)
    assert ensure_utc(aware).tzinfo == timezone.utc


# ---------------------------------------------------------------------------
# shared.logging
# ---------------------------------------------------------------------------


class TestShouldSample:
    def test_unknown_event_always_logged(self):
        assert shared_logging.should_sample("something_else") is True

    def test_zero_rate(self, monkeypatch):
        monkeypatch.setitem(shared_logging.SAMPLING_RATES, "url_redirect", 0.0)
        assert shared_logging.should_sample("url_redirect") is False

    def test_full_rate(self, monkeypatch):
        monkeypatch.setitem(shared_logging.SAMPLING_RATES, "url_redirect", 1.0)
        assert shared_logging.should_sample("url_redirect") is True


class TestHashIp:
    def test_none(self):
        assert shared_logging.hash_ip(None) is None

    def test_development_passthrough(self, monkeypatch):
        monkeypatch.setattr(shared_logging, "IS_PRODUCTION", False)
        assert shared_logging.hash_ip("1.2.3.4") == "1.2.3.4"

    def test_production_hashes(self, monkeypatch):
        monkeypatch.setattr(shared_logging, "IS_PRODUCTION", True)
        hashed = shared_logging.hash_ip("1.2.3.4")
        assert hashed != "1.2.3.4"
        assert len(hashed) == 16


def test_redact_sensitive_fields():
    event = {"event": "x", "password": "hunter2", "api_token": "t", "short_code": "abc"}
    result = shared_logging.redact_sensitive_fields(None, "info", event)
    assert result["password"] == "***REDACTED***"
    assert result["api_token"] == "***REDACTED***"
    assert result["short_code"] == "abc"
    assert result["event"] == "x"
