"""
Shared test fixtures.

Patches dotenv so pydantic-settings never reads the project's real .env file
during tests. Tests control config exclusively through monkeypatch.setenv()
or explicit constructor arguments.
"""

import pytest

from config import AppSettings
from factories import InMemoryLinkRepository
from services.platform_resolver import PlatformRegistry, default_registry


@pytest.fixture(autouse=True)
def disable_dotenv_loading(monkeypatch):
    """Prevent pydantic-settings from loading .env files in all tests."""
    import pydantic_settings.sources.providers.dotenv as ps_dotenv

    monkeypatch.setattr(ps_dotenv, "dotenv_values", lambda *a, **kw: {})


@pytest.fixture
def registry() -> PlatformRegistry:
    return default_registry()


@pytest.fixture
def repository() -> InMemoryLinkRepository:
    return InMemoryLinkRepository()


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(domain="https://dl.test", env="testing")
