"""
FastAPI dependency providers.

All injectable dependencies are defined here as plain functions used with
FastAPI's Depends() system. Long-lived objects (settings, repository, platform
registry, page renderer) are created in the app lifespan and stored on
app.state.
"""

from __future__ import annotations

from fastapi import Depends, Request

from config import AppSettings
from infrastructure.pages import PageRenderer
from repositories.link_repository import LinkRepository
from services.link_service import LinkService
from services.platform_resolver import PlatformRegistry


def get_settings(request: Request) -> AppSettings:
    """Return the AppSettings instance stored on app.state."""
    return request.app.state.settings


async def get_db(request: Request):
    """Return the async MongoDB database from app.state."""
    return request.app.state.db


def get_link_repository(request: Request) -> LinkRepository:
    return request.app.state.link_repository


def get_platform_registry(request: Request) -> PlatformRegistry:
    return request.app.state.platform_registry


def get_page_renderer(request: Request) -> PageRenderer:
    return request.app.state.page_renderer


def get_link_service(
    repository: LinkRepository = Depends(get_link_repository),
    registry: PlatformRegistry = Depends(get_platform_registry),
    settings: AppSettings = Depends(get_settings),
) -> LinkService:
    return LinkService(
        repository,
        registry,
        short_code_length=settings.short_code_length,
        max_attempts=settings.max_short_code_attempts,
    )
