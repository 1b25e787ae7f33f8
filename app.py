"""
FastAPI application factory.
create_app() is the single entry point for building the app.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pymongo import AsyncMongoClient

from config import AppSettings
from errors import register_error_handlers
from infrastructure.pages import PageRenderer
from repositories.link_repository import LinkRepository
from routes.api_routes import router as api_router
from routes.health_routes import router as health_router
from routes.redirect_routes import router as redirect_router
from services.platform_resolver import PlatformRegistry, default_registry
from shared.logging import get_logger, setup_logging

log = get_logger(__name__)


def create_app(
    settings: Optional[AppSettings] = None,
    registry: Optional[PlatformRegistry] = None,
) -> FastAPI:
    """Create and return a fully configured FastAPI application.

    *registry* lets callers start with a custom rule set; by default a fresh
    registry with the built-in platforms is created per app.
    """
    if settings is None:
        settings = AppSettings()

    setup_logging(
        settings.logging.log_level or ("INFO" if settings.is_production else "DEBUG"),
        settings.logging.log_format or ("json" if settings.is_production else "console"),
        {
            "url_redirect": settings.logging.sample_rate_redirect,
            "stats_query": settings.logging.sample_rate_stats,
        },
        production=settings.is_production,
    )

    # Initialise Sentry before anything else so it captures startup errors
    if settings.sentry.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry.sentry_dsn,
            send_default_pii=settings.sentry.sentry_send_pii,
            traces_sample_rate=settings.sentry.sentry_traces_sample_rate,
            profiles_sample_rate=settings.sentry.sentry_profile_sample_rate,
            environment=settings.env,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # ── Startup ──────────────────────────────────────────────────────────
        mongo_client: AsyncMongoClient = AsyncMongoClient(settings.db.mongodb_uri)
        db = mongo_client[settings.db.db_name]
        app.state.mongo_client = mongo_client
        app.state.db = db
        app.state.settings = settings

        repository = LinkRepository(db[settings.db.links_collection])
        await repository.ensure_indexes()
        app.state.link_repository = repository
        app.state.platform_registry = registry or default_registry()
        app.state.page_renderer = PageRenderer(
            timeout_ms=settings.redirect_timeout_ms,
            app_name=settings.app_name,
        )

        log.info(
            "app_started",
            env=settings.env,
            db_name=settings.db.db_name,
            platforms=app.state.platform_registry.names(),
        )

        yield

        # ── Shutdown ─────────────────────────────────────────────────────────
        await mongo_client.close()
        log.info("app_stopped")

    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        docs_url=settings.docs_url,
        redoc_url=None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    app.include_router(health_router)
    app.include_router(api_router)
    # Catch-all /{short_code} must come last
    app.include_router(redirect_router)

    return app
