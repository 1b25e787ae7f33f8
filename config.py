"""
Application configuration via pydantic-settings.

All settings are loaded from environment variables (and .env file).

DOMAIN is optional: when empty, short URLs are built from the base URL of the
incoming request.
"""

from __future__ import annotations

from typing import Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    mongodb_uri: str = "mongodb://localhost:27017"
    db_name: str = "deeplink-shortener"
    links_collection: str = "links"


class LoggingSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Unset values follow ENV: INFO + json in production, DEBUG + console otherwise
    log_level: Optional[str] = None
    log_format: Optional[str] = None

    # Sampling rates (0.0–1.0)
    sample_rate_redirect: float = 0.05
    sample_rate_stats: float = 0.20


class SentrySettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    sentry_dsn: str = ""
    sentry_send_pii: bool = False
    sentry_traces_sample_rate: float = 0.1
    sentry_profile_sample_rate: float = 0.05


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Core
    env: str = "development"
    app_name: str = "Deep Link Shortener"
    domain: str = ""

    cors_origins: list[str] = ["*"]

    # OpenAPI docs URL (None disables the docs UI in production)
    docs_url: Optional[str] = "/docs"

    # Short codes
    short_code_length: int = 7
    max_short_code_attempts: int = 5

    # Intermediate page: delay before falling back to the web URL
    redirect_timeout_ms: int = 2000

    # Listing and stats
    default_page_size: int = 10
    max_page_size: int = 100
    top_n: int = 5

    # Sub-configs (composed via model_validator below)
    db: Optional[DatabaseSettings] = None
    logging: Optional[LoggingSettings] = None
    sentry: Optional[SentrySettings] = None

    @model_validator(mode="after")
    def _populate_sub_configs(self) -> "AppSettings":
        if self.db is None:
            self.db = DatabaseSettings()
        if self.logging is None:
            self.logging = LoggingSettings()
        if self.sentry is None:
            self.sentry = SentrySettings()
        # Trailing slash would produce "https://host//code"
        self.domain = self.domain.rstrip("/")
        return self

    @property
    def is_production(self) -> bool:
        return self.env == "production"

    @property
    def is_development(self) -> bool:
        return self.env == "development"
