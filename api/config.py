"""Configuration management for the Local Event Finder API."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Required
    eventbrite_api_key: str = Field(default="", description="Eventbrite private token")

    # Upstream
    eventbrite_base_url: str = Field(
        default="https://www.eventbriteapi.com/v3",
        description="Base URL of the Eventbrite API",
    )
    eventbrite_auth_mode: Literal["header", "query"] = Field(
        default="header",
        description="Send the token as a Bearer header or as a 'token' query parameter",
    )
    request_timeout: float = Field(
        default=10.0, gt=0, description="Upstream request timeout in seconds"
    )

    # Server config
    host: str = Field(default="0.0.0.0", description="Host to bind to")
    port: int = Field(default=3001, description="Port to bind to")
    cors_origins: str = Field(
        default="*",
        description="Comma-separated CORS origins",
    )
    log_level: str = Field(default="INFO", description="Logging level")

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins into list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def has_event_source(self) -> bool:
        """Check if the upstream credential is configured."""
        return bool(self.eventbrite_api_key)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(settings: Settings | None = None) -> None:
    """Configure application logging."""
    if settings is None:
        settings = get_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # Suppress verbose third-party loggers; httpx logs full URLs, which may carry the token
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
