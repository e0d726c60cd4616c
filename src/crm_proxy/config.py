"""Application configuration via Pydantic BaseSettings."""

from __future__ import annotations

from enum import Enum
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from uvicorn.config import LOG_LEVELS

# Levels both uvicorn and the stdlib root logger accept ("trace" is uvicorn-only)
LOG_LEVEL_NAMES = tuple(name.upper() for name in LOG_LEVELS if name != "trace")


class Environment(str, Enum):
    development = "development"
    staging = "staging"
    production = "production"


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    Frozen after construction: the credential and base URL are shared by
    every request and never change for the life of the process.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", frozen=True)

    # HubSpot
    HUBSPOT_ACCESS_TOKEN: str  # Private app token; required, startup fails without it
    HUBSPOT_API_BASE: str = "https://api.hubapi.com"
    HUBSPOT_DEAL_CONTACT_ASSOCIATION_TYPE_ID: int = 3  # "deal to primary contact"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3001

    # Environment
    ENVIRONMENT: Environment = Environment.development

    # Logging
    LOG_LEVEL: str = "INFO"

    # CORS
    CORS_ALLOWED_ORIGINS: str = "*"

    # Static assets served at the web root
    STATIC_DIR: str = "public"

    # Monitoring
    SENTRY_DSN: str = ""

    @field_validator("HUBSPOT_ACCESS_TOKEN")
    @classmethod
    def _require_access_token(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("HUBSPOT_ACCESS_TOKEN must not be empty")
        return value

    @field_validator("LOG_LEVEL")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LOG_LEVEL_NAMES:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVEL_NAMES)}")
        return level

    def get_cors_origins(self) -> list[str]:
        """Return the allowed CORS origins as a list."""
        if self.CORS_ALLOWED_ORIGINS == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ALLOWED_ORIGINS.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """Singleton settings instance."""
    return Settings()
