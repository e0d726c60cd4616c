"""Process entry point for the CRM proxy.

Loads settings, refuses to start without a HubSpot access token (exit 1),
and serves the app with uvicorn. uvicorn handles SIGINT/SIGTERM by draining
open connections before the lifespan shutdown runs; the process then exits 0.

Usage:
    python -m src.crm_proxy
"""

from __future__ import annotations

import sys

import structlog
import uvicorn
from pydantic import ValidationError

from src.crm_proxy.api.middleware.logging import configure_structlog
from src.crm_proxy.config import Settings, get_settings
from src.crm_proxy.main import create_app

logger = structlog.get_logger(__name__)

ACCESS_TOKEN_FIELD = "HUBSPOT_ACCESS_TOKEN"


def load_settings() -> Settings:
    """Load settings or exit with status 1 if they are unusable."""
    try:
        return get_settings()
    except ValidationError as exc:
        configure_structlog()
        fields = [".".join(str(part) for part in err["loc"]) for err in exc.errors()]
        if ACCESS_TOKEN_FIELD in fields:
            logger.error(
                "config.missing_access_token",
                hint=f"Set {ACCESS_TOKEN_FIELD} in the environment or .env",
            )
        else:
            logger.error("config.invalid", fields=fields, error=str(exc))
        sys.exit(1)


def main() -> None:
    settings = load_settings()
    configure_structlog(settings.ENVIRONMENT, settings.LOG_LEVEL)

    app = create_app(settings)

    base_url = f"http://localhost:{settings.PORT}"
    logger.info(
        "server.starting",
        api_url=base_url,
        health_url=f"{base_url}/health",
        static_dir=settings.STATIC_DIR,
    )

    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())
    logger.info("server.stopped")


if __name__ == "__main__":
    main()
