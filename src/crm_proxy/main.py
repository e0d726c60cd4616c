"""FastAPI application factory.

Creates the app with logging middleware, metrics middleware, CORS, JSON
error handlers, the API router, static file serving, and a lifespan that
initializes Sentry on startup and closes the HubSpot client on shutdown.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

import httpx
import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.requests import Request
from fastapi.responses import Response
from fastapi.staticfiles import StaticFiles

from src.crm_proxy.api.errors import register_exception_handlers
from src.crm_proxy.api.middleware.logging import LoggingMiddleware
from src.crm_proxy.api.routes.router import router as api_router
from src.crm_proxy.config import Settings, get_settings
from src.crm_proxy.core.monitoring import MetricsMiddleware, get_metrics_response, init_sentry
from src.crm_proxy.hubspot.client import HubSpotClient
from src.crm_proxy.services.contacts import ContactService
from src.crm_proxy.services.deals import DealService

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: init Sentry on startup, close the HubSpot client on shutdown."""
    settings: Settings = app.state.settings

    if settings.SENTRY_DSN:
        try:
            init_sentry(dsn=settings.SENTRY_DSN, environment=settings.ENVIRONMENT.value)
        except Exception:
            logger.warning("sentry.init_failed", exc_info=True)

    logger.info("app.started", hubspot_api_base=app.state.hubspot_client.base_url)

    yield

    await app.state.hubspot_client.aclose()
    logger.info("app.stopped")


def create_app(
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Configuration to use; defaults to get_settings().
        transport: Optional httpx transport for the HubSpot client.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="CRM Proxy API",
        version="0.1.0",
        description="Contacts and deals API backed by HubSpot",
        lifespan=lifespan,
    )

    # One HubSpot client per process, shared by every request
    hubspot_client = HubSpotClient(
        access_token=settings.HUBSPOT_ACCESS_TOKEN,
        base_url=settings.HUBSPOT_API_BASE,
        transport=transport,
    )
    app.state.settings = settings
    app.state.hubspot_client = hubspot_client
    app.state.contact_service = ContactService(hubspot_client)
    app.state.deal_service = DealService(
        hubspot_client,
        association_type_id=settings.HUBSPOT_DEAL_CONTACT_ASSOCIATION_TYPE_ID,
    )

    # Middleware is added in reverse order (last added = outermost)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Logging middleware (logs every request with timing)
    app.add_middleware(LoggingMiddleware)

    # Metrics middleware (outermost -- records Prometheus metrics for all requests)
    app.add_middleware(MetricsMiddleware)

    register_exception_handlers(app)

    app.include_router(api_router)

    # Prometheus metrics endpoint (infrastructure route)
    @app.get("/metrics", include_in_schema=False)
    async def metrics(request: Request) -> Response:
        """Prometheus metrics endpoint."""
        return get_metrics_response()

    # Static files last so API routes take precedence
    static_dir = Path(settings.STATIC_DIR)
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")
    else:
        logger.warning("static.directory_missing", static_dir=str(static_dir))

    return app
