"""Test fixtures for the CRM proxy API.

Provides:
- FakeHubSpot: an httpx.MockTransport-backed stand-in for the HubSpot API
  that records every request it receives
- Settings with a test access token and a temporary static directory
- The FastAPI app wired to the fake HubSpot
- Async HTTP client for API testing
"""

from __future__ import annotations

import json
from collections.abc import AsyncGenerator
from typing import Any

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.crm_proxy.config import Settings
from src.crm_proxy.main import create_app

TEST_TOKEN = "test-access-token"


class FakeHubSpot:
    """Scripted HubSpot API.

    Register responses per (method, path) with ``add()``; unregistered
    routes answer 404. Every request is kept in ``requests`` so tests can
    assert on call count, order and payloads.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], tuple[int, Any] | Exception] = {}

    def add(self, method: str, path: str, status_code: int = 200, json: Any = None) -> None:
        self._routes[(method, path)] = (status_code, json)

    def fail(self, method: str, path: str, exc: Exception) -> None:
        self._routes[(method, path)] = exc

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self._routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(
                404,
                json={"status": "error", "message": f"No route for {request.url.path}"},
            )
        if isinstance(route, Exception):
            raise route
        status_code, body = route
        if body is None:
            return httpx.Response(status_code)
        return httpx.Response(status_code, json=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)

    @property
    def calls(self) -> list[tuple[str, str]]:
        return [(r.method, r.url.path) for r in self.requests]

    def body(self, index: int) -> Any:
        return json.loads(self.requests[index].content)


@pytest.fixture
def hubspot() -> FakeHubSpot:
    return FakeHubSpot()


@pytest.fixture
def static_dir(tmp_path):
    directory = tmp_path / "public"
    directory.mkdir()
    (directory / "index.html").write_text("<h1>CRM</h1>")
    return directory


@pytest.fixture
def settings(static_dir) -> Settings:
    return Settings(
        _env_file=None,
        HUBSPOT_ACCESS_TOKEN=TEST_TOKEN,
        HUBSPOT_API_BASE="https://api.hubapi.test",
        STATIC_DIR=str(static_dir),
    )


@pytest.fixture
def app(settings, hubspot):
    return create_app(settings, transport=hubspot.transport)


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for testing the API."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
