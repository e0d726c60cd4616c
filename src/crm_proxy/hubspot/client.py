"""Async HTTP client wrapper for the HubSpot CRM REST API.

Provides HubSpotClient, a thin layer over one shared httpx.AsyncClient that
carries the private-app bearer token and base URL. Every method maps to a
single HubSpot endpoint and returns the decoded JSON body.

Failures (non-2xx responses and transport errors) are raised as HubSpotError
carrying the upstream status and body. There is no retry: each call is made
exactly once and callers decide how to report the failure.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any
from urllib.parse import quote

import httpx
import structlog

from src.crm_proxy.core.monitoring import track_hubspot_call
from src.crm_proxy.hubspot.errors import HubSpotError

logger = structlog.get_logger(__name__)

DEFAULT_API_BASE = "https://api.hubapi.com"


def _segment(value: str | int) -> str:
    """Encode a record id for use as a single URL path segment."""
    return quote(str(value), safe="")


def _decode_body(response: httpx.Response) -> Any:
    """Best-effort decode of an upstream body: JSON if possible, else text."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class HubSpotClient:
    """Async client for the HubSpot CRM v3/v4 object APIs.

    The underlying httpx.AsyncClient is created once and reused for all
    requests; its configuration is never mutated after construction.

    Args:
        access_token: HubSpot private app access token.
        base_url: API root (default: https://api.hubapi.com).
        transport: Optional httpx transport, used by tests to stand in
            for the real API.
    """

    def __init__(
        self,
        access_token: str,
        base_url: str = DEFAULT_API_BASE,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._http = httpx.AsyncClient(
            base_url=self._base_url,
            headers={
                "Authorization": f"Bearer {access_token}",
                "Content-Type": "application/json",
            },
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    async def aclose(self) -> None:
        """Close the shared connection pool."""
        await self._http.aclose()

    async def _request(self, operation: str, method: str, path: str, **kwargs: Any) -> Any:
        """Issue one request and return the decoded body, raising HubSpotError on failure."""
        async with track_hubspot_call(operation):
            try:
                response = await self._http.request(method, path, **kwargs)
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                status_code = exc.response.status_code
                payload = _decode_body(exc.response)
                logger.warning(
                    "hubspot.request_failed",
                    operation=operation,
                    method=method,
                    path=path,
                    status_code=status_code,
                )
                raise HubSpotError(
                    f"HubSpot request failed with status code {status_code}",
                    status_code=status_code,
                    payload=payload,
                ) from exc
            except httpx.HTTPError as exc:
                logger.warning(
                    "hubspot.transport_error",
                    operation=operation,
                    method=method,
                    path=path,
                    error=str(exc),
                )
                raise HubSpotError(str(exc) or exc.__class__.__name__) from exc

        body = _decode_body(response)
        return body if body is not None else {}

    # ── Objects ─────────────────────────────────────────────────────────────

    async def list_objects(
        self,
        object_type: str,
        properties: Iterable[str],
        limit: int,
    ) -> dict:
        """GET /crm/v3/objects/{type}: first page of records."""
        return await self._request(
            "list_objects",
            "GET",
            f"/crm/v3/objects/{object_type}",
            params={"limit": limit, "properties": ",".join(properties)},
        )

    async def create_object(self, object_type: str, properties: Any) -> dict:
        """POST /crm/v3/objects/{type}: create one record from a property map."""
        data = await self._request(
            "create_object",
            "POST",
            f"/crm/v3/objects/{object_type}",
            json={"properties": properties},
        )
        logger.info("hubspot.object_created", object_type=object_type, object_id=data.get("id"))
        return data

    async def search_objects(
        self,
        object_type: str,
        filter_groups: list[dict],
        properties: Iterable[str],
        limit: int,
    ) -> dict:
        """POST /crm/v3/objects/{type}/search."""
        return await self._request(
            "search_objects",
            "POST",
            f"/crm/v3/objects/{object_type}/search",
            json={
                "filterGroups": filter_groups,
                "properties": list(properties),
                "limit": limit,
            },
        )

    async def batch_read(
        self,
        object_type: str,
        ids: Sequence[str | int],
        properties: Iterable[str],
    ) -> dict:
        """POST /crm/v3/objects/{type}/batch/read: fetch many records by id in one call."""
        return await self._request(
            "batch_read",
            "POST",
            f"/crm/v3/objects/{object_type}/batch/read",
            json={
                "properties": list(properties),
                "inputs": [{"id": object_id} for object_id in ids],
            },
        )

    # ── Associations ────────────────────────────────────────────────────────

    async def associate(
        self,
        from_type: str,
        from_id: str | int,
        to_type: str,
        to_id: str | int,
        association_type_id: int,
    ) -> dict:
        """PUT /crm/v3/objects/{from}/{id}/associations/{to}/{id}/{type}: link two records."""
        data = await self._request(
            "associate",
            "PUT",
            (
                f"/crm/v3/objects/{from_type}/{_segment(from_id)}"
                f"/associations/{to_type}/{_segment(to_id)}/{association_type_id}"
            ),
        )
        logger.info(
            "hubspot.association_created",
            from_type=from_type,
            from_id=str(from_id),
            to_type=to_type,
            to_id=str(to_id),
            association_type_id=association_type_id,
        )
        return data

    async def list_associations(
        self,
        from_type: str,
        from_id: str | int,
        to_type: str,
        limit: int,
    ) -> dict:
        """GET /crm/v4/objects/{from}/{id}/associations/{to}: one page of linked records."""
        return await self._request(
            "list_associations",
            "GET",
            f"/crm/v4/objects/{from_type}/{_segment(from_id)}/associations/{to_type}",
            params={"limit": limit},
        )
