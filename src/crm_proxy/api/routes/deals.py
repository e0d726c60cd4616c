"""REST API endpoints for HubSpot deals."""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from src.crm_proxy.api.deps import get_deal_service
from src.crm_proxy.api.errors import ProxyError
from src.crm_proxy.hubspot.errors import HubSpotError
from src.crm_proxy.services.deals import DealService

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/deals", tags=["deals"])


class CreateDealRequest(BaseModel):
    """Request body for creating a deal linked to a contact."""

    dealProperties: Any = None
    contactId: Any = None


def _is_missing(value: Any) -> bool:
    """True for null, false, zero and empty string; objects and arrays always count as present."""
    if value is None or isinstance(value, (bool, int, float, str)):
        return not value
    return False


@router.get("")
async def list_deals(
    service: DealService = Depends(get_deal_service),
) -> dict:
    """Fetch up to 50 deals with the standard property set."""
    try:
        results = await service.list_deals()
    except HubSpotError as exc:
        logger.error("deals.list_failed", details=exc.details)
        raise ProxyError(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to fetch deals", exc.details
        ) from exc
    return {"results": results}


@router.post("")
async def create_deal(
    body: CreateDealRequest | None = None,
    service: DealService = Depends(get_deal_service),
) -> dict:
    """Create a deal and associate it with a contact.

    A failure on the association step is reported like any other; the deal
    already created in HubSpot is left in place.
    """
    if body is None or _is_missing(body.dealProperties) or _is_missing(body.contactId):
        raise ProxyError(
            status.HTTP_400_BAD_REQUEST,
            "Missing dealProperties or contactId",
            'Request body must include { dealProperties: {...}, contactId: "123" }',
        )

    try:
        return await service.create_deal_for_contact(body.dealProperties, str(body.contactId))
    except HubSpotError as exc:
        logger.error("deals.create_failed", contact_id=str(body.contactId), details=exc.details)
        raise ProxyError(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to create deal", exc.details
        ) from exc
