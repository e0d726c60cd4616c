"""REST API endpoints for HubSpot contacts.

Each endpoint forwards to ContactService/DealService and converts upstream
failures into ``{"error", "details"}`` responses. A duplicate contact whose
existing id can be recovered is returned as a normal 200 with
``existing: true``.
"""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel

from src.crm_proxy.api.deps import get_contact_service, get_deal_service
from src.crm_proxy.api.errors import ProxyError
from src.crm_proxy.hubspot.errors import HubSpotError
from src.crm_proxy.services.contacts import ContactExistsError, ContactService
from src.crm_proxy.services.deals import DealService

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/contacts", tags=["contacts"])


# ── Request Schemas ──────────────────────────────────────────────────────────


class CreateContactRequest(BaseModel):
    """Request body for creating a contact; properties are forwarded unchanged."""

    properties: Any = None


# ── Endpoints ────────────────────────────────────────────────────────────────


@router.get("")
async def list_contacts(
    service: ContactService = Depends(get_contact_service),
) -> dict:
    """Fetch up to 50 contacts with the standard property set."""
    try:
        results = await service.list_contacts()
    except HubSpotError as exc:
        logger.error("contacts.list_failed", details=exc.details)
        raise ProxyError(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to fetch contacts", exc.details
        ) from exc
    return {"results": results}


@router.post("")
async def create_contact(
    body: CreateContactRequest | None = None,
    service: ContactService = Depends(get_contact_service),
) -> dict:
    """Create a contact; an already-existing email returns the existing id."""
    properties = body.properties if body is not None else None
    try:
        return await service.create_contact(properties)
    except ContactExistsError as exc:
        raise ProxyError(
            status.HTTP_409_CONFLICT, "Contact already exists", exc.details
        ) from exc
    except HubSpotError as exc:
        logger.error("contacts.create_failed", details=exc.details)
        raise ProxyError(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to create contact", exc.details
        ) from exc


@router.get("/by-email")
async def find_contact_by_email(
    email: str | None = Query(default=None),
    service: ContactService = Depends(get_contact_service),
) -> dict:
    """Look up a contact by exact email match."""
    if not email:
        raise ProxyError(
            status.HTTP_400_BAD_REQUEST,
            "Missing email parameter",
            "Please provide ?email=example@domain.com",
        )

    try:
        contact = await service.find_by_email(email)
    except HubSpotError as exc:
        logger.error("contacts.search_failed", details=exc.details)
        raise ProxyError(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Failed to search contact by email",
            exc.details,
        ) from exc

    if contact is None:
        return {"found": False}
    return {"found": True, "contact": contact}


@router.get("/{contactId}/deals")
async def list_contact_deals(
    contactId: str,
    service: DealService = Depends(get_deal_service),
) -> dict:
    """Get all deals associated with a contact (first association page only)."""
    try:
        results = await service.list_deals_for_contact(contactId)
    except HubSpotError as exc:
        logger.error("contacts.deals_failed", contact_id=contactId, details=exc.details)
        raise ProxyError(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Failed to fetch deals for contact",
            exc.details,
        ) from exc
    return {"results": results}
