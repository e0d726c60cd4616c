"""FastAPI dependency injection for the CRM services.

Services are built once in create_app() and stored on app.state; these
dependencies hand them to endpoint functions.
"""

from __future__ import annotations

from fastapi import Request

from src.crm_proxy.services.contacts import ContactService
from src.crm_proxy.services.deals import DealService


async def get_contact_service(request: Request) -> ContactService:
    """Get the shared ContactService."""
    return request.app.state.contact_service


async def get_deal_service(request: Request) -> DealService:
    """Get the shared DealService."""
    return request.app.state.deal_service
