"""Deal operations against HubSpot.

Both multi-step flows here are strictly sequential: the second HubSpot call
is only issued after the first has returned. Neither flow compensates for a
partial failure; a deal whose association call fails stays in HubSpot
unlinked.
"""

from __future__ import annotations

from typing import Any

import structlog

from src.crm_proxy.hubspot.client import HubSpotClient
from src.crm_proxy.hubspot.properties import (
    ASSOCIATION_PAGE_SIZE,
    CONTACTS,
    DEAL_PROPERTIES,
    DEALS,
    LIST_PAGE_SIZE,
)

logger = structlog.get_logger(__name__)


class DealService:
    """Deal list/create operations and contact-to-deal lookups.

    Args:
        client: Shared HubSpot API client.
        association_type_id: HubSpot association type used when linking a
            new deal to its contact.
    """

    def __init__(self, client: HubSpotClient, association_type_id: int) -> None:
        self._client = client
        self._association_type_id = association_type_id

    async def list_deals(self) -> list[dict]:
        """Return the first page of deals with the standard property set."""
        data = await self._client.list_objects(DEALS, DEAL_PROPERTIES, LIST_PAGE_SIZE)
        return data.get("results") or []

    async def create_deal_for_contact(self, deal_properties: Any, contact_id: str) -> dict:
        """Create a deal, then associate it with an existing contact.

        Returns the deal as HubSpot returned it from the create call.
        """
        deal = await self._client.create_object(DEALS, deal_properties)
        deal_id = deal.get("id")

        await self._client.associate(
            DEALS, deal_id, CONTACTS, contact_id, self._association_type_id
        )
        logger.info("deals.created_for_contact", deal_id=deal_id, contact_id=contact_id)
        return deal

    async def list_deals_for_contact(self, contact_id: str) -> list[dict]:
        """Return the deals associated with a contact.

        Reads a single page of contact→deal associations, then batch-reads
        the linked deals. Skips the batch read when nothing is associated.
        """
        data = await self._client.list_associations(
            CONTACTS, contact_id, DEALS, ASSOCIATION_PAGE_SIZE
        )
        associations = data.get("results") or []
        deal_ids = [a.get("toObjectId") for a in associations if a.get("toObjectId")]

        if not deal_ids:
            return []

        batch = await self._client.batch_read(DEALS, deal_ids, DEAL_PROPERTIES)
        return batch.get("results") or []
