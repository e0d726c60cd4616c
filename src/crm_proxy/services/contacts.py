"""Contact operations against HubSpot.

ContactService wraps the HubSpotClient calls for contacts and owns the one
piece of non-trivial behavior in the proxy: turning a duplicate-contact
conflict into a soft success when HubSpot tells us the existing record id.
"""

from __future__ import annotations

from typing import Any

import structlog

from src.crm_proxy.hubspot.client import HubSpotClient
from src.crm_proxy.hubspot.errors import HubSpotError, extract_existing_id
from src.crm_proxy.hubspot.properties import (
    CONTACT_PROPERTIES,
    CONTACT_SEARCH_PROPERTIES,
    CONTACTS,
    LIST_PAGE_SIZE,
    SEARCH_LIMIT,
)

logger = structlog.get_logger(__name__)


class ContactExistsError(Exception):
    """HubSpot rejected a contact as a duplicate and did not name the existing id.

    Args:
        error: The underlying conflict returned by HubSpot.
    """

    def __init__(self, error: HubSpotError) -> None:
        super().__init__(error.upstream_message or error.message)
        self.error = error

    @property
    def details(self) -> Any:
        return self.error.details


class ContactService:
    """Contact list/create/search operations.

    Args:
        client: Shared HubSpot API client.
    """

    def __init__(self, client: HubSpotClient) -> None:
        self._client = client

    async def list_contacts(self) -> list[dict]:
        """Return the first page of contacts with the standard property set."""
        data = await self._client.list_objects(CONTACTS, CONTACT_PROPERTIES, LIST_PAGE_SIZE)
        return data.get("results") or []

    async def create_contact(self, properties: Any) -> dict:
        """Create a contact, resolving duplicates to the existing record.

        Returns the created record as HubSpot returned it. When HubSpot reports
        a conflict whose message contains ``Existing ID: <digits>``, returns
        ``{"id": <digits>, "properties": <input>, "existing": True}`` instead.

        Raises:
            ContactExistsError: Conflict without a recoverable id.
            HubSpotError: Any other upstream failure.
        """
        try:
            return await self._client.create_object(CONTACTS, properties)
        except HubSpotError as exc:
            if not exc.is_conflict:
                raise

            existing_id = extract_existing_id(exc.upstream_message)
            if existing_id is None:
                logger.warning(
                    "contacts.conflict_unresolved",
                    status_code=exc.status_code,
                    upstream_message=exc.upstream_message,
                )
                raise ContactExistsError(exc) from exc

            logger.info("contacts.existing_contact_returned", contact_id=existing_id)
            return {
                "id": existing_id,
                "properties": properties or {},
                "existing": True,
            }

    async def find_by_email(self, email: str) -> dict | None:
        """Look up one contact by exact email match; None when there is no match."""
        filter_groups = [
            {
                "filters": [
                    {"propertyName": "email", "operator": "EQ", "value": email},
                ],
            },
        ]
        data = await self._client.search_objects(
            CONTACTS, filter_groups, CONTACT_SEARCH_PROPERTIES, SEARCH_LIMIT
        )
        results = data.get("results") or []
        if not results:
            return None

        contact = results[0]
        return {"id": contact.get("id"), "properties": contact.get("properties")}
