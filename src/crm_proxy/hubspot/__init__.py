"""HubSpot integration layer -- the only code that talks to the CRM.

Provides:
- HubSpotClient: Async wrapper over the HubSpot object and association APIs
- HubSpotError: Upstream failure carrying HubSpot's status and error body
- extract_existing_id: Recover a duplicate record id from a conflict message
"""

from src.crm_proxy.hubspot.client import HubSpotClient
from src.crm_proxy.hubspot.errors import HubSpotError, extract_existing_id

__all__ = [
    "HubSpotClient",
    "HubSpotError",
    "extract_existing_id",
]
