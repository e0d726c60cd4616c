"""CRM-facing services used by the API routers."""

from src.crm_proxy.services.contacts import ContactExistsError, ContactService
from src.crm_proxy.services.deals import DealService

__all__ = [
    "ContactExistsError",
    "ContactService",
    "DealService",
]
