"""Unit tests for ContactService and DealService.

Uses an AsyncMock in place of HubSpotClient to check call order and
early exits without going through HTTP.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.crm_proxy.hubspot.errors import HubSpotError
from src.crm_proxy.services.contacts import ContactExistsError, ContactService
from src.crm_proxy.services.deals import DealService


@pytest.fixture
def mock_client():
    """Mock HubSpotClient; every method is an AsyncMock."""
    client = MagicMock()
    client.list_objects = AsyncMock(return_value={"results": []})
    client.create_object = AsyncMock()
    client.search_objects = AsyncMock(return_value={"results": []})
    client.associate = AsyncMock(return_value={})
    client.list_associations = AsyncMock(return_value={"results": []})
    client.batch_read = AsyncMock(return_value={"results": []})
    return client


class TestContactService:

    @pytest.mark.asyncio
    async def test_conflict_with_id_returns_existing(self, mock_client):
        mock_client.create_object.side_effect = HubSpotError(
            "failed",
            status_code=409,
            payload={"message": "Contact already exists. Existing ID: 12", "category": "CONFLICT"},
        )
        service = ContactService(mock_client)

        result = await service.create_contact({"email": "a@b.com"})

        assert result == {"id": "12", "properties": {"email": "a@b.com"}, "existing": True}

    @pytest.mark.asyncio
    async def test_conflict_with_no_properties_returns_empty_map(self, mock_client):
        mock_client.create_object.side_effect = HubSpotError(
            "failed", status_code=409, payload={"message": "Existing ID: 12"}
        )
        service = ContactService(mock_client)

        result = await service.create_contact(None)

        assert result["properties"] == {}

    @pytest.mark.asyncio
    async def test_conflict_without_id_raises_contact_exists(self, mock_client):
        upstream = HubSpotError("failed", status_code=409, payload={"message": "duplicate"})
        mock_client.create_object.side_effect = upstream
        service = ContactService(mock_client)

        with pytest.raises(ContactExistsError) as exc_info:
            await service.create_contact({"email": "a@b.com"})

        assert exc_info.value.error is upstream
        assert exc_info.value.details == {"message": "duplicate"}

    @pytest.mark.asyncio
    async def test_non_conflict_error_propagates(self, mock_client):
        mock_client.create_object.side_effect = HubSpotError("failed", status_code=500)
        service = ContactService(mock_client)

        with pytest.raises(HubSpotError):
            await service.create_contact({"email": "a@b.com"})

    @pytest.mark.asyncio
    async def test_find_by_email_no_results(self, mock_client):
        service = ContactService(mock_client)

        assert await service.find_by_email("a@b.com") is None
        mock_client.search_objects.assert_awaited_once()


class TestDealService:

    @pytest.mark.asyncio
    async def test_create_then_associate_in_order(self, mock_client):
        calls: list[str] = []

        async def create(*args, **kwargs):
            calls.append("create")
            return {"id": "88", "properties": {}}

        async def associate(*args, **kwargs):
            calls.append("associate")
            return {}

        mock_client.create_object.side_effect = create
        mock_client.associate.side_effect = associate
        service = DealService(mock_client, association_type_id=3)

        deal = await service.create_deal_for_contact({"dealname": "D"}, "42")

        assert deal["id"] == "88"
        assert calls == ["create", "associate"]
        mock_client.associate.assert_awaited_once_with("deals", "88", "contacts", "42", 3)

    @pytest.mark.asyncio
    async def test_create_failure_never_associates(self, mock_client):
        mock_client.create_object.side_effect = HubSpotError("failed", status_code=400)
        service = DealService(mock_client, association_type_id=3)

        with pytest.raises(HubSpotError):
            await service.create_deal_for_contact({"dealname": "D"}, "42")

        mock_client.associate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_no_associations_skips_batch_read(self, mock_client):
        service = DealService(mock_client, association_type_id=3)

        assert await service.list_deals_for_contact("42") == []
        mock_client.batch_read.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_falsy_association_ids_dropped(self, mock_client):
        mock_client.list_associations.return_value = {
            "results": [{"toObjectId": 7}, {"toObjectId": 0}, {"toObjectId": None}, {}]
        }
        service = DealService(mock_client, association_type_id=3)

        await service.list_deals_for_contact("42")

        args = mock_client.batch_read.await_args.args
        assert args[1] == [7]
