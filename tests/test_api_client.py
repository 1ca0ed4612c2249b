"""Tests for the remote API client against a mocked transport."""

import httpx
import pytest

from core.exceptions import RemoteRequestError
from schemas.slot import SlotStatus
from schemas.user import AccountStatus, Role
from utils.api_client import MentorConnectClient

from conftest import slot_payload

pytestmark = pytest.mark.anyio


class TestSlots:
    """Test cases for slot endpoints."""

    async def test_list_slots_sends_filters_and_token(self, client, remote_api):
        remote_api.on("GET", "/slots", (200, [slot_payload("a", "05-03-2025", "2:00 PM - 2:30 PM")]))

        slots = await client.list_slots("m1", SlotStatus.OPEN)

        request = remote_api.requests[0]
        assert request.url.params["mentor"] == "m1"
        assert request.url.params["status"] == "Open"
        assert request.headers["Authorization"] == "Bearer test-token"
        assert slots[0].start_time == "14:00"
        assert slots[0].end_time == "14:30"

    async def test_populated_mentor_is_flattened(self, client, remote_api):
        payload = slot_payload("a", "05-03-2025", "2:00 PM - 2:30 PM")
        payload["mentor"] = {"_id": "m1", "name": "Mentor"}
        remote_api.on("GET", "/slots", (200, [payload]))

        slots = await client.list_slots("m1")

        assert slots[0].mentor_id == "m1"

    async def test_delete_with_empty_body(self, client, remote_api):
        remote_api.on("DELETE", "/slots/a", lambda request: httpx.Response(204))

        assert await client.delete_slot("a") is None


class TestErrors:
    """Test cases for failure handling."""

    async def test_error_message_from_body(self, client, remote_api):
        remote_api.on("GET", "/slots", (500, {"message": "boom"}))

        with pytest.raises(RemoteRequestError) as exc_info:
            await client.list_slots("m1")

        assert exc_info.value.status_code == 500
        assert str(exc_info.value) == "boom"

    async def test_transport_failure(self, client, remote_api):
        def fail(request):
            raise httpx.ConnectError("unreachable", request=request)

        remote_api.on("GET", "/get-user-status", fail)

        with pytest.raises(RemoteRequestError) as exc_info:
            await client.get_user_status()

        assert exc_info.value.status_code is None

    async def test_non_ascii_token_is_rejected(self, remote_api):
        with pytest.raises(RemoteRequestError):
            MentorConnectClient(token="abc\u00e9", transport=httpx.MockTransport(remote_api))

        assert remote_api.requests == []

    async def test_unexpected_payload(self, client, remote_api):
        remote_api.on("GET", "/get-user-status", (200, {"roles": ["MENTOR"]}))

        with pytest.raises(RemoteRequestError):
            await client.get_user_status()


class TestUsers:
    """Test cases for user and course endpoints."""

    async def test_user_status(self, client, remote_api):
        remote_api.on("GET", "/get-user-status", (200, {"status": "ACTIVE", "roles": ["MENTOR", "STUDENT"]}))

        user_status = await client.get_user_status()

        assert user_status.status == AccountStatus.ACTIVE
        assert user_status.roles == [Role.MENTOR, Role.STUDENT]

    async def test_get_users_joins_ids(self, client, remote_api):
        remote_api.on("GET", "/users", (200, [{"_id": "u1", "name": "A"}, {"_id": "u2", "name": "B"}]))

        users = await client.get_users(["u1", "u2"])

        assert remote_api.requests[0].url.params["ids"] == "u1,u2"
        assert [u.id for u in users] == ["u1", "u2"]

    async def test_get_users_without_ids_skips_request(self, client, remote_api):
        assert await client.get_users([]) == []
        assert remote_api.requests == []
