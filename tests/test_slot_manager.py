"""Tests for SlotManager against a mocked remote API."""

import httpx
import pytest

from core.exceptions import DuplicateSlotError, RemoteRequestError, ValidationError
from schemas.slot import SlotGenerationRequest, SlotStatus, SlotUpdate
from utils.slot_manager import SlotManager

from conftest import FakeRemoteApi, slot_payload

pytestmark = pytest.mark.anyio


@pytest.fixture
def manager(client):
    return SlotManager(client)


def echo_created(request):
    body = FakeRemoteApi.body(request)
    return httpx.Response(
        201, json=[dict(item, _id=f"new-{i}") for i, item in enumerate(body)]
    )


class TestCreateSlots:
    """Test cases for generating and creating slots."""

    async def test_creates_generated_batch(self, manager, remote_api):
        remote_api.on("GET", "/slots", (200, []))
        remote_api.on("POST", "/slots", echo_created)
        request = SlotGenerationRequest(
            dates=["05-03-2025"], start_time="10:00", end_time="11:00", slot_duration=30
        )

        created = await manager.create_slots("m1", request)

        sent = FakeRemoteApi.body(remote_api.sent("POST", "/slots")[0])
        assert [s["time"] for s in sent] == ["10:00 AM - 10:30 AM", "10:30 AM - 11:00 AM"]
        assert all(s["mentor"] == "m1" and s["status"] == "Open" for s in sent)
        assert [s.id for s in created] == ["new-0", "new-1"]

    async def test_duplicate_rejects_whole_batch(self, manager, remote_api):
        remote_api.on(
            "GET", "/slots", (200, [slot_payload("a", "05-03-2025", "10:30 AM - 11:00 AM", "Archived")])
        )
        remote_api.on("POST", "/slots", echo_created)
        request = SlotGenerationRequest(
            dates=["05-03-2025"], start_time="10:00", end_time="11:00", slot_duration=30
        )

        with pytest.raises(DuplicateSlotError):
            await manager.create_slots("m1", request)

        assert remote_api.sent("POST", "/slots") == []

    async def test_nothing_fits(self, manager, remote_api):
        request = SlotGenerationRequest(
            dates=["05-03-2025"], start_time="10:00", end_time="10:20", slot_duration=30
        )

        assert await manager.create_slots("m1", request) == []
        assert remote_api.requests == []


class TestUpdateSlot:
    """Test cases for editing a slot."""

    async def test_edit_sends_rebuilt_label(self, manager, remote_api):
        remote_api.on("GET", "/slots", (200, [slot_payload("a", "05-03-2025", "10:00 AM - 10:30 AM")]))
        remote_api.on(
            "PUT",
            "/slots/a",
            lambda request: httpx.Response(200, json=dict(FakeRemoteApi.body(request), _id="a")),
        )

        slot = await manager.update_slot("m1", "a", SlotUpdate(start_time="11:00", end_time="11:45"))

        sent = FakeRemoteApi.body(remote_api.sent("PUT", "/slots/a")[0])
        assert sent["time"] == "11:00 AM - 11:45 AM"
        assert sent["startTime"] == "11:00"
        assert slot.end_time == "11:45"

    async def test_edit_collides(self, manager, remote_api):
        remote_api.on(
            "GET",
            "/slots",
            (200, [
                slot_payload("a", "05-03-2025", "10:00 AM - 10:30 AM"),
                slot_payload("b", "05-03-2025", "11:00 AM - 11:30 AM"),
            ]),
        )

        with pytest.raises(DuplicateSlotError):
            await manager.update_slot("m1", "a", SlotUpdate(start_time="11:00", end_time="11:30"))

    async def test_edit_end_before_start(self, manager, remote_api):
        remote_api.on("GET", "/slots", (200, [slot_payload("a", "05-03-2025", "10:00 AM - 10:30 AM")]))

        with pytest.raises(ValidationError):
            await manager.update_slot("m1", "a", SlotUpdate(end_time="09:00"))

    async def test_unknown_slot(self, manager, remote_api):
        remote_api.on("GET", "/slots", (200, []))

        with pytest.raises(RemoteRequestError) as exc_info:
            await manager.update_slot("m1", "zzz", SlotUpdate(status=SlotStatus.ARCHIVED))

        assert exc_info.value.status_code == 404


async def test_archive_slot(manager, remote_api):
    remote_api.on(
        "PUT",
        "/slots/a",
        (200, slot_payload("a", "05-03-2025", "10:00 AM - 10:30 AM", "Archived")),
    )

    slot = await manager.archive_slot("a")

    assert FakeRemoteApi.body(remote_api.requests[0]) == {"status": "Archived"}
    assert slot.status == SlotStatus.ARCHIVED


async def test_list_slots_filters_status(manager, remote_api):
    remote_api.on(
        "GET",
        "/slots",
        (200, [
            slot_payload("a", "06-03-2025", "10:00 AM - 10:30 AM"),
            slot_payload("b", "05-03-2025", "10:00 AM - 10:30 AM", "Booked"),
            slot_payload("c", "05-03-2025", "11:00 AM - 11:30 AM"),
        ]),
    )

    grouped = await manager.list_slots_by_date("m1", SlotStatus.OPEN)

    assert list(grouped) == ["05-03-2025", "06-03-2025"]
    assert [s.id for s in grouped["05-03-2025"]] == ["c"]
