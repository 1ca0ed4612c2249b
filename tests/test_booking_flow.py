"""Unit tests for the booking flow state machine."""

import pytest

from core.exceptions import BookingLimitError, InvalidTransitionError, ValidationError
from schemas.booking import SessionMode, SessionType
from schemas.slot import Slot
from utils.booking_flow import (
    BookingFlow,
    BookingStep,
    build_booking_request,
    choose_mentor,
    choose_mode,
    choose_session_type,
    choose_slot,
    complete,
    go_back,
    start_flow,
)


def make_slot(slot_id="slot-1", status="Open", mentor="m1"):
    return Slot.model_validate(
        {
            "_id": slot_id,
            "date": "05-03-2025",
            "time": "2:00 PM - 2:30 PM",
            "status": status,
            "mentor": mentor,
        }
    )


@pytest.fixture
def flow_at_slot():
    flow = choose_session_type(start_flow(0), SessionType.MENTOR)
    return choose_mentor(flow, "m1")


@pytest.fixture
def flow_at_confirm(flow_at_slot):
    flow = choose_slot(flow_at_slot, make_slot())
    return choose_mode(flow, SessionMode.PUBLIC)


class TestTransitions:
    """Test cases for moving through the steps."""

    def test_start(self):
        assert start_flow(3).step == BookingStep.SELECT_TYPE

    def test_limit_reached(self):
        with pytest.raises(BookingLimitError) as exc_info:
            start_flow(15, limit=15)

        assert "15" in str(exc_info.value)

    def test_full_path(self, flow_at_confirm):
        assert flow_at_confirm.step == BookingStep.CONFIRM
        assert flow_at_confirm.slot.slot_id == "slot-1"
        assert flow_at_confirm.mode == SessionMode.PUBLIC
        assert complete(flow_at_confirm).step == BookingStep.SUCCESS

    def test_wrong_step(self):
        with pytest.raises(InvalidTransitionError):
            choose_mentor(BookingFlow(), "m1")

    def test_flow_is_immutable(self, flow_at_slot):
        choose_slot(flow_at_slot, make_slot())

        assert flow_at_slot.step == BookingStep.SELECT_SLOT
        assert flow_at_slot.slot is None

    def test_go_back_keeps_selections(self, flow_at_confirm):
        flow = go_back(go_back(flow_at_confirm))

        assert flow.step == BookingStep.SELECT_SLOT
        assert flow.mentor_id == "m1"

    def test_cannot_go_back_from_start(self):
        with pytest.raises(InvalidTransitionError):
            go_back(BookingFlow())


class TestChooseSlot:
    """Test cases for slot eligibility."""

    def test_booked_slot(self, flow_at_slot):
        with pytest.raises(ValidationError):
            choose_slot(flow_at_slot, make_slot(status="Booked"))

    def test_already_held(self, flow_at_slot):
        with pytest.raises(ValidationError):
            choose_slot(flow_at_slot, make_slot(), booked_slot_ids=["slot-1"])

    def test_other_mentor(self, flow_at_slot):
        with pytest.raises(ValidationError):
            choose_slot(flow_at_slot, make_slot(mentor="m2"))


class TestBuildBookingRequest:
    """Test cases for the booking payload."""

    def test_payload(self, flow_at_confirm):
        request = build_booking_request(flow_at_confirm, "s1", "  Career advice  ")

        assert request.to_payload() == {
            "student": "s1",
            "mentor": "m1",
            "sessionType": "Mentor Connect",
            "mode": "Public",
            "slot": {"slotId": "slot-1", "date": "05-03-2025", "time": "2:00 PM - 2:30 PM"},
            "agenda": "Career advice",
        }

    def test_empty_agenda(self, flow_at_confirm):
        with pytest.raises(ValidationError):
            build_booking_request(flow_at_confirm, "s1", "   ")

    def test_agenda_too_long(self, flow_at_confirm):
        with pytest.raises(ValidationError):
            build_booking_request(flow_at_confirm, "s1", "x" * 201)

    def test_padding_does_not_count_toward_length(self, flow_at_confirm):
        request = build_booking_request(flow_at_confirm, "s1", "   " + "x" * 198 + "   ")

        assert request.agenda == "x" * 198

    def test_not_at_confirm(self, flow_at_slot):
        with pytest.raises(InvalidTransitionError):
            build_booking_request(flow_at_slot, "s1", "Agenda")
