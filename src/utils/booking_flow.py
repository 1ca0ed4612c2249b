"""Booking flow state machine.

A student books a session in steps: pick a session type, a responder, a
slot and a mode, then confirm with an agenda. The flow is an immutable
value; every transition returns a new value and raises
InvalidTransitionError when taken from the wrong step.
"""

from enum import Enum
from typing import Collection, Optional

from pydantic import BaseModel, ConfigDict

from config import MAX_BOOKINGS
from core.exceptions import BookingLimitError, InvalidTransitionError, ValidationError
from schemas.booking import BookingCreate, SessionMode, SessionType, SlotRef
from schemas.slot import Slot, SlotStatus


class BookingStep(str, Enum):
    SELECT_TYPE = "selectType"
    SELECT_MENTOR = "selectMentor"
    SELECT_SLOT = "selectSlot"
    SELECT_MODE = "selectMode"
    CONFIRM = "confirm"
    SUCCESS = "success"


# Step reached by going back from each step
_PREVIOUS_STEP = {
    BookingStep.SELECT_MENTOR: BookingStep.SELECT_TYPE,
    BookingStep.SELECT_SLOT: BookingStep.SELECT_MENTOR,
    BookingStep.SELECT_MODE: BookingStep.SELECT_SLOT,
    BookingStep.CONFIRM: BookingStep.SELECT_MODE,
}


class BookingFlow(BaseModel):
    """Selections made so far and the current step."""

    model_config = ConfigDict(frozen=True)

    step: BookingStep = BookingStep.SELECT_TYPE
    session_type: Optional[SessionType] = None
    mentor_id: Optional[str] = None
    slot: Optional[SlotRef] = None
    mode: Optional[SessionMode] = None


def _expect(flow: BookingFlow, step: BookingStep) -> None:
    if flow.step != step:
        raise InvalidTransitionError(
            f"Cannot do that while at step '{flow.step.value}', expected '{step.value}'"
        )


def start_flow(existing_bookings: int, limit: int = MAX_BOOKINGS) -> BookingFlow:
    """Open a fresh flow unless the student is at the booking limit.

    Raises:
        BookingLimitError: If ``existing_bookings`` has reached ``limit``.
    """
    if existing_bookings >= limit:
        raise BookingLimitError(limit)
    return BookingFlow()


def choose_session_type(flow: BookingFlow, session_type: SessionType) -> BookingFlow:
    _expect(flow, BookingStep.SELECT_TYPE)
    return flow.model_copy(
        update={"session_type": session_type, "step": BookingStep.SELECT_MENTOR}
    )


def choose_mentor(flow: BookingFlow, mentor_id: str) -> BookingFlow:
    _expect(flow, BookingStep.SELECT_MENTOR)
    return flow.model_copy(update={"mentor_id": mentor_id, "step": BookingStep.SELECT_SLOT})


def choose_slot(
    flow: BookingFlow, slot: Slot, booked_slot_ids: Collection[str] = ()
) -> BookingFlow:
    """Pick a slot of the chosen mentor.

    Args:
        flow: Flow at the slot selection step.
        slot: The slot to book.
        booked_slot_ids: Slot ids the student already holds with this mentor.

    Raises:
        InvalidTransitionError: If the flow is not at slot selection.
        ValidationError: If the slot is not open or already booked.
    """
    _expect(flow, BookingStep.SELECT_SLOT)
    if slot.status != SlotStatus.OPEN or slot.id in booked_slot_ids:
        raise ValidationError(f"Slot {slot.id} is not available for booking")
    if slot.mentor_id and slot.mentor_id != flow.mentor_id:
        raise ValidationError(f"Slot {slot.id} does not belong to the selected mentor")
    ref = SlotRef(slot_id=slot.id, date=slot.date, time=slot.time)
    return flow.model_copy(update={"slot": ref, "step": BookingStep.SELECT_MODE})


def choose_mode(flow: BookingFlow, mode: SessionMode) -> BookingFlow:
    _expect(flow, BookingStep.SELECT_MODE)
    return flow.model_copy(update={"mode": mode, "step": BookingStep.CONFIRM})


def go_back(flow: BookingFlow) -> BookingFlow:
    """Return to the previous step, keeping earlier selections."""
    previous = _PREVIOUS_STEP.get(flow.step)
    if previous is None:
        raise InvalidTransitionError(f"Cannot go back from step '{flow.step.value}'")
    return flow.model_copy(update={"step": previous})


def build_booking_request(flow: BookingFlow, student_id: str, agenda: str) -> BookingCreate:
    """Assemble the booking payload from a flow at the confirm step.

    Raises:
        InvalidTransitionError: If the flow is not at the confirm step.
        ValidationError: If the agenda is empty or too long.
    """
    _expect(flow, BookingStep.CONFIRM)
    try:
        return BookingCreate(
            student_id=student_id,
            mentor_id=flow.mentor_id,
            session_type=flow.session_type,
            mode=flow.mode,
            slot=flow.slot,
            agenda=agenda,
        )
    except ValueError as e:
        raise ValidationError(str(e))


def complete(flow: BookingFlow) -> BookingFlow:
    """Mark the booking as created."""
    _expect(flow, BookingStep.CONFIRM)
    return flow.model_copy(update={"step": BookingStep.SUCCESS})
