"""Booking management module.

This module lists a user's sessions with their state at read time, finds who
can take each session type and which of their slots are bookable, and
creates bookings from a completed booking flow.
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from config import MAX_BOOKINGS
from core.exceptions import BookingLimitError, ValidationError
from schemas.booking import Booking, BookingRequest, SessionState, SessionType, SessionView
from schemas.slot import Slot, SlotStatus
from schemas.user import UserSummary
from utils.api_client import MentorConnectClient
from utils.booking_flow import (
    BookingFlow,
    build_booking_request,
    choose_mentor,
    choose_mode,
    choose_session_type,
    choose_slot,
    complete,
    start_flow,
)
from utils.session_classifier import filter_sessions
from utils.week_calendar import group_slots_by_date, within_booking_window

logger = logging.getLogger(__name__)


class BookingManager:
    """Manages sessions and bookings through the remote API."""

    def __init__(self, client: MentorConnectClient, max_bookings: int = MAX_BOOKINGS):
        """Initialize BookingManager.

        Args:
            client: Remote API client authenticated as the current user.
            max_bookings: Booking limit per student.
        """
        self.client = client
        self.max_bookings = max_bookings

    async def list_sessions(
        self,
        user_id: str,
        tab: Optional[SessionState] = None,
        now: Optional[datetime] = None,
        include_ongoing_in_upcoming: bool = True,
    ) -> List[SessionView]:
        """List a user's sessions shown under ``tab``, classified at ``now``."""
        bookings = await self.client.list_bookings(user_id)
        return filter_sessions(bookings, tab, now, include_ongoing_in_upcoming)

    async def eligible_responders(
        self, course_id: str, session_type: SessionType
    ) -> List[UserSummary]:
        """Users on the course roster who take ``session_type`` sessions."""
        course = await self.client.get_course(course_id)
        return await self.client.get_users(course.responder_ids(session_type))

    async def available_slots(
        self, mentor_id: str, now: Optional[datetime] = None
    ) -> Dict[str, List[Slot]]:
        """Open slots of a mentor still bookable at ``now``, grouped by day."""
        slots = await self.client.list_slots(mentor_id, SlotStatus.OPEN)
        open_slots = [slot for slot in slots if slot.status == SlotStatus.OPEN]
        return group_slots_by_date(within_booking_window(open_slots, now))

    @staticmethod
    def booked_slot_ids(bookings: List[Booking], mentor_id: str) -> List[str]:
        """Slot ids the student already holds with ``mentor_id``."""
        return [b.slot.slot_id for b in bookings if b.mentor_id == mentor_id]

    async def book(
        self,
        flow: BookingFlow,
        student_id: str,
        agenda: str,
        existing: Optional[List[Booking]] = None,
    ) -> Tuple[Booking, BookingFlow]:
        """Create the booking described by a flow at the confirm step.

        Args:
            flow: Booking flow at the confirm step.
            student_id: The booking student.
            agenda: What the student wants to discuss.
            existing: The student's current bookings, fetched when not given.

        Returns:
            Tuple of (created Booking, flow at the success step).

        Raises:
            BookingLimitError: If the student is at the booking limit.
            InvalidTransitionError: If the flow is not ready to confirm.
            ValidationError: If the agenda is invalid.
            RemoteRequestError: If the API rejects the booking.
        """
        request = build_booking_request(flow, student_id, agenda)

        if existing is None:
            existing = await self.client.list_bookings(student_id)
        if len(existing) >= self.max_bookings:
            raise BookingLimitError(self.max_bookings)

        booking = await self.client.create_booking(request)
        logger.info(
            "Student %s booked slot %s with %s", student_id, request.slot.slot_id, request.mentor_id
        )
        return booking, complete(flow)

    async def book_slot(
        self, student_id: str, request: BookingRequest, now: Optional[datetime] = None
    ) -> Tuple[Booking, BookingFlow]:
        """Walk the booking flow with the student's selections and book.

        Raises:
            BookingLimitError: If the student is at the booking limit.
            ValidationError: If the slot is not open, not in the booking
                window, already over, already held or the agenda is invalid.
            RemoteRequestError: If an API call fails.
        """
        existing = await self.client.list_bookings(student_id)
        flow = start_flow(len(existing), self.max_bookings)
        flow = choose_session_type(flow, request.session_type)
        flow = choose_mentor(flow, request.mentor_id)

        slots = await self.client.list_slots(request.mentor_id, SlotStatus.OPEN)
        slot = next(
            (s for s in within_booking_window(slots, now) if s.id == request.slot_id), None
        )
        if slot is None:
            raise ValidationError(f"Slot {request.slot_id} is not available for booking")

        flow = choose_slot(flow, slot, self.booked_slot_ids(existing, request.mentor_id))
        flow = choose_mode(flow, request.mode)
        return await self.book(flow, student_id, request.agenda, existing)
