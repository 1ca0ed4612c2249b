"""Session booking routes.

Students browse session types, responders and open slots, and book
sessions. Both students and mentors list their sessions by tab.
"""

from typing import Dict, List, Optional

from fastapi import APIRouter, Query, status

from api.errors import to_http_exception
from config import DEFAULT_COURSE_ID
from core.dependencies import BookingManagerDep, CurrentUserIdDep
from core.exceptions import MentorConnectError
from schemas.booking import Booking, BookingRequest, SessionState, SessionType, SessionView
from schemas.slot import Slot
from schemas.user import UserSummary

router = APIRouter(prefix="/api/sessions", tags=["Sessions"])


@router.get("/types", summary="Bookable session types")
def list_session_types() -> List[dict]:
    return [
        {
            "id": session_type.value,
            "label": session_type.label,
            "description": session_type.description,
            "responder_role": session_type.responder_role.value,
        }
        for session_type in SessionType
    ]


@router.get("", response_model=List[SessionView], summary="List own sessions")
async def list_sessions(
    user_id: CurrentUserIdDep,
    booking_manager: BookingManagerDep,
    tab: Optional[SessionState] = None,
    strict: bool = False,
) -> List[SessionView]:
    """List the current user's sessions shown under ``tab``.

    Args:
        user_id: Current user.
        booking_manager: Injected BookingManager instance.
        tab: Upcoming, Ongoing or Past. All sessions when omitted.
        strict: Keep ongoing sessions out of the Upcoming tab.

    Returns:
        Sessions with their state and join action at request time.
    """
    try:
        return await booking_manager.list_sessions(
            user_id, tab, include_ongoing_in_upcoming=not strict
        )
    except MentorConnectError as e:
        raise to_http_exception(e)


@router.get("/responders", response_model=List[UserSummary], summary="Responders for a session type")
async def list_responders(
    session_type: SessionType,
    booking_manager: BookingManagerDep,
    course_id: str = DEFAULT_COURSE_ID,
) -> List[UserSummary]:
    try:
        return await booking_manager.eligible_responders(course_id, session_type)
    except MentorConnectError as e:
        raise to_http_exception(e)


@router.get(
    "/available-slots",
    response_model=Dict[str, List[Slot]],
    summary="Open slots of a responder, by day",
)
async def list_available_slots(
    booking_manager: BookingManagerDep,
    mentor_id: str = Query(alias="mentor"),
) -> Dict[str, List[Slot]]:
    try:
        return await booking_manager.available_slots(mentor_id)
    except MentorConnectError as e:
        raise to_http_exception(e)


@router.post(
    "",
    response_model=Booking,
    status_code=status.HTTP_201_CREATED,
    summary="Book a session",
)
async def create_booking(
    req: BookingRequest,
    student_id: CurrentUserIdDep,
    booking_manager: BookingManagerDep,
) -> Booking:
    """Book a slot for the current student.

    Raises:
        HTTPException: 409 at the booking limit, 400 if the slot cannot be
            booked or the agenda is invalid.
    """
    try:
        booking, _ = await booking_manager.book_slot(student_id, req)
    except MentorConnectError as e:
        raise to_http_exception(e)
    return booking
