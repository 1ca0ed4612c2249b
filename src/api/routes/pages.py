"""Page routes.

Every route here sits behind RoleAccessMiddleware and returns the view
model the corresponding page renders.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Cookie, HTTPException, status

from api.errors import to_http_exception
from config import (
    BUFFER_PRESETS,
    MAX_BOOKINGS,
    PENDING_APPROVAL_PATH,
    SCHEDULE_PAGE_SIZE,
    SLOT_SETTINGS_COOKIE_NAME,
)
from core.dependencies import BookingManagerDep, CurrentUserIdDep, SlotManagerDep
from core.exceptions import MentorConnectError
from schemas.booking import SessionState, SessionType
from schemas.slot import SlotSettings
from schemas.user import Role
from utils.route_access import ROLE_ROUTES
from utils.session_classifier import matches_tab, paginate
from utils.week_calendar import current_week

router = APIRouter(tags=["Pages"])


@router.get(PENDING_APPROVAL_PATH, summary="Pending approval page")
def pending_approval() -> Dict[str, Any]:
    return {
        "page": "pending-approval",
        "message": "Your account is awaiting approval. You will get access once an admin approves it.",
    }


@router.get("/{role_name}/dashboard", summary="Role dashboard")
def dashboard(role_name: str) -> Dict[str, Any]:
    role = Role.parse(role_name)
    if role is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Page not found")
    return {"page": "dashboard", "role": role.value, "links": list(ROLE_ROUTES[role])}


@router.get("/mentor/manage-slots", summary="Mentor slot management page")
async def manage_slots(
    mentor_id: CurrentUserIdDep,
    slot_manager: SlotManagerDep,
    saved_settings: Optional[str] = Cookie(default=None, alias=SLOT_SETTINGS_COOKIE_NAME),
) -> Dict[str, Any]:
    """View model of the slot management page.

    The slot form is prefilled from saved settings when the mentor saved
    them, otherwise from the configured defaults.

    Returns:
        Dictionary with the current week, the slot form defaults and the
        mentor's slots grouped by day.
    """
    settings = SlotSettings.from_cookie(saved_settings)
    try:
        slots_by_date = await slot_manager.list_slots_by_date(mentor_id)
    except MentorConnectError as e:
        raise to_http_exception(e)
    return {
        "page": "manage-slots",
        "week": current_week(),
        "defaults": dict(
            (settings or SlotSettings()).model_dump(), buffer_presets=list(BUFFER_PRESETS)
        ),
        "settings_saved": settings is not None,
        "slots_by_date": slots_by_date,
    }


@router.get("/mentor/schedule", summary="Mentor schedule page")
async def schedule(
    mentor_id: CurrentUserIdDep,
    booking_manager: BookingManagerDep,
    tab: SessionState = SessionState.UPCOMING,
    page: int = 1,
) -> Dict[str, Any]:
    """View model of the mentor schedule, one page of one tab.

    Upcoming is strict here: ongoing sessions are only under Ongoing.
    """
    try:
        sessions = await booking_manager.list_sessions(
            mentor_id, tab, include_ongoing_in_upcoming=False
        )
    except MentorConnectError as e:
        raise to_http_exception(e)
    items, total_pages = paginate(sessions, page, SCHEDULE_PAGE_SIZE)
    return {
        "page": "schedule",
        "tab": tab.value,
        "sessions": items,
        "current_page": max(page, 1),
        "total_pages": total_pages,
    }


@router.get("/student/slot-booking", summary="Student slot booking page")
async def slot_booking(
    student_id: CurrentUserIdDep,
    booking_manager: BookingManagerDep,
    tab: SessionState = SessionState.UPCOMING,
) -> Dict[str, Any]:
    try:
        all_sessions = await booking_manager.list_sessions(student_id)
    except MentorConnectError as e:
        raise to_http_exception(e)
    shown = [view for view in all_sessions if matches_tab(view.state, tab)]
    return {
        "page": "slot-booking",
        "tab": tab.value,
        "sessions": shown,
        "booking_count": len(all_sessions),
        "max_bookings": MAX_BOOKINGS,
        "can_book": len(all_sessions) < MAX_BOOKINGS,
        "session_types": [
            {"id": t.value, "label": t.label, "description": t.description}
            for t in SessionType
        ],
    }
