"""Session classification against the wall clock.

A session is Upcoming before its start, Ongoing from its start to its end
(both inclusive) and Past afterwards. Join eligibility is derived from the
same instants on every read.
"""

from datetime import datetime
from typing import Iterable, List, Optional, Sequence, Tuple, TypeVar

from schemas.booking import (
    COMPLETED_STATUS,
    Booking,
    JoinAction,
    SessionState,
    SessionView,
)
from utils.time_parsing import local_now, parse_time_range

JOIN_LABEL = "Join"
ENDED_LABEL = "Session Ended"

T = TypeVar("T")


def classify(start: datetime, end: datetime, now: datetime) -> SessionState:
    """Place ``now`` relative to the closed interval [start, end]."""
    if now < start:
        return SessionState.UPCOMING
    if now > end:
        return SessionState.PAST
    return SessionState.ONGOING


def classify_slot(date_stamp: str, time_range: str, now: datetime) -> SessionState:
    """Classify a slot given its date stamp and display range.

    Raises:
        ParseError: If the date or range is malformed.
    """
    start, end = parse_time_range(date_stamp, time_range)
    return classify(start, end, now)


def join_action(booking: Booking, now: datetime) -> JoinAction:
    """Compute the join button state of a booking.

    Joining is allowed for upcoming and ongoing sessions unless the booking
    is already marked Completed.
    """
    _, end = parse_time_range(booking.slot.date, booking.slot.time)
    if booking.status == COMPLETED_STATUS or now > end:
        return JoinAction(disabled=True, label=ENDED_LABEL)
    return JoinAction(disabled=False, label=JOIN_LABEL, url=booking.join_url)


def build_session_view(booking: Booking, now: Optional[datetime] = None) -> SessionView:
    now = now or local_now()
    return SessionView(
        booking=booking,
        state=classify_slot(booking.slot.date, booking.slot.time, now),
        join=join_action(booking, now),
        responder_role=booking.session_type.responder_role,
    )


def matches_tab(
    state: SessionState, tab: Optional[SessionState], include_ongoing_in_upcoming: bool = True
) -> bool:
    """Whether a session in ``state`` is listed under ``tab``.

    The student view lists ongoing sessions under Upcoming as well; the
    mentor schedule keeps Upcoming strict.
    """
    if tab is None:
        return True
    if tab == SessionState.UPCOMING and include_ongoing_in_upcoming:
        return state in (SessionState.UPCOMING, SessionState.ONGOING)
    return state == tab


def filter_sessions(
    bookings: Iterable[Booking],
    tab: Optional[SessionState],
    now: Optional[datetime] = None,
    include_ongoing_in_upcoming: bool = True,
) -> List[SessionView]:
    """Classify bookings and keep those shown under ``tab``."""
    now = now or local_now()
    views = [build_session_view(booking, now) for booking in bookings]
    return [
        view for view in views
        if matches_tab(view.state, tab, include_ongoing_in_upcoming)
    ]


def paginate(items: Sequence[T], page: int, page_size: int) -> Tuple[List[T], int]:
    """Slice one 1-based page out of ``items``.

    Returns:
        Tuple of (page items, total page count).
    """
    total_pages = (len(items) + page_size - 1) // page_size
    page = max(page, 1)
    offset = (page - 1) * page_size
    return list(items[offset:offset + page_size]), total_pages
