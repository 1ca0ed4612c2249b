"""Unit tests for session classification and join eligibility."""

from datetime import datetime

import pytest

from schemas.booking import Booking, SessionState
from schemas.user import Role
from utils.session_classifier import (
    ENDED_LABEL,
    JOIN_LABEL,
    build_session_view,
    classify_slot,
    filter_sessions,
    join_action,
    matches_tab,
    paginate,
)

from conftest import booking_payload

DATE = "05-03-2025"
RANGE = "2:00 PM - 3:00 PM"


def at(hour, minute):
    return datetime(2025, 3, 5, hour, minute)


class TestClassify:
    """Test cases for the Upcoming/Ongoing/Past boundaries."""

    @pytest.mark.parametrize(
        "now, expected",
        [
            (at(13, 59), SessionState.UPCOMING),
            (at(14, 0), SessionState.ONGOING),
            (at(14, 30), SessionState.ONGOING),
            (at(15, 0), SessionState.ONGOING),
            (at(15, 1), SessionState.PAST),
        ],
    )
    def test_boundaries(self, now, expected):
        assert classify_slot(DATE, RANGE, now) == expected

    def test_other_day(self):
        assert classify_slot("04-03-2025", RANGE, at(9, 0)) == SessionState.PAST


class TestJoinAction:
    """Test cases for the join button."""

    def test_join_before_end(self):
        booking = Booking.model_validate(booking_payload("b1", DATE, RANGE))
        action = join_action(booking, at(13, 0))

        assert not action.disabled
        assert action.label == JOIN_LABEL
        assert action.url == "https://zoom.test/j/1"

    def test_ended_after_end(self):
        booking = Booking.model_validate(booking_payload("b1", DATE, RANGE))
        action = join_action(booking, at(15, 1))

        assert action.disabled
        assert action.label == ENDED_LABEL
        assert action.url is None

    def test_completed_booking(self):
        booking = Booking.model_validate(booking_payload("b1", DATE, RANGE, status="Completed"))

        assert join_action(booking, at(14, 10)).disabled


class TestFilterSessions:
    """Test cases for tab filtering."""

    def setup_method(self):
        self.bookings = [
            Booking.model_validate(booking_payload("past", DATE, "10:00 AM - 11:00 AM")),
            Booking.model_validate(booking_payload("now", DATE, RANGE)),
            Booking.model_validate(booking_payload("later", DATE, "5:00 PM - 5:30 PM")),
        ]

    def ids(self, views):
        return [view.booking.id for view in views]

    def test_upcoming_includes_ongoing_by_default(self):
        views = filter_sessions(self.bookings, SessionState.UPCOMING, at(14, 30))

        assert self.ids(views) == ["now", "later"]

    def test_strict_upcoming(self):
        views = filter_sessions(
            self.bookings, SessionState.UPCOMING, at(14, 30), include_ongoing_in_upcoming=False
        )

        assert self.ids(views) == ["later"]

    def test_past(self):
        assert self.ids(filter_sessions(self.bookings, SessionState.PAST, at(14, 30))) == ["past"]

    def test_no_tab(self):
        assert len(filter_sessions(self.bookings, None, at(14, 30))) == 3

    def test_matches_tab(self):
        assert matches_tab(SessionState.ONGOING, SessionState.ONGOING)
        assert not matches_tab(SessionState.PAST, SessionState.UPCOMING)

    def test_view_carries_responder_role(self):
        view = build_session_view(self.bookings[1], at(14, 30))

        assert view.responder_role == Role.MENTOR
        assert view.booking.mentor_name == "Mentor"


class TestPaginate:
    """Test cases for page slicing."""

    def test_pages(self):
        items, total = paginate(list(range(12)), 3, 5)

        assert items == [10, 11]
        assert total == 3

    def test_empty(self):
        assert paginate([], 1, 5) == ([], 0)

    def test_page_below_one(self):
        assert paginate([1, 2], 0, 5) == ([1, 2], 1)
