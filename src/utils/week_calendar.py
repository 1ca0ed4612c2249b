"""Weekly calendar helpers.

Builds the Monday-to-Sunday week used to pick days for slot generation and
groups slots into per-day buckets in calendar order.
"""

from collections import OrderedDict
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, TypeVar

from pydantic import BaseModel

from config import BOOKING_WINDOW_DAYS
from utils.time_parsing import format_date, local_now, local_today, parse_date, parse_time_range

DAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
FULL_DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

SlotT = TypeVar("SlotT")


class WeekDay(BaseModel):
    day: str
    date: str
    iso: str


def week_start(today: date) -> date:
    """Monday of the week containing ``today``; Sunday closes the week."""
    return today - timedelta(days=today.weekday())


def current_week(today: Optional[date] = None) -> List[WeekDay]:
    """Return the seven days of the current week, Monday first.

    Args:
        today: Reference date. Defaults to today in the configured timezone.
    """
    monday = week_start(today or local_today())
    days = []
    for offset, name in enumerate(DAY_NAMES):
        current = monday + timedelta(days=offset)
        days.append(WeekDay(day=name, date=format_date(current), iso=current.isoformat()))
    return days


def day_name(date_stamp: str) -> str:
    """Full weekday name of a dd-mm-yyyy date, e.g. "Monday"."""
    return FULL_DAY_NAMES[parse_date(date_stamp).weekday()]


def sort_date_stamps(date_stamps: Iterable[str]) -> List[str]:
    """Sort dd-mm-yyyy stamps chronologically (not lexically)."""
    return sorted(date_stamps, key=parse_date)


def group_slots_by_date(slots: Iterable[SlotT]) -> Dict[str, List[SlotT]]:
    """Bucket slots by their ``date`` attribute, buckets in calendar order.

    Slots keep their relative order inside a bucket.
    """
    buckets: Dict[str, List[SlotT]] = {}
    for slot in slots:
        buckets.setdefault(slot.date, []).append(slot)
    return OrderedDict((key, buckets[key]) for key in sort_date_stamps(buckets))


def within_booking_window(
    slots: Iterable[SlotT], now: Optional[datetime] = None, days: int = BOOKING_WINDOW_DAYS
) -> List[SlotT]:
    """Keep slots that can still be booked at ``now``.

    A slot qualifies when it is dated from today through today + ``days``
    inclusive and has not ended yet.

    Args:
        slots: Slots with ``date`` and ``time`` display range attributes.
        now: Reference instant. Defaults to the current wall-clock time.
        days: Length of the window after today.
    """
    now = now or local_now()
    first = now.date()
    last = first + timedelta(days=days)
    kept = []
    for slot in slots:
        day = parse_date(slot.date)
        if not first <= day <= last:
            continue
        if day == first and parse_time_range(slot.date, slot.time)[1] < now:
            continue
        kept.append(slot)
    return kept
