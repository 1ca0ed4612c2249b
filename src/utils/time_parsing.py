"""Date and time parsing utilities.

Slots and bookings carry their date as a ``dd-mm-yyyy`` string and their
time range as a display string such as ``"2:30 PM - 3:00 PM"``. This module
converts between those strings and ``datetime`` values. Parsed instants are
naive local wall-clock datetimes; ``local_now`` returns the current instant
in the same form.
"""

from datetime import date, datetime, time
from typing import Optional, Tuple

import pytz

from config import TIMEZONE
from core.exceptions import ParseError

DATE_FORMAT_HINT = "a dd-mm-yyyy date"
TIME_FORMAT_HINT = "a 'h:mm AM/PM' time"
CLOCK_FORMAT_HINT = "a 24-hour 'HH:MM' time"
RANGE_SEPARATOR = " - "


def _to_int(part: str, value: str, expected: str) -> int:
    if not part.isdigit():
        raise ParseError(value, expected)
    return int(part)


def parse_date(value: str) -> date:
    """Parse a ``dd-mm-yyyy`` date stamp.

    Args:
        value: Date stamp, e.g. "05-03-2025".

    Returns:
        The corresponding calendar date.

    Raises:
        ParseError: If the string does not have exactly three numeric
            components or does not name a real date.
    """
    parts = value.split("-") if isinstance(value, str) else []
    if len(parts) != 3:
        raise ParseError(str(value), DATE_FORMAT_HINT)
    day, month, year = (_to_int(p, value, DATE_FORMAT_HINT) for p in parts)
    try:
        return date(year, month, day)
    except ValueError:
        raise ParseError(value, DATE_FORMAT_HINT)


def format_date(value: date) -> str:
    """Format a date as a zero-padded ``dd-mm-yyyy`` stamp."""
    return f"{value.day:02d}-{value.month:02d}-{value.year:04d}"


def parse_time_of_day(value: str) -> time:
    """Parse a 12-hour ``h:mm AM/PM`` time.

    12 AM maps to hour 0, 12 PM stays 12 and other PM hours add 12.

    Args:
        value: Time string, e.g. "2:30 PM".

    Returns:
        The time of day.

    Raises:
        ParseError: On a missing meridian, non-numeric hour or minute,
            hour outside 1-12 or minute outside 0-59.
    """
    parts = value.split() if isinstance(value, str) else []
    if len(parts) != 2:
        raise ParseError(str(value), TIME_FORMAT_HINT)
    clock, meridian = parts
    meridian = meridian.upper()
    if meridian not in ("AM", "PM"):
        raise ParseError(value, TIME_FORMAT_HINT)

    clock_parts = clock.split(":")
    if len(clock_parts) != 2:
        raise ParseError(value, TIME_FORMAT_HINT)
    hour, minute = (_to_int(p, value, TIME_FORMAT_HINT) for p in clock_parts)
    if not 1 <= hour <= 12 or not 0 <= minute <= 59:
        raise ParseError(value, TIME_FORMAT_HINT)

    if meridian == "PM" and hour != 12:
        hour += 12
    elif meridian == "AM" and hour == 12:
        hour = 0
    return time(hour, minute)


def format_time_of_day(value: time) -> str:
    """Format a time as ``h:mm AM/PM``, e.g. 14:30 -> "2:30 PM"."""
    meridian = "PM" if value.hour >= 12 else "AM"
    hour = value.hour % 12 or 12
    return f"{hour}:{value.minute:02d} {meridian}"


def parse_clock_time(value: str) -> time:
    """Parse a 24-hour ``HH:MM`` time as used by slot start/end fields.

    Raises:
        ParseError: If the string is not a valid 24-hour time.
    """
    parts = value.split(":") if isinstance(value, str) else []
    if len(parts) != 2:
        raise ParseError(str(value), CLOCK_FORMAT_HINT)
    hour, minute = (_to_int(p.strip(), value, CLOCK_FORMAT_HINT) for p in parts)
    if hour > 23 or minute > 59:
        raise ParseError(value, CLOCK_FORMAT_HINT)
    return time(hour, minute)


def format_clock_time(value: time) -> str:
    """Format a time as a zero-padded 24-hour ``HH:MM`` string."""
    return f"{value.hour:02d}:{value.minute:02d}"


def format_time_range(start: time, end: time) -> str:
    """Build the display label ``"<start> - <end>"`` of a slot."""
    return f"{format_time_of_day(start)}{RANGE_SEPARATOR}{format_time_of_day(end)}"


def parse_time_range(date_stamp: str, time_range: str) -> Tuple[datetime, datetime]:
    """Resolve a slot's date and display range into two instants.

    Both instants fall on the same calendar day. Ranges crossing midnight
    (e.g. "11:00 PM - 1:00 AM") are not supported.

    Args:
        date_stamp: The ``dd-mm-yyyy`` date of the slot.
        time_range: The display range, e.g. "2:00 PM - 3:00 PM".

    Returns:
        Tuple of (start, end) naive local datetimes.

    Raises:
        ParseError: If either part is malformed or the range ends before
            it starts.
    """
    day = parse_date(date_stamp)
    parts = time_range.split(RANGE_SEPARATOR) if isinstance(time_range, str) else []
    if len(parts) != 2:
        raise ParseError(str(time_range), "a '<start> - <end>' time range")

    start = datetime.combine(day, parse_time_of_day(parts[0].strip()))
    end = datetime.combine(day, parse_time_of_day(parts[1].strip()))
    if end < start:
        raise ParseError(time_range, "a same-day time range (overnight ranges are unsupported)")
    return start, end


def local_now(timezone: Optional[str] = None) -> datetime:
    """Return the current wall-clock time as a naive datetime.

    Args:
        timezone: pytz zone name. Defaults to the configured TIMEZONE.
    """
    tz = pytz.timezone(timezone or TIMEZONE)
    return datetime.now(tz).replace(tzinfo=None)


def local_today(timezone: Optional[str] = None) -> date:
    """Return today's date in the configured timezone."""
    return local_now(timezone).date()
