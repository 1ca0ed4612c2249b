"""Slot generator.

Turns a mentor's availability window into bookable slots. Packing is greedy
and forward-only: a slot is emitted while it still fits before the window's
end, then the cursor skips the slot and the buffer. A trailing remainder
shorter than the slot duration is dropped, so the window is not necessarily
split evenly.
"""

import logging
from datetime import time
from typing import Iterable, List, Tuple

from core.exceptions import ValidationError
from schemas.slot import SlotGenerationRequest, SlotWindow
from utils.time_parsing import format_date, format_time_range, parse_clock_time, parse_date

logger = logging.getLogger(__name__)


def _to_minutes(value: time) -> int:
    return value.hour * 60 + value.minute


def _from_minutes(minutes: int) -> time:
    return time(minutes // 60, minutes % 60)


def generate_time_slots(
    start: time, end: time, slot_duration: int, buffer: int = 0
) -> List[Tuple[time, time]]:
    """Pack [start, end) with slots of ``slot_duration`` minutes.

    Args:
        start: Start of the availability window.
        end: End of the availability window.
        slot_duration: Length of each slot in minutes, positive.
        buffer: Gap left after each slot in minutes, non-negative.

    Returns:
        Ordered list of (slot_start, slot_end) time pairs. Empty when the
        window is shorter than one slot.

    Raises:
        ValidationError: If the duration is not positive or the buffer is
            negative.
    """
    if slot_duration <= 0:
        raise ValidationError(f"Slot duration must be positive, got {slot_duration}")
    if buffer < 0:
        raise ValidationError(f"Buffer must not be negative, got {buffer}")

    cursor = _to_minutes(start)
    limit = _to_minutes(end)
    windows = []
    while cursor + slot_duration <= limit:
        slot_end = cursor + slot_duration
        windows.append((_from_minutes(cursor), _from_minutes(slot_end)))
        cursor = slot_end + buffer
    return windows


def generate_day_slots(
    date_stamp: str, start: time, end: time, slot_duration: int, buffer: int = 0
) -> List[SlotWindow]:
    """Generate the labelled slot windows of a single day."""
    day = format_date(parse_date(date_stamp))
    return [
        SlotWindow(
            date=day,
            start_time=slot_start,
            end_time=slot_end,
            display=format_time_range(slot_start, slot_end),
        )
        for slot_start, slot_end in generate_time_slots(start, end, slot_duration, buffer)
    ]


def generate_slots(
    dates: Iterable[str], start: time, end: time, slot_duration: int, buffer: int = 0
) -> List[SlotWindow]:
    """Generate slot windows for every target date.

    Each date is packed independently with the same settings; the result
    lists dates in the order given, each day's slots in start-time order.
    """
    slots: List[SlotWindow] = []
    for date_stamp in dates:
        day_slots = generate_day_slots(date_stamp, start, end, slot_duration, buffer)
        if not day_slots:
            logger.info(
                "No %d-minute slot fits between %s and %s on %s",
                slot_duration, start, end, date_stamp,
            )
        slots.extend(day_slots)
    return slots


def generate_from_request(request: SlotGenerationRequest) -> List[SlotWindow]:
    """Generate slot windows from a mentor's submitted settings."""
    return generate_slots(
        request.dates,
        parse_clock_time(request.start_time),
        parse_clock_time(request.end_time),
        request.slot_duration,
        request.buffer,
    )
