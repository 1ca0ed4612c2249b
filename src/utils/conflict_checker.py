"""Duplicate slot detection.

Two slots collide when they share the same date and start time for the
same mentor. Values are compared after normalisation (a real date and a
time of day), never as display strings. A batch is accepted or rejected
as a whole.

The check only sees the snapshot of slots the caller fetched; two clients
racing to create the same slot are not caught here.
"""

import logging
from datetime import date, time
from typing import Iterable, List, Optional, Set, Tuple, Union

from core.exceptions import DuplicateSlotError
from schemas.slot import Slot, SlotWindow
from utils.time_parsing import format_date, parse_clock_time, parse_date

logger = logging.getLogger(__name__)

SlotKey = Tuple[date, time]
SlotLike = Union[Slot, SlotWindow]


def slot_key(slot: SlotLike) -> SlotKey:
    """Return the normalised (date, start time) identity of a slot."""
    start = slot.start_time
    if isinstance(start, str):
        start = parse_clock_time(start)
    return parse_date(slot.date), start


def find_conflicts(candidates: Iterable[SlotLike], existing: Iterable[SlotLike]) -> List[SlotKey]:
    """List candidate keys that collide with existing slots or with each other.

    Args:
        candidates: Slots about to be created or saved.
        existing: Slots already known for the same mentor.

    Returns:
        The colliding keys, in candidate order.
    """
    taken: Set[SlotKey] = {slot_key(slot) for slot in existing}
    conflicts = []
    for candidate in candidates:
        key = slot_key(candidate)
        if key in taken:
            conflicts.append(key)
        taken.add(key)
    return conflicts


def check_batch(candidates: Iterable[SlotLike], existing: Iterable[SlotLike]) -> None:
    """Reject a batch of new slots if any of them is a duplicate.

    Raises:
        DuplicateSlotError: Naming every date with a collision.
    """
    conflicts = find_conflicts(candidates, existing)
    if conflicts:
        dates = [format_date(day) for day, _ in conflicts]
        logger.info("Rejected slot batch: %d duplicate(s) on %s", len(conflicts), dates)
        raise DuplicateSlotError(dates)


def check_edit(edited: Slot, existing: Iterable[Slot], slot_id: Optional[str] = None) -> None:
    """Reject an edited slot that would duplicate another slot.

    The slot being edited is excluded from the comparison by id.

    Raises:
        DuplicateSlotError: If another slot has the same date and start time.
    """
    own_id = slot_id or edited.id
    others = [slot for slot in existing if slot.id != own_id]
    check_batch([edited], others)
