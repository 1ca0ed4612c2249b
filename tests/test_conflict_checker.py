"""Unit tests for duplicate slot detection."""

from datetime import time

import pytest

from core.exceptions import DuplicateSlotError
from schemas.slot import Slot
from utils.conflict_checker import check_batch, check_edit, find_conflicts
from utils.slot_generator import generate_slots


def make_slot(slot_id, date, label, status="Open"):
    return Slot.model_validate({"_id": slot_id, "date": date, "time": label, "status": status})


class TestFindConflicts:
    """Test cases for collision detection."""

    def test_no_conflict(self):
        existing = [make_slot("a", "05-03-2025", "10:00 AM - 10:30 AM")]
        candidates = generate_slots(["06-03-2025"], time(10, 0), time(11, 0), 30)

        assert find_conflicts(candidates, existing) == []

    def test_same_date_and_start(self):
        existing = [make_slot("a", "05-03-2025", "10:30 AM - 11:00 AM")]
        candidates = generate_slots(["05-03-2025"], time(10, 0), time(11, 0), 30)

        assert len(find_conflicts(candidates, existing)) == 1

    def test_compares_normalised_values(self):
        # Unpadded date against a padded one
        existing = [make_slot("a", "5-3-2025", "10:00 AM - 10:30 AM")]
        candidates = generate_slots(["05-03-2025"], time(10, 0), time(10, 30), 30)

        assert len(find_conflicts(candidates, existing)) == 1

    def test_same_start_different_length_still_conflicts(self):
        existing = [make_slot("a", "05-03-2025", "10:00 AM - 11:00 AM")]
        candidates = generate_slots(["05-03-2025"], time(10, 0), time(10, 30), 30)

        assert len(find_conflicts(candidates, existing)) == 1

    def test_duplicates_inside_batch(self):
        candidates = generate_slots(["05-03-2025", "05-03-2025"], time(10, 0), time(10, 30), 30)

        assert len(find_conflicts(candidates, [])) == 1


class TestCheckBatch:
    """Test cases for whole-batch rejection."""

    def test_raises_with_dates(self):
        existing = [make_slot("a", "05-03-2025", "10:00 AM - 10:30 AM")]
        candidates = generate_slots(["05-03-2025", "06-03-2025"], time(10, 0), time(11, 0), 30)

        with pytest.raises(DuplicateSlotError) as exc_info:
            check_batch(candidates, existing)

        assert exc_info.value.dates == ["05-03-2025"]
        assert "05-03-2025" in str(exc_info.value)

    def test_clean_batch_passes(self):
        check_batch(generate_slots(["05-03-2025"], time(10, 0), time(11, 0), 30), [])


class TestCheckEdit:
    """Test cases for editing a single slot."""

    def test_editing_slot_ignores_itself(self):
        slot = make_slot("a", "05-03-2025", "10:00 AM - 10:30 AM")

        check_edit(slot, [slot])

    def test_edit_onto_other_slot(self):
        other = make_slot("b", "05-03-2025", "11:00 AM - 11:30 AM")
        edited = make_slot("a", "05-03-2025", "11:00 AM - 11:45 AM")

        with pytest.raises(DuplicateSlotError):
            check_edit(edited, [edited, other])
