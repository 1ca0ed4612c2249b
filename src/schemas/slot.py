"""Slot schema definitions.

This module defines the generated slot window, the persisted Slot entity as
exchanged with the remote API, and the request bodies used to generate and
edit slots.
"""

import base64
from datetime import time
from enum import Enum
from typing import Annotated, Any, Dict, List, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator, model_validator

import config
from core.exceptions import ParseError, ValidationError
from utils.time_parsing import (
    RANGE_SEPARATOR,
    format_clock_time,
    format_date,
    format_time_range,
    parse_clock_time,
    parse_date,
    parse_time_of_day,
)
from utils.week_calendar import day_name


class SlotStatus(str, Enum):
    OPEN = "Open"
    BOOKED = "Booked"
    ARCHIVED = "Archived"


def _normalize_date(value: str) -> str:
    try:
        return format_date(parse_date(value))
    except ParseError as e:
        raise ValueError(str(e))


def _normalize_clock(value: str) -> str:
    try:
        return format_clock_time(parse_clock_time(value))
    except ParseError as e:
        raise ValueError(str(e))


# dd-mm-yyyy, always zero-padded once validated
DateStamp = Annotated[str, AfterValidator(_normalize_date)]

# 24-hour HH:MM, always zero-padded once validated
ClockTime = Annotated[str, AfterValidator(_normalize_clock)]


class SlotWindow(BaseModel):
    """One bookable interval produced by the slot generator."""

    date: DateStamp = Field(description="The dd-mm-yyyy date of the slot.")
    start_time: time
    end_time: time
    display: str = Field(description="Human label, e.g. '10:00 AM - 10:30 AM'.")

    @model_validator(mode="after")
    def check_order(self) -> "SlotWindow":
        if self.start_time >= self.end_time:
            raise ValueError("Slot start time must be before its end time")
        return self

    @property
    def duration_minutes(self) -> int:
        start = self.start_time.hour * 60 + self.start_time.minute
        end = self.end_time.hour * 60 + self.end_time.minute
        return end - start

    def to_payload(self, mentor_id: str) -> Dict[str, Any]:
        """Wire form of a new Open slot owned by ``mentor_id``."""
        return {
            "date": self.date,
            "time": self.display,
            "startTime": format_clock_time(self.start_time),
            "endTime": format_clock_time(self.end_time),
            "status": SlotStatus.OPEN.value,
            "mentor": mentor_id,
        }


class Slot(BaseModel):
    """A slot persisted by the remote API."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(alias="_id")
    date: DateStamp
    time: str = Field(description="Display range, e.g. '2:00 PM - 2:30 PM'.")
    start_time: Optional[ClockTime] = Field(default=None, alias="startTime")
    end_time: Optional[ClockTime] = Field(default=None, alias="endTime")
    status: SlotStatus = SlotStatus.OPEN
    mentor_id: Optional[str] = Field(default=None, alias="mentor")

    @field_validator("mentor_id", mode="before")
    @classmethod
    def flatten_mentor(cls, value: Any) -> Any:
        # The API sometimes populates the mentor document
        if isinstance(value, dict):
            return value.get("_id")
        return value

    @model_validator(mode="after")
    def fill_clock_times(self) -> "Slot":
        """Derive missing HH:MM start/end values from the display label."""
        start_label, _, end_label = self.time.partition(RANGE_SEPARATOR)
        try:
            if not self.start_time:
                self.start_time = format_clock_time(parse_time_of_day(start_label.strip()))
            if not self.end_time and end_label:
                self.end_time = format_clock_time(parse_time_of_day(end_label.strip()))
        except ParseError as e:
            raise ValueError(str(e))
        return self


class SlotSettings(BaseModel):
    """Slot form settings a mentor can save for the next visit.

    Stored in a cookie as base64 encoded JSON so the value stays a valid
    cookie token.
    """

    week_days: List[str] = Field(default_factory=list, description="Full weekday names.")
    start_time: ClockTime = config.DEFAULT_SLOT_START_TIME
    end_time: ClockTime = config.DEFAULT_SLOT_END_TIME
    slot_duration: int = Field(default=config.DEFAULT_SLOT_DURATION_MINUTES, gt=0)
    buffer: int = Field(default=config.DEFAULT_BUFFER_MINUTES, ge=0)

    def to_cookie(self) -> str:
        return base64.urlsafe_b64encode(self.model_dump_json().encode()).decode("ascii")

    @classmethod
    def from_cookie(cls, value: Optional[str]) -> Optional["SlotSettings"]:
        """Decode a saved settings cookie, None if absent or unreadable."""
        if not value:
            return None
        try:
            return cls.model_validate_json(base64.urlsafe_b64decode(value.encode("ascii")))
        except ValueError:
            return None


class SlotGenerationRequest(BaseModel):
    """Availability settings submitted by a mentor for a set of days."""

    dates: List[DateStamp] = Field(min_length=1, description="Selected dd-mm-yyyy days.")
    start_time: ClockTime = config.DEFAULT_SLOT_START_TIME
    end_time: ClockTime = config.DEFAULT_SLOT_END_TIME
    slot_duration: int = Field(default=config.DEFAULT_SLOT_DURATION_MINUTES, gt=0)
    buffer: int = Field(default=config.DEFAULT_BUFFER_MINUTES, ge=0)
    save_settings: bool = Field(
        default=False, description="Remember these settings for the next visit."
    )

    def settings(self) -> SlotSettings:
        return SlotSettings(
            week_days=list(dict.fromkeys(day_name(stamp) for stamp in self.dates)),
            start_time=self.start_time,
            end_time=self.end_time,
            slot_duration=self.slot_duration,
            buffer=self.buffer,
        )


class SlotUpdate(BaseModel):
    """Editable fields of a slot. Unset fields are left unchanged."""

    date: Optional[DateStamp] = None
    start_time: Optional[ClockTime] = None
    end_time: Optional[ClockTime] = None
    status: Optional[SlotStatus] = None

    def apply_to(self, slot: Slot) -> Slot:
        """Return a copy of ``slot`` with this update applied.

        Raises:
            ValidationError: If the edited slot would not start before it ends.
        """
        updated = slot.model_copy(update=self.model_dump(exclude_none=True))
        start = parse_clock_time(updated.start_time)
        end = parse_clock_time(updated.end_time) if updated.end_time else start
        if start >= end:
            raise ValidationError("Slot start time must be before its end time")
        updated.time = format_time_range(start, end)
        return updated

    def to_payload(self, slot: Slot) -> Dict[str, Any]:
        """Wire form of the edited slot sent with ``PUT /slots/:id``."""
        updated = self.apply_to(slot)
        return {
            "date": updated.date,
            "time": updated.time,
            "startTime": updated.start_time,
            "endTime": updated.end_time,
            "status": updated.status.value,
        }
