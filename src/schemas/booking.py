"""Booking schema definitions.

This module defines the session type enumeration, the Booking entity as
exchanged with the remote API, the booking creation payload and the
per-session view computed on read (lifecycle state and join action).
"""

from enum import Enum
from typing import Annotated, Any, Dict, List, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, model_validator

import config
from schemas.slot import DateStamp
from schemas.user import Role, UserSummary


class SessionType(str, Enum):
    """Kinds of connect session a student can book."""

    PEER_TO_PEER = "Peer-to-Peer"
    DOST_EC = "Dost / EC Connect"
    LEADERSHIP = "Leadership Connect"
    MENTOR = "Mentor Connect"

    @property
    def label(self) -> str:
        return _SESSION_TYPE_LABELS[self]

    @property
    def description(self) -> str:
        return _SESSION_TYPE_DESCRIPTIONS[self]

    @property
    def responder_role(self) -> Role:
        """The role of the person who takes this kind of session."""
        return _SESSION_TYPE_ROLES[self]

    @property
    def roster(self) -> str:
        """Course roster the eligible responders are drawn from."""
        return _SESSION_TYPE_ROSTERS[self]


_SESSION_TYPE_LABELS = {
    SessionType.PEER_TO_PEER: "Peer-to-Peer / IA Connect",
    SessionType.DOST_EC: "Dost / EC Connect",
    SessionType.LEADERSHIP: "Leadership Connect",
    SessionType.MENTOR: "Mentor Connect",
}

_SESSION_TYPE_DESCRIPTIONS = {
    SessionType.PEER_TO_PEER: "Discuss your progress, challenges, and goals with fellow peers or IAs.",
    SessionType.DOST_EC: "Book a session with EC support or Dost for academic and personal guidance.",
    SessionType.LEADERSHIP: "Engage in strategic conversations with leaders to gain insights on success.",
    SessionType.MENTOR: "Schedule a one-on-one session with a mentor to discuss your projects.",
}

_SESSION_TYPE_ROLES = {
    SessionType.PEER_TO_PEER: Role.IA,
    SessionType.DOST_EC: Role.EC,
    SessionType.LEADERSHIP: Role.LEADERSHIP,
    SessionType.MENTOR: Role.MENTOR,
}

_SESSION_TYPE_ROSTERS = {
    SessionType.PEER_TO_PEER: "ias",
    SessionType.DOST_EC: "ecs",
    SessionType.LEADERSHIP: "mentors",
    SessionType.MENTOR: "mentors",
}


class SessionMode(str, Enum):
    PRIVATE = "Private"
    PUBLIC = "Public"


class SessionState(str, Enum):
    """Lifecycle of a booked session relative to the current time."""

    UPCOMING = "Upcoming"
    ONGOING = "Ongoing"
    PAST = "Past"


# Booking status that ends a session regardless of the clock
COMPLETED_STATUS = "Completed"


def _flatten_ref(value: Any) -> Any:
    if isinstance(value, dict):
        return value.get("_id")
    return value


class SlotRef(BaseModel):
    """A booking's reference to its slot, with date and time copied for display."""

    model_config = ConfigDict(populate_by_name=True)

    slot_id: str = Field(alias="slotId")
    date: DateStamp
    time: str


class Booking(BaseModel):
    """A booking persisted by the remote API."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(alias="_id")
    student_id: Optional[str] = Field(default=None, alias="student")
    student_name: Optional[str] = None
    mentor_id: Optional[str] = Field(default=None, alias="mentor")
    mentor_name: Optional[str] = None
    session_type: SessionType = Field(alias="sessionType")
    mode: SessionMode
    slot: SlotRef
    agenda: str = ""
    status: str = "Booked"
    join_url: Optional[str] = Field(default=None, alias="zoomJoinUrl")

    @model_validator(mode="before")
    @classmethod
    def flatten_people(cls, data: Any) -> Any:
        """
        student and mentor come back either as ids or as populated documents
        """
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for key in ("student", "mentor"):
            person = data.get(key)
            if isinstance(person, dict):
                data.setdefault(f"{key}_name", person.get("name"))
                data[key] = _flatten_ref(person)
        return data


def _check_agenda(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Agenda is required")
    if len(value) > config.AGENDA_MAX_LENGTH:
        raise ValueError(f"Agenda must be at most {config.AGENDA_MAX_LENGTH} characters")
    return value


# Length is checked on the stripped text
Agenda = Annotated[str, AfterValidator(_check_agenda)]


class BookingCreate(BaseModel):
    """Payload of ``POST /bookings``."""

    model_config = ConfigDict(populate_by_name=True)

    student_id: str = Field(alias="student")
    mentor_id: str = Field(alias="mentor")
    session_type: SessionType = Field(alias="sessionType")
    mode: SessionMode
    slot: SlotRef
    agenda: Agenda

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class Course(BaseModel):
    """Course rosters used to find who can take each session type."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(alias="_id")
    name: Optional[str] = None
    ias: List[UserSummary] = Field(default_factory=list, alias="IAs")
    ecs: List[UserSummary] = Field(default_factory=list, alias="ECs")
    mentors: List[UserSummary] = Field(default_factory=list)

    def responder_ids(self, session_type: SessionType) -> List[str]:
        return [user.id for user in getattr(self, session_type.roster)]


class JoinAction(BaseModel):
    """Join button state; recomputed on every read, never stored."""

    disabled: bool
    label: str
    url: Optional[str] = None


class SessionView(BaseModel):
    """A booking together with its classification at read time."""

    booking: Booking
    state: SessionState
    join: JoinAction
    responder_role: Role


class BookingRequest(BaseModel):
    """Selections a student submits to book a session in one request."""

    session_type: SessionType
    mentor_id: str
    slot_id: str
    mode: SessionMode = SessionMode.PRIVATE
    agenda: Agenda
