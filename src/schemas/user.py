"""User, role and session context schemas."""

from enum import Enum
from typing import List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    """Roles a platform user can hold."""

    ADMIN = "ADMIN"
    MENTOR = "MENTOR"
    STUDENT = "STUDENT"
    IA = "IA"
    LEADERSHIP = "LEADERSHIP"
    EC = "EC"
    TEACHER = "TEACHER"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["Role"]:
        """Return the matching role, or None for a missing/unknown name."""
        if not value:
            return None
        try:
            return cls(value.upper())
        except ValueError:
            return None


class AccountStatus(str, Enum):
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"


class UserStatus(BaseModel):
    """Payload of the remote ``/get-user-status`` endpoint."""

    status: AccountStatus
    roles: List[Role] = Field(default_factory=list)
    name: Optional[str] = None
    email: Optional[str] = None


class UserSummary(BaseModel):
    """A user as returned by the remote ``/users`` endpoint."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(alias="_id")
    name: Optional[str] = None
    email: Optional[str] = None


class SessionContext(BaseModel):
    """Client session state: the auth credential and the selected role.

    Built once per request from cookies and handed to whatever needs it.
    """

    model_config = ConfigDict(frozen=True)

    token: Optional[str] = None
    selected_role: Optional[Role] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    @classmethod
    def from_cookies(
        cls, cookies: Mapping[str, str], token_name: str, role_name: str
    ) -> "SessionContext":
        """Build a context from a cookie mapping.

        Args:
            cookies: Request cookies.
            token_name: Name of the credential cookie.
            role_name: Name of the selected role cookie.

        Returns:
            SessionContext; unknown role names are treated as unset.
        """
        return cls(
            token=cookies.get(token_name) or None,
            selected_role=Role.parse(cookies.get(role_name)),
        )


class SelectRoleRequest(BaseModel):
    role: Role
