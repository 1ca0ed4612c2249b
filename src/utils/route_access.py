"""Role-based route access decisions.

Given the session context of a request, the user's account status as
reported by the remote API and the requested path, decide whether the
request proceeds or is redirected. Any failure to learn the user's status
is treated like a missing credential.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from config import (
    FALLBACK_DASHBOARD_PATH,
    HOME_PATH,
    PENDING_APPROVAL_PATH,
    PUBLIC_PATH_PREFIXES,
    PUBLIC_PATHS,
    SELECT_ROLE_PATH,
)
from schemas.user import AccountStatus, Role, SessionContext, UserStatus

logger = logging.getLogger(__name__)

# Path prefixes each role may open; the first entry is its dashboard
ROLE_ROUTES: Dict[Role, Tuple[str, ...]] = {
    Role.ADMIN: ("/admin/dashboard", "/admin/manage-users", "/admin/reports", "/admin/settings"),
    Role.MENTOR: (
        "/mentor/dashboard",
        "/mentor/schedule",
        "/mentor/tasks",
        "/mentor/support",
        "/mentor/manage-slots",
    ),
    Role.STUDENT: (
        "/student/dashboard",
        "/student/lectures",
        "/student/assignments",
        "/student/notifications",
        "/student/slot-booking",
    ),
    Role.IA: ("/ia/dashboard", "/ia/performance"),
    Role.LEADERSHIP: ("/leadership/dashboard", "/leadership/analytics", "/leadership/reports"),
    Role.EC: ("/ec/dashboard", "/ec/events"),
    Role.TEACHER: ("/teacher/dashboard",),
}


class AccessAction(str, Enum):
    ALLOW = "allow"
    REDIRECT = "redirect"


@dataclass(frozen=True)
class AccessDecision:
    """Outcome of an access check.

    Attributes:
        action: Whether the request proceeds or is redirected.
        location: Redirect target, set only for redirects.
        persist_role: Role to store as the selected role, if it changed.
    """

    action: AccessAction
    location: Optional[str] = None
    persist_role: Optional[Role] = None

    @property
    def allowed(self) -> bool:
        return self.action == AccessAction.ALLOW

    @classmethod
    def allow(cls, persist_role: Optional[Role] = None) -> "AccessDecision":
        return cls(AccessAction.ALLOW, persist_role=persist_role)

    @classmethod
    def redirect(cls, location: str, persist_role: Optional[Role] = None) -> "AccessDecision":
        return cls(AccessAction.REDIRECT, location=location, persist_role=persist_role)


def is_public_path(path: str) -> bool:
    return path in PUBLIC_PATHS or path.startswith(PUBLIC_PATH_PREFIXES)


def dashboard_path(role: Optional[Role]) -> str:
    """First listed path of ``role``, or the generic dashboard."""
    routes = ROLE_ROUTES.get(role) if role else None
    return routes[0] if routes else FALLBACK_DASHBOARD_PATH


def role_allows(role: Role, path: str) -> bool:
    return path.startswith(ROLE_ROUTES.get(role, ()))


def _check_role_path(
    role: Role, path: str, persist_role: Optional[Role] = None
) -> AccessDecision:
    if role_allows(role, path):
        return AccessDecision.allow(persist_role)
    logger.info("Role %s may not open %s, redirecting to its dashboard", role.value, path)
    return AccessDecision.redirect(dashboard_path(role), persist_role)


def decide_access(
    path: str, context: SessionContext, user_status: Optional[UserStatus]
) -> AccessDecision:
    """Decide what happens to a navigation request.

    Args:
        path: The requested path.
        context: Credential and selected role of the requester.
        user_status: Status from the remote API, or None if it could not be
            fetched.

    Returns:
        AccessDecision for the request.
    """
    if is_public_path(path):
        return AccessDecision.allow()

    if not context.is_authenticated or user_status is None:
        return AccessDecision.redirect(HOME_PATH)

    if user_status.status == AccountStatus.PENDING:
        if path.startswith(PENDING_APPROVAL_PATH):
            return AccessDecision.allow()
        return AccessDecision.redirect(PENDING_APPROVAL_PATH)

    roles = list(dict.fromkeys(user_status.roles))
    if len(roles) > 1:
        selected = context.selected_role
        if selected is None or selected not in roles:
            return AccessDecision.redirect(SELECT_ROLE_PATH)
        return _check_role_path(selected, path)

    if len(roles) == 1:
        role = roles[0]
        persist = role if context.selected_role != role else None
        return _check_role_path(role, path, persist)

    # Active account without any role
    logger.warning("Active user has no roles, treating as unauthenticated")
    return AccessDecision.redirect(HOME_PATH)
