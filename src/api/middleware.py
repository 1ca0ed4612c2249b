"""Role-based access middleware.

Runs on every request before routing. Public paths pass straight through;
everything else requires a credential whose account status is fetched from
the remote API and checked against the role route table.
"""

import logging
from typing import Awaitable, Callable, Optional

from fastapi import Request
from fastapi.responses import RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp

from config import HOME_PATH, SELECTED_ROLE_COOKIE_NAME
from core.dependencies import get_session_context
from core.exceptions import RemoteRequestError
from schemas.user import UserStatus
from utils.api_client import MentorConnectClient
from utils.route_access import decide_access, is_public_path

logger = logging.getLogger(__name__)

StatusLoader = Callable[[str], Awaitable[UserStatus]]


async def fetch_user_status(token: str) -> UserStatus:
    """Fetch the account status of the credential's owner."""
    async with MentorConnectClient(token=token) as client:
        return await client.get_user_status()


class RoleAccessMiddleware(BaseHTTPMiddleware):
    """Redirects navigation requests the current user may not make."""

    def __init__(self, app: ASGIApp, status_loader: StatusLoader = fetch_user_status):
        """Initialize the middleware.

        Args:
            app: The wrapped ASGI application.
            status_loader: Coroutine function returning the UserStatus for a
                token.
        """
        super().__init__(app)
        self.status_loader = status_loader

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path
        if is_public_path(path):
            return await call_next(request)

        context = get_session_context(request)
        if not context.is_authenticated:
            logger.info("No credential for %s, redirecting to %s", path, HOME_PATH)
            return RedirectResponse(HOME_PATH)

        user_status = await self._load_status(context.token)
        decision = decide_access(path, context, user_status)

        if decision.allowed:
            response = await call_next(request)
        else:
            logger.info("Redirecting %s to %s", path, decision.location)
            response = RedirectResponse(decision.location)

        if decision.persist_role is not None:
            response.set_cookie(SELECTED_ROLE_COOKIE_NAME, decision.persist_role.value, path="/")
        return response

    async def _load_status(self, token: str) -> Optional[UserStatus]:
        try:
            return await self.status_loader(token)
        except RemoteRequestError as e:
            logger.warning("Could not load user status: %s", e)
            return None
