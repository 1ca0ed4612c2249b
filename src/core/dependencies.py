"""Dependency injection module for FastAPI.

This module provides dependency injection functions for FastAPI routes:
the per-request session context, the current user id carried by the
credential, and request-scoped remote API client and managers.
"""

from typing import Annotated, AsyncIterator

from fastapi import Depends, HTTPException, Request, status
from jose import JWTError, jwt

from config import SELECTED_ROLE_COOKIE_NAME, TOKEN_COOKIE_NAME
from schemas.user import SessionContext
from utils.api_client import MentorConnectClient
from utils.booking_manager import BookingManager
from utils.slot_manager import SlotManager

BEARER_PREFIX = "Bearer "


def get_session_context(request: Request) -> SessionContext:
    """Build the session context from request cookies.

    A ``Authorization: Bearer`` header is accepted when the token cookie is
    absent, so API clients without cookies can call the routes.

    Args:
        request: Incoming request.

    Returns:
        SessionContext for the request.
    """
    context = SessionContext.from_cookies(
        request.cookies, TOKEN_COOKIE_NAME, SELECTED_ROLE_COOKIE_NAME
    )
    if context.token is None:
        header = request.headers.get("Authorization", "")
        if header.startswith(BEARER_PREFIX) and header[len(BEARER_PREFIX):].strip():
            context = context.model_copy(
                update={"token": header[len(BEARER_PREFIX):].strip()}
            )
    return context


SessionContextDep = Annotated[SessionContext, Depends(get_session_context)]


def require_token(context: SessionContextDep) -> str:
    """Return the credential of the request.

    Raises:
        HTTPException: If the request carries no credential, or one that
            cannot be sent as a header value.
    """
    if not context.token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    if not context.token.isascii():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
        )
    return context.token


def get_current_user_id(token: Annotated[str, Depends(require_token)]) -> str:
    """Read the user id from the credential.

    The signature is verified by the remote API on every call, so the claims
    are only read here.

    Raises:
        HTTPException: If the token is malformed or has no ``user_id`` claim.
    """
    try:
        claims = jwt.get_unverified_claims(token)
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
        )
    user_id = claims.get("user_id")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
        )
    return str(user_id)


async def get_api_client(
    token: Annotated[str, Depends(require_token)],
) -> AsyncIterator[MentorConnectClient]:
    """Get a request-scoped remote API client authenticated as the caller."""
    async with MentorConnectClient(token=token) as client:
        yield client


ApiClientDep = Annotated[MentorConnectClient, Depends(get_api_client)]


def get_slot_manager(client: ApiClientDep) -> SlotManager:
    """Get SlotManager instance with request-scoped API client.

    Args:
        client: Remote API client.

    Returns:
        SlotManager instance.
    """
    return SlotManager(client)


def get_booking_manager(client: ApiClientDep) -> BookingManager:
    """Get BookingManager instance with request-scoped API client."""
    return BookingManager(client)


# Type aliases for dependency injection
CurrentUserIdDep = Annotated[str, Depends(get_current_user_id)]
SlotManagerDep = Annotated[SlotManager, Depends(get_slot_manager)]
BookingManagerDep = Annotated[BookingManager, Depends(get_booking_manager)]
