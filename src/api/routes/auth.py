"""Authentication routes.

This module exposes the current user's account status and lets users with
several roles pick the one they act as.
"""

import logging

from fastapi import APIRouter, HTTPException, Response, status

from api.errors import to_http_exception
from config import SELECTED_ROLE_COOKIE_NAME
from core.dependencies import ApiClientDep
from core.exceptions import RemoteRequestError
from schemas.user import SelectRoleRequest, UserStatus
from utils.route_access import dashboard_path

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.get("/status", response_model=UserStatus, summary="Current account status")
async def get_status(client: ApiClientDep) -> UserStatus:
    try:
        return await client.get_user_status()
    except RemoteRequestError as e:
        raise to_http_exception(e)


@router.post("/select-role", summary="Select the active role")
async def select_role(req: SelectRoleRequest, response: Response, client: ApiClientDep) -> dict:
    """Store the role a multi-role user acts as.

    Args:
        req: The chosen role.
        response: Outgoing response, used to set the role cookie.
        client: Injected remote API client.

    Returns:
        Dictionary with the role and the dashboard to open.

    Raises:
        HTTPException: If the user does not hold the role.
    """
    try:
        user_status = await client.get_user_status()
    except RemoteRequestError as e:
        raise to_http_exception(e)

    if req.role not in user_status.roles:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Role {req.role.value} is not assigned to this user.",
        )

    response.set_cookie(SELECTED_ROLE_COOKIE_NAME, req.role.value, path="/")
    logger.info("Selected role %s", req.role.value)
    return {"role": req.role.value, "redirect": dashboard_path(req.role)}
