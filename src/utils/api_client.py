"""Remote API client.

This module wraps the persistence REST API (slots, bookings, users, courses
and user status). Every call is a single request: there is no retry and no
cancellation, and any failure is raised as RemoteRequestError.
"""

import logging
from typing import Any, Dict, List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel

from config import REMOTE_API_BASE_URL, REMOTE_API_TIMEOUT
from core.exceptions import RemoteRequestError
from schemas.booking import Booking, BookingCreate, Course
from schemas.slot import Slot, SlotStatus
from schemas.user import UserStatus, UserSummary

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class MentorConnectClient:
    """Async client for the remote persistence API.

    Use as an async context manager so the connection pool is closed:

        async with MentorConnectClient(token=token) as client:
            slots = await client.list_slots(mentor_id, SlotStatus.OPEN)
    """

    def __init__(
        self,
        token: Optional[str] = None,
        base_url: str = REMOTE_API_BASE_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            token: Bearer credential of the current user.
            base_url: Root URL of the remote API.
            transport: Optional httpx transport, used by tests.

        Raises:
            RemoteRequestError: If the token cannot be sent as a header value.
        """
        # Header values are ASCII only
        if token and not token.isascii():
            raise RemoteRequestError("Credential is not a valid header value")
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=REMOTE_API_TIMEOUT,
            transport=transport,
        )

    async def __aenter__(self) -> "MentorConnectClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error("%s %s failed: %s", method, path, e)
            raise RemoteRequestError(f"Request to {path} failed: {e}")

        if response.is_error:
            message = _error_message(response) or f"Request to {path} failed"
            logger.warning("%s %s returned %d: %s", method, path, response.status_code, message)
            raise RemoteRequestError(message, status_code=response.status_code)

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            raise RemoteRequestError(f"Invalid JSON from {path}", status_code=response.status_code)

    # --- Slots ---

    async def list_slots(
        self, mentor_id: str, status: Optional[SlotStatus] = None
    ) -> List[Slot]:
        """Fetch a mentor's slots, optionally only those with ``status``."""
        params = {"mentor": mentor_id}
        if status is not None:
            params["status"] = status.value
        data = await self._request("GET", "/slots", params=params)
        return _validate_list(Slot, data)

    async def create_slots(self, payload: List[Dict[str, Any]]) -> List[Slot]:
        """Create a batch of slots; returns them with their new ids."""
        data = await self._request("POST", "/slots", json=payload)
        return _validate_list(Slot, data)

    async def update_slot(self, slot_id: str, patch: Dict[str, Any]) -> Slot:
        data = await self._request("PUT", f"/slots/{slot_id}", json=patch)
        return _validate(Slot, data)

    async def delete_slot(self, slot_id: str) -> None:
        await self._request("DELETE", f"/slots/{slot_id}")

    # --- Bookings ---

    async def list_bookings(self, user_id: str) -> List[Booking]:
        data = await self._request("GET", "/bookings", params={"user": user_id})
        return _validate_list(Booking, data)

    async def create_booking(self, booking: BookingCreate) -> Booking:
        data = await self._request("POST", "/bookings", json=booking.to_payload())
        return _validate(Booking, data)

    # --- Users and courses ---

    async def get_user_status(self) -> UserStatus:
        data = await self._request("GET", "/get-user-status")
        return _validate(UserStatus, data)

    async def get_users(self, user_ids: List[str]) -> List[UserSummary]:
        if not user_ids:
            return []
        data = await self._request("GET", "/users", params={"ids": ",".join(user_ids)})
        return _validate_list(UserSummary, data)

    async def get_course(self, course_id: str) -> Course:
        data = await self._request("GET", f"/courses/{course_id}")
        return _validate(Course, data)


def _error_message(response: httpx.Response) -> Optional[str]:
    """Pull the ``error`` text out of an API error body, if there is one."""
    try:
        body = response.json()
    except ValueError:
        return response.text or None
    if isinstance(body, dict):
        return body.get("error") or body.get("message")
    return None


def _validate(model: Type[ModelT], data: Any) -> ModelT:
    try:
        return model.model_validate(data)
    except ValueError as e:
        raise RemoteRequestError(f"Unexpected {model.__name__} payload from the API: {e}")


def _validate_list(model: Type[ModelT], data: Any) -> List[ModelT]:
    return [_validate(model, item) for item in data or []]
