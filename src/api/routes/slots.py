"""Slot management routes.

Mentors list, generate, edit, archive and delete their own slots. The
mentor is always the user the credential belongs to.
"""

from typing import List, Optional

from fastapi import APIRouter, Query, Response, status

from api.errors import to_http_exception
from config import SLOT_SETTINGS_COOKIE_NAME, SLOT_SETTINGS_MAX_AGE
from core.dependencies import CurrentUserIdDep, SlotManagerDep
from core.exceptions import MentorConnectError
from schemas.slot import Slot, SlotGenerationRequest, SlotStatus, SlotUpdate, SlotWindow
from utils.week_calendar import WeekDay, current_week

router = APIRouter(prefix="/api", tags=["Slots"])


@router.get("/calendar/week", response_model=List[WeekDay], summary="Days of the current week")
def get_week() -> List[WeekDay]:
    return current_week()


@router.get("/slots", response_model=List[Slot], summary="List own slots")
async def list_slots(
    mentor_id: CurrentUserIdDep,
    slot_manager: SlotManagerDep,
    status_filter: Optional[SlotStatus] = Query(default=None, alias="status"),
) -> List[Slot]:
    try:
        return await slot_manager.list_slots(mentor_id, status_filter)
    except MentorConnectError as e:
        raise to_http_exception(e)


@router.post("/slots/preview", response_model=List[SlotWindow], summary="Preview generated slots")
def preview_slots(req: SlotGenerationRequest, slot_manager: SlotManagerDep) -> List[SlotWindow]:
    try:
        return slot_manager.preview_slots(req)
    except MentorConnectError as e:
        raise to_http_exception(e)


@router.post(
    "/slots",
    response_model=List[Slot],
    status_code=status.HTTP_201_CREATED,
    summary="Generate and create slots",
)
async def create_slots(
    req: SlotGenerationRequest,
    response: Response,
    mentor_id: CurrentUserIdDep,
    slot_manager: SlotManagerDep,
) -> List[Slot]:
    """Create slots for the selected days.

    When ``save_settings`` is set, the settings are stored in a cookie once
    the slots are created and prefill the slot management page.

    Args:
        req: Days and availability settings.
        response: Response the settings cookie is set on.
        mentor_id: Current user, the owner of the new slots.
        slot_manager: Injected SlotManager instance.

    Returns:
        The created slots.

    Raises:
        HTTPException: 409 if any slot already exists, in which case none
            are created.
    """
    try:
        created = await slot_manager.create_slots(mentor_id, req)
    except MentorConnectError as e:
        raise to_http_exception(e)
    if req.save_settings:
        response.set_cookie(
            SLOT_SETTINGS_COOKIE_NAME,
            req.settings().to_cookie(),
            max_age=SLOT_SETTINGS_MAX_AGE,
            samesite="lax",
        )
    return created


@router.put("/slots/{slot_id}", response_model=Slot, summary="Edit a slot")
async def update_slot(
    slot_id: str,
    req: SlotUpdate,
    mentor_id: CurrentUserIdDep,
    slot_manager: SlotManagerDep,
) -> Slot:
    try:
        return await slot_manager.update_slot(mentor_id, slot_id, req)
    except MentorConnectError as e:
        raise to_http_exception(e)


@router.post("/slots/{slot_id}/archive", response_model=Slot, summary="Archive a slot")
async def archive_slot(slot_id: str, slot_manager: SlotManagerDep) -> Slot:
    try:
        return await slot_manager.archive_slot(slot_id)
    except MentorConnectError as e:
        raise to_http_exception(e)


@router.delete(
    "/slots/{slot_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a slot"
)
async def delete_slot(slot_id: str, slot_manager: SlotManagerDep) -> Response:
    try:
        await slot_manager.delete_slot(slot_id)
    except MentorConnectError as e:
        raise to_http_exception(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
