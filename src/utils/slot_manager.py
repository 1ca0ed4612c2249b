"""Slot management module.

This module handles a mentor's slots: listing them, generating new ones from
availability settings, editing, archiving and deleting. Persistence happens
in the remote API; every batch is checked for duplicates against the
mentor's current slots before anything is sent.
"""

import logging
from typing import Dict, List, Optional

from core.exceptions import RemoteRequestError
from schemas.slot import Slot, SlotGenerationRequest, SlotStatus, SlotUpdate, SlotWindow
from utils.api_client import MentorConnectClient
from utils.conflict_checker import check_batch, check_edit
from utils.slot_generator import generate_from_request
from utils.week_calendar import group_slots_by_date

logger = logging.getLogger(__name__)


class SlotManager:
    """Manages a mentor's slots through the remote API."""

    def __init__(self, client: MentorConnectClient):
        """Initialize SlotManager.

        Args:
            client: Remote API client authenticated as the mentor.
        """
        self.client = client

    async def list_slots(
        self, mentor_id: str, status: Optional[SlotStatus] = None
    ) -> List[Slot]:
        """List a mentor's slots, keeping only ``status`` when given.

        The API filters by status too; filtering again here guards against
        a server that ignores the parameter.
        """
        slots = await self.client.list_slots(mentor_id, status)
        if status is not None:
            slots = [slot for slot in slots if slot.status == status]
        return slots

    async def list_slots_by_date(
        self, mentor_id: str, status: Optional[SlotStatus] = None
    ) -> Dict[str, List[Slot]]:
        return group_slots_by_date(await self.list_slots(mentor_id, status))

    def preview_slots(self, request: SlotGenerationRequest) -> List[SlotWindow]:
        """Generate slot windows without creating anything."""
        return generate_from_request(request)

    async def create_slots(self, mentor_id: str, request: SlotGenerationRequest) -> List[Slot]:
        """Generate and create slots for the selected days.

        Args:
            mentor_id: Owner of the new slots.
            request: Days and availability settings.

        Returns:
            The created slots. Empty if no slot fits the settings.

        Raises:
            DuplicateSlotError: If any generated slot already exists; nothing
                is created in that case.
            RemoteRequestError: If the API call fails.
        """
        windows = generate_from_request(request)
        if not windows:
            logger.info("Settings for mentor %s produced no slots", mentor_id)
            return []

        existing = await self.client.list_slots(mentor_id)
        check_batch(windows, existing)

        created = await self.client.create_slots(
            [window.to_payload(mentor_id) for window in windows]
        )
        logger.info("Created %d slots for mentor %s", len(created), mentor_id)
        return created

    async def update_slot(self, mentor_id: str, slot_id: str, update: SlotUpdate) -> Slot:
        """Save an edited slot after checking it against the mentor's others.

        Raises:
            RemoteRequestError: If the slot is unknown or the API call fails.
            DuplicateSlotError: If the edit collides with another slot.
            ValidationError: If the edited slot would not start before it ends.
        """
        existing = await self.client.list_slots(mentor_id)
        current = next((slot for slot in existing if slot.id == slot_id), None)
        if current is None:
            raise RemoteRequestError(f"Slot '{slot_id}' not found", status_code=404)

        edited = update.apply_to(current)
        check_edit(edited, existing)
        return await self.client.update_slot(slot_id, update.to_payload(current))

    async def archive_slot(self, slot_id: str) -> Slot:
        return await self.client.update_slot(slot_id, {"status": SlotStatus.ARCHIVED.value})

    async def delete_slot(self, slot_id: str) -> None:
        await self.client.delete_slot(slot_id)
        logger.info("Deleted slot %s", slot_id)
