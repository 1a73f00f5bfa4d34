"""Scheduling business logic layer."""

from __future__ import annotations

import logging
from collections.abc import Collection
from datetime import date

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.database import get_db_session
from app.core.enums import RoleEnum
from app.modules.identity.models import User
from app.modules.scheduling.models import DaySlotSet
from app.modules.scheduling.repository import SchedulingRepository
from app.modules.scheduling.schemas import DaySlotsCreate, DaySlotWindow
from app.modules.scheduling.slot_generator import GeneratedSlot, generate_time_slots
from app.shared.exceptions import ForbiddenException, NotFoundException

logger = logging.getLogger(__name__)


class SchedulingService:
    """Global slot store: generate, replace and read day slot sets."""

    def __init__(self, repository: SchedulingRepository, allowed_durations: Collection[int]) -> None:
        self.repository = repository
        self.allowed_durations = allowed_durations

    def preview_day_slots(self, payload: DaySlotWindow) -> list[GeneratedSlot]:
        """Generate slots for a window without storing them."""
        return generate_time_slots(
            payload.start_time,
            payload.end_time,
            payload.duration,
            allowed_durations=self.allowed_durations,
        )

    async def create_day_slots(self, payload: DaySlotsCreate, actor: User) -> DaySlotSet:
        """Replace the slot set of ``payload.date`` (admin only)."""
        if actor.role.name != RoleEnum.ADMIN:
            raise ForbiddenException("Only admin can create slots")

        slots = self.preview_day_slots(payload)
        day_slot_set = await self.repository.replace_day(
            day=payload.date,
            opens_at=payload.start_time,
            closes_at=payload.end_time,
            duration_minutes=payload.duration,
            created_by_admin_id=actor.id,
            slots=slots,
        )
        logger.info("Generated %d slots for %s", len(slots), payload.date.isoformat())
        return day_slot_set

    async def get_day_slots(self, day: date) -> DaySlotSet:
        day_slot_set = await self.repository.get_day_by_date(day)
        if day_slot_set is None:
            raise NotFoundException("No slots found for this date")
        return day_slot_set

    async def delete_day_slots(self, day: date, actor: User) -> None:
        """Drop the slot set of a date (admin only)."""
        if actor.role.name != RoleEnum.ADMIN:
            raise ForbiddenException("Only admin can delete slots")
        day_slot_set = await self.get_day_slots(day)
        await self.repository.delete_day(day_slot_set)
        logger.info("Deleted slot set for %s", day.isoformat())


async def get_scheduling_service(session: AsyncSession = Depends(get_db_session)) -> SchedulingService:
    """Dependency provider for scheduling service."""
    return SchedulingService(
        SchedulingRepository(session),
        allowed_durations=get_settings().slot_allowed_durations,
    )
