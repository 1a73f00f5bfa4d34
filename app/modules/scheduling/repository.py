"""Scheduling repository layer."""

from __future__ import annotations

from datetime import date
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.modules.scheduling.models import DaySlotSet, TimeSlot
from app.modules.scheduling.slot_generator import GeneratedSlot


class SchedulingRepository:
    """DB access for the global slot store."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_day_by_date(self, day: date) -> DaySlotSet | None:
        stmt = select(DaySlotSet).options(selectinload(DaySlotSet.slots)).where(DaySlotSet.date == day)
        return await self.session.scalar(stmt)

    async def replace_day(
        self,
        day: date,
        opens_at: str,
        closes_at: str,
        duration_minutes: int,
        created_by_admin_id: UUID,
        slots: list[GeneratedSlot],
    ) -> DaySlotSet:
        existing = await self.get_day_by_date(day)
        if existing is not None:
            await self.session.delete(existing)
            await self.session.flush()

        day_slot_set = DaySlotSet(
            date=day,
            opens_at=opens_at,
            closes_at=closes_at,
            duration_minutes=duration_minutes,
            created_by_admin_id=created_by_admin_id,
            slots=[
                TimeSlot(position=position, start_time=slot.start_time, end_time=slot.end_time)
                for position, slot in enumerate(slots)
            ],
        )
        self.session.add(day_slot_set)
        await self.session.flush()
        return day_slot_set

    async def delete_day(self, day_slot_set: DaySlotSet) -> None:
        await self.session.delete(day_slot_set)
        await self.session.flush()

    async def mark_slot_booked(self, slot: TimeSlot, booked_by_id: UUID) -> TimeSlot:
        slot.is_booked = True
        slot.is_approved = True
        slot.booked_by_id = booked_by_id
        await self.session.flush()
        return slot

    async def release_slot(self, slot: TimeSlot) -> TimeSlot:
        slot.is_booked = False
        slot.is_approved = False
        slot.booked_by_id = None
        await self.session.flush()
        return slot
