"""Scheduling API router."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, status

from app.modules.identity.service import get_current_user
from app.modules.scheduling.schemas import DaySlotSetRead, DaySlotsCreate, DaySlotWindow, GeneratedSlotRead
from app.modules.scheduling.service import SchedulingService, get_scheduling_service

router = APIRouter(prefix="/scheduling", tags=["scheduling"])


@router.post("/days", response_model=DaySlotSetRead, status_code=status.HTTP_201_CREATED)
async def create_day_slots(
    payload: DaySlotsCreate,
    service: SchedulingService = Depends(get_scheduling_service),
    current_user=Depends(get_current_user),
) -> DaySlotSetRead:
    """Create or replace the global slots of a date."""
    day_slot_set = await service.create_day_slots(payload, current_user)
    return DaySlotSetRead.model_validate(day_slot_set)


@router.post("/slots/preview", response_model=list[GeneratedSlotRead])
async def preview_day_slots(
    payload: DaySlotWindow,
    service: SchedulingService = Depends(get_scheduling_service),
    _=Depends(get_current_user),
) -> list[GeneratedSlotRead]:
    """Show the slots a window would produce without saving them."""
    return [GeneratedSlotRead.model_validate(slot) for slot in service.preview_day_slots(payload)]


@router.get("/days/{day}", response_model=DaySlotSetRead)
async def get_day_slots(
    day: date,
    service: SchedulingService = Depends(get_scheduling_service),
    _=Depends(get_current_user),
) -> DaySlotSetRead:
    """Return the global slots of a date."""
    day_slot_set = await service.get_day_slots(day)
    return DaySlotSetRead.model_validate(day_slot_set)


@router.delete("/days/{day}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_day_slots(
    day: date,
    service: SchedulingService = Depends(get_scheduling_service),
    current_user=Depends(get_current_user),
) -> None:
    """Delete the global slots of a date."""
    await service.delete_day_slots(day, current_user)
