"""Scheduling schemas."""

from __future__ import annotations

import datetime as dt
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class DaySlotWindow(BaseModel):
    """Working window and slot length used to generate a day."""

    start_time: str = Field(examples=["09:00"])
    end_time: str = Field(examples=["17:00"])
    duration: int = Field(examples=[30])


class DaySlotsCreate(DaySlotWindow):
    """Create or replace the slot set of a date."""

    date: dt.date


class GeneratedSlotRead(BaseModel):
    """Slot interval without persisted state."""

    model_config = ConfigDict(from_attributes=True)

    start_time: str
    end_time: str


class TimeSlotRead(BaseModel):
    """Persisted slot response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    position: int
    start_time: str
    end_time: str
    is_booked: bool
    is_approved: bool
    booked_by_id: UUID | None


class DaySlotSetRead(BaseModel):
    """Day slot set response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    date: dt.date
    opens_at: str
    closes_at: str
    duration_minutes: int
    slots: list[TimeSlotRead]
    created_at: dt.datetime
    updated_at: dt.datetime
