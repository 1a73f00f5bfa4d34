"""Booking schemas."""

from __future__ import annotations

import datetime as dt
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from app.core.enums import PairBookingStatusEnum
from app.modules.identity.schemas import UserSummaryRead
from app.modules.scheduling.schemas import TimeSlotRead


class PairBookingCreate(BaseModel):
    """Request a slot of ``date`` together with another user."""

    date: dt.date
    slot_id: UUID
    with_user_id: UUID


class PairBookingRead(BaseModel):
    """Pair booking response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    date: dt.date
    slot_index: int
    start_time: str
    end_time: str
    user_ids: list[UUID]
    requested_by_id: UUID
    is_approved: bool
    status: PairBookingStatusEnum
    approved_at: dt.datetime | None
    created_at: dt.datetime
    updated_at: dt.datetime


class PairBookingApprovalRead(BaseModel):
    """Approved booking together with the global slot it now occupies."""

    booking: PairBookingRead
    slot: TimeSlotRead


class PairBookingSummaryRead(BaseModel):
    """Booking as seen by one participant."""

    id: UUID
    date: dt.date
    start_time: str
    end_time: str
    other_user: UserSummaryRead | None
