"""Booking API router."""

from __future__ import annotations

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, status

from app.modules.booking.schemas import (
    PairBookingApprovalRead,
    PairBookingCreate,
    PairBookingRead,
    PairBookingSummaryRead,
)
from app.modules.booking.service import PairBookingService, get_booking_service
from app.modules.identity.service import get_current_user
from app.modules.scheduling.schemas import TimeSlotRead

router = APIRouter(prefix="/bookings/pair-slots", tags=["booking"])


@router.post("", response_model=PairBookingRead, status_code=status.HTTP_201_CREATED)
async def request_pair_slot(
    payload: PairBookingCreate,
    service: PairBookingService = Depends(get_booking_service),
    current_user=Depends(get_current_user),
) -> PairBookingRead:
    """Ask another user to share a slot."""
    booking = await service.request_booking(payload, current_user)
    return PairBookingRead.model_validate(booking)


@router.patch("/{booking_id}/approve", response_model=PairBookingApprovalRead)
async def approve_pair_slot(
    booking_id: UUID,
    service: PairBookingService = Depends(get_booking_service),
    current_user=Depends(get_current_user),
) -> PairBookingApprovalRead:
    """Approve a pending pair slot request."""
    booking, slot = await service.approve_booking(booking_id, current_user)
    return PairBookingApprovalRead(
        booking=PairBookingRead.model_validate(booking),
        slot=TimeSlotRead.model_validate(slot),
    )


@router.delete("/{booking_id}", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_pair_slot(
    booking_id: UUID,
    service: PairBookingService = Depends(get_booking_service),
    current_user=Depends(get_current_user),
) -> None:
    """Cancel a pending or approved pair slot."""
    await service.cancel_booking(booking_id, current_user)


@router.get("/available/{day}/{with_user_id}", response_model=list[TimeSlotRead])
async def list_available_pair_slots(
    day: date,
    with_user_id: UUID,
    service: PairBookingService = Depends(get_booking_service),
    current_user=Depends(get_current_user),
) -> list[TimeSlotRead]:
    """List slots of a day that neither user of the pair has claimed."""
    slots = await service.list_available_pair_slots(day, current_user, with_user_id)
    return [TimeSlotRead.model_validate(slot) for slot in slots]


@router.get("/approved", response_model=list[PairBookingSummaryRead])
async def list_my_approved_pair_slots(
    service: PairBookingService = Depends(get_booking_service),
    current_user=Depends(get_current_user),
) -> list[PairBookingSummaryRead]:
    """List approved bookings of the current user."""
    return await service.list_approved(current_user)


@router.get("/pending-sent", response_model=list[PairBookingSummaryRead])
async def list_pending_sent(
    service: PairBookingService = Depends(get_booking_service),
    current_user=Depends(get_current_user),
) -> list[PairBookingSummaryRead]:
    """List pending requests the current user sent."""
    return await service.list_pending_sent(current_user)


@router.get("/pending-received", response_model=list[PairBookingSummaryRead])
async def list_pending_received(
    service: PairBookingService = Depends(get_booking_service),
    current_user=Depends(get_current_user),
) -> list[PairBookingSummaryRead]:
    """List pending requests waiting for the current user."""
    return await service.list_pending_received(current_user)
