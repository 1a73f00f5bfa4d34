"""Booking repository layer."""

from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from sqlalchemy import Select, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.modules.booking.models import PairBooking, PairBookingParticipant


class BookingRepository:
    """DB operations for pair bookings."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create_booking(
        self,
        day: date,
        slot_index: int,
        start_time: str,
        end_time: str,
        requested_by_id: UUID,
        user_ids: list[UUID],
    ) -> PairBooking:
        booking = PairBooking(
            date=day,
            slot_index=slot_index,
            start_time=start_time,
            end_time=end_time,
            requested_by_id=requested_by_id,
            is_approved=False,
            participants=[
                PairBookingParticipant(user_id=user_id, date=day, start_time=start_time, end_time=end_time)
                for user_id in user_ids
            ],
        )
        self.session.add(booking)
        await self.session.flush()
        return booking

    async def get_booking_by_id(self, booking_id: UUID) -> PairBooking | None:
        stmt = (
            select(PairBooking)
            .options(selectinload(PairBooking.participants).selectinload(PairBookingParticipant.user))
            .where(PairBooking.id == booking_id)
        )
        return await self.session.scalar(stmt)

    async def find_claim(
        self,
        day: date,
        start_time: str,
        end_time: str,
        user_ids: list[UUID],
    ) -> PairBooking | None:
        stmt = (
            select(PairBooking)
            .join(PairBookingParticipant, PairBookingParticipant.booking_id == PairBooking.id)
            .where(
                PairBooking.date == day,
                PairBooking.start_time == start_time,
                PairBooking.end_time == end_time,
                PairBookingParticipant.user_id.in_(user_ids),
            )
            .limit(1)
        )
        return await self.session.scalar(stmt)

    async def list_claimed_intervals(self, day: date, user_ids: list[UUID]) -> set[tuple[str, str]]:
        stmt = (
            select(PairBooking.start_time, PairBooking.end_time)
            .join(PairBookingParticipant, PairBookingParticipant.booking_id == PairBooking.id)
            .where(PairBooking.date == day, PairBookingParticipant.user_id.in_(user_ids))
            .distinct()
        )
        rows = (await self.session.execute(stmt)).all()
        return {(row.start_time, row.end_time) for row in rows}

    async def mark_approved(self, booking: PairBooking, approved_at: datetime) -> bool:
        """Flip ``is_approved`` only if it is still false; return whether it did."""
        stmt = (
            update(PairBooking)
            .where(PairBooking.id == booking.id, PairBooking.is_approved.is_(False))
            .values(is_approved=True, approved_at=approved_at)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        if result.rowcount != 1:
            return False
        booking.is_approved = True
        booking.approved_at = approved_at
        return True

    async def delete_booking(self, booking: PairBooking) -> None:
        await self.session.delete(booking)
        await self.session.flush()

    async def list_for_user(
        self,
        user_id: UUID,
        *,
        is_approved: bool,
        requested_by_id: UUID | None = None,
        not_requested_by_id: UUID | None = None,
    ) -> list[PairBooking]:
        stmt: Select[tuple[PairBooking]] = (
            select(PairBooking)
            .options(selectinload(PairBooking.participants).selectinload(PairBookingParticipant.user))
            .join(PairBookingParticipant, PairBookingParticipant.booking_id == PairBooking.id)
            .where(PairBookingParticipant.user_id == user_id, PairBooking.is_approved.is_(is_approved))
        )
        if requested_by_id is not None:
            stmt = stmt.where(PairBooking.requested_by_id == requested_by_id)
        if not_requested_by_id is not None:
            stmt = stmt.where(PairBooking.requested_by_id != not_requested_by_id)

        stmt = stmt.order_by(PairBooking.date.desc(), PairBooking.start_time.asc())
        return list((await self.session.scalars(stmt)).all())
