"""Booking ORM models."""

from __future__ import annotations

import datetime as dt
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base, BaseModelMixin
from app.core.enums import PairBookingStatusEnum

if TYPE_CHECKING:
    from app.modules.identity.models import User


class PairBooking(BaseModelMixin, Base):
    """Two-user request to hold one slot of a day together.

    The slot is addressed by ``(date, slot_index)``; ``start_time`` and
    ``end_time`` record the interval that was requested so a regenerated day
    cannot silently rebind the booking to a different interval.
    """

    __tablename__ = "pair_bookings"

    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    slot_index: Mapped[int] = mapped_column(Integer, nullable=False)
    start_time: Mapped[str] = mapped_column(String(5), nullable=False)
    end_time: Mapped[str] = mapped_column(String(5), nullable=False)
    requested_by_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    is_approved: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)
    approved_at: Mapped[dt.datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    participants: Mapped[list["PairBookingParticipant"]] = relationship(
        back_populates="booking",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def user_ids(self) -> list[UUID]:
        return [participant.user_id for participant in self.participants]

    @property
    def status(self) -> PairBookingStatusEnum:
        return PairBookingStatusEnum.APPROVED if self.is_approved else PairBookingStatusEnum.PENDING


class PairBookingParticipant(BaseModelMixin, Base):
    """One user's claim on a wall-clock slot through a pair booking."""

    __tablename__ = "pair_booking_participants"
    __table_args__ = (
        UniqueConstraint(
            "user_id",
            "date",
            "start_time",
            "end_time",
            name="uq_pair_booking_participants_user_slot",
        ),
    )

    booking_id: Mapped[UUID] = mapped_column(
        ForeignKey("pair_bookings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    start_time: Mapped[str] = mapped_column(String(5), nullable=False)
    end_time: Mapped[str] = mapped_column(String(5), nullable=False)

    booking: Mapped[PairBooking] = relationship(back_populates="participants")
    user: Mapped["User"] = relationship(back_populates="pair_booking_claims")
