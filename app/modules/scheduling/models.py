"""Scheduling ORM models."""

from __future__ import annotations

import datetime as dt
from uuid import UUID

from sqlalchemy import Boolean, Date, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base, BaseModelMixin


class DaySlotSet(BaseModelMixin, Base):
    """All bookable slots of one calendar date, generated by an admin."""

    __tablename__ = "day_slot_sets"

    date: Mapped[dt.date] = mapped_column(Date, unique=True, nullable=False, index=True)
    opens_at: Mapped[str] = mapped_column(String(5), nullable=False)
    closes_at: Mapped[str] = mapped_column(String(5), nullable=False)
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False)
    created_by_admin_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    slots: Mapped[list["TimeSlot"]] = relationship(
        back_populates="day",
        order_by="TimeSlot.position",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class TimeSlot(BaseModelMixin, Base):
    """One interval of a day slot set with its global booking flags."""

    __tablename__ = "time_slots"
    __table_args__ = (UniqueConstraint("day_slot_set_id", "position", name="uq_time_slots_day_position"),)

    day_slot_set_id: Mapped[UUID] = mapped_column(
        ForeignKey("day_slot_sets.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    start_time: Mapped[str] = mapped_column(String(5), nullable=False)
    end_time: Mapped[str] = mapped_column(String(5), nullable=False)
    is_booked: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_approved: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    booked_by_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    day: Mapped[DaySlotSet] = relationship(back_populates="slots")
