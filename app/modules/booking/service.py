"""Booking business logic layer."""

from __future__ import annotations

import logging
from datetime import date
from uuid import UUID

from fastapi import BackgroundTasks, Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.database import get_db_session
from app.modules.booking.models import PairBooking
from app.modules.booking.notifier import PairBookingNotifier
from app.modules.booking.repository import BookingRepository
from app.modules.booking.schemas import PairBookingCreate, PairBookingSummaryRead
from app.modules.identity.models import User
from app.modules.identity.repository import IdentityRepository
from app.modules.identity.schemas import UserSummaryRead
from app.modules.notifications.service import NotificationsService, get_notifications_service
from app.modules.scheduling.models import TimeSlot
from app.modules.scheduling.repository import SchedulingRepository
from app.shared.exceptions import ConflictException, ForbiddenException, NotFoundException
from app.shared.utils import utc_now

logger = logging.getLogger(__name__)


def _participant_ids(booking: PairBooking) -> list[UUID]:
    return [participant.user_id for participant in booking.participants]


def _other_user(booking: PairBooking, viewer_id: UUID) -> User | None:
    for participant in booking.participants:
        if participant.user_id != viewer_id:
            return participant.user
    return None


class PairBookingService:
    """Pair booking state machine: request, approve, cancel and listings.

    A booking is pending until one participant approves it; approval is
    final. Cancellation by either participant deletes the booking in any
    state.
    """

    def __init__(
        self,
        booking_repository: BookingRepository,
        scheduling_repository: SchedulingRepository,
        identity_repository: IdentityRepository,
        notifier: PairBookingNotifier,
        *,
        allow_requester_approval: bool = True,
        release_slot_on_cancel: bool = False,
    ) -> None:
        self.booking_repository = booking_repository
        self.scheduling_repository = scheduling_repository
        self.identity_repository = identity_repository
        self.notifier = notifier
        self.allow_requester_approval = allow_requester_approval
        self.release_slot_on_cancel = release_slot_on_cancel

    async def _resolve_slot(self, booking: PairBooking) -> TimeSlot:
        """Find the global slot holding the booking's interval.

        The slot at ``slot_index`` wins when its times still match; after a
        regeneration that shifted positions the first slot with the same
        ``(start_time, end_time)`` is used instead.
        """
        day_slot_set = await self.scheduling_repository.get_day_by_date(booking.date)
        if day_slot_set is None:
            raise NotFoundException("No slots found for this date")

        fallback: TimeSlot | None = None
        for slot in day_slot_set.slots:
            if slot.start_time != booking.start_time or slot.end_time != booking.end_time:
                continue
            if slot.position == booking.slot_index:
                return slot
            if fallback is None:
                fallback = slot
        if fallback is None:
            raise NotFoundException("Slot not found")
        return fallback

    async def request_booking(self, payload: PairBookingCreate, actor: User) -> PairBooking:
        """Create a pending pair booking for one slot of a day."""
        if actor.id == payload.with_user_id:
            raise ConflictException("Cannot book a slot with yourself")

        day_slot_set = await self.scheduling_repository.get_day_by_date(payload.date)
        if day_slot_set is None:
            raise NotFoundException("No slots found for this date")

        slot = next((item for item in day_slot_set.slots if item.id == payload.slot_id), None)
        if slot is None:
            raise NotFoundException("Slot not found")

        counterparty = await self.identity_repository.get_user_by_id(payload.with_user_id)
        if counterparty is None or not counterparty.is_active:
            raise NotFoundException("User not found")

        user_ids = [actor.id, counterparty.id]
        existing = await self.booking_repository.find_claim(
            payload.date,
            slot.start_time,
            slot.end_time,
            user_ids,
        )
        if existing is not None:
            raise ConflictException("This slot is already booked or pending for one of the users")

        try:
            booking = await self.booking_repository.create_booking(
                day=payload.date,
                slot_index=slot.position,
                start_time=slot.start_time,
                end_time=slot.end_time,
                requested_by_id=actor.id,
                user_ids=user_ids,
            )
        except IntegrityError as exc:
            raise ConflictException("This slot is already booked or pending for one of the users") from exc

        logger.info("Pair booking %s requested by %s with %s", booking.id, actor.id, counterparty.id)
        self.notifier.booking_requested(booking, actor, counterparty)
        return booking

    async def approve_booking(self, booking_id: UUID, actor: User) -> tuple[PairBooking, TimeSlot]:
        """Approve a pending booking and mark its global slot as booked."""
        booking = await self.booking_repository.get_booking_by_id(booking_id)
        if booking is None:
            raise NotFoundException("Pair slot not found")

        if booking.is_approved:
            raise ConflictException("Slot already approved")

        if actor.id not in _participant_ids(booking):
            raise ForbiddenException("Not authorized to approve this slot")

        if not self.allow_requester_approval and actor.id == booking.requested_by_id:
            raise ForbiddenException("Only the invited user can approve this slot")

        slot = await self._resolve_slot(booking)

        if not await self.booking_repository.mark_approved(booking, utc_now()):
            raise ConflictException("Slot already approved")
        await self.scheduling_repository.mark_slot_booked(slot, actor.id)

        logger.info("Pair booking %s approved by %s", booking.id, actor.id)
        self.notifier.booking_approved(booking, actor, _other_user(booking, actor.id))
        return booking, slot

    async def cancel_booking(self, booking_id: UUID, actor: User) -> None:
        """Delete a booking on behalf of either participant."""
        booking = await self.booking_repository.get_booking_by_id(booking_id)
        if booking is None:
            raise NotFoundException("Pair slot not found")

        participant_ids = _participant_ids(booking)
        if actor.id not in participant_ids:
            raise ForbiddenException("Not authorized to cancel this slot")

        if self.release_slot_on_cancel and booking.is_approved:
            await self._release_slot(booking, participant_ids)

        recipient = _other_user(booking, actor.id)
        await self.booking_repository.delete_booking(booking)

        logger.info("Pair booking %s cancelled by %s", booking.id, actor.id)
        self.notifier.booking_cancelled(booking, actor, recipient)

    async def _release_slot(self, booking: PairBooking, participant_ids: list[UUID]) -> None:
        try:
            slot = await self._resolve_slot(booking)
        except NotFoundException:
            logger.info("Slot of pair booking %s no longer exists, nothing to release", booking.id)
            return
        # Leave flags set by another pair holding the same interval.
        if slot.booked_by_id in participant_ids:
            await self.scheduling_repository.release_slot(slot)

    async def list_available_pair_slots(self, day: date, actor: User, with_user_id: UUID) -> list[TimeSlot]:
        """Slots of ``day`` not yet claimed by either user of the pair."""
        if actor.id == with_user_id:
            raise ConflictException("Cannot book a slot with yourself")

        day_slot_set = await self.scheduling_repository.get_day_by_date(day)
        if day_slot_set is None:
            return []

        claimed = await self.booking_repository.list_claimed_intervals(day, [actor.id, with_user_id])
        return [slot for slot in day_slot_set.slots if (slot.start_time, slot.end_time) not in claimed]

    async def list_approved(self, actor: User) -> list[PairBookingSummaryRead]:
        bookings = await self.booking_repository.list_for_user(actor.id, is_approved=True)
        return self._summaries(bookings, actor.id)

    async def list_pending_sent(self, actor: User) -> list[PairBookingSummaryRead]:
        bookings = await self.booking_repository.list_for_user(
            actor.id,
            is_approved=False,
            requested_by_id=actor.id,
        )
        return self._summaries(bookings, actor.id)

    async def list_pending_received(self, actor: User) -> list[PairBookingSummaryRead]:
        bookings = await self.booking_repository.list_for_user(
            actor.id,
            is_approved=False,
            not_requested_by_id=actor.id,
        )
        return self._summaries(bookings, actor.id)

    @staticmethod
    def _summaries(bookings: list[PairBooking], viewer_id: UUID) -> list[PairBookingSummaryRead]:
        summaries = []
        for booking in bookings:
            other_user = _other_user(booking, viewer_id)
            summaries.append(
                PairBookingSummaryRead(
                    id=booking.id,
                    date=booking.date,
                    start_time=booking.start_time,
                    end_time=booking.end_time,
                    other_user=UserSummaryRead.model_validate(other_user) if other_user is not None else None,
                ),
            )
        return summaries


async def get_booking_service(
    background_tasks: BackgroundTasks,
    session: AsyncSession = Depends(get_db_session),
    notifications: NotificationsService = Depends(get_notifications_service),
) -> PairBookingService:
    """Dependency provider for pair booking service."""
    settings = get_settings()
    return PairBookingService(
        booking_repository=BookingRepository(session),
        scheduling_repository=SchedulingRepository(session),
        identity_repository=IdentityRepository(session),
        notifier=PairBookingNotifier(notifications, background_tasks.add_task),
        allow_requester_approval=settings.booking_allow_requester_approval,
        release_slot_on_cancel=settings.booking_release_slot_on_cancel,
    )
