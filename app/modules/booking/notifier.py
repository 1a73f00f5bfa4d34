"""Push notifications emitted by pair booking transitions."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from app.core.enums import PushDeliveryStatusEnum
from app.core.metrics import record_push_delivery
from app.modules.booking.models import PairBooking
from app.modules.identity.models import User
from app.modules.notifications.service import NotificationsService, PushMessage

logger = logging.getLogger(__name__)


class PairBookingNotifier:
    """Queue push messages for delivery after the request has committed.

    ``schedule`` receives ``(func, *args)`` and is expected to run it later,
    e.g. ``BackgroundTasks.add_task``.
    """

    def __init__(self, notifications: NotificationsService, schedule: Callable[..., Any]) -> None:
        self.notifications = notifications
        self.schedule = schedule

    def booking_requested(self, booking: PairBooking, requester: User, recipient: User) -> None:
        self._push(
            recipient,
            "New pair slot request",
            f"{requester.name} wants to meet on {booking.date.isoformat()} "
            f"at {booking.start_time}-{booking.end_time}.",
        )

    def booking_approved(self, booking: PairBooking, approver: User, recipient: User | None) -> None:
        self._push(
            recipient,
            "Pair slot approved",
            f"{approver.name} approved your slot on {booking.date.isoformat()} "
            f"at {booking.start_time}-{booking.end_time}.",
        )

    def booking_cancelled(self, booking: PairBooking, actor: User, recipient: User | None) -> None:
        self._push(
            recipient,
            "Pair slot cancelled",
            f"{actor.name} cancelled the slot on {booking.date.isoformat()} "
            f"at {booking.start_time}-{booking.end_time}.",
        )

    def _push(self, recipient: User | None, title: str, body: str) -> None:
        if recipient is None or not recipient.device_token:
            logger.debug("Skipping push %r: recipient has no device token", title)
            record_push_delivery(PushDeliveryStatusEnum.SKIPPED)
            return
        self.schedule(
            self.notifications.deliver,
            PushMessage(device_token=recipient.device_token, title=title, body=body),
        )
