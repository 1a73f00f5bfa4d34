"""Best-effort notification delivery."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import Depends, Request

from app.core.enums import PushDeliveryStatusEnum
from app.core.metrics import record_push_delivery
from app.modules.notifications.push import PushSender, SendResult

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PushMessage:
    device_token: str
    title: str
    body: str


class NotificationsService:
    """Send push messages without ever failing the caller."""

    def __init__(self, sender: PushSender) -> None:
        self.sender = sender

    async def deliver(self, *messages: PushMessage) -> list[SendResult]:
        results: list[SendResult] = []
        for message in messages:
            try:
                result = await self.sender.send(message.device_token, (message.title, message.body))
            except Exception as exc:
                logger.exception("Push sender raised for %r", message.title)
                result = SendResult(success=False, message="oops! cannot send", error=str(exc))

            record_push_delivery(
                PushDeliveryStatusEnum.SENT if result.success else PushDeliveryStatusEnum.FAILED,
            )
            results.append(result)
        return results


def get_push_sender(request: Request) -> PushSender:
    """Return the sender built at application startup."""
    return request.app.state.push_sender


def get_notifications_service(sender: PushSender = Depends(get_push_sender)) -> NotificationsService:
    """Dependency provider for notifications service."""
    return NotificationsService(sender)
