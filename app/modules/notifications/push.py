"""Push notification transport."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Protocol

import firebase_admin
from firebase_admin import credentials, messaging

from app.core.config import Settings

logger = logging.getLogger(__name__)

FIREBASE_APP_NAME = "pairslots-push"


@dataclass(frozen=True, slots=True)
class SendResult:
    success: bool
    message: str
    response: dict[str, Any] | None = None
    error: str | None = None


class PushSender(Protocol):
    async def send(self, device_token: str, message: tuple[str, str]) -> SendResult: ...

    async def aclose(self) -> None: ...


class FCMPushSender:
    """Deliver notifications through Firebase Cloud Messaging.

    ``send`` never raises: SDK, credential and per-token errors are logged and
    returned as a failed ``SendResult`` so callers can treat delivery as best
    effort. The blocking SDK call runs in a worker thread.
    """

    def __init__(self, app: firebase_admin.App) -> None:
        self._app = app

    @classmethod
    def from_settings(cls, settings: Settings) -> FCMPushSender:
        if settings.push_firebase_credentials_file:
            credential = credentials.Certificate(settings.push_firebase_credentials_file)
        else:
            credential = credentials.ApplicationDefault()

        options: dict[str, Any] = {"httpTimeout": settings.push_timeout_seconds}
        if settings.push_firebase_project_id:
            options["projectId"] = settings.push_firebase_project_id

        try:
            app = firebase_admin.get_app(FIREBASE_APP_NAME)
        except ValueError:
            app = firebase_admin.initialize_app(credential, options, name=FIREBASE_APP_NAME)
            logger.info("Firebase app %s initialized", FIREBASE_APP_NAME)
        return cls(app)

    async def send(self, device_token: str, message: tuple[str, str]) -> SendResult:
        title, body = message
        push = messaging.Message(
            token=str(device_token),
            notification=messaging.Notification(title=title, body=body),
            data={},
        )
        try:
            message_id = await asyncio.to_thread(messaging.send, push, app=self._app)
        except Exception as exc:
            logger.warning("Error sending notification: %s", exc)
            return SendResult(success=False, message="oops! cannot send", error=str(exc))
        return SendResult(success=True, message="send successful", response={"message_id": message_id})

    async def aclose(self) -> None:
        firebase_admin.delete_app(self._app)


class LoggingPushSender:
    """Sender used when push delivery is disabled."""

    async def send(self, device_token: str, message: tuple[str, str]) -> SendResult:
        title, _ = message
        logger.info("Push disabled, dropping notification %r for token %s...", title, device_token[:8])
        return SendResult(success=True, message="push disabled")

    async def aclose(self) -> None:
        return None


def build_push_sender(settings: Settings) -> PushSender:
    """Build the process-wide sender from settings."""
    if settings.push_enabled:
        return FCMPushSender.from_settings(settings)
    return LoggingPushSender()
