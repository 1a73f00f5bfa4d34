"""Core enums used across modules."""

from enum import StrEnum


class RoleEnum(StrEnum):
    """System roles."""

    USER = "user"
    ADMIN = "admin"


class PairBookingStatusEnum(StrEnum):
    """Pair booking state derived from the approval flag."""

    PENDING = "pending"
    APPROVED = "approved"


class PushDeliveryStatusEnum(StrEnum):
    """Outcome of a push delivery attempt."""

    SENT = "sent"
    FAILED = "failed"
    SKIPPED = "skipped"
