"""Pure generation of fixed-length time slots for one day."""

from __future__ import annotations

import re
from collections.abc import Collection
from dataclasses import dataclass

from app.shared.exceptions import ValidationException

DEFAULT_ALLOWED_DURATIONS: tuple[int, ...] = (10, 20, 30, 40, 50, 60)

_TIME_PATTERN = re.compile(r"([0-1][0-9]|2[0-3]):([0-5][0-9])")


@dataclass(frozen=True, slots=True)
class GeneratedSlot:
    """Half-open interval [start_time, end_time) in HH:MM."""

    start_time: str
    end_time: str


def parse_time(value: str) -> int:
    """Convert zero-padded 24h HH:MM into minutes since midnight."""
    match = _TIME_PATTERN.fullmatch(value or "")
    if match is None:
        raise ValidationException("Invalid time format. Use HH:MM")
    return int(match.group(1)) * 60 + int(match.group(2))


def format_minutes(minutes: int) -> str:
    # Hours are not wrapped: a slot overrunning midnight ends at e.g. "24:10".
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def validate_duration(duration_minutes: int, allowed: Collection[int]) -> int:
    if duration_minutes not in allowed:
        allowed_text = ", ".join(str(item) for item in sorted(allowed))
        raise ValidationException(f"Duration must be one of {allowed_text} minutes")
    return duration_minutes


def generate_time_slots(
    start_time: str,
    end_time: str,
    duration_minutes: int,
    *,
    allowed_durations: Collection[int] = DEFAULT_ALLOWED_DURATIONS,
) -> list[GeneratedSlot]:
    """Split the [start_time, end_time) window into consecutive slots.

    Stepping stops once a slot would start at or after ``end_time``; the last
    slot is not clamped, so its end may run past ``end_time`` when the window
    is not a multiple of the duration.
    """
    start = parse_time(start_time)
    end = parse_time(end_time)
    validate_duration(duration_minutes, allowed_durations)

    if start >= end:
        raise ValidationException("Start time must be earlier than end time")

    return [
        GeneratedSlot(start_time=format_minutes(minute), end_time=format_minutes(minute + duration_minutes))
        for minute in range(start, end, duration_minutes)
    ]
