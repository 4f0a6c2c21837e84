# backend/slotwise/services/slots.py
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from ..core.errors import InvalidInputError
from .intervals import Interval, overlaps_any

DEFAULT_BUFFER_MIN = 15
DEFAULT_STEP_MIN = 30


@dataclass(frozen=True)
class AvailableSlot:
    start: datetime


def generate_slots(window: Interval, duration: int, conflicts,
                   buffer: int = DEFAULT_BUFFER_MIN,
                   step: int = DEFAULT_STEP_MIN) -> list[AvailableSlot]:
    """
    Walk the window in `step` minutes and keep every start whose buffered span
    [start, start + duration + buffer) fits inside the window and hits no conflict.

    The returned start is unbuffered; the buffer only keeps slots apart.
    """
    if duration <= 0:
        raise InvalidInputError(f"duration must be positive, got {duration}")
    if step <= 0:
        raise InvalidInputError(f"step must be positive, got {step}")
    if buffer < 0:
        raise InvalidInputError(f"buffer must not be negative, got {buffer}")

    # walk in UTC: same-zone aware arithmetic is wall-clock and drifts across DST
    cur = window.start.astimezone(timezone.utc)
    end = window.end.astimezone(timezone.utc)
    span = timedelta(minutes=duration + buffer)
    step_td = timedelta(minutes=step)

    slots: list[AvailableSlot] = []
    while cur + span <= end:
        if not overlaps_any(Interval(cur, cur + span), conflicts):
            slots.append(AvailableSlot(start=cur))
        cur += step_td
    return slots
