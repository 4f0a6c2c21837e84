# backend/slotwise/services/intervals.py
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Interval:
    """Half-open time range [start, end)."""
    start: datetime
    end: datetime


def overlaps(a: Interval, b: Interval) -> bool:
    """
    True when the two ranges share at least one instant.
    Touching ranges (a.end == b.start) do not overlap: back-to-back is allowed.
    """
    return a.start < b.end and b.start < a.end


def overlaps_any(span: Interval, others) -> bool:
    return any(overlaps(span, o) for o in others)
