# backend/slotwise/services/policy.py
from dataclasses import dataclass
from datetime import date, datetime, time
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..core.errors import InvalidPolicyError
from .intervals import Interval
from .ports import AvailabilityStore

DEFAULT_START_HOUR = 9
DEFAULT_END_HOUR = 17
DEFAULT_WEEKDAYS = frozenset({1, 2, 3, 4, 5})  # 0 = Sunday


@dataclass(frozen=True)
class AvailabilityPolicy:
    booking_link_id: int
    start_hour: int
    end_hour: int
    allowed_weekdays: frozenset
    timezone: str

    @property
    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    def allows(self, day: date) -> bool:
        return weekday_index(day) in self.allowed_weekdays

    def window_for(self, day: date) -> Interval:
        """[start_hour:00, end_hour:00) of `day`, wall-clock in the policy zone."""
        tz = self.zone
        return Interval(
            datetime.combine(day, time(self.start_hour), tzinfo=tz),
            datetime.combine(day, time(self.end_hour), tzinfo=tz),
        )


def weekday_index(day: date) -> int:
    """0 = Sunday ... 6 = Saturday."""
    return (day.weekday() + 1) % 7


def validate_policy(policy: AvailabilityPolicy) -> AvailabilityPolicy:
    link = policy.booking_link_id
    for name, hour in (("start_hour", policy.start_hour), ("end_hour", policy.end_hour)):
        if not isinstance(hour, int) or not 0 <= hour <= 23:
            raise InvalidPolicyError(f"{name}={hour!r} out of range 0-23 (link {link})")
    if policy.start_hour >= policy.end_hour:
        raise InvalidPolicyError(
            f"start_hour {policy.start_hour} must be before end_hour {policy.end_hour} (link {link})"
        )
    if not policy.allowed_weekdays:
        raise InvalidPolicyError(f"allowed_weekdays is empty (link {link})")
    bad = [d for d in policy.allowed_weekdays if not isinstance(d, int) or not 0 <= d <= 6]
    if bad:
        raise InvalidPolicyError(f"weekdays out of range 0-6: {sorted(bad)} (link {link})")
    try:
        ZoneInfo(policy.timezone)
    except (ZoneInfoNotFoundError, ValueError, TypeError):
        raise InvalidPolicyError(f"unknown timezone {policy.timezone!r} (link {link})")
    return policy


def default_policy(booking_link_id: int, timezone: str) -> AvailabilityPolicy:
    return AvailabilityPolicy(
        booking_link_id=booking_link_id,
        start_hour=DEFAULT_START_HOUR,
        end_hour=DEFAULT_END_HOUR,
        allowed_weekdays=DEFAULT_WEEKDAYS,
        timezone=timezone,
    )


def resolve_policy(store: AvailabilityStore, booking_link_id: int,
                   default_timezone: str = "UTC") -> AvailabilityPolicy:
    """
    Stored policy for the link, or the 09-17 Mon-Fri default.
    The default is a read-time fallback: nothing is written back.
    """
    stored = store.get_availability_policy(booking_link_id)
    if stored is None:
        return default_policy(booking_link_id, default_timezone)
    return validate_policy(stored)
