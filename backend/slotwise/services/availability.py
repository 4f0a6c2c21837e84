# backend/slotwise/services/availability.py
import logging
from dataclasses import dataclass, field
from datetime import date, datetime

from ..core.errors import InvalidInputError
from .busy import aggregate_busy_intervals
from .policy import AvailabilityPolicy, resolve_policy
from .ports import AvailabilityStore, CalendarGateway
from .slots import DEFAULT_BUFFER_MIN, DEFAULT_STEP_MIN, generate_slots

logger = logging.getLogger(__name__)


@dataclass
class AvailabilityResult:
    slots: list = field(default_factory=list)
    calendar_source_degraded: bool = False


class AvailabilityService:
    """
    Computes bookable slots for one booking link and one calendar day.

    Stateless per call: the store and the calendar gateway are injected handles,
    nothing is cached or reserved. A returned slot can still be taken by a
    concurrent guest before it is booked; BookingService re-checks at commit.
    """

    def __init__(self, store: AvailabilityStore, calendar: CalendarGateway, *,
                 default_timezone: str = "UTC",
                 buffer_minutes: int = DEFAULT_BUFFER_MIN,
                 step_minutes: int = DEFAULT_STEP_MIN):
        self.store = store
        self.calendar = calendar
        self.default_timezone = default_timezone
        self.buffer_minutes = buffer_minutes
        self.step_minutes = step_minutes

    def compute_available_slots(self, booking_link_id: int, day) -> list:
        return self.compute_availability(booking_link_id, day).slots

    def compute_availability(self, booking_link_id: int, day) -> AvailabilityResult:
        policy = resolve_policy(self.store, booking_link_id, self.default_timezone)
        local_day = local_date(day, policy)
        if not policy.allows(local_day):
            return AvailabilityResult()

        window = policy.window_for(local_day)

        link = self.store.get_booking_link(booking_link_id)
        host_id = self.store.get_booking_link_owner(booking_link_id)
        if link is None or host_id is None:
            raise InvalidInputError(f"Unknown booking link {booking_link_id}")

        busy = aggregate_busy_intervals(
            self.store, self.calendar, booking_link_id, host_id, window.start, window.end
        )
        slots = generate_slots(
            window,
            link.duration_minutes,
            busy.conflicts,
            buffer=self.buffer_minutes,
            step=self.step_minutes,
        )
        logger.debug("link %s on %s: %d slots (degraded=%s)",
                     booking_link_id, local_day, len(slots), busy.calendar_source_degraded)
        return AvailabilityResult(slots=slots, calendar_source_degraded=busy.calendar_source_degraded)


def local_date(value, policy: AvailabilityPolicy) -> date:
    """
    The calendar day a request refers to, in the policy's zone.
    Accepts a date, an ISO date string or an aware datetime.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            raise InvalidInputError("datetime must be timezone-aware")
        return value.astimezone(policy.zone).date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            raise InvalidInputError(f"Invalid date {value!r}")
    raise InvalidInputError(f"Invalid date {value!r}")
