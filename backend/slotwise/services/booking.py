# backend/slotwise/services/booking.py
import logging
from datetime import datetime, timedelta

from ..core.errors import CalendarError, InvalidInputError, SlotNoLongerAvailableError
from .availability import AvailabilityService
from .intervals import Interval, overlaps_any
from .policy import resolve_policy
from .ports import BookingStore, CalendarGateway, EventRequest

logger = logging.getLogger(__name__)


class BookingService:
    """
    Turns a guest's chosen slot into a confirmed booking.

    The slot is re-checked right before the insert (fresh availability for that
    day plus the host's confirmed bookings). Check and insert are not locked
    together, so two guests committing the same slot at the same instant can
    still both succeed.
    """

    def __init__(self, store: BookingStore, calendar: CalendarGateway, availability: AvailabilityService):
        self.store = store
        self.calendar = calendar
        self.availability = availability

    def book(self, slug: str, *, guest_name: str, guest_email: str,
             start: datetime, guest_notes: str | None = None):
        link = self.store.get_booking_link_by_slug(slug)
        if link is None or not link.is_active:
            raise InvalidInputError(f"Booking link {slug!r} not found")
        if start.tzinfo is None:
            raise InvalidInputError("start must be timezone-aware")

        policy = resolve_policy(self.store, link.id, self.availability.default_timezone)
        self.ensure_available(link, start)

        end = start + timedelta(minutes=link.duration_minutes)
        event_id = None
        try:
            event_id = self.calendar.create_event(
                link.host_id,
                EventRequest(
                    summary=link.title,
                    description=link.description,
                    start=start,
                    end=end,
                    guest_email=guest_email,
                    guest_name=guest_name,
                    host_email=self.store.get_host_email(link.host_id),
                    time_zone=policy.timezone,
                ),
            )
        except CalendarError as e:
            # the booking still stands; the host just won't see it on the calendar
            logger.warning("could not create calendar event for link %s at %s: %s", link.id, start.isoformat(), e)

        return self.store.create_booking(
            link,
            guest_name=guest_name,
            guest_email=guest_email,
            guest_notes=guest_notes,
            start=start,
            end=end,
            calendar_event_id=event_id,
        )

    def ensure_available(self, link, start: datetime) -> None:
        slots = self.availability.compute_available_slots(link.id, start)
        if start not in {s.start for s in slots}:
            raise SlotNoLongerAvailableError(link.id, start)

        span = Interval(start, start + timedelta(minutes=link.duration_minutes + self.availability.buffer_minutes))
        booked = self.store.list_confirmed_bookings(link.host_id, span.start, span.end)
        if overlaps_any(span, booked):
            raise SlotNoLongerAvailableError(link.id, start)
