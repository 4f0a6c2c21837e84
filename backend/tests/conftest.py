from datetime import date, datetime, time, timezone
from types import SimpleNamespace

import pytest

from slotwise.services.intervals import Interval, overlaps
from slotwise.services.policy import AvailabilityPolicy
from slotwise.services.ports import BlockedInterval, BookingLinkRecord

MONDAY = date(2024, 6, 3)
SATURDAY = date(2024, 6, 8)
UTC = timezone.utc


def at(hh: int, mm: int = 0, day: date = MONDAY, tz=UTC) -> datetime:
    return datetime.combine(day, time(hh, mm), tzinfo=tz)


def hhmm(slots) -> list[str]:
    return [s.start.astimezone(UTC).strftime("%H:%M") for s in slots]


class FakeStore:
    def __init__(self, policy=None, blocked=(), duration=30, host_id=7, link_id=1, slug="intro-call"):
        self.policy = policy
        self.blocked = list(blocked)
        self.link = BookingLinkRecord(
            id=link_id, host_id=host_id, slug=slug, title="Intro call", duration_minutes=duration
        )
        self.bookings: list[SimpleNamespace] = []
        self.blocked_queries = []

    def get_availability_policy(self, booking_link_id):
        return self.policy

    def list_blocked_intervals(self, booking_link_id, range_start, range_end):
        self.blocked_queries.append((booking_link_id, range_start, range_end))
        return [b for b in self.blocked if b.start < range_end and b.end > range_start]

    def get_booking_link(self, booking_link_id):
        return self.link if booking_link_id == self.link.id else None

    def get_booking_link_by_slug(self, slug):
        return self.link if slug == self.link.slug else None

    def get_booking_link_owner(self, booking_link_id):
        return self.link.host_id if booking_link_id == self.link.id else None

    def get_host_email(self, host_id):
        return "host@example.com"

    def list_confirmed_bookings(self, host_id, range_start, range_end):
        span = Interval(range_start, range_end)
        return [
            Interval(b.start_time, b.end_time)
            for b in self.bookings
            if overlaps(Interval(b.start_time, b.end_time), span)
        ]

    def create_booking(self, link, *, guest_name, guest_email, guest_notes, start, end, calendar_event_id):
        b = SimpleNamespace(
            id=len(self.bookings) + 1,
            booking_link_id=link.id,
            guest_name=guest_name,
            guest_email=guest_email,
            guest_notes=guest_notes,
            start_time=start,
            end_time=end,
            calendar_event_id=calendar_event_id,
        )
        self.bookings.append(b)
        return b


class FakeCalendar:
    def __init__(self, busy=(), error=None, create_error=None):
        self.busy = list(busy)
        self.error = error
        self.create_error = create_error
        self.fetch_calls = []
        self.created = []

    def fetch_busy_intervals(self, host_id, range_start, range_end):
        self.fetch_calls.append((host_id, range_start, range_end))
        if self.error is not None:
            raise self.error
        return list(self.busy)

    def create_event(self, host_id, event):
        if self.create_error is not None:
            raise self.create_error
        self.created.append((host_id, event))
        return f"evt-{len(self.created)}"


def blocked(start: datetime, end: datetime, link_id: int = 1) -> BlockedInterval:
    return BlockedInterval(booking_link_id=link_id, start=start, end=end)


def weekday_policy(start_hour=9, end_hour=17, days=(1, 2, 3, 4, 5), tz="UTC", link_id=1):
    return AvailabilityPolicy(
        booking_link_id=link_id,
        start_hour=start_hour,
        end_hour=end_hour,
        allowed_weekdays=frozenset(days),
        timezone=tz,
    )


@pytest.fixture
def store():
    return FakeStore(policy=weekday_policy())


@pytest.fixture
def calendar():
    return FakeCalendar()
