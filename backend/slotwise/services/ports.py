# backend/slotwise/services/ports.py
"""
Contracts the availability engine consumes from its collaborators.
The SQL repository and the Google gateway implement them; tests use in-memory fakes.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Protocol, runtime_checkable

from .intervals import Interval


@dataclass(frozen=True)
class BookingLinkRecord:
    id: int
    host_id: int
    slug: str
    title: str
    duration_minutes: int
    is_active: bool = True
    description: Optional[str] = None


@dataclass(frozen=True)
class BlockedInterval:
    booking_link_id: int
    start: datetime
    end: datetime
    title: Optional[str] = None
    id: Optional[int] = None

    def as_interval(self) -> Interval:
        return Interval(self.start, self.end)


# busy periods reported by the external calendar carry no identity beyond their range
ExternalBusyInterval = Interval


@dataclass(frozen=True)
class CalendarCredentials:
    host_id: int
    access_token: Optional[str]
    refresh_token: Optional[str]
    expires_at: Optional[datetime]
    scope: Optional[str]


@dataclass(frozen=True)
class EventRequest:
    summary: str
    start: datetime
    end: datetime
    guest_email: str
    guest_name: str
    host_email: Optional[str] = None
    description: Optional[str] = None
    time_zone: str = "UTC"


@runtime_checkable
class AvailabilityStore(Protocol):
    def get_availability_policy(self, booking_link_id: int): ...

    def list_blocked_intervals(self, booking_link_id: int, range_start: datetime,
                               range_end: datetime) -> list[BlockedInterval]: ...

    def get_booking_link_owner(self, booking_link_id: int) -> Optional[int]: ...

    def get_booking_link(self, booking_link_id: int) -> Optional[BookingLinkRecord]: ...


@runtime_checkable
class BookingStore(AvailabilityStore, Protocol):
    def get_booking_link_by_slug(self, slug: str) -> Optional[BookingLinkRecord]: ...

    def get_host_email(self, host_id: int) -> Optional[str]: ...

    def list_confirmed_bookings(self, host_id: int, range_start: datetime,
                                range_end: datetime) -> list[Interval]: ...

    def create_booking(self, link: BookingLinkRecord, *, guest_name: str, guest_email: str,
                       guest_notes: Optional[str], start: datetime, end: datetime,
                       calendar_event_id: Optional[str]): ...


@runtime_checkable
class CalendarGateway(Protocol):
    def fetch_busy_intervals(self, host_id: int, range_start: datetime,
                             range_end: datetime) -> list[ExternalBusyInterval]: ...

    def create_event(self, host_id: int, event: EventRequest) -> str: ...


@runtime_checkable
class CredentialStore(Protocol):
    def get_calendar_credentials(self, host_id: int) -> Optional[CalendarCredentials]: ...

    def save_access_token(self, host_id: int, access_token: str,
                          expires_at: Optional[datetime]) -> None: ...
