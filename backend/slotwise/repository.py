# backend/slotwise/repository.py
import secrets
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session, selectinload

from .core.errors import InvalidInputError, SlotwiseError
from .models.availability import AvailabilitySettings, AvailabilityWeekday
from .models.blocked_time import BlockedTime
from .models.booking import Booking, BookingStatus
from .models.booking_link import BookingLink
from .models.calendar_account import CalendarAccount
from .models.user import User
from .services.intervals import Interval
from .services.policy import AvailabilityPolicy, validate_policy
from .services.ports import BlockedInterval, BookingLinkRecord, CalendarCredentials

# public link slugs: 10 lowercase hex chars
SLUG_BYTES = 5
SLUG_ATTEMPTS = 5


def as_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """SQLite hands timestamps back naive; everything is stored in UTC."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _require_aware(dt: datetime, name: str) -> datetime:
    if dt.tzinfo is None:
        raise InvalidInputError(f"{name} must be timezone-aware")
    return dt.astimezone(timezone.utc)


def _link_record(link: BookingLink) -> BookingLinkRecord:
    return BookingLinkRecord(
        id=link.id,
        host_id=link.user_id,
        slug=link.slug,
        title=link.title,
        duration_minutes=link.duration,
        is_active=bool(link.is_active),
        description=link.description,
    )


def _blocked_record(b: BlockedTime) -> BlockedInterval:
    return BlockedInterval(
        booking_link_id=b.booking_link_id,
        start=as_utc(b.start_time),
        end=as_utc(b.end_time),
        title=b.title,
        id=b.id,
    )


class SqlAvailabilityStore:
    """
    SQLAlchemy implementation of the storage contract the availability engine
    reads from, plus the host-side write path and the calendar credential store.
    """

    def __init__(self, db: Session):
        self.db = db

    # -----------------------------------------
    # Booking links
    # -----------------------------------------
    def get_booking_link(self, booking_link_id: int) -> Optional[BookingLinkRecord]:
        link = self.db.get(BookingLink, booking_link_id)
        return _link_record(link) if link else None

    def get_booking_link_by_slug(self, slug: str) -> Optional[BookingLinkRecord]:
        link = self.db.query(BookingLink).filter(BookingLink.slug == slug).first()
        return _link_record(link) if link else None

    def get_booking_link_owner(self, booking_link_id: int) -> Optional[int]:
        row = self.db.query(BookingLink.user_id).filter(BookingLink.id == booking_link_id).first()
        return row[0] if row else None

    def list_host_booking_links(self, host_id: int) -> list[BookingLinkRecord]:
        rows = (
            self.db.query(BookingLink)
            .filter(BookingLink.user_id == host_id)
            .order_by(BookingLink.created_at.desc(), BookingLink.id.desc())
            .all()
        )
        return [_link_record(link) for link in rows]

    def create_booking_link(self, host_id: int, *, title: str, duration_minutes: int,
                            description: Optional[str] = None) -> BookingLinkRecord:
        if not title or duration_minutes <= 0:
            raise InvalidInputError("Title and a positive duration are required")
        for _ in range(SLUG_ATTEMPTS):
            slug = secrets.token_hex(SLUG_BYTES)
            if not self.db.query(BookingLink.id).filter(BookingLink.slug == slug).first():
                break
        else:
            raise SlotwiseError("could not generate a unique booking link slug")
        link = BookingLink(
            user_id=host_id,
            slug=slug,
            title=title,
            description=description or None,
            duration=duration_minutes,
            is_active=True,
        )
        self.db.add(link)
        self.db.commit()
        self.db.refresh(link)
        return _link_record(link)

    def get_host_email(self, host_id: int) -> Optional[str]:
        row = self.db.query(User.email).filter(User.id == host_id).first()
        return row[0] if row else None

    # -----------------------------------------
    # Availability policy
    # -----------------------------------------
    def get_availability_policy(self, booking_link_id: int) -> Optional[AvailabilityPolicy]:
        s = (
            self.db.query(AvailabilitySettings)
            .options(selectinload(AvailabilitySettings.weekdays))
            .filter(AvailabilitySettings.booking_link_id == booking_link_id)
            .first()
        )
        if not s:
            return None
        return AvailabilityPolicy(
            booking_link_id=booking_link_id,
            start_hour=s.start_hour,
            end_hour=s.end_hour,
            allowed_weekdays=frozenset(w.weekday for w in s.weekdays),
            timezone=s.timezone,
        )

    def upsert_availability_policy(self, policy: AvailabilityPolicy) -> AvailabilityPolicy:
        validate_policy(policy)
        s = (
            self.db.query(AvailabilitySettings)
            .filter(AvailabilitySettings.booking_link_id == policy.booking_link_id)
            .first()
        )
        if s is None:
            s = AvailabilitySettings(booking_link_id=policy.booking_link_id)
            self.db.add(s)
        s.start_hour = policy.start_hour
        s.end_hour = policy.end_hour
        s.timezone = policy.timezone
        # diff instead of replace: the unit of work inserts before it deletes,
        # so re-adding a kept weekday would trip uniq_settings_weekday
        keep = set(policy.allowed_weekdays)
        s.weekdays = [w for w in s.weekdays if w.weekday in keep]
        have = {w.weekday for w in s.weekdays}
        for d in sorted(keep - have):
            s.weekdays.append(AvailabilityWeekday(weekday=d))
        self.db.commit()
        return policy

    # -----------------------------------------
    # Blocked times
    # -----------------------------------------
    def list_blocked_intervals(self, booking_link_id: int, range_start: datetime,
                               range_end: datetime) -> list[BlockedInterval]:
        # multi-day blocks included: anything that overlaps the range at all
        rows = (
            self.db.query(BlockedTime)
            .filter(
                BlockedTime.booking_link_id == booking_link_id,
                BlockedTime.start_time < _require_aware(range_end, "range_end"),
                BlockedTime.end_time > _require_aware(range_start, "range_start"),
            )
            .order_by(BlockedTime.start_time.asc())
            .all()
        )
        return [_blocked_record(b) for b in rows]

    def list_all_blocked_intervals(self, booking_link_id: int) -> list[BlockedInterval]:
        rows = (
            self.db.query(BlockedTime)
            .filter(BlockedTime.booking_link_id == booking_link_id)
            .order_by(BlockedTime.start_time.asc())
            .all()
        )
        return [_blocked_record(b) for b in rows]

    def add_blocked_interval(self, booking_link_id: int, start: datetime, end: datetime,
                             title: Optional[str] = None) -> BlockedInterval:
        start = _require_aware(start, "start")
        end = _require_aware(end, "end")
        if start >= end:
            raise InvalidInputError("Blocked time must end after it starts")
        b = BlockedTime(booking_link_id=booking_link_id, start_time=start, end_time=end, title=title or None)
        self.db.add(b)
        self.db.commit()
        self.db.refresh(b)
        return _blocked_record(b)

    def get_blocked_interval(self, blocked_id: int) -> Optional[BlockedInterval]:
        b = self.db.get(BlockedTime, blocked_id)
        return _blocked_record(b) if b else None

    def delete_blocked_interval(self, blocked_id: int) -> bool:
        b = self.db.get(BlockedTime, blocked_id)
        if not b:
            return False
        self.db.delete(b)
        self.db.commit()
        return True

    # -----------------------------------------
    # Bookings
    # -----------------------------------------
    def list_confirmed_bookings(self, host_id: int, range_start: datetime, range_end: datetime) -> list[Interval]:
        rows = (
            self.db.query(Booking.start_time, Booking.end_time)
            .filter(
                Booking.user_id == host_id,
                Booking.status == BookingStatus.CONFIRMED,
                Booking.start_time < _require_aware(range_end, "range_end"),
                Booking.end_time > _require_aware(range_start, "range_start"),
            )
            .all()
        )
        return [Interval(as_utc(s), as_utc(e)) for s, e in rows]

    def create_booking(self, link: BookingLinkRecord, *, guest_name: str, guest_email: str,
                       guest_notes: Optional[str], start: datetime, end: datetime,
                       calendar_event_id: Optional[str]) -> Booking:
        b = Booking(
            booking_link_id=link.id,
            user_id=link.host_id,
            guest_name=guest_name,
            guest_email=guest_email,
            guest_notes=guest_notes or None,
            start_time=_require_aware(start, "start"),
            end_time=_require_aware(end, "end"),
            calendar_event_id=calendar_event_id,
            status=BookingStatus.CONFIRMED,
        )
        self.db.add(b)
        self.db.commit()
        self.db.refresh(b)
        return b

    def list_host_bookings(self, host_id: int) -> list[tuple[Booking, str]]:
        return (
            self.db.query(Booking, BookingLink.title)
            .join(BookingLink, Booking.booking_link_id == BookingLink.id)
            .filter(Booking.user_id == host_id)
            .order_by(Booking.start_time.desc())
            .all()
        )

    # -----------------------------------------
    # Calendar credentials
    # -----------------------------------------
    def get_calendar_credentials(self, host_id: int) -> Optional[CalendarCredentials]:
        acc = self.db.query(CalendarAccount).filter(CalendarAccount.user_id == host_id).first()
        if not acc:
            return None
        return CalendarCredentials(
            host_id=host_id,
            access_token=acc.access_token,
            refresh_token=acc.refresh_token,
            expires_at=as_utc(acc.access_token_expires_at),
            scope=acc.scope,
        )

    def save_access_token(self, host_id: int, access_token: str, expires_at: Optional[datetime]) -> None:
        acc = self.db.query(CalendarAccount).filter(CalendarAccount.user_id == host_id).first()
        if not acc:
            return
        acc.access_token = access_token
        acc.access_token_expires_at = as_utc(expires_at)
        self.db.commit()
