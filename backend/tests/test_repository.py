from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from slotwise.core.errors import InvalidInputError, InvalidPolicyError
from slotwise.database import Base, make_engine, make_sessionmaker
from slotwise.models.availability import AvailabilitySettings, AvailabilityWeekday
from slotwise.models.blocked_time import BlockedTime
from slotwise.models.booking_link import BookingLink
from slotwise.models.calendar_account import CalendarAccount
from slotwise.models.user import User
from slotwise.repository import SqlAvailabilityStore
from slotwise.services.intervals import Interval
from slotwise.services.ports import BookingStore, CredentialStore

from conftest import at, weekday_policy

UTC = timezone.utc


@pytest.fixture
def db():
    engine = make_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    session = make_sessionmaker(engine)()
    host = User(email="host@example.com", display_name="Host")
    session.add(host)
    session.flush()
    session.add(BookingLink(id=1, user_id=host.id, slug="intro-call", title="Intro call", duration=30))
    session.commit()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def store(db):
    return SqlAvailabilityStore(db)


def test_booking_link_lookups(store):
    link = store.get_booking_link(1)
    assert link.slug == "intro-call" and link.duration_minutes == 30 and link.is_active
    assert store.get_booking_link_by_slug("intro-call") == link
    assert store.get_booking_link_owner(1) == link.host_id
    assert store.get_booking_link(2) is None
    assert store.get_booking_link_owner(2) is None
    assert store.get_host_email(link.host_id) == "host@example.com"


def test_policy_absent_until_saved(store):
    assert store.get_availability_policy(1) is None


def test_upsert_keeps_a_single_row(store, db):
    store.upsert_availability_policy(weekday_policy(start_hour=8, end_hour=12, days=(1, 3)))
    store.upsert_availability_policy(weekday_policy(start_hour=10, end_hour=18, days=(1, 6), tz="Europe/Rome"))

    assert db.query(AvailabilitySettings).count() == 1
    assert db.query(AvailabilityWeekday).count() == 2
    policy = store.get_availability_policy(1)
    assert (policy.start_hour, policy.end_hour, policy.timezone) == (10, 18, "Europe/Rome")
    assert policy.allowed_weekdays == frozenset({1, 6})


def test_upsert_rejects_broken_policy(store):
    with pytest.raises(InvalidPolicyError):
        store.upsert_availability_policy(weekday_policy(start_hour=17, end_hour=9))
    with pytest.raises(InvalidPolicyError):
        store.upsert_availability_policy(weekday_policy(days=()))


def test_blocked_intervals_overlap_query(store):
    store.add_blocked_interval(1, at(10), at(10, 30), "dentist")
    store.add_blocked_interval(1, at(17), at(18))  # starts at window end
    store.add_blocked_interval(1, at(7), at(9))    # ends at window start
    store.add_blocked_interval(1, at(0) - timedelta(days=2), at(0) + timedelta(days=2), "vacation")

    found = store.list_blocked_intervals(1, at(9), at(17))
    assert [b.title for b in found] == ["vacation", "dentist"]
    assert all(b.start.tzinfo is not None for b in found)
    assert found[1].as_interval() == Interval(at(10), at(10, 30))


def test_blocked_interval_timezones_normalised(store):
    rome = ZoneInfo("Europe/Rome")
    store.add_blocked_interval(1, datetime(2024, 6, 3, 12, tzinfo=rome), datetime(2024, 6, 3, 13, tzinfo=rome))
    (b,) = store.list_blocked_intervals(1, at(9), at(17))
    assert b.start == at(10) and b.end == at(11)


def test_add_blocked_interval_validates(store):
    with pytest.raises(InvalidInputError):
        store.add_blocked_interval(1, at(11), at(10))
    with pytest.raises(InvalidInputError):
        store.add_blocked_interval(1, datetime(2024, 6, 3, 10), datetime(2024, 6, 3, 11))


def test_delete_blocked_interval(store, db):
    b = store.add_blocked_interval(1, at(10), at(11))
    assert store.delete_blocked_interval(b.id)
    assert not store.delete_blocked_interval(b.id)
    assert db.query(BlockedTime).count() == 0


def test_deleting_link_cascades(store, db):
    store.upsert_availability_policy(weekday_policy())
    store.add_blocked_interval(1, at(10), at(11))
    db.delete(db.get(BookingLink, 1))
    db.commit()
    assert db.query(AvailabilitySettings).count() == 0
    assert db.query(AvailabilityWeekday).count() == 0
    assert db.query(BlockedTime).count() == 0


def test_bookings_roundtrip_and_overlap(store):
    link = store.get_booking_link(1)
    store.create_booking(link, guest_name="Ann", guest_email="ann@example.com", guest_notes=None,
                         start=at(10), end=at(10, 30), calendar_event_id="evt-1")

    assert store.list_confirmed_bookings(link.host_id, at(10, 30), at(11)) == []
    assert store.list_confirmed_bookings(link.host_id, at(10, 15), at(11)) == [Interval(at(10), at(10, 30))]

    ((booking, title),) = store.list_host_bookings(link.host_id)
    assert title == "Intro call" and booking.calendar_event_id == "evt-1"


def test_calendar_credentials(store, db):
    host_id = store.get_booking_link_owner(1)
    assert store.get_calendar_credentials(host_id) is None

    db.add(CalendarAccount(user_id=host_id, access_token="a", refresh_token="r",
                           access_token_expires_at=at(9), scope="openid"))
    db.commit()
    creds = store.get_calendar_credentials(host_id)
    assert creds.refresh_token == "r" and creds.expires_at == at(9)

    store.save_access_token(host_id, "fresh", at(12))
    creds = store.get_calendar_credentials(host_id)
    assert creds.access_token == "fresh" and creds.expires_at == at(12)


def test_create_booking_link_generates_unique_slugs(store):
    host_id = store.get_booking_link_owner(1)
    a = store.create_booking_link(host_id, title="Deep dive", duration_minutes=60, description="")
    b = store.create_booking_link(host_id, title="Quick sync", duration_minutes=15)

    assert a.slug != b.slug and len(a.slug) == 10
    assert a.description is None and a.is_active
    assert store.get_booking_link_by_slug(a.slug) == a
    assert [link.id for link in store.list_host_booking_links(host_id)][:2] == [b.id, a.id]
    assert store.list_host_booking_links(host_id + 100) == []


def test_create_booking_link_validates(store):
    with pytest.raises(InvalidInputError):
        store.create_booking_link(1, title="", duration_minutes=30)
    with pytest.raises(InvalidInputError):
        store.create_booking_link(1, title="x", duration_minutes=0)


def test_store_satisfies_engine_contracts(store):
    assert isinstance(store, BookingStore)
    assert isinstance(store, CredentialStore)
