from datetime import date, datetime
from zoneinfo import ZoneInfo

import pytest

from slotwise.core.errors import InvalidInputError, InvalidPolicyError
from slotwise.services.policy import (
    AvailabilityPolicy,
    resolve_policy,
    validate_policy,
    weekday_index,
)

from conftest import MONDAY, SATURDAY, FakeStore, weekday_policy


def test_weekday_index_starts_on_sunday():
    assert weekday_index(date(2024, 6, 2)) == 0  # Sunday
    assert weekday_index(MONDAY) == 1
    assert weekday_index(SATURDAY) == 6


def test_missing_policy_resolves_to_default_without_writing():
    store = FakeStore(policy=None)
    policy = resolve_policy(store, 1, "Europe/Rome")
    assert (policy.start_hour, policy.end_hour) == (9, 17)
    assert policy.allowed_weekdays == frozenset({1, 2, 3, 4, 5})
    assert policy.timezone == "Europe/Rome"
    assert store.policy is None


def test_stored_policy_is_returned():
    stored = weekday_policy(start_hour=8, end_hour=12, days=(0, 6), tz="Asia/Tokyo")
    assert resolve_policy(FakeStore(policy=stored), 1) == stored


@pytest.mark.parametrize(
    "kwargs",
    [
        {"start_hour": 17, "end_hour": 9},
        {"start_hour": 9, "end_hour": 9},
        {"start_hour": -1},
        {"end_hour": 24},
        {"days": ()},
        {"days": (1, 7)},
        {"tz": "Mars/Olympus_Mons"},
    ],
)
def test_broken_stored_policy_fails_fast(kwargs):
    with pytest.raises(InvalidPolicyError):
        resolve_policy(FakeStore(policy=weekday_policy(**kwargs)), 1)


def test_broken_policy_is_not_an_input_error():
    assert not issubclass(InvalidPolicyError, InvalidInputError)


def test_window_is_built_in_policy_zone():
    policy = validate_policy(weekday_policy(tz="America/New_York"))
    window = policy.window_for(MONDAY)
    ny = ZoneInfo("America/New_York")
    assert window.start == datetime(2024, 6, 3, 9, tzinfo=ny)
    assert window.end == datetime(2024, 6, 3, 17, tzinfo=ny)
    # EDT is UTC-4 in June
    assert window.start.utcoffset().total_seconds() == -4 * 3600


def test_allows_uses_allowed_weekdays():
    policy = AvailabilityPolicy(1, 9, 17, frozenset({6}), "UTC")
    assert policy.allows(SATURDAY)
    assert not policy.allows(MONDAY)
