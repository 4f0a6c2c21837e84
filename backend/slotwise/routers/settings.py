# backend/slotwise/routers/settings.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request

from ..deps import get_current_user, get_settings, get_store
from ..models.user import User
from ..repository import SqlAvailabilityStore
from ..schemas.availability import (
    AvailabilitySettingsIn,
    AvailabilitySettingsOut,
    BlockedTimeIn,
    BlockedTimeOut,
)
from ..services.policy import AvailabilityPolicy, default_policy

router = APIRouter(tags=["settings"])


def _own_link(store: SqlAvailabilityStore, booking_link_id: int, me: User):
    link = store.get_booking_link(booking_link_id)
    if not link or link.host_id != me.id:
        raise HTTPException(404, "Not found")
    return link


def _policy_out(policy: AvailabilityPolicy, is_default: bool) -> AvailabilitySettingsOut:
    return AvailabilitySettingsOut(
        booking_link_id=policy.booking_link_id,
        start_hour=policy.start_hour,
        end_hour=policy.end_hour,
        days_of_week=sorted(policy.allowed_weekdays),
        timezone=policy.timezone,
        is_default=is_default,
    )


def _blocked_out(b) -> BlockedTimeOut:
    return BlockedTimeOut(
        id=b.id, booking_link_id=b.booking_link_id, start_time=b.start, end_time=b.end, title=b.title
    )


# -----------------------------------------------------------------------------
# AVAILABILITY SETTINGS (one row per link, upsert)
# -----------------------------------------------------------------------------
@router.get("/availability-settings/{booking_link_id}", response_model=AvailabilitySettingsOut)
def get_availability_settings(
    booking_link_id: int,
    request: Request,
    me: User = Depends(get_current_user),
    store: SqlAvailabilityStore = Depends(get_store),
):
    _own_link(store, booking_link_id, me)
    policy = store.get_availability_policy(booking_link_id)
    if policy is None:
        return _policy_out(default_policy(booking_link_id, get_settings(request).TIMEZONE), True)
    return _policy_out(policy, False)


@router.put("/availability-settings/{booking_link_id}", response_model=AvailabilitySettingsOut)
def put_availability_settings(
    booking_link_id: int,
    payload: AvailabilitySettingsIn,
    me: User = Depends(get_current_user),
    store: SqlAvailabilityStore = Depends(get_store),
):
    _own_link(store, booking_link_id, me)
    policy = store.upsert_availability_policy(
        AvailabilityPolicy(
            booking_link_id=booking_link_id,
            start_hour=payload.start_hour,
            end_hour=payload.end_hour,
            allowed_weekdays=frozenset(payload.days_of_week),
            timezone=payload.timezone,
        )
    )
    return _policy_out(policy, False)


# -----------------------------------------------------------------------------
# BLOCKED TIMES
# -----------------------------------------------------------------------------
@router.get("/blocked-times", response_model=List[BlockedTimeOut])
def list_blocked_times(
    booking_link_id: int,
    me: User = Depends(get_current_user),
    store: SqlAvailabilityStore = Depends(get_store),
):
    _own_link(store, booking_link_id, me)
    return [_blocked_out(b) for b in store.list_all_blocked_intervals(booking_link_id)]


@router.post("/blocked-times", response_model=BlockedTimeOut, status_code=201)
def create_blocked_time(
    payload: BlockedTimeIn,
    me: User = Depends(get_current_user),
    store: SqlAvailabilityStore = Depends(get_store),
):
    _own_link(store, payload.booking_link_id, me)
    b = store.add_blocked_interval(payload.booking_link_id, payload.start_time, payload.end_time, payload.title)
    return _blocked_out(b)


@router.delete("/blocked-times/{blocked_id}")
def delete_blocked_time(
    blocked_id: int,
    me: User = Depends(get_current_user),
    store: SqlAvailabilityStore = Depends(get_store),
):
    b = store.get_blocked_interval(blocked_id)
    if not b:
        raise HTTPException(404, "Not found")
    _own_link(store, b.booking_link_id, me)
    store.delete_blocked_interval(blocked_id)
    return {"ok": True}
