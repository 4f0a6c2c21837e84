# backend/slotwise/routers/bookings.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from ..core.errors import SlotNoLongerAvailableError
from ..deps import get_booking_service, get_current_user, get_store
from ..models.user import User
from ..repository import SqlAvailabilityStore, as_utc
from ..schemas.booking import BookingOut, CreateBookingIn, HostBookingOut
from ..services.booking import BookingService

router = APIRouter(prefix="/bookings", tags=["bookings"])


def _status(b) -> str:
    return b.status.value if hasattr(b.status, "value") else str(b.status)


# -----------------------------------------------------------------------------
# GUEST: book a slot (public)
# -----------------------------------------------------------------------------
@router.post("", response_model=BookingOut, status_code=201)
def create_booking(
    payload: CreateBookingIn,
    store: SqlAvailabilityStore = Depends(get_store),
    svc: BookingService = Depends(get_booking_service),
):
    link = store.get_booking_link_by_slug(payload.slug)
    if not link or not link.is_active:
        raise HTTPException(404, "Booking link not found")

    try:
        b = svc.book(
            payload.slug,
            guest_name=payload.guest_name,
            guest_email=payload.guest_email,
            guest_notes=payload.guest_notes,
            start=payload.start_time,
        )
    except SlotNoLongerAvailableError:
        raise HTTPException(409, "This time is no longer available")

    return BookingOut(
        id=b.id,
        booking_link_id=b.booking_link_id,
        guest_name=b.guest_name,
        guest_email=b.guest_email,
        guest_notes=b.guest_notes,
        start_time=as_utc(b.start_time),
        end_time=as_utc(b.end_time),
        calendar_event_id=b.calendar_event_id,
        status=_status(b),
    )


# -----------------------------------------------------------------------------
# HOST: own bookings, newest first
# -----------------------------------------------------------------------------
@router.get("", response_model=List[HostBookingOut])
def list_bookings(me: User = Depends(get_current_user), store: SqlAvailabilityStore = Depends(get_store)):
    out = []
    for b, title in store.list_host_bookings(me.id):
        out.append(
            HostBookingOut(
                id=b.id,
                title=title,
                guest_name=b.guest_name,
                guest_email=b.guest_email,
                start_time=as_utc(b.start_time),
                end_time=as_utc(b.end_time),
                status=_status(b),
            )
        )
    return out
