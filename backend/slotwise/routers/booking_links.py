# backend/slotwise/routers/booking_links.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from ..deps import get_current_user, get_store
from ..models.user import User
from ..repository import SqlAvailabilityStore
from ..schemas.booking_link import BookingLinkIn, BookingLinkOut
from ..services.ports import BookingLinkRecord

router = APIRouter(prefix="/booking-links", tags=["booking-links"])


def _link_out(link: BookingLinkRecord) -> BookingLinkOut:
    return BookingLinkOut(
        id=link.id,
        slug=link.slug,
        title=link.title,
        description=link.description,
        duration=link.duration_minutes,
        is_active=link.is_active,
    )


# -----------------------------------------------------------------------------
# HOST: own links, newest first
# -----------------------------------------------------------------------------
@router.get("", response_model=List[BookingLinkOut])
def list_booking_links(me: User = Depends(get_current_user), store: SqlAvailabilityStore = Depends(get_store)):
    return [_link_out(link) for link in store.list_host_booking_links(me.id)]


@router.post("", response_model=BookingLinkOut, status_code=201)
def create_booking_link(
    payload: BookingLinkIn,
    me: User = Depends(get_current_user),
    store: SqlAvailabilityStore = Depends(get_store),
):
    link = store.create_booking_link(
        me.id,
        title=payload.title,
        duration_minutes=payload.duration,
        description=payload.description,
    )
    return _link_out(link)


# -----------------------------------------------------------------------------
# GUEST: public lookup for the booking page
# -----------------------------------------------------------------------------
@router.get("/{slug}", response_model=BookingLinkOut)
def get_booking_link(slug: str, store: SqlAvailabilityStore = Depends(get_store)):
    link = store.get_booking_link_by_slug(slug)
    if not link or not link.is_active:
        raise HTTPException(404, "Booking link not found")
    return _link_out(link)
