# backend/slotwise/routers/availability.py
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query

from ..deps import get_availability_service, get_store
from ..repository import SqlAvailabilityStore
from ..schemas.booking import AvailableSlotsOut
from ..services.availability import AvailabilityService

router = APIRouter(prefix="/availability", tags=["availability"])


@router.get("/{slug}", response_model=AvailableSlotsOut)
def available_slots(
    slug: str,
    date_param: str | None = Query(None, alias="date"),
    store: SqlAvailabilityStore = Depends(get_store),
    svc: AvailabilityService = Depends(get_availability_service),
):
    link = store.get_booking_link_by_slug(slug)
    if not link or not link.is_active:
        raise HTTPException(404, "Booking link not found")

    if not date_param:
        raise HTTPException(400, "Date parameter is required")
    try:
        day = date.fromisoformat(date_param)
    except ValueError:
        raise HTTPException(400, "Invalid date")

    slots = svc.compute_available_slots(link.id, day)
    return {"availableSlots": [s.start.isoformat().replace("+00:00", "Z") for s in slots]}
