# backend/slotwise/schemas/booking.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator


class CreateBookingIn(BaseModel):
    """Guest request: book the slot starting at `start_time` on link `slug`."""
    slug: str = Field(..., min_length=1)
    guest_name: str = Field(..., min_length=1)
    guest_email: EmailStr
    guest_notes: Optional[str] = None
    start_time: datetime

    @field_validator("start_time")
    @classmethod
    def _aware(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            raise ValueError("start_time must include a UTC offset")
        return v


class BookingOut(BaseModel):
    id: int
    booking_link_id: int
    guest_name: str
    guest_email: str
    guest_notes: Optional[str] = None
    start_time: datetime
    end_time: datetime
    calendar_event_id: Optional[str] = None
    status: str


class HostBookingOut(BaseModel):
    id: int
    title: str
    guest_name: str
    guest_email: str
    start_time: datetime
    end_time: datetime
    status: str


class AvailableSlotsOut(BaseModel):
    availableSlots: list[str]
