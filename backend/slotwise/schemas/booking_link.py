# backend/slotwise/schemas/booking_link.py
from typing import Optional

from pydantic import BaseModel, Field


class BookingLinkIn(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    duration: int = Field(..., gt=0, le=24 * 60)  # minutes


class BookingLinkOut(BaseModel):
    id: int
    slug: str
    title: str
    description: Optional[str] = None
    duration: int
    is_active: bool
