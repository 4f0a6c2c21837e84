# backend/slotwise/schemas/availability.py
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator, model_validator


class AvailabilitySettingsIn(BaseModel):
    start_hour: int = Field(9, ge=0, le=23)
    end_hour: int = Field(17, ge=0, le=23)
    days_of_week: list[int] = Field(default_factory=lambda: [1, 2, 3, 4, 5], min_length=1)  # 0 = Sunday
    timezone: str = "UTC"

    @field_validator("days_of_week")
    @classmethod
    def _days(cls, v: list[int]) -> list[int]:
        if any(d < 0 or d > 6 for d in v):
            raise ValueError("days_of_week values must be 0-6 (0 = Sunday)")
        return sorted(set(v))

    @field_validator("timezone")
    @classmethod
    def _tz(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"unknown timezone {v!r}")
        return v

    @model_validator(mode="after")
    def _window(self):
        if self.start_hour >= self.end_hour:
            raise ValueError("start_hour must be before end_hour")
        return self


class AvailabilitySettingsOut(BaseModel):
    booking_link_id: int
    start_hour: int
    end_hour: int
    days_of_week: list[int]
    timezone: str
    is_default: bool = False


class BlockedTimeIn(BaseModel):
    booking_link_id: int
    start_time: datetime
    end_time: datetime
    title: Optional[str] = None

    @model_validator(mode="after")
    def _range(self):
        if self.start_time.tzinfo is None or self.end_time.tzinfo is None:
            raise ValueError("start_time and end_time must include a UTC offset")
        if self.start_time >= self.end_time:
            raise ValueError("end_time must be after start_time")
        return self


class BlockedTimeOut(BaseModel):
    id: int
    booking_link_id: int
    start_time: datetime
    end_time: datetime
    title: Optional[str] = None
