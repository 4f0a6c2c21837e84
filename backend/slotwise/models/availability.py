from sqlalchemy import Column, Integer, String, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship
from ..database import Base


class AvailabilitySettings(Base):
    __tablename__ = "availability_settings"

    id = Column(Integer, primary_key=True)
    booking_link_id = Column(
        Integer, ForeignKey("booking_links.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    start_hour = Column(Integer, nullable=False, default=9)   # 0-23
    end_hour = Column(Integer, nullable=False, default=17)    # 0-23
    timezone = Column(String, nullable=False, default="UTC")  # IANA name

    booking_link = relationship("BookingLink", back_populates="availability")
    weekdays = relationship(
        "AvailabilityWeekday", back_populates="settings", cascade="all, delete-orphan", order_by="AvailabilityWeekday.weekday"
    )

    __table_args__ = (
        CheckConstraint("start_hour >= 0 AND start_hour <= 23", name="ck_start_hour"),
        CheckConstraint("end_hour >= 0 AND end_hour <= 23", name="ck_end_hour"),
    )


class AvailabilityWeekday(Base):
    """One allowed day of week per row (0 = Sunday)."""
    __tablename__ = "availability_weekdays"

    id = Column(Integer, primary_key=True)
    settings_id = Column(Integer, ForeignKey("availability_settings.id", ondelete="CASCADE"), nullable=False)
    weekday = Column(Integer, nullable=False)

    settings = relationship("AvailabilitySettings", back_populates="weekdays")
    __table_args__ = (
        UniqueConstraint("settings_id", "weekday", name="uniq_settings_weekday"),
        CheckConstraint("weekday >= 0 AND weekday <= 6", name="ck_weekday"),
    )
