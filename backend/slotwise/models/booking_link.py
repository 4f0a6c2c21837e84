from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from ..database import Base


class BookingLink(Base):
    __tablename__ = "booking_links"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    slug = Column(String, unique=True, nullable=False)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    duration = Column(Integer, nullable=False)  # minutes
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="booking_links")
    # exactly one settings row at most: upsert, never append
    availability = relationship(
        "AvailabilitySettings", back_populates="booking_link", uselist=False, cascade="all, delete-orphan"
    )
    blocked_times = relationship("BlockedTime", back_populates="booking_link", cascade="all, delete-orphan")
    bookings = relationship("Booking", back_populates="booking_link", cascade="all, delete-orphan")
