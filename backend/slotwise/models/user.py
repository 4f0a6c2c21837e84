from sqlalchemy import Column, Integer, String, Boolean
from sqlalchemy.orm import relationship
from ..database import Base


class User(Base):
    """A host: owns booking links and the calendar they sync to."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    email = Column(String, unique=True, nullable=False)
    display_name = Column(String, nullable=True)
    is_active = Column(Boolean, default=True)

    booking_links = relationship("BookingLink", back_populates="user", cascade="all, delete-orphan")
    calendar_account = relationship(
        "CalendarAccount", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
