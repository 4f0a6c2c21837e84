from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from ..database import Base


class BlockedTime(Base):
    __tablename__ = "blocked_times"

    id = Column(Integer, primary_key=True)
    booking_link_id = Column(
        Integer, ForeignKey("booking_links.id", ondelete="CASCADE"), nullable=False, index=True
    )
    start_time = Column(DateTime(timezone=True), nullable=False, index=True)
    end_time = Column(DateTime(timezone=True), nullable=False)
    title = Column(String, nullable=True)

    booking_link = relationship("BookingLink", back_populates="blocked_times")
