"""Event ORM model — a scheduled club dinner."""
import enum
from sqlalchemy import Column, Integer, String, Date, DateTime, Enum as SAEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from meatup.database import Base


class EventStatus(str, enum.Enum):
    upcoming = "upcoming"
    completed = "completed"
    cancelled = "cancelled"


class Event(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    restaurant_name = Column(String(255), nullable=False)
    restaurant_address = Column(String(500), nullable=True)
    event_date = Column(Date, nullable=False, index=True)
    status = Column(SAEnum(EventStatus), nullable=False, default=EventStatus.upcoming)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    rsvps = relationship("RSVP", back_populates="event", cascade="all, delete-orphan")
