"""RSVP ORM model — attendance intent, one row per (user, event)."""
import enum
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, UniqueConstraint, Enum as SAEnum, false
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from meatup.database import Base


class RSVPStatus(str, enum.Enum):
    yes = "yes"
    no = "no"
    maybe = "maybe"


class RSVP(Base):
    __tablename__ = "rsvps"
    __table_args__ = (UniqueConstraint("event_id", "user_id", name="uq_rsvps_event_user"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    status = Column(SAEnum(RSVPStatus), nullable=False)
    dietary_restrictions = Column(String(1000), nullable=True)
    # Set when an admin records attendance on a member's behalf; cleared by the member's own RSVP
    admin_override = Column(Boolean, nullable=False, default=False, server_default=false())
    admin_override_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    admin_override_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    event = relationship("Event", back_populates="rsvps")
    user = relationship("User", back_populates="rsvps", foreign_keys=[user_id])
