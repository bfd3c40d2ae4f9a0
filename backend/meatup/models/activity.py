"""ActivityLog ORM model — append-only record of member actions."""
import enum
from sqlalchemy import Column, Integer, String, DateTime, JSON, ForeignKey, Enum as SAEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from meatup.database import Base


class ActivityType(str, enum.Enum):
    profile_refresh = "profile_refresh"
    accept_invite = "accept_invite"
    suggest_restaurant = "suggest_restaurant"
    suggest_date = "suggest_date"
    vote_restaurant = "vote_restaurant"
    unvote_restaurant = "unvote_restaurant"
    vote_date = "vote_date"
    unvote_date = "unvote_date"
    rsvp = "rsvp"
    update_rsvp = "update_rsvp"
    admin_override_rsvp = "admin_override_rsvp"
    comment = "comment"
    delete_comment = "delete_comment"
    exclude_restaurant = "exclude_restaurant"
    include_restaurant = "include_restaurant"


class ActivityLog(Base):
    __tablename__ = "activity_log"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    action_type = Column(SAEnum(ActivityType), nullable=False)
    action_details = Column(JSON, nullable=True)
    route = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="activity")
