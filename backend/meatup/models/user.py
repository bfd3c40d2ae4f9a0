"""User ORM model — club members, provisioned by an admin before first sign-in."""
import enum
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Enum as SAEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from meatup.database import Base


class MemberStatus(str, enum.Enum):
    invited = "invited"
    active = "active"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=True)
    picture = Column(String(1024), nullable=True)
    is_admin = Column(Boolean, nullable=False, default=False)
    status = Column(SAEnum(MemberStatus), nullable=False, default=MemberStatus.invited)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    restaurant_suggestions = relationship(
        "RestaurantSuggestion", back_populates="proposer", cascade="all, delete-orphan"
    )
    date_suggestions = relationship(
        "DateSuggestion", back_populates="proposer", cascade="all, delete-orphan"
    )
    restaurant_votes = relationship("RestaurantVote", cascade="all, delete-orphan")
    date_votes = relationship("DateVote", cascade="all, delete-orphan")
    rsvps = relationship("RSVP", back_populates="user", foreign_keys="RSVP.user_id", cascade="all, delete-orphan")
    activity = relationship("ActivityLog", back_populates="user", cascade="all, delete-orphan")
    comments = relationship("Comment", back_populates="user", cascade="all, delete-orphan")

    @property
    def is_active_member(self) -> bool:
        return self.status == MemberStatus.active
