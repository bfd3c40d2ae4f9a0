"""Restaurant and date suggestion ORM models — candidates proposed for an event."""
from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from meatup.database import Base


class RestaurantSuggestion(Base):
    __tablename__ = "restaurant_suggestions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    address = Column(String(500), nullable=True)
    cuisine = Column(String(100), nullable=True)
    url = Column(String(1024), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    proposer = relationship("User", back_populates="restaurant_suggestions")
    votes = relationship("RestaurantVote", back_populates="suggestion", cascade="all, delete-orphan")
    exclusions = relationship(
        "PollExcludedRestaurant", back_populates="restaurant", cascade="all, delete-orphan"
    )


class DateSuggestion(Base):
    __tablename__ = "date_suggestions"
    # One user may not propose the same date twice for the same event
    __table_args__ = (
        UniqueConstraint("user_id", "event_id", "suggested_date", name="uq_date_suggestions_user_event_date"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    suggested_date = Column(Date, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    proposer = relationship("User", back_populates="date_suggestions")
    votes = relationship("DateVote", back_populates="suggestion", cascade="all, delete-orphan")
