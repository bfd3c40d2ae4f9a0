"""Vote ORM models — one row per (voter, suggestion)."""
from sqlalchemy import Column, Integer, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from meatup.database import Base


class RestaurantVote(Base):
    __tablename__ = "restaurant_votes"
    __table_args__ = (
        UniqueConstraint("suggestion_id", "user_id", name="uq_restaurant_votes_suggestion_user"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    suggestion_id = Column(
        Integer, ForeignKey("restaurant_suggestions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    suggestion = relationship("RestaurantSuggestion", back_populates="votes")


class DateVote(Base):
    __tablename__ = "date_votes"
    __table_args__ = (
        UniqueConstraint("date_suggestion_id", "user_id", name="uq_date_votes_suggestion_user"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    date_suggestion_id = Column(
        Integer, ForeignKey("date_suggestions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    suggestion = relationship("DateSuggestion", back_populates="votes")
