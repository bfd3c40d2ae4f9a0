"""Poll ORM model — the explicit voting round for one target event."""
import enum
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index, UniqueConstraint, Enum as SAEnum, text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from meatup.database import Base


class PollStatus(str, enum.Enum):
    open = "open"
    closed = "closed"


class Poll(Base):
    __tablename__ = "polls"
    # At most one open poll at any time
    __table_args__ = (
        Index(
            "uq_polls_single_open",
            "status",
            unique=True,
            sqlite_where=text("status = 'open'"),
            postgresql_where=text("status = 'open'"),
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    status = Column(SAEnum(PollStatus), nullable=False, default=PollStatus.open)
    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False)
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    closed_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    closed_at = Column(DateTime(timezone=True), nullable=True)
    winning_restaurant_id = Column(
        Integer, ForeignKey("restaurant_suggestions.id", ondelete="SET NULL"), nullable=True
    )
    winning_date_id = Column(Integer, ForeignKey("date_suggestions.id", ondelete="SET NULL"), nullable=True)
    created_event_id = Column(Integer, ForeignKey("events.id", ondelete="SET NULL"), nullable=True)

    event = relationship("Event", foreign_keys=[event_id])
    created_event = relationship("Event", foreign_keys=[created_event_id])
    winning_restaurant = relationship("RestaurantSuggestion", foreign_keys=[winning_restaurant_id])
    winning_date = relationship("DateSuggestion", foreign_keys=[winning_date_id])
    exclusions = relationship("PollExcludedRestaurant", back_populates="poll", cascade="all, delete-orphan")


class PollExcludedRestaurant(Base):
    """A restaurant suggestion taken out of one poll's running."""

    __tablename__ = "poll_excluded_restaurants"
    __table_args__ = (UniqueConstraint("poll_id", "restaurant_id", name="uq_poll_excluded_restaurant"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    poll_id = Column(Integer, ForeignKey("polls.id", ondelete="CASCADE"), nullable=False, index=True)
    restaurant_id = Column(
        Integer, ForeignKey("restaurant_suggestions.id", ondelete="CASCADE"), nullable=False
    )
    excluded_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    poll = relationship("Poll", back_populates="exclusions")
    restaurant = relationship("RestaurantSuggestion", back_populates="exclusions")
