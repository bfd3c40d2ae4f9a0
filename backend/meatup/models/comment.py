"""Comment ORM model — threaded discussion on a poll or an event."""
import enum
from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, Index, Enum as SAEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from meatup.database import Base


class CommentableType(str, enum.Enum):
    poll = "poll"
    event = "event"


class Comment(Base):
    __tablename__ = "comments"
    __table_args__ = (Index("ix_comments_target", "commentable_type", "commentable_id"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    commentable_type = Column(SAEnum(CommentableType), nullable=False)
    commentable_id = Column(Integer, nullable=False)
    content = Column(Text, nullable=False)
    parent_id = Column(Integer, ForeignKey("comments.id", ondelete="CASCADE"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="comments")
    parent = relationship("Comment", remote_side=[id], back_populates="replies")
    replies = relationship("Comment", back_populates="parent", cascade="all, delete-orphan")
