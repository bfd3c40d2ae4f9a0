"""Comment threads on polls and events.

Comments hang off a (commentable_type, commentable_id) target and may reply
to another comment on the same target. Deleting a comment takes its whole
subtree with it.
"""
import logging
from typing import Any, Optional

from sqlalchemy.orm import Session

from meatup.exceptions import ForbiddenError, NotFoundError, ValidationError
from meatup.models.activity import ActivityType
from meatup.models.comment import Comment, CommentableType
from meatup.models.event import Event
from meatup.models.poll import Poll
from meatup.models.user import User
from meatup.services import activity_service

logger = logging.getLogger(__name__)

MAX_COMMENT_LENGTH = 2000

_TARGETS = {
    CommentableType.poll: (Poll, "Poll not found"),
    CommentableType.event: (Event, "Event not found"),
}


def parse_target_type(value: Optional[str]) -> CommentableType:
    try:
        return CommentableType(value)
    except ValueError:
        raise ValidationError("commentable_type must be poll or event")


def _require_target(db: Session, commentable_type: CommentableType, commentable_id: Optional[int]) -> None:
    if commentable_id is None:
        raise ValidationError("commentable_id is required")
    model, missing = _TARGETS[commentable_type]
    if not db.query(model.id).filter(model.id == commentable_id).first():
        raise NotFoundError(missing)


def get_comment(db: Session, comment_id: int) -> Comment:
    comment = db.query(Comment).filter(Comment.id == comment_id).first()
    if not comment:
        raise NotFoundError("Comment not found")
    return comment


def list_comments(db: Session, commentable_type: CommentableType, commentable_id: Optional[int]) -> list[dict[str, Any]]:
    """Top-level comments oldest first, each with its nested ``replies``.

    A reply whose parent is gone is promoted to the top level.
    """
    _require_target(db, commentable_type, commentable_id)
    rows = (
        db.query(Comment, User.name, User.email, User.picture)
        .join(User, Comment.user_id == User.id)
        .filter(Comment.commentable_type == commentable_type, Comment.commentable_id == commentable_id)
        .order_by(Comment.created_at.asc(), Comment.id.asc())
        .all()
    )

    by_id: dict[int, dict[str, Any]] = {}
    for comment, name, email, picture in rows:
        entry = {col.name: getattr(comment, col.name) for col in Comment.__table__.columns}
        entry.update(user_name=name, user_email=email, user_picture=picture, replies=[])
        by_id[comment.id] = entry

    roots = []
    for entry in by_id.values():
        parent = by_id.get(entry["parent_id"]) if entry["parent_id"] else None
        if parent is not None:
            parent["replies"].append(entry)
        else:
            roots.append(entry)
    return roots


def count_comments(db: Session, commentable_type: CommentableType, commentable_id: int) -> int:
    return (
        db.query(Comment)
        .filter(Comment.commentable_type == commentable_type, Comment.commentable_id == commentable_id)
        .count()
    )


def create_comment(
    db: Session,
    user: User,
    commentable_type: CommentableType,
    commentable_id: Optional[int],
    content: Optional[str],
    parent_id: Optional[int] = None,
) -> Comment:
    """Post a comment, or a reply when ``parent_id`` is given."""
    content = (content or "").strip()
    if not content:
        raise ValidationError("Comment cannot be empty")
    if len(content) > MAX_COMMENT_LENGTH:
        raise ValidationError(f"Comment must be at most {MAX_COMMENT_LENGTH} characters")
    _require_target(db, commentable_type, commentable_id)

    if parent_id is not None:
        parent = get_comment(db, parent_id)
        if parent.commentable_type != commentable_type or parent.commentable_id != commentable_id:
            raise ValidationError("Reply must be on the same thread as its parent")

    comment = Comment(
        user_id=user.id,
        commentable_type=commentable_type,
        commentable_id=commentable_id,
        content=content,
        parent_id=parent_id,
    )
    db.add(comment)
    db.flush()
    activity_service.record(
        db, user.id, ActivityType.comment,
        {"comment_id": comment.id, "commentable_type": commentable_type.value,
         "commentable_id": commentable_id, "parent_id": parent_id},
    )
    db.commit()
    db.refresh(comment)
    logger.info("User %s commented on %s %s (comment %s)", user.id, commentable_type.value, commentable_id, comment.id)
    return comment


def delete_comment(db: Session, user: User, comment_id: int) -> None:
    """Delete a comment and every reply under it. Authors and admins only."""
    comment = get_comment(db, comment_id)
    if comment.user_id != user.id and not user.is_admin:
        raise ForbiddenError("You can only delete your own comments")

    activity_service.record(db, user.id, ActivityType.delete_comment, {"comment_id": comment.id})
    db.delete(comment)
    db.commit()
    logger.info("User %s deleted comment %s", user.id, comment_id)
