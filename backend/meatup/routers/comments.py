"""Comment routes — threads on polls and events."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from meatup.database import get_db
from meatup.dependencies import require_active_member
from meatup.models.user import User
from meatup.schemas.comment import CommentCreate, CommentOut, CommentThreadOut
from meatup.services import comment_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", response_model=list[CommentThreadOut])
def list_comments(
    commentable_type: Optional[str] = Query(None),
    commentable_id: Optional[int] = Query(None),
    user: User = Depends(require_active_member),
    db: Session = Depends(get_db),
):
    """Threaded comments for a poll or an event, oldest first."""
    target = comment_service.parse_target_type(commentable_type)
    return comment_service.list_comments(db, target, commentable_id)


@router.post("/", response_model=CommentOut, status_code=status.HTTP_201_CREATED)
def create_comment(
    payload: CommentCreate,
    user: User = Depends(require_active_member),
    db: Session = Depends(get_db),
):
    """Post a comment; include ``parent_id`` to reply."""
    target = comment_service.parse_target_type(payload.commentable_type)
    return comment_service.create_comment(
        db, user, target, payload.commentable_id, payload.content, payload.parent_id
    )


@router.delete("/{comment_id}")
def delete_comment(comment_id: int, user: User = Depends(require_active_member), db: Session = Depends(get_db)):
    comment_service.delete_comment(db, user, comment_id)
    return {"message": "Comment deleted"}
