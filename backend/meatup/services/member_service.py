"""Membership management — admin invites, edits and removals."""
import logging
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from meatup.exceptions import NotFoundError, ValidationError
from meatup.models.user import User, MemberStatus
from meatup.services import email_service

logger = logging.getLogger(__name__)


def get_member(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    return user


def list_members(db: Session) -> list[User]:
    return db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()


def invite_member(
    db: Session,
    admin: User,
    email: Optional[str],
    name: Optional[str] = None,
    is_admin: bool = False,
) -> tuple[User, bool]:
    """Provision an invited member and send the invite email. Returns (user, email_sent)."""
    email = (email or "").strip()
    if not email:
        raise ValidationError("Email is required")

    user = User(email=email, name=name, is_admin=is_admin, status=MemberStatus.invited)
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValidationError("User with this email already exists")
    db.refresh(user)
    logger.info("Admin %s invited %s as user %s", admin.id, email, user.id)

    email_sent = email_service.send_invite_email(email, name, admin.name)
    return user, email_sent


def update_member(db: Session, admin: User, user_id: int, updates: dict[str, Any]) -> User:
    user = get_member(db, user_id)
    for field in ("is_admin", "status"):
        if field in updates and updates[field] is None:
            raise ValidationError(f"{field} cannot be empty")
    if "status" in updates:
        try:
            updates = {**updates, "status": MemberStatus(updates["status"])}
        except ValueError:
            raise ValidationError(f"Invalid member status: {updates['status']}")

    for field in ("name", "is_admin", "status"):
        if field in updates:
            setattr(user, field, updates[field])
    db.commit()
    db.refresh(user)
    logger.info("Admin %s updated user %s", admin.id, user_id)
    return user


def remove_member(db: Session, admin: User, user_id: Optional[int]) -> None:
    """Delete a member with their suggestions, votes, RSVPs and activity."""
    if user_id is None:
        raise ValidationError("user_id is required")
    if user_id == admin.id:
        raise ValidationError("Cannot delete your own account")
    user = get_member(db, user_id)
    db.delete(user)
    db.commit()
    logger.info("Admin %s removed user %s", admin.id, user_id)
