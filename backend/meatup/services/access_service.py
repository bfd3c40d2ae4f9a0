"""Access gate — identity resolution, membership status and admin checks.

Members are provisioned by an admin ("invited") before they can ever sign
in; an unknown email is rejected here and never auto-created. The only
self-service transition is invited -> active via accept_invite.
"""
import logging

from sqlalchemy.orm import Session

from meatup.exceptions import ForbiddenError, NotFoundError, UnknownIdentityError
from meatup.models.activity import ActivityType
from meatup.models.user import User, MemberStatus
from meatup.schemas.user import Identity
from meatup.services import activity_service

logger = logging.getLogger(__name__)


def authenticate(db: Session, identity: Identity) -> User:
    """Resolve a verified identity to its member row, refreshing profile fields."""
    user = db.query(User).filter(User.email == identity.email).first()
    if not user:
        logger.warning("Rejected sign-in for unknown email %s", identity.email)
        raise UnknownIdentityError("This email is not on the member list")

    refreshed = []
    if identity.name and identity.name != user.name:
        user.name = identity.name
        refreshed.append("name")
    if identity.picture and identity.picture != user.picture:
        user.picture = identity.picture
        refreshed.append("picture")

    if refreshed:
        activity_service.record(db, user.id, ActivityType.profile_refresh, {"fields": refreshed})
        db.commit()
        db.refresh(user)
        logger.info("Refreshed %s for user %s", ", ".join(refreshed), user.id)
    return user


def require_active(user: User) -> None:
    if user.status != MemberStatus.active:
        raise ForbiddenError("Your membership has not been activated yet")


def require_admin(user: User) -> None:
    if not user.is_admin:
        raise ForbiddenError("Forbidden: Admin access required")


def accept_invite(db: Session, identity: Identity) -> bool:
    """Activate the caller's own account.

    Returns False without touching the row when it is already active.
    """
    user = db.query(User).filter(User.email == identity.email).first()
    if not user:
        raise NotFoundError("User not found")

    updated = (
        db.query(User)
        .filter(User.id == user.id, User.status == MemberStatus.invited)
        .update({User.status: MemberStatus.active}, synchronize_session=False)
    )
    if not updated:
        db.rollback()
        return False

    activity_service.record(db, user.id, ActivityType.accept_invite)
    db.commit()
    logger.info("User %s accepted their invite", user.id)
    return True
