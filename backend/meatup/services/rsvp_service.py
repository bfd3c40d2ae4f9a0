"""RSVP ledger — one attendance row per (member, event), written as an upsert.

Members write their own RSVP; an admin may record one on a member's behalf,
which marks the row as overridden until the member answers again.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from meatup.exceptions import InvalidStatusError, ValidationError
from meatup.models.activity import ActivityType
from meatup.models.rsvp import RSVP, RSVPStatus
from meatup.models.user import User
from meatup.services import activity_service, event_service, member_service

logger = logging.getLogger(__name__)


def _parse_status(value: Optional[str]) -> RSVPStatus:
    try:
        return RSVPStatus(value)
    except ValueError:
        raise InvalidStatusError("Invalid status. Must be yes, no, or maybe")


def _update_existing(db: Session, user_id: int, event_id: int, values: dict) -> bool:
    updated = (
        db.query(RSVP)
        .filter(RSVP.event_id == event_id, RSVP.user_id == user_id)
        .update(values, synchronize_session=False)
    )
    return updated > 0


def _upsert(db: Session, user_id: int, event_id: int, values: dict) -> bool:
    """Update the (user, event) row or insert it. Returns True if inserted."""
    if _update_existing(db, user_id, event_id, values):
        return False
    try:
        with db.begin_nested():
            db.add(RSVP(event_id=event_id, user_id=user_id, **{col.key: v for col, v in values.items()}))
        return True
    except IntegrityError:
        # Lost the insert race; the row exists now
        _update_existing(db, user_id, event_id, values)
        return False


def set_rsvp(
    db: Session,
    user: User,
    event_id: Optional[int],
    status: Optional[str],
    comment: Optional[str] = None,
) -> tuple[RSVP, bool]:
    """Create or update the caller's RSVP. Returns (rsvp, created).

    A ``None`` comment leaves an existing note untouched. Answering clears
    any admin override.
    """
    if event_id is None or not status:
        raise ValidationError("event_id and status are required")
    parsed = _parse_status(status)
    event_service.get_event(db, event_id)

    values: dict[Any, Any] = {
        RSVP.status: parsed,
        RSVP.admin_override: False,
        RSVP.admin_override_by: None,
        RSVP.admin_override_at: None,
    }
    if comment is not None:
        values[RSVP.dietary_restrictions] = comment

    created = _upsert(db, user.id, event_id, values)
    activity_service.record(
        db, user.id, ActivityType.rsvp if created else ActivityType.update_rsvp,
        {"event_id": event_id, "status": parsed.value},
    )
    db.commit()
    rsvp = get_rsvp(db, user.id, event_id)
    logger.info("User %s %s RSVP '%s' for event %s", user.id, "created" if created else "updated", parsed.value, event_id)
    return rsvp, created


def override_rsvp(
    db: Session,
    admin: User,
    event_id: Optional[int],
    user_id: Optional[int],
    status: Optional[str],
) -> tuple[RSVP, bool]:
    """Record a member's attendance on their behalf. Returns (rsvp, created)."""
    if event_id is None or user_id is None or not status:
        raise ValidationError("event_id, user_id and status are required")
    parsed = _parse_status(status)
    event_service.get_event(db, event_id)
    member_service.get_member(db, user_id)

    values = {
        RSVP.status: parsed,
        RSVP.admin_override: True,
        RSVP.admin_override_by: admin.id,
        RSVP.admin_override_at: datetime.now(timezone.utc),
    }
    created = _upsert(db, user_id, event_id, values)
    activity_service.record(
        db, admin.id, ActivityType.admin_override_rsvp,
        {"event_id": event_id, "user_id": user_id, "status": parsed.value},
    )
    db.commit()
    rsvp = get_rsvp(db, user_id, event_id)
    logger.info("Admin %s set RSVP '%s' for user %s on event %s", admin.id, parsed.value, user_id, event_id)
    return rsvp, created


def get_rsvp(db: Session, user_id: int, event_id: int) -> Optional[RSVP]:
    return db.query(RSVP).filter(RSVP.event_id == event_id, RSVP.user_id == user_id).first()


def list_rsvps(db: Session, event_id: int) -> list[dict[str, Any]]:
    """Every RSVP for an event with attendee display fields, oldest first."""
    rows = (
        db.query(RSVP, User.name, User.email, User.picture)
        .join(User, RSVP.user_id == User.id)
        .filter(RSVP.event_id == event_id)
        .order_by(RSVP.created_at.asc(), RSVP.id.asc())
        .all()
    )
    attendees = []
    for rsvp, name, email, picture in rows:
        entry = {col.name: getattr(rsvp, col.name) for col in RSVP.__table__.columns}
        entry.update(name=name, email=email, picture=picture)
        attendees.append(entry)
    return attendees
