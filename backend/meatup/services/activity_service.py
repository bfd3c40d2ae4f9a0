"""Activity log — records member actions inside the caller's transaction."""
import logging
from typing import Any, Optional

from sqlalchemy.orm import Session

from meatup.models.activity import ActivityLog, ActivityType
from meatup.models.user import User

logger = logging.getLogger(__name__)


def record(
    db: Session,
    user_id: int,
    action_type: ActivityType,
    details: Optional[dict[str, Any]] = None,
    route: Optional[str] = None,
) -> ActivityLog:
    """Stage an activity row; the caller's commit persists it with the action."""
    entry = ActivityLog(
        user_id=user_id,
        action_type=action_type,
        action_details=details,
        route=route,
    )
    db.add(entry)
    return entry


def list_activity(db: Session, limit: int = 100, offset: int = 0) -> list[dict[str, Any]]:
    """Latest activity across all members, newest first."""
    rows = (
        db.query(ActivityLog, User.name, User.email)
        .join(User, ActivityLog.user_id == User.id)
        .order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc())
        .limit(limit)
        .offset(offset)
        .all()
    )
    return [
        {
            "id": entry.id,
            "user_id": entry.user_id,
            "user_name": name,
            "user_email": email,
            "action_type": entry.action_type.value,
            "action_details": entry.action_details,
            "route": entry.route,
            "created_at": entry.created_at,
        }
        for entry, name, email in rows
    ]
