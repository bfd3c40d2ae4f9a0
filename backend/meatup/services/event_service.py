"""Core event service — admin event management.

Responsibilities:
- Direct creation (always starts ``upcoming``)
- Partial updates with the lifecycle rule upcoming -> completed | cancelled
- Listing by status, newest date first
"""
import logging
from datetime import date, datetime
from typing import Any, Optional

import pytz
from sqlalchemy.orm import Session

from meatup.config import settings
from meatup.exceptions import NotFoundError, ValidationError
from meatup.models.event import Event, EventStatus
from meatup.models.user import User

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("restaurant_name", "restaurant_address", "event_date", "status")


def club_today() -> date:
    """Today's date in the club's time zone."""
    tz = pytz.timezone(settings.CLUB_TIMEZONE)
    return datetime.now(tz).date()


def parse_status(value: Optional[str]) -> EventStatus:
    try:
        return EventStatus(value)
    except ValueError:
        raise ValidationError(f"Invalid event status: {value}")


def _check_transition(event: Event, new_status: EventStatus) -> None:
    """Only upcoming events may move; re-setting the current status is a no-op."""
    if new_status == event.status or event.status == EventStatus.upcoming:
        return
    raise ValidationError(f"Event is already {event.status.value} and cannot become {new_status.value}")


def get_event(db: Session, event_id: int) -> Event:
    event = db.query(Event).filter(Event.id == event_id).first()
    if not event:
        raise NotFoundError("Event not found")
    return event


def create_event(
    db: Session,
    admin: User,
    restaurant_name: str,
    event_date: date,
    restaurant_address: Optional[str] = None,
) -> Event:
    """Create an upcoming event directly."""
    if not restaurant_name or not restaurant_name.strip():
        raise ValidationError("Restaurant name and date are required")

    event = Event(
        restaurant_name=restaurant_name.strip(),
        restaurant_address=restaurant_address,
        event_date=event_date,
        status=EventStatus.upcoming,
    )
    db.add(event)
    db.commit()
    db.refresh(event)
    logger.info("Admin %s created event %s at '%s' on %s", admin.id, event.id, event.restaurant_name, event_date)
    return event


def update_event(db: Session, admin: User, event_id: int, updates: dict[str, Any]) -> Event:
    """Apply a partial update to an event."""
    event = get_event(db, event_id)

    if "status" in updates:
        new_status = parse_status(updates["status"])
        _check_transition(event, new_status)
        updates = {**updates, "status": new_status}
    if "restaurant_name" in updates and not (updates["restaurant_name"] or "").strip():
        raise ValidationError("Restaurant name cannot be empty")
    if "event_date" in updates and updates["event_date"] is None:
        raise ValidationError("Event date cannot be empty")

    for field, value in updates.items():
        if field in EDITABLE_FIELDS:
            setattr(event, field, value)

    db.commit()
    db.refresh(event)
    logger.info("Admin %s updated event %s (%s)", admin.id, event_id, ", ".join(sorted(updates)))
    return event


def list_events(db: Session, status_filter: Optional[str] = None) -> list[Event]:
    """All events, or those with one status, by date descending."""
    query = db.query(Event)
    if status_filter and status_filter != "all":
        query = query.filter(Event.status == parse_status(status_filter))
    return query.order_by(Event.event_date.desc(), Event.id.desc()).all()
