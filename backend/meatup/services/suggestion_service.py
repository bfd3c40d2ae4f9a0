"""Suggestion ledger — target event resolution and candidate restaurants/dates."""
import logging
from datetime import date
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from meatup.exceptions import (
    DuplicateSuggestionError,
    NoUpcomingEventError,
    NotFoundError,
    ValidationError,
)
from meatup.models.activity import ActivityType
from meatup.models.event import Event, EventStatus
from meatup.models.poll import Poll, PollStatus
from meatup.models.suggestion import RestaurantSuggestion, DateSuggestion
from meatup.models.user import User
from meatup.services import activity_service
from meatup.services.ranking import SuggestionKind, rank_suggestions

logger = logging.getLogger(__name__)


def earliest_upcoming_event(db: Session) -> Optional[Event]:
    return (
        db.query(Event)
        .filter(Event.status == EventStatus.upcoming)
        .order_by(Event.event_date.asc(), Event.id.asc())
        .first()
    )


def resolve_target_event(db: Session, event_id: Optional[int] = None) -> Event:
    """Pick the event that suggestions and votes attach to.

    Order: the explicit id, then the open poll's event, then the earliest
    upcoming event. Never creates an event.
    """
    if event_id is not None:
        event = db.query(Event).filter(Event.id == event_id).first()
        if not event:
            raise NotFoundError("Event not found")
        return event

    poll = db.query(Poll).filter(Poll.status == PollStatus.open).first()
    if poll is not None:
        return poll.event

    event = earliest_upcoming_event(db)
    if event is None:
        raise NoUpcomingEventError()
    return event


def suggest_restaurant(
    db: Session,
    user: User,
    event: Event,
    name: Optional[str],
    address: Optional[str] = None,
    cuisine: Optional[str] = None,
    url: Optional[str] = None,
) -> RestaurantSuggestion:
    """Add a restaurant candidate. Duplicate names are allowed."""
    if not name or not name.strip():
        raise ValidationError("Restaurant name is required")

    suggestion = RestaurantSuggestion(
        user_id=user.id,
        event_id=event.id,
        name=name.strip(),
        address=address,
        cuisine=cuisine,
        url=url,
    )
    db.add(suggestion)
    db.flush()
    activity_service.record(
        db, user.id, ActivityType.suggest_restaurant,
        {"suggestion_id": suggestion.id, "event_id": event.id, "name": suggestion.name},
    )
    db.commit()
    db.refresh(suggestion)
    logger.info("User %s suggested restaurant '%s' (%s) for event %s", user.id, suggestion.name, suggestion.id, event.id)
    return suggestion


def suggest_date(db: Session, user: User, event: Event, suggested_date: Optional[date]) -> DateSuggestion:
    """Add a date candidate; the same user may not repeat a date for one event."""
    if suggested_date is None:
        raise ValidationError("Date is required")

    suggestion = DateSuggestion(user_id=user.id, event_id=event.id, suggested_date=suggested_date)
    db.add(suggestion)
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise DuplicateSuggestionError("You already suggested this date")

    activity_service.record(
        db, user.id, ActivityType.suggest_date,
        {"suggestion_id": suggestion.id, "event_id": event.id, "date": suggested_date.isoformat()},
    )
    db.commit()
    db.refresh(suggestion)
    logger.info("User %s suggested date %s (%s) for event %s", user.id, suggested_date, suggestion.id, event.id)
    return suggestion


def list_suggestions(
    db: Session,
    kind: SuggestionKind,
    event: Event,
    voter: Optional[User] = None,
) -> list[dict[str, Any]]:
    """Ranked candidates of one kind for an event, annotated for the voter."""
    return rank_suggestions(db, kind, event.id, voter.id if voter else None)
