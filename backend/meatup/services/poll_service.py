"""Poll service — opening voting rounds and promoting winners into events.

A poll is bound to one target event and is either ``open`` or ``closed``;
at most one is open at a time. Closing validates the chosen winners
against the same ranked candidate sets the listing endpoints show, then
writes the closed poll and the promoted event in a single commit.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from meatup.exceptions import ConflictError, NoUpcomingEventError, NotFoundError, ValidationError
from meatup.models.activity import ActivityType
from meatup.models.event import Event, EventStatus
from meatup.models.poll import Poll, PollExcludedRestaurant, PollStatus
from meatup.models.suggestion import RestaurantSuggestion, DateSuggestion
from meatup.models.user import User
from meatup.services import activity_service, event_service
from meatup.services.ranking import SuggestionKind, leader_of, rank_suggestions
from meatup.services.suggestion_service import earliest_upcoming_event, resolve_target_event

logger = logging.getLogger(__name__)


def get_active_poll(db: Session) -> Optional[Poll]:
    return db.query(Poll).filter(Poll.status == PollStatus.open).first()


def _close_open_polls(db: Session, admin: User) -> int:
    return (
        db.query(Poll)
        .filter(Poll.status == PollStatus.open)
        .update(
            {Poll.status: PollStatus.closed, Poll.closed_by: admin.id, Poll.closed_at: datetime.now(timezone.utc)},
            synchronize_session=False,
        )
    )


def _close_poll_row(db: Session, poll_id: int, closed_fields: dict) -> bool:
    """Close one poll only if it is still open."""
    changed = (
        db.query(Poll)
        .filter(Poll.id == poll_id, Poll.status == PollStatus.open)
        .update(closed_fields, synchronize_session=False)
    )
    return changed > 0


def open_poll(db: Session, admin: User, title: Optional[str], event_id: Optional[int] = None) -> Poll:
    """Close whatever poll is open and open a new one for the target event."""
    if not title or not title.strip():
        raise ValidationError("Poll title is required")

    if event_id is not None:
        event = event_service.get_event(db, event_id)
    else:
        event = earliest_upcoming_event(db)
        if event is None:
            raise NoUpcomingEventError()

    closed = _close_open_polls(db, admin)
    poll = Poll(title=title.strip(), status=PollStatus.open, event_id=event.id, created_by=admin.id)
    db.add(poll)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Another poll was opened at the same time")
    db.refresh(poll)
    logger.info("Admin %s opened poll %s for event %s (closed %d)", admin.id, poll.id, event.id, closed)
    return poll


def current_leaders(db: Session, event_id: Optional[int] = None, voter: Optional[User] = None) -> dict[str, Any]:
    """Ranked options and leaders of both kinds from one ranking per kind."""
    event = resolve_target_event(db, event_id)
    voter_id = voter.id if voter else None
    restaurants = rank_suggestions(db, SuggestionKind.restaurant, event.id, voter_id)
    dates = rank_suggestions(db, SuggestionKind.date, event.id, voter_id)
    return {
        "event_id": event.id,
        "restaurant_leader": leader_of(restaurants),
        "date_leader": leader_of(dates),
        "restaurants": restaurants,
        "dates": dates,
    }


def _pick_winner(ranked: list[dict[str, Any]], chosen_id: Optional[int], label: str) -> Optional[dict[str, Any]]:
    """The chosen candidate, or the leader when none was chosen."""
    if chosen_id is None:
        return leader_of(ranked)
    for entry in ranked:
        if entry["id"] == chosen_id:
            return entry
    raise ValidationError(f"Winning {label} must belong to the poll being closed")


def close_and_promote(
    db: Session,
    admin: User,
    event_id: Optional[int] = None,
    winning_restaurant_id: Optional[int] = None,
    winning_date_id: Optional[int] = None,
    create_event: bool = False,
) -> tuple[Poll, Optional[Event]]:
    """Close the poll for the target event and optionally create the winning event."""
    target = resolve_target_event(db, event_id)
    restaurant = _pick_winner(
        rank_suggestions(db, SuggestionKind.restaurant, target.id), winning_restaurant_id, "restaurant"
    )
    winning_date = _pick_winner(rank_suggestions(db, SuggestionKind.date, target.id), winning_date_id, "date")

    if create_event:
        if restaurant is None or winning_date is None:
            raise ValidationError("Winning restaurant and date are required to create an event")
        if winning_date["suggested_date"] < event_service.club_today():
            raise ValidationError("Cannot create event for a date in the past")

    closed_fields = {
        Poll.status: PollStatus.closed,
        Poll.closed_by: admin.id,
        Poll.closed_at: datetime.now(timezone.utc),
        Poll.winning_restaurant_id: restaurant["id"] if restaurant else None,
        Poll.winning_date_id: winning_date["id"] if winning_date else None,
    }

    new_event = None
    if create_event:
        new_event = Event(
            restaurant_name=restaurant["name"],
            restaurant_address=restaurant["address"],
            event_date=winning_date["suggested_date"],
            status=EventStatus.upcoming,
        )
        db.add(new_event)
        db.flush()
        closed_fields[Poll.created_event_id] = new_event.id

    poll = (
        db.query(Poll)
        .filter(Poll.status == PollStatus.open, Poll.event_id == target.id)
        .first()
    )
    if poll is not None:
        if not _close_poll_row(db, poll.id, closed_fields):
            db.rollback()
            raise ConflictError("Poll was closed by another request")
    else:
        poll = Poll(
            title=f"Dinner poll for event {target.id}",
            event_id=target.id,
            created_by=admin.id,
            **{column.key: value for column, value in closed_fields.items()},
        )
        db.add(poll)

    db.commit()
    db.refresh(poll)
    if new_event is not None:
        db.refresh(new_event)
    logger.info(
        "Admin %s closed poll %s (restaurant=%s, date=%s, event=%s)",
        admin.id, poll.id, poll.winning_restaurant_id, poll.winning_date_id, poll.created_event_id,
    )
    return poll, new_event


def list_closed_polls(db: Session, limit: int = 10) -> list[dict[str, Any]]:
    """Most recently closed polls with their winners' display values."""
    rows = (
        db.query(Poll, RestaurantSuggestion.name, DateSuggestion.suggested_date)
        .outerjoin(RestaurantSuggestion, Poll.winning_restaurant_id == RestaurantSuggestion.id)
        .outerjoin(DateSuggestion, Poll.winning_date_id == DateSuggestion.id)
        .filter(Poll.status == PollStatus.closed)
        .order_by(Poll.closed_at.desc(), Poll.id.desc())
        .limit(limit)
        .all()
    )
    closed = []
    for poll, restaurant_name, winning_date in rows:
        entry = {col.name: getattr(poll, col.name) for col in Poll.__table__.columns}
        entry.update(winning_restaurant_name=restaurant_name, winning_date=winning_date)
        closed.append(entry)
    return closed


def get_poll(db: Session, poll_id: int) -> Poll:
    poll = db.query(Poll).filter(Poll.id == poll_id).first()
    if not poll:
        raise NotFoundError("Poll not found")
    return poll


def _open_poll_restaurant(db: Session, poll_id: int, restaurant_id: Optional[int]) -> tuple[Poll, RestaurantSuggestion]:
    if restaurant_id is None:
        raise ValidationError("restaurant_id is required")
    poll = get_poll(db, poll_id)
    if poll.status != PollStatus.open:
        raise ValidationError("Exclusions can only change while the poll is open")
    restaurant = db.query(RestaurantSuggestion).filter(RestaurantSuggestion.id == restaurant_id).first()
    if not restaurant:
        raise NotFoundError("Restaurant not found")
    if restaurant.event_id != poll.event_id:
        raise ValidationError("Restaurant does not belong to this poll's event")
    return poll, restaurant


def exclude_restaurant(db: Session, admin: User, poll_id: int, restaurant_id: Optional[int]) -> bool:
    """Take a restaurant out of an open poll. Returns False if it was already excluded."""
    poll, restaurant = _open_poll_restaurant(db, poll_id, restaurant_id)
    try:
        with db.begin_nested():
            db.add(PollExcludedRestaurant(poll_id=poll.id, restaurant_id=restaurant.id, excluded_by=admin.id))
    except IntegrityError:
        db.commit()
        return False

    activity_service.record(
        db, admin.id, ActivityType.exclude_restaurant, {"poll_id": poll.id, "restaurant_id": restaurant.id}
    )
    db.commit()
    logger.info("Admin %s excluded restaurant %s from poll %s", admin.id, restaurant.id, poll.id)
    return True


def include_restaurant(db: Session, admin: User, poll_id: int, restaurant_id: Optional[int]) -> None:
    """Put an excluded restaurant back into an open poll."""
    poll, restaurant = _open_poll_restaurant(db, poll_id, restaurant_id)
    deleted = (
        db.query(PollExcludedRestaurant)
        .filter(PollExcludedRestaurant.poll_id == poll.id, PollExcludedRestaurant.restaurant_id == restaurant.id)
        .delete(synchronize_session=False)
    )
    if not deleted:
        db.rollback()
        raise NotFoundError("Restaurant is not excluded from this poll")

    activity_service.record(
        db, admin.id, ActivityType.include_restaurant, {"poll_id": poll.id, "restaurant_id": restaurant.id}
    )
    db.commit()
    logger.info("Admin %s restored restaurant %s to poll %s", admin.id, restaurant.id, poll.id)


def list_exclusions(db: Session, poll_id: int) -> list[dict[str, Any]]:
    get_poll(db, poll_id)
    rows = (
        db.query(PollExcludedRestaurant, RestaurantSuggestion.name)
        .join(RestaurantSuggestion, PollExcludedRestaurant.restaurant_id == RestaurantSuggestion.id)
        .filter(PollExcludedRestaurant.poll_id == poll_id)
        .order_by(PollExcludedRestaurant.created_at.asc(), PollExcludedRestaurant.id.asc())
        .all()
    )
    return [
        {
            "poll_id": exclusion.poll_id,
            "restaurant_id": exclusion.restaurant_id,
            "restaurant_name": name,
            "excluded_by": exclusion.excluded_by,
            "created_at": exclusion.created_at,
        }
        for exclusion, name in rows
    ]
