"""Suggestion ranking — the single ordering behind listings, leaders and promotion.

Every place that shows candidates or picks a winner goes through
rank_suggestions, scoped to one event, so a computed leader is always a
member of the option list shown next to it. Restaurants excluded from
the event's open poll are left out of every ranking.
"""
import enum
import logging
from typing import Any, Optional

from sqlalchemy import case, func, literal, select
from sqlalchemy.orm import Session

from meatup.models.poll import Poll, PollExcludedRestaurant, PollStatus
from meatup.models.suggestion import RestaurantSuggestion, DateSuggestion
from meatup.models.user import User
from meatup.models.vote import RestaurantVote, DateVote

logger = logging.getLogger(__name__)


class SuggestionKind(str, enum.Enum):
    restaurant = "restaurant"
    date = "date"


# kind -> (suggestion model, vote model, vote column pointing at the suggestion)
_KINDS = {
    SuggestionKind.restaurant: (RestaurantSuggestion, RestaurantVote, RestaurantVote.suggestion_id),
    SuggestionKind.date: (DateSuggestion, DateVote, DateVote.date_suggestion_id),
}


def suggestion_model(kind: SuggestionKind):
    return _KINDS[kind][0]


def vote_model(kind: SuggestionKind):
    return _KINDS[kind][1], _KINDS[kind][2]


def _tie_break(kind: SuggestionKind) -> list:
    """Secondary ordering once vote counts are equal."""
    if kind == SuggestionKind.date:
        return [DateSuggestion.suggested_date.asc(), DateSuggestion.id.asc()]
    return [RestaurantSuggestion.created_at.desc(), RestaurantSuggestion.id.desc()]


def _excluded_restaurants(event_id: int):
    """Restaurant ids the event's open poll has taken out of the running."""
    return (
        select(PollExcludedRestaurant.restaurant_id)
        .join(Poll, Poll.id == PollExcludedRestaurant.poll_id)
        .where(Poll.event_id == event_id, Poll.status == PollStatus.open)
    )


def rank_suggestions(
    db: Session,
    kind: SuggestionKind,
    event_id: int,
    voter_id: Optional[int] = None,
) -> list[dict[str, Any]]:
    """Return the event's suggestions of one kind, best first.

    Each entry carries the suggestion columns plus the proposer's name and
    email, ``vote_count`` and ``user_has_voted`` for ``voter_id``.
    """
    model, votes, vote_fk = _KINDS[kind]
    vote_count = func.count(votes.id)
    if voter_id is not None:
        voted = func.coalesce(func.sum(case((votes.user_id == voter_id, 1), else_=0)), 0)
    else:
        voted = literal(0)

    query = (
        db.query(model, User.name, User.email, vote_count.label("vote_count"), voted.label("user_has_voted"))
        .outerjoin(User, model.user_id == User.id)
        .outerjoin(votes, vote_fk == model.id)
        .filter(model.event_id == event_id)
    )
    if kind == SuggestionKind.restaurant:
        query = query.filter(model.id.not_in(_excluded_restaurants(event_id)))
    rows = (
        query.group_by(model.id, User.name, User.email)
        .order_by(vote_count.desc(), *_tie_break(kind))
        .all()
    )

    ranked = []
    for suggestion, name, email, count, has_voted in rows:
        entry = {col.name: getattr(suggestion, col.name) for col in model.__table__.columns}
        entry.update(
            suggested_by_name=name,
            suggested_by_email=email,
            vote_count=int(count or 0),
            user_has_voted=bool(has_voted),
        )
        ranked.append(entry)
    return ranked


def leader_of(ranked: list[dict[str, Any]]) -> Optional[dict[str, Any]]:
    """First ranked entry, provided it has at least one vote."""
    if ranked and ranked[0]["vote_count"] > 0:
        return ranked[0]
    return None


def leader(db: Session, kind: SuggestionKind, event_id: int) -> Optional[dict[str, Any]]:
    """Current leading suggestion of one kind for an event, or None without votes."""
    return leader_of(rank_suggestions(db, kind, event_id))
