"""Vote tally — toggling a member's vote on a restaurant or date suggestion.

At most one vote exists per (voter, suggestion); the storage layer holds
that as a unique constraint. Removal is a single conditional DELETE whose
rowcount says whether a vote existed, and a racing duplicate INSERT is
read as "already voted" instead of an error.
"""
import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from meatup.exceptions import NotFoundError, ValidationError, VoteNotFoundError
from meatup.models.activity import ActivityType
from meatup.models.user import User
from meatup.services import activity_service
from meatup.services.ranking import SuggestionKind, suggestion_model, vote_model

logger = logging.getLogger(__name__)

VOTE_ACTIONS = ("add", "remove")

_ACTIVITY = {
    SuggestionKind.restaurant: (ActivityType.vote_restaurant, ActivityType.unvote_restaurant),
    SuggestionKind.date: (ActivityType.vote_date, ActivityType.unvote_date),
}


def _require_suggestion(db: Session, kind: SuggestionKind, suggestion_id: Optional[int]) -> None:
    if suggestion_id is None:
        raise ValidationError("suggestion_id is required")
    model = suggestion_model(kind)
    if not db.query(model.id).filter(model.id == suggestion_id).first():
        raise NotFoundError("Suggestion not found")


def _delete_vote(db: Session, kind: SuggestionKind, user: User, suggestion_id: int) -> bool:
    votes, vote_fk = vote_model(kind)
    deleted = (
        db.query(votes)
        .filter(vote_fk == suggestion_id, votes.user_id == user.id)
        .delete(synchronize_session=False)
    )
    return deleted > 0


def cast_or_toggle_vote(
    db: Session,
    user: User,
    kind: SuggestionKind,
    suggestion_id: Optional[int],
    action: Optional[str] = None,
) -> bool:
    """Toggle the caller's vote and return whether a vote exists afterwards.

    An existing vote is always removed, whatever the action. ``remove``
    without an existing vote raises VoteNotFoundError.
    """
    if action is not None and action not in VOTE_ACTIONS:
        raise ValidationError(f"Invalid action: {action}")
    _require_suggestion(db, kind, suggestion_id)
    vote_activity, unvote_activity = _ACTIVITY[kind]

    if _delete_vote(db, kind, user, suggestion_id):
        activity_service.record(db, user.id, unvote_activity, {"suggestion_id": suggestion_id})
        db.commit()
        logger.info("User %s removed vote for %s suggestion %s", user.id, kind.value, suggestion_id)
        return False

    if action == "remove":
        db.rollback()
        raise VoteNotFoundError("No vote found to remove")

    votes, vote_fk = vote_model(kind)
    try:
        with db.begin_nested():
            db.add(votes(**{vote_fk.key: suggestion_id, "user_id": user.id}))
    except IntegrityError:
        # A concurrent request from the same user inserted first
        db.commit()
        logger.info("User %s already voted for %s suggestion %s", user.id, kind.value, suggestion_id)
        return True

    activity_service.record(db, user.id, vote_activity, {"suggestion_id": suggestion_id})
    db.commit()
    logger.info("User %s voted for %s suggestion %s", user.id, kind.value, suggestion_id)
    return True


def remove_vote(db: Session, user: User, kind: SuggestionKind, suggestion_id: Optional[int]) -> None:
    """Unconditionally remove the caller's vote; VoteNotFoundError if there is none."""
    if suggestion_id is None:
        raise ValidationError("suggestion_id is required")
    if not _delete_vote(db, kind, user, suggestion_id):
        db.rollback()
        raise VoteNotFoundError("Vote not found")

    activity_service.record(db, user.id, _ACTIVITY[kind][1], {"suggestion_id": suggestion_id})
    db.commit()
    logger.info("User %s removed vote for %s suggestion %s", user.id, kind.value, suggestion_id)
