"""Restaurant suggestion and vote routes."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from meatup.database import get_db
from meatup.dependencies import require_active_member
from meatup.models.user import User
from meatup.schemas.suggestion import (
    RankedRestaurantOut,
    RestaurantSuggestionCreate,
    RestaurantSuggestionOut,
    VoteOut,
    VotePayload,
)
from meatup.services import suggestion_service, vote_service
from meatup.services.ranking import SuggestionKind

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", response_model=list[RankedRestaurantOut])
def list_restaurants(
    event_id: Optional[int] = Query(None),
    user: User = Depends(require_active_member),
    db: Session = Depends(get_db),
):
    """Restaurant suggestions for the target event, most votes first."""
    event = suggestion_service.resolve_target_event(db, event_id)
    return suggestion_service.list_suggestions(db, SuggestionKind.restaurant, event, voter=user)


@router.post("/", response_model=RestaurantSuggestionOut, status_code=status.HTTP_201_CREATED)
def suggest_restaurant(
    payload: RestaurantSuggestionCreate,
    user: User = Depends(require_active_member),
    db: Session = Depends(get_db),
):
    event = suggestion_service.resolve_target_event(db, payload.event_id)
    return suggestion_service.suggest_restaurant(
        db, user, event,
        name=payload.name,
        address=payload.address,
        cuisine=payload.cuisine,
        url=payload.url,
    )


@router.post("/vote", response_model=VoteOut)
def vote(
    payload: VotePayload,
    response: Response,
    user: User = Depends(require_active_member),
    db: Session = Depends(get_db),
):
    """Toggle the caller's vote; ``action: remove`` fails when there is nothing to remove."""
    voted = vote_service.cast_or_toggle_vote(
        db, user, SuggestionKind.restaurant, payload.suggestion_id, payload.action
    )
    if voted:
        response.status_code = status.HTTP_201_CREATED
        return VoteOut(message="Vote added", voted=True)
    return VoteOut(message="Vote removed", voted=False)


@router.delete("/vote", response_model=VoteOut)
def remove_vote(
    suggestion_id: Optional[int] = Query(None),
    user: User = Depends(require_active_member),
    db: Session = Depends(get_db),
):
    vote_service.remove_vote(db, user, SuggestionKind.restaurant, suggestion_id)
    return VoteOut(message="Vote removed", voted=False)
