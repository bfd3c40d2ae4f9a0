"""Poll routes — the open voting round, its leaders, and closing it."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from meatup.database import get_db
from meatup.dependencies import require_active_member, require_admin
from meatup.models.user import User
from meatup.schemas.event import EventOut
from meatup.schemas.poll import (
    ClosedPollOut,
    LeadersOut,
    PollClose,
    PollCloseOut,
    PollCreate,
    PollExclusionOut,
    PollExclusionPayload,
    PollOut,
)
from meatup.services import poll_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/active", response_model=Optional[PollOut])
def get_active_poll(user: User = Depends(require_active_member), db: Session = Depends(get_db)):
    return poll_service.get_active_poll(db)


@router.get("/closed", response_model=list[ClosedPollOut])
def list_closed_polls(
    limit: int = Query(10, ge=1, le=100),
    user: User = Depends(require_active_member),
    db: Session = Depends(get_db),
):
    return poll_service.list_closed_polls(db, limit)


@router.get("/leaders", response_model=LeadersOut)
def get_leaders(
    event_id: Optional[int] = Query(None),
    user: User = Depends(require_active_member),
    db: Session = Depends(get_db),
):
    """Leaders and full option lists, computed from the same ranking."""
    return poll_service.current_leaders(db, event_id, voter=user)


@router.post("/", response_model=PollOut, status_code=status.HTTP_201_CREATED)
def open_poll(payload: PollCreate, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    """Open a new poll, closing the current one."""
    return poll_service.open_poll(db, admin, payload.title, payload.event_id)


@router.post("/close", response_model=PollCloseOut)
def close_poll(payload: PollClose, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    """Close the poll with its winners, optionally creating the winning event."""
    poll, event = poll_service.close_and_promote(
        db,
        admin,
        event_id=payload.event_id,
        winning_restaurant_id=payload.winning_restaurant_id,
        winning_date_id=payload.winning_date_id,
        create_event=payload.create_event,
    )
    return PollCloseOut(
        poll=PollOut.model_validate(poll),
        event=EventOut.model_validate(event) if event is not None else None,
    )


@router.get("/{poll_id}/exclusions", response_model=list[PollExclusionOut])
def list_exclusions(poll_id: int, user: User = Depends(require_active_member), db: Session = Depends(get_db)):
    return poll_service.list_exclusions(db, poll_id)


@router.post("/{poll_id}/exclusions", response_model=list[PollExclusionOut])
def exclude_restaurant(
    poll_id: int,
    payload: PollExclusionPayload,
    response: Response,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Take a restaurant out of the poll (201), or 200 if it was already out."""
    if poll_service.exclude_restaurant(db, admin, poll_id, payload.restaurant_id):
        response.status_code = status.HTTP_201_CREATED
    return poll_service.list_exclusions(db, poll_id)


@router.delete("/{poll_id}/exclusions/{restaurant_id}", response_model=list[PollExclusionOut])
def include_restaurant(
    poll_id: int,
    restaurant_id: int,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    poll_service.include_restaurant(db, admin, poll_id, restaurant_id)
    return poll_service.list_exclusions(db, poll_id)
