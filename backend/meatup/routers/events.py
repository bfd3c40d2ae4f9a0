"""Event API routes — delegates to event_service."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from meatup.database import get_db
from meatup.dependencies import require_active_member, require_admin
from meatup.models.user import User
from meatup.schemas.event import EventCreate, EventUpdate, EventOut
from meatup.services import event_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=EventOut, status_code=status.HTTP_201_CREATED)
def create_event(payload: EventCreate, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    """Create a new upcoming event."""
    return event_service.create_event(
        db=db,
        admin=admin,
        restaurant_name=payload.restaurant_name,
        restaurant_address=payload.restaurant_address,
        event_date=payload.event_date,
    )


@router.get("/", response_model=list[EventOut])
def list_events(
    status_filter: Optional[str] = Query(None, alias="status"),
    user: User = Depends(require_active_member),
    db: Session = Depends(get_db),
):
    """List events, optionally filtered by status (upcoming, completed, cancelled, all)."""
    return event_service.list_events(db, status_filter)


@router.get("/{event_id}", response_model=EventOut)
def get_event(event_id: int, user: User = Depends(require_active_member), db: Session = Depends(get_db)):
    return event_service.get_event(db, event_id)


@router.put("/{event_id}", response_model=EventOut)
def update_event(
    event_id: int,
    payload: EventUpdate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Update an event (admin only)."""
    updates = payload.model_dump(exclude_unset=True)
    return event_service.update_event(db=db, admin=admin, event_id=event_id, updates=updates)
