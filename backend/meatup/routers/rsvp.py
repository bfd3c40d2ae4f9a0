"""RSVP routes."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from meatup.database import get_db
from meatup.dependencies import require_active_member, require_admin
from meatup.exceptions import ValidationError
from meatup.models.user import User
from meatup.schemas.rsvp import EventRSVPsOut, RSVPOut, RSVPOverridePayload, RSVPPayload, RSVPWriteOut
from meatup.services import event_service, rsvp_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", response_model=EventRSVPsOut)
def get_rsvps(
    event_id: Optional[int] = Query(None),
    user: User = Depends(require_active_member),
    db: Session = Depends(get_db),
):
    """The caller's RSVP plus every RSVP for the event."""
    if event_id is None:
        raise ValidationError("event_id is required")
    event_service.get_event(db, event_id)
    return EventRSVPsOut(
        userRsvp=rsvp_service.get_rsvp(db, user.id, event_id),
        allRsvps=rsvp_service.list_rsvps(db, event_id),
    )


@router.post("/", response_model=RSVPWriteOut)
def set_rsvp(
    payload: RSVPPayload,
    response: Response,
    user: User = Depends(require_active_member),
    db: Session = Depends(get_db),
):
    """Create (201) or update (200) the caller's RSVP."""
    rsvp, created = rsvp_service.set_rsvp(db, user, payload.event_id, payload.status, payload.comment)
    if created:
        response.status_code = status.HTTP_201_CREATED
    return RSVPWriteOut(
        message="RSVP created" if created else "RSVP updated",
        rsvp=RSVPOut.model_validate(rsvp),
    )


@router.post("/override", response_model=RSVPWriteOut)
def override_rsvp(
    payload: RSVPOverridePayload,
    response: Response,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Admin sets a member's RSVP; the member's next answer replaces it."""
    rsvp, created = rsvp_service.override_rsvp(db, admin, payload.event_id, payload.user_id, payload.status)
    if created:
        response.status_code = status.HTTP_201_CREATED
    return RSVPWriteOut(message="RSVP overridden", rsvp=RSVPOut.model_validate(rsvp))
