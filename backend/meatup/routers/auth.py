"""Identity routes — who am I, and accepting an invitation."""
import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from meatup.database import get_db
from meatup.dependencies import get_current_user, get_identity
from meatup.models.user import User
from meatup.schemas.user import AcceptInviteOut, Identity, MeOut
from meatup.services import access_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/me", response_model=MeOut)
def me(user: User = Depends(get_current_user)):
    """Return the signed-in member; available before activation."""
    return user


@router.post("/accept-invite", response_model=AcceptInviteOut)
def accept_invite(identity: Identity = Depends(get_identity), db: Session = Depends(get_db)):
    """Activate the caller's invited account. Repeating it is a no-op."""
    changed = access_service.accept_invite(db, identity)
    message = "Account activated successfully" if changed else "Account already active"
    return AcceptInviteOut(message=message, status="active", changed=changed)
