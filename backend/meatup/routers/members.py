"""Member management routes (admin only)."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from meatup.database import get_db
from meatup.dependencies import require_admin
from meatup.models.user import User
from meatup.schemas.user import MemberCreate, MemberInviteOut, MemberOut, MemberUpdate
from meatup.services import member_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", response_model=list[MemberOut])
def list_members(admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    return member_service.list_members(db)


@router.post("/", response_model=MemberInviteOut, status_code=status.HTTP_201_CREATED)
def invite_member(payload: MemberCreate, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    """Invite a new member by email; they become active once they accept."""
    user, email_sent = member_service.invite_member(
        db, admin, email=payload.email, name=payload.name, is_admin=payload.is_admin
    )
    return MemberInviteOut(member=MemberOut.model_validate(user), email_sent=email_sent)


@router.put("/", response_model=MemberOut)
def update_member(payload: MemberUpdate, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    updates = payload.model_dump(exclude_unset=True, exclude={"user_id"})
    return member_service.update_member(db, admin, payload.user_id, updates)


@router.delete("/")
def remove_member(
    user_id: Optional[int] = Query(None),
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    member_service.remove_member(db, admin, user_id)
    return {"message": "Member removed successfully"}
