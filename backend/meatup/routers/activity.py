"""Activity log routes (admin only)."""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from meatup.database import get_db
from meatup.dependencies import require_admin
from meatup.models.user import User
from meatup.schemas.activity import ActivityOut
from meatup.services import activity_service

router = APIRouter()


@router.get("/", response_model=list[ActivityOut])
def list_activity(
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return activity_service.list_activity(db, limit=limit, offset=offset)
