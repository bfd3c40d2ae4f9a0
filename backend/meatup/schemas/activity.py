"""Pydantic schemas for the activity log."""
from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel


class ActivityOut(BaseModel):
    id: int
    user_id: int
    user_name: Optional[str] = None
    user_email: str
    action_type: str
    action_details: Optional[Any] = None
    route: Optional[str] = None
    created_at: Optional[datetime] = None
