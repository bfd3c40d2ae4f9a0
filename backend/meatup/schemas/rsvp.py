"""Pydantic schemas for RSVPs."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class RSVPPayload(BaseModel):
    event_id: Optional[int] = None
    status: Optional[str] = None  # yes, no, maybe
    dietary_restrictions: Optional[str] = None
    comments: Optional[str] = None

    @property
    def comment(self) -> Optional[str]:
        return self.dietary_restrictions if self.dietary_restrictions is not None else self.comments


class RSVPOverridePayload(BaseModel):
    event_id: Optional[int] = None
    user_id: Optional[int] = None
    status: Optional[str] = None


class RSVPOut(BaseModel):
    id: int
    event_id: int
    user_id: int
    status: str
    dietary_restrictions: Optional[str] = None
    admin_override: bool = False
    admin_override_by: Optional[int] = None
    admin_override_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class AttendeeOut(RSVPOut):
    name: Optional[str] = None
    email: str
    picture: Optional[str] = None


class RSVPWriteOut(BaseModel):
    message: str
    rsvp: RSVPOut


class EventRSVPsOut(BaseModel):
    userRsvp: Optional[RSVPOut] = None
    allRsvps: list[AttendeeOut] = []
