"""Pydantic schemas for members and the verified identity."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class Identity(BaseModel):
    """Identity asserted by the upstream OAuth provider."""

    email: str
    name: Optional[str] = None
    picture: Optional[str] = None


class MemberCreate(BaseModel):
    email: Optional[str] = None
    name: Optional[str] = None
    is_admin: bool = False


class MemberUpdate(BaseModel):
    user_id: int
    name: Optional[str] = None
    is_admin: Optional[bool] = None
    status: Optional[str] = None


class MemberOut(BaseModel):
    id: int
    email: str
    name: Optional[str] = None
    picture: Optional[str] = None
    is_admin: bool
    status: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class MemberInviteOut(BaseModel):
    member: MemberOut
    email_sent: bool


class MeOut(BaseModel):
    id: int
    email: str
    name: Optional[str] = None
    picture: Optional[str] = None
    is_admin: bool
    status: str

    model_config = {"from_attributes": True}


class AcceptInviteOut(BaseModel):
    message: str
    status: str
    changed: bool
