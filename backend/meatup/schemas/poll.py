"""Pydantic schemas for polls and vote leaders."""
from __future__ import annotations
from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel

from meatup.schemas.event import EventOut
from meatup.schemas.suggestion import RankedRestaurantOut, RankedDateOut


class PollCreate(BaseModel):
    title: Optional[str] = None
    event_id: Optional[int] = None


class PollClose(BaseModel):
    event_id: Optional[int] = None
    winning_restaurant_id: Optional[int] = None
    winning_date_id: Optional[int] = None
    create_event: bool = False


class PollOut(BaseModel):
    id: int
    title: str
    status: str
    event_id: int
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None
    closed_by: Optional[int] = None
    closed_at: Optional[datetime] = None
    winning_restaurant_id: Optional[int] = None
    winning_date_id: Optional[int] = None
    created_event_id: Optional[int] = None

    model_config = {"from_attributes": True}


class ClosedPollOut(PollOut):
    winning_restaurant_name: Optional[str] = None
    winning_date: Optional[date] = None


class PollCloseOut(BaseModel):
    poll: PollOut
    event: Optional[EventOut] = None


class LeadersOut(BaseModel):
    event_id: int
    restaurant_leader: Optional[RankedRestaurantOut] = None
    date_leader: Optional[RankedDateOut] = None
    restaurants: list[RankedRestaurantOut] = []
    dates: list[RankedDateOut] = []


class PollExclusionPayload(BaseModel):
    restaurant_id: Optional[int] = None


class PollExclusionOut(BaseModel):
    poll_id: int
    restaurant_id: int
    restaurant_name: Optional[str] = None
    excluded_by: Optional[int] = None
    created_at: Optional[datetime] = None
