"""Pydantic schemas for Events."""
from __future__ import annotations
from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel


class EventCreate(BaseModel):
    restaurant_name: str
    restaurant_address: Optional[str] = None
    event_date: date


class EventUpdate(BaseModel):
    restaurant_name: Optional[str] = None
    restaurant_address: Optional[str] = None
    event_date: Optional[date] = None
    status: Optional[str] = None


class EventOut(BaseModel):
    id: int
    restaurant_name: str
    restaurant_address: Optional[str] = None
    event_date: date
    status: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
