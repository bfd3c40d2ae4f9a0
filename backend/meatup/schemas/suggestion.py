"""Pydantic schemas for restaurant/date suggestions and votes."""
from __future__ import annotations
from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel


class RestaurantSuggestionCreate(BaseModel):
    event_id: Optional[int] = None
    name: Optional[str] = None
    address: Optional[str] = None
    cuisine: Optional[str] = None
    url: Optional[str] = None


class DateSuggestionCreate(BaseModel):
    event_id: Optional[int] = None
    suggested_date: Optional[date] = None


class RestaurantSuggestionOut(BaseModel):
    id: int
    user_id: int
    event_id: int
    name: str
    address: Optional[str] = None
    cuisine: Optional[str] = None
    url: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class DateSuggestionOut(BaseModel):
    id: int
    user_id: int
    event_id: int
    suggested_date: date
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class RankedRestaurantOut(RestaurantSuggestionOut):
    suggested_by_name: Optional[str] = None
    suggested_by_email: Optional[str] = None
    vote_count: int
    user_has_voted: bool


class RankedDateOut(DateSuggestionOut):
    suggested_by_name: Optional[str] = None
    suggested_by_email: Optional[str] = None
    vote_count: int
    user_has_voted: bool


class VotePayload(BaseModel):
    suggestion_id: Optional[int] = None
    action: Optional[str] = None  # "add" | "remove"; omitted means toggle


class VoteOut(BaseModel):
    message: str
    voted: bool
