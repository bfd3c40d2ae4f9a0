"""Pydantic schemas for comment threads."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class CommentCreate(BaseModel):
    commentable_type: Optional[str] = None  # poll, event
    commentable_id: Optional[int] = None
    content: Optional[str] = None
    parent_id: Optional[int] = None


class CommentOut(BaseModel):
    id: int
    user_id: int
    commentable_type: str
    commentable_id: int
    content: str
    parent_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class CommentThreadOut(CommentOut):
    user_name: Optional[str] = None
    user_email: str
    user_picture: Optional[str] = None
    replies: list[CommentThreadOut] = []
