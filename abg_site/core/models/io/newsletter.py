"""
Newsletter I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from .common import ReadModel


class SubscribeRequest(BaseModel):
    email: EmailStr
    name: Optional[str] = Field(default=None, max_length=256)
    source: str = Field(default="website", max_length=64)


class UnsubscribeRequest(BaseModel):
    email: EmailStr


class SubscriberRead(ReadModel):
    id: int
    email: str
    name: Optional[str] = None
    source: str
    is_active: bool
    subscribed_at: datetime
    unsubscribed_at: Optional[datetime] = None


class SubscribeResult(BaseModel):
    message: str
    subscriber: SubscriberRead
