"""
Newsletter subscriber entity.

Unsubscribing keeps the row (``is_active`` false) so a later subscribe
reactivates it.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from ..base import Base, TZDateTime, utc_now


class NewsletterSubscriber(Base, table=True):
    """
    Table: newsletter_subscribers
    """

    __tablename__ = "newsletter_subscribers"

    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(max_length=320, unique=True, index=True)
    name: Optional[str] = Field(default=None, max_length=256)
    source: str = Field(default="website", max_length=64)
    is_active: bool = Field(default=True, index=True)
    subscribed_at: datetime = Field(default_factory=utc_now, sa_type=TZDateTime)
    unsubscribed_at: Optional[datetime] = Field(default=None, sa_type=TZDateTime)
