"""
Key/value site settings editable from the admin console.

Values are stored as text; ``type`` tells readers how to interpret them.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from ..base import Base, TZDateTime, utc_now


class SiteSetting(Base, table=True):
    """
    Table: site_settings
    """

    __tablename__ = "site_settings"

    id: Optional[int] = Field(default=None, primary_key=True)
    key: str = Field(max_length=128, unique=True, index=True)
    value: str = Field(default="")
    type: str = Field(default="TEXT", max_length=16)
    description: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now, sa_type=TZDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=TZDateTime)
