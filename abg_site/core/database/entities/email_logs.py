"""
Email log entity.

Every outbound recruitment email attempt is recorded, successful or not.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from ..base import Base, TZDateTime, utc_now


class EmailLog(Base, table=True):
    """
    Table: email_logs
    """

    __tablename__ = "email_logs"

    id: Optional[int] = Field(default=None, primary_key=True)
    cycle_id: Optional[int] = Field(default=None, index=True)
    application_id: Optional[int] = Field(default=None, index=True)
    to_email: str = Field(max_length=320, index=True)
    subject: str = Field(max_length=512)
    template: str = Field(max_length=64)
    status: str = Field(max_length=16)
    error: Optional[str] = Field(default=None)
    sent_by: Optional[str] = Field(default=None, max_length=320)
    sent_at: datetime = Field(default_factory=utc_now, index=True, sa_type=TZDateTime)
