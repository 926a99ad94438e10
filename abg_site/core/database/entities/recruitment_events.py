"""
Recruitment event and RSVP entity models.

Recruitment events (info sessions, socials) belong to a cycle. Applicants
RSVP to them through the portal and check in on site with a short code.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from ..base import Base, TZDateTime, utc_now


class RecruitmentEvent(Base, table=True):
    """
    Table: recruitment_events
    """

    __tablename__ = "recruitment_events"

    id: Optional[int] = Field(default=None, primary_key=True)
    cycle_id: int = Field(foreign_key="recruitment_cycles.id", index=True)

    title: str = Field(max_length=256)
    description: Optional[str] = Field(default=None)
    location: Optional[str] = Field(default=None, max_length=256)
    start_time: datetime = Field(sa_type=TZDateTime)
    end_time: Optional[datetime] = Field(default=None, sa_type=TZDateTime)

    rsvp_enabled: bool = Field(default=True)
    rsvp_deadline: Optional[datetime] = Field(default=None, sa_type=TZDateTime)
    capacity: Optional[int] = Field(default=None, ge=1)

    check_in_enabled: bool = Field(default=False)
    check_in_code: Optional[str] = Field(default=None, max_length=16)

    created_at: datetime = Field(default_factory=utc_now, sa_type=TZDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=TZDateTime)


class EventRsvp(Base, table=True):
    """
    One RSVP per user per recruitment event.

    Table: recruitment_event_rsvps
    """

    __tablename__ = "recruitment_event_rsvps"
    __table_args__ = (UniqueConstraint("event_id", "user_id", name="uq_rsvp_event_user"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    cycle_id: int = Field(index=True)
    event_id: int = Field(foreign_key="recruitment_events.id", index=True)
    user_id: int = Field(index=True)
    user_email: str = Field(max_length=320)
    user_name: Optional[str] = Field(default=None, max_length=256)

    rsvped_at: datetime = Field(default_factory=utc_now, sa_type=TZDateTime)
    attended_at: Optional[datetime] = Field(default=None, sa_type=TZDateTime)
    checked_in_at: Optional[datetime] = Field(default=None, sa_type=TZDateTime)
