"""
Public event and attendee entity models.

Public events are open to the community. When attendance confirmation is
enabled, visitors register with a campus email; once ``capacity`` is reached
registrations go to an ordered waitlist.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlmodel import JSON, Field

from ..base import Base, TZDateTime, utc_now


class Event(Base, table=True):
    """
    Table: events
    """

    __tablename__ = "events"

    id: Optional[int] = Field(default=None, primary_key=True)
    slug: str = Field(max_length=128, unique=True, index=True)
    title: str = Field(max_length=256)
    description: Optional[str] = Field(default=None)
    location: Optional[str] = Field(default=None, max_length=256)
    start_time: datetime = Field(sa_type=TZDateTime)
    end_time: Optional[datetime] = Field(default=None, sa_type=TZDateTime)
    published: bool = Field(default=False, index=True)

    attendance_confirm_enabled: bool = Field(default=False)
    attendance_password: Optional[str] = Field(default=None, max_length=128)
    # None means unlimited
    capacity: Optional[int] = Field(default=None)
    waitlist_enabled: bool = Field(default=False)
    waitlist_max_size: Optional[int] = Field(default=None)
    waitlist_auto_promote: bool = Field(default=True)
    required_roles_any: List[str] = Field(default_factory=list, sa_type=JSON)

    created_at: datetime = Field(default_factory=utc_now, sa_type=TZDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=TZDateTime)


class EventAttendee(Base, table=True):
    """
    Table: event_attendees
    """

    __tablename__ = "event_attendees"

    id: Optional[int] = Field(default=None, primary_key=True)
    event_id: int = Field(foreign_key="events.id", index=True)
    name: str = Field(max_length=256)
    email: str = Field(max_length=320, index=True)
    umich_id: Optional[str] = Field(default=None, max_length=32)
    major: Optional[str] = Field(default=None, max_length=128)
    year: Optional[str] = Field(default=None, max_length=32)

    status: str = Field(default="confirmed", max_length=16, index=True)
    # 1-based, set only while waitlisted
    waitlist_position: Optional[int] = Field(default=None)
    check_in_code: str = Field(max_length=16, index=True)
    checked_in_at: Optional[datetime] = Field(default=None, sa_type=TZDateTime)
    registered_at: datetime = Field(default_factory=utc_now, sa_type=TZDateTime)
    confirmed_at: Optional[datetime] = Field(default=None, sa_type=TZDateTime)
