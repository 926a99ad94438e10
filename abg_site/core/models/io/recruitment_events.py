"""
Recruitment event and RSVP I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from .common import ReadModel, UtcDateTime


class RecruitmentEventCreate(BaseModel):
    title: str = Field(min_length=1, max_length=256)
    description: Optional[str] = None
    location: Optional[str] = None
    start_time: UtcDateTime
    end_time: Optional[UtcDateTime] = None
    rsvp_enabled: bool = True
    rsvp_deadline: Optional[UtcDateTime] = None
    capacity: Optional[int] = Field(default=None, ge=1)
    check_in_enabled: bool = False
    check_in_code: Optional[str] = Field(default=None, min_length=4, max_length=16)


class RecruitmentEventUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    start_time: Optional[UtcDateTime] = None
    end_time: Optional[UtcDateTime] = None
    rsvp_enabled: Optional[bool] = None
    rsvp_deadline: Optional[UtcDateTime] = None
    capacity: Optional[int] = Field(default=None, ge=1)
    check_in_enabled: Optional[bool] = None
    check_in_code: Optional[str] = Field(default=None, min_length=4, max_length=16)


class RecruitmentEventRead(ReadModel):
    id: int
    cycle_id: int
    title: str
    description: Optional[str] = None
    location: Optional[str] = None
    start_time: datetime
    end_time: Optional[datetime] = None
    rsvp_enabled: bool
    rsvp_deadline: Optional[datetime] = None
    capacity: Optional[int] = None
    check_in_enabled: bool
    check_in_code: Optional[str] = None


class PortalEventRead(RecruitmentEventRead):
    """Recruitment event as an applicant sees it: no check-in code, plus RSVP state."""

    check_in_code: Optional[str] = Field(default=None, exclude=True)
    rsvp_count: int = 0
    has_rsvped: bool = False
    checked_in: bool = False


class RsvpRead(ReadModel):
    id: int
    cycle_id: int
    event_id: int
    user_id: int
    user_email: str
    user_name: Optional[str] = None
    rsvped_at: datetime
    attended_at: Optional[datetime] = None
    checked_in_at: Optional[datetime] = None


class CheckInRequest(BaseModel):
    code: str = Field(min_length=1, max_length=16)
