"""
Public event, attendance and waitlist I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, EmailStr, Field

from abg_site.core.models.domain.enums import UserRole

from .common import ReadModel, UtcDateTime


class EventCreate(BaseModel):
    slug: str = Field(min_length=1, max_length=128, pattern=r"^[a-z0-9][a-z0-9-]*$")
    title: str = Field(min_length=1, max_length=256)
    description: Optional[str] = None
    location: Optional[str] = None
    start_time: UtcDateTime
    end_time: Optional[UtcDateTime] = None
    published: bool = False
    attendance_confirm_enabled: bool = False
    attendance_password: Optional[str] = None
    capacity: Optional[int] = Field(default=None, ge=1)
    waitlist_enabled: bool = False
    waitlist_max_size: Optional[int] = Field(default=None, ge=1)
    waitlist_auto_promote: bool = True
    required_roles_any: List[UserRole] = Field(default_factory=list)


class EventUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    start_time: Optional[UtcDateTime] = None
    end_time: Optional[UtcDateTime] = None
    published: Optional[bool] = None
    attendance_confirm_enabled: Optional[bool] = None
    attendance_password: Optional[str] = None
    capacity: Optional[int] = Field(default=None, ge=1)
    waitlist_enabled: Optional[bool] = None
    waitlist_max_size: Optional[int] = Field(default=None, ge=1)
    waitlist_auto_promote: Optional[bool] = None
    required_roles_any: Optional[List[UserRole]] = None


class EventRead(ReadModel):
    id: int
    slug: str
    title: str
    description: Optional[str] = None
    location: Optional[str] = None
    start_time: datetime
    end_time: Optional[datetime] = None
    published: bool
    attendance_confirm_enabled: bool
    capacity: Optional[int] = None
    waitlist_enabled: bool
    waitlist_max_size: Optional[int] = None
    waitlist_auto_promote: bool
    required_roles_any: List[str] = Field(default_factory=list)
    # Admin-only details are left out of the public shape
    password_protected: bool = False


class AttendanceRegistration(BaseModel):
    name: str = Field(min_length=1, max_length=256)
    email: EmailStr
    umich_id: Optional[str] = Field(default=None, max_length=32)
    major: Optional[str] = Field(default=None, max_length=128)
    year: Optional[str] = Field(default=None, max_length=32)
    password: Optional[str] = None


class AttendanceCancel(BaseModel):
    email: EmailStr


class AttendeeRead(ReadModel):
    id: int
    event_id: int
    name: str
    email: str
    umich_id: Optional[str] = None
    major: Optional[str] = None
    year: Optional[str] = None
    status: str
    waitlist_position: Optional[int] = None
    check_in_code: str
    checked_in_at: Optional[datetime] = None
    registered_at: datetime
    confirmed_at: Optional[datetime] = None


class AttendanceResult(BaseModel):
    status: str
    message: str
    waitlist_position: Optional[int] = None
    check_in_code: str
    attendee_id: int


class AttendeeCheckIn(BaseModel):
    code: str = Field(min_length=1, max_length=16)


class AttendeeList(BaseModel):
    attendees: List[AttendeeRead]
    counts: Dict[str, int]


class WaitlistPromote(BaseModel):
    attendee_ids: Optional[List[int]] = None


class WaitlistExpand(BaseModel):
    new_capacity: int = Field(ge=1)


class WaitlistActionResult(BaseModel):
    promoted: List[int] = Field(default_factory=list)
    capacity: Optional[int] = None
    message: str
