"""
Slot and booking I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from abg_site.core.models.domain.enums import BookingStatus, SlotKind, Track

from .common import ReadModel, UtcDateTime


class SlotCreate(BaseModel):
    kind: SlotKind
    start_time: UtcDateTime
    end_time: UtcDateTime
    location: Optional[str] = None
    meeting_url: Optional[str] = None
    host_name: Optional[str] = None
    host_email: Optional[str] = None
    max_bookings: int = Field(default=1, ge=1)
    for_track: Optional[Track] = None
    is_active: bool = True

    @model_validator(mode="after")
    def _check_times(self) -> "SlotCreate":
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class SlotUpdate(BaseModel):
    start_time: Optional[UtcDateTime] = None
    end_time: Optional[UtcDateTime] = None
    location: Optional[str] = None
    meeting_url: Optional[str] = None
    host_name: Optional[str] = None
    host_email: Optional[str] = None
    max_bookings: Optional[int] = Field(default=None, ge=1)
    for_track: Optional[Track] = None
    is_active: Optional[bool] = None


class SlotRead(ReadModel):
    id: int
    cycle_id: int
    kind: str
    start_time: datetime
    end_time: datetime
    location: Optional[str] = None
    meeting_url: Optional[str] = None
    host_name: Optional[str] = None
    host_email: Optional[str] = None
    max_bookings: int
    for_track: Optional[str] = None
    is_active: bool
    booked_count: int = 0

    @property
    def is_full(self) -> bool:
        return self.booked_count >= self.max_bookings


class BookingRead(ReadModel):
    id: int
    cycle_id: int
    slot_id: int
    application_id: Optional[int] = None
    user_id: int
    user_email: str
    user_name: Optional[str] = None
    slot_kind: str
    status: str
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    slot: Optional[SlotRead] = None


class BookingStatusUpdate(BaseModel):
    status: BookingStatus
    notes: Optional[str] = None
