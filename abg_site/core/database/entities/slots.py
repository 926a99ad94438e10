"""
Slot and booking entity models.

Slots are time windows for coffee chats and interviews. A booking reserves
one seat in a slot for one applicant; capacity is ``max_bookings``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from ..base import Base, TZDateTime, utc_now


class Slot(Base, table=True):
    """
    Table: slots
    """

    __tablename__ = "slots"

    id: Optional[int] = Field(default=None, primary_key=True)
    cycle_id: int = Field(foreign_key="recruitment_cycles.id", index=True)
    kind: str = Field(max_length=32, index=True)

    start_time: datetime = Field(index=True, sa_type=TZDateTime)
    end_time: datetime = Field(sa_type=TZDateTime)
    location: Optional[str] = Field(default=None, max_length=256)
    meeting_url: Optional[str] = Field(default=None, max_length=512)
    host_name: Optional[str] = Field(default=None, max_length=256)
    host_email: Optional[str] = Field(default=None, max_length=320)

    max_bookings: int = Field(default=1, ge=1)
    # None means open to every track
    for_track: Optional[str] = Field(default=None, max_length=32)
    is_active: bool = Field(default=True)

    created_at: datetime = Field(default_factory=utc_now, sa_type=TZDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=TZDateTime)


class SlotBooking(Base, table=True):
    """
    Table: slot_bookings
    """

    __tablename__ = "slot_bookings"

    id: Optional[int] = Field(default=None, primary_key=True)
    cycle_id: int = Field(index=True)
    slot_id: int = Field(foreign_key="slots.id", index=True)
    application_id: Optional[int] = Field(default=None, index=True)
    user_id: int = Field(index=True)
    user_email: str = Field(max_length=320)
    user_name: Optional[str] = Field(default=None, max_length=256)

    slot_kind: str = Field(max_length=32)
    status: str = Field(default="confirmed", max_length=16, index=True)
    notes: Optional[str] = Field(default=None)

    created_at: datetime = Field(default_factory=utc_now, sa_type=TZDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=TZDateTime)
