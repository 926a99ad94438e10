"""
Applicant portal I/O models: the dashboard and its round tracker.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from .applications import ApplicationRead, QuestionSetRead
from .cycles import CycleRead
from .recruitment_events import PortalEventRead, RsvpRead
from .slots import BookingRead, SlotRead


class ScheduledInterview(BaseModel):
    booking_id: int
    time: datetime
    location: Optional[str] = None
    interviewers: List[str] = Field(default_factory=list)


class RoundStatus(BaseModel):
    round: int
    name: str
    phase: str
    # not_started | in_progress | completed | advanced | not_advanced
    status: str
    scheduled_interview: Optional[ScheduledInterview] = None


class NextAction(BaseModel):
    type: str
    title: str
    description: str
    action_url: Optional[str] = None
    deadline: Optional[datetime] = None


class RoundTracker(BaseModel):
    """Where an applicant stands across the three recruitment rounds."""

    current_round: int
    round_name: str
    # waiting | invited | scheduled | completed | decision_pending | advanced | not_advanced
    status: str
    next_action: NextAction
    rounds: List[RoundStatus]


class PortalDashboard(BaseModel):
    active_cycle: CycleRead
    application: Optional[ApplicationRead] = None
    upcoming_events: List[PortalEventRead] = Field(default_factory=list)
    my_rsvps: List[RsvpRead] = Field(default_factory=list)
    available_slots: List[SlotRead] = Field(default_factory=list)
    my_bookings: List[BookingRead] = Field(default_factory=list)
    questions: List[QuestionSetRead] = Field(default_factory=list)
    round_tracker: RoundTracker
