"""
Database entity models.

This package contains all database entity models organized by business domain.
Importing it registers every table on ``Base.metadata``.
"""

from .applications import Application
from .cycles import RecruitmentCycle
from .email_logs import EmailLog
from .events import Event, EventAttendee
from .forms import Form, FormSubmission
from .newsletter import NewsletterSubscriber
from .newsroom import NewsroomPost, NewsroomView
from .phases import PhaseConfig, PhaseDecision, PhaseRanking, PhaseReview
from .projects import Project
from .questions import ApplicationQuestions
from .recruitment_events import EventRsvp, RecruitmentEvent
from .site_settings import SiteSetting
from .slots import Slot, SlotBooking
from .team import TeamMember
from .users import AuditLog, User

__all__ = [
    "Application",
    "ApplicationQuestions",
    "AuditLog",
    "EmailLog",
    "Event",
    "EventAttendee",
    "EventRsvp",
    "Form",
    "FormSubmission",
    "NewsletterSubscriber",
    "NewsroomPost",
    "NewsroomView",
    "PhaseConfig",
    "PhaseDecision",
    "PhaseRanking",
    "PhaseReview",
    "Project",
    "RecruitmentCycle",
    "RecruitmentEvent",
    "SiteSetting",
    "Slot",
    "SlotBooking",
    "TeamMember",
    "User",
]
