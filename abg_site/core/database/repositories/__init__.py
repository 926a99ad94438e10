"""
Repository layer.

One repository per entity, each built on ``SQLModelRepository`` for CRUD and
adding the domain queries its services need.
"""

from .applications import ApplicationRepository, QuestionRepository
from .base import AsyncBaseRepository, AsyncQueryBuilder, SQLModelRepository
from .cycles import RecruitmentCycleRepository
from .email_logs import EmailLogRepository
from .events import EventAttendeeRepository, EventRepository
from .forms import FormRepository, FormSubmissionRepository
from .newsletter import NewsletterSubscriberRepository
from .newsroom import NewsroomPostRepository, NewsroomViewRepository
from .phases import (
    PhaseConfigRepository,
    PhaseDecisionRepository,
    PhaseRankingRepository,
    PhaseReviewRepository,
)
from .projects import ProjectRepository
from .recruitment_events import EventRsvpRepository, RecruitmentEventRepository
from .site_settings import SiteSettingRepository
from .slots import SlotBookingRepository, SlotRepository
from .team import TeamMemberRepository
from .users import AuditLogRepository, UserRepository

__all__ = [
    "ApplicationRepository",
    "AsyncBaseRepository",
    "AsyncQueryBuilder",
    "AuditLogRepository",
    "EmailLogRepository",
    "EventAttendeeRepository",
    "EventRepository",
    "EventRsvpRepository",
    "FormRepository",
    "FormSubmissionRepository",
    "NewsletterSubscriberRepository",
    "NewsroomPostRepository",
    "NewsroomViewRepository",
    "PhaseConfigRepository",
    "PhaseDecisionRepository",
    "PhaseRankingRepository",
    "PhaseReviewRepository",
    "ProjectRepository",
    "QuestionRepository",
    "RecruitmentCycleRepository",
    "RecruitmentEventRepository",
    "SQLModelRepository",
    "SiteSettingRepository",
    "SlotBookingRepository",
    "SlotRepository",
    "TeamMemberRepository",
    "UserRepository",
]
