"""Domain enums for the recruitment portal, events and access control."""

from __future__ import annotations

from enum import Enum


class Track(str, Enum):
    """Application track an applicant applies to."""

    business = "business"
    engineering = "engineering"
    ai_investment_fund = "ai_investment_fund"
    ai_energy_efficiency = "ai_energy_efficiency"
    both = "both"  # Question sets shared by every track.


class ApplicationStage(str, Enum):
    """
    Lifecycle stage of an application.

    Stages advance through cutoffs; ``withdrawn`` is set by the applicant.
    """

    not_started = "not_started"
    draft = "draft"
    submitted = "submitted"
    under_review = "under_review"
    coffee_chat = "coffee_chat"
    interview_round1 = "interview_round1"
    interview_round2 = "interview_round2"
    final_review = "final_review"
    waitlisted = "waitlisted"
    accepted = "accepted"
    rejected = "rejected"
    withdrawn = "withdrawn"


class SlotKind(str, Enum):
    """Kind of bookable time slot."""

    coffee_chat = "coffee_chat"
    interview_round1 = "interview_round1"
    interview_round2 = "interview_round2"


class BookingStatus(str, Enum):
    confirmed = "confirmed"
    cancelled = "cancelled"
    completed = "completed"
    no_show = "no_show"


class ReviewPhase(str, Enum):
    """Review rounds an applicant passes through."""

    application = "application"
    interview_round1 = "interview_round1"
    interview_round2 = "interview_round2"


class PhaseStatus(str, Enum):
    not_started = "not_started"
    in_progress = "in_progress"
    finalized = "finalized"


class Recommendation(str, Enum):
    advance = "advance"
    hold = "hold"
    reject = "reject"


class ReferralSignal(str, Enum):
    """A reviewer's strong signal for or against an applicant."""

    referral = "referral"
    neutral = "neutral"
    deferral = "deferral"


class CutoffType(str, Enum):
    top_n = "top_n"
    min_score = "min_score"
    manual = "manual"


class DecisionOutcome(str, Enum):
    advance = "advance"
    reject = "reject"
    manual_advance = "manual_advance"
    manual_reject = "manual_reject"

    @property
    def advances(self) -> bool:
        return self in (DecisionOutcome.advance, DecisionOutcome.manual_advance)


class AttendeeStatus(str, Enum):
    confirmed = "confirmed"
    waitlisted = "waitlisted"
    cancelled = "cancelled"


class EmailStatus(str, Enum):
    sent = "sent"
    failed = "failed"


class ProjectStatus(str, Enum):
    PLANNING = "PLANNING"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    ON_HOLD = "ON_HOLD"
    CANCELLED = "CANCELLED"


class PostType(str, Enum):
    blog = "blog"
    podcast = "podcast"
    video = "video"
    member_spotlight = "member-spotlight"
    project_update = "project-update"


class PostStatus(str, Enum):
    draft = "draft"
    published = "published"
    archived = "archived"


class FormQuestionType(str, Enum):
    """Answer kinds a form question accepts."""

    TEXT = "TEXT"
    TEXTAREA = "TEXTAREA"
    EMAIL = "EMAIL"
    PHONE = "PHONE"
    URL = "URL"
    NUMBER = "NUMBER"
    DATE = "DATE"
    BOOLEAN = "BOOLEAN"
    SELECT = "SELECT"
    RADIO = "RADIO"
    CHECKBOX = "CHECKBOX"


class SettingType(str, Enum):
    TEXT = "TEXT"
    BOOLEAN = "BOOLEAN"
    NUMBER = "NUMBER"
    JSON = "JSON"


class UserRole(str, Enum):
    """Roles a site user can hold. A user may hold several."""

    USER = "USER"
    ADMIN = "ADMIN"
    PROJECT_TEAM_MEMBER = "PROJECT_TEAM_MEMBER"
    GENERAL_MEMBER = "GENERAL_MEMBER"
    ROUND1 = "ROUND1"
    ROUND2 = "ROUND2"
    SPECIAL_PRIVS = "SPECIAL_PRIVS"
    # Executive board
    PRESIDENT = "PRESIDENT"
    VP_EXTERNAL = "VP_EXTERNAL"
    VP_OPERATIONS = "VP_OPERATIONS"
    VP_EDUCATION = "VP_EDUCATION"
    VP_MARKETING = "VP_MARKETING"
    VP_CONFERENCES = "VP_CONFERENCES"
    VP_FINANCE = "VP_FINANCE"
    VP_COMMUNITY = "VP_COMMUNITY"
    VP_SPONSORSHIPS = "VP_SPONSORSHIPS"
    VP_RECRUITMENT = "VP_RECRUITMENT"
    VP_TECHNOLOGY = "VP_TECHNOLOGY"


class AuditAction(str, Enum):
    """Actions recorded in the audit log."""

    user_role_changed = "user.role_changed"
    event_created = "event.created"
    event_updated = "event.updated"
    event_deleted = "event.deleted"
    event_registration_created = "event.registration_created"
    event_registration_cancelled = "event.registration_cancelled"
    event_registration_promoted = "event.registration_promoted"
    content_created = "content.created"
    content_updated = "content.updated"
    content_deleted = "content.deleted"
    form_submitted = "form.submitted"
    setting_updated = "settings.updated"
    admin_access_granted = "admin.access_granted"
    admin_access_denied = "admin.access_denied"
    phase_cutoff_applied = "recruitment.cutoff_applied"
    phase_finalized = "recruitment.phase_finalized"
    phase_unlocked = "recruitment.phase_unlocked"
    phase_reverted = "recruitment.phase_reverted"


def value_of(item: "str | Enum") -> str:
    """Plain string value of an enum member or string."""
    return item.value if isinstance(item, Enum) else item
