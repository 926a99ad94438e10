"""Domain enums and access-control rules."""

from .enums import (
    ApplicationStage,
    AttendeeStatus,
    AuditAction,
    BookingStatus,
    CutoffType,
    DecisionOutcome,
    EmailStatus,
    PhaseStatus,
    Recommendation,
    ReferralSignal,
    ReviewPhase,
    SlotKind,
    Track,
    UserRole,
    value_of,
)

__all__ = [
    "ApplicationStage",
    "AttendeeStatus",
    "AuditAction",
    "BookingStatus",
    "CutoffType",
    "DecisionOutcome",
    "EmailStatus",
    "PhaseStatus",
    "Recommendation",
    "ReferralSignal",
    "ReviewPhase",
    "SlotKind",
    "Track",
    "UserRole",
    "value_of",
]
