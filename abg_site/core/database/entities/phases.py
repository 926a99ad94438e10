"""
Review phase entity models.

A review phase (application screening, interview round 1, interview round 2)
has a scoring configuration, per-reviewer reviews, a saved ranking once a
cutoff is applied, and a decision record per applicant that allows the cutoff
to be reverted.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import JSON, Field

from ..base import Base, TZDateTime, utc_now


class PhaseConfig(Base, table=True):
    """Scoring configuration and lifecycle state of one phase.

    ``track`` is None for the general configuration shared by all tracks.

    Table: phase_configs
    """

    __tablename__ = "phase_configs"
    __table_args__ = (UniqueConstraint("cycle_id", "phase", "track", name="uq_phase_config"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    cycle_id: int = Field(foreign_key="recruitment_cycles.id", index=True)
    phase: str = Field(max_length=32)
    track: Optional[str] = Field(default=None, max_length=32)

    # [{key, label, weight, description}]
    categories: List[Dict[str, Any]] = Field(default_factory=list, sa_type=JSON)
    min_score: float = Field(default=1.0)
    max_score: float = Field(default=5.0)
    min_reviewers_required: int = Field(default=2)
    referral_weight: float = Field(default=0.5)
    deferral_weight: float = Field(default=-0.5)

    status: str = Field(default="not_started", max_length=16)
    finalized_at: Optional[datetime] = Field(default=None, sa_type=TZDateTime)
    finalized_by: Optional[str] = Field(default=None, max_length=320)
    cutoff_applied_at: Optional[datetime] = Field(default=None, sa_type=TZDateTime)
    cutoff_applied_by: Optional[str] = Field(default=None, max_length=320)
    cutoff_criteria: Optional[Dict[str, Any]] = Field(default=None, sa_type=JSON)

    created_at: datetime = Field(default_factory=utc_now, sa_type=TZDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=TZDateTime)


class PhaseReview(Base, table=True):
    """One reviewer's scores for one application in one phase.

    Table: phase_reviews
    """

    __tablename__ = "phase_reviews"
    __table_args__ = (
        UniqueConstraint("application_id", "reviewer_email", "phase", name="uq_phase_review_reviewer"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    application_id: int = Field(foreign_key="applications.id", index=True)
    cycle_id: int = Field(index=True)
    phase: str = Field(max_length=32, index=True)
    reviewer_email: str = Field(max_length=320, index=True)
    reviewer_name: Optional[str] = Field(default=None, max_length=256)

    scores: Dict[str, float] = Field(default_factory=dict, sa_type=JSON)
    recommendation: str = Field(max_length=16)
    referral_signal: str = Field(default="neutral", max_length=16)
    comments: Optional[str] = Field(default=None)

    created_at: datetime = Field(default_factory=utc_now, sa_type=TZDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=TZDateTime)


class PhaseRanking(Base, table=True):
    """Snapshot of a ranking saved when a cutoff is applied.

    Table: phase_rankings
    """

    __tablename__ = "phase_rankings"

    id: Optional[int] = Field(default=None, primary_key=True)
    cycle_id: int = Field(index=True)
    phase: str = Field(max_length=32, index=True)
    track: Optional[str] = Field(default=None, max_length=32)
    entries: List[Dict[str, Any]] = Field(default_factory=list, sa_type=JSON)
    finalized_at: Optional[datetime] = Field(default=None, sa_type=TZDateTime)
    created_at: datetime = Field(default_factory=utc_now, sa_type=TZDateTime)


class PhaseDecision(Base, table=True):
    """Stage change applied to one application by a cutoff.

    Table: phase_decisions
    """

    __tablename__ = "phase_decisions"

    id: Optional[int] = Field(default=None, primary_key=True)
    cycle_id: int = Field(index=True)
    phase: str = Field(max_length=32, index=True)
    application_id: int = Field(index=True)
    decision: str = Field(max_length=16)
    reason: Optional[str] = Field(default=None)
    previous_stage: str = Field(max_length=32)
    new_stage: str = Field(max_length=32)
    performed_by: str = Field(max_length=320)
    created_at: datetime = Field(default_factory=utc_now, sa_type=TZDateTime)
