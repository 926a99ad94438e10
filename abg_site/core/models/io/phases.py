"""
Review phase I/O models: configs, reviews, rankings, cutoffs.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, model_validator

from abg_site.core.models.domain.enums import (
    CutoffType,
    DecisionOutcome,
    Recommendation,
    ReferralSignal,
    Track,
)

from .common import ReadModel


class ScoringCategory(BaseModel):
    key: str = Field(min_length=1, max_length=64)
    label: str
    weight: float = Field(ge=0.0)
    description: Optional[str] = None


class PhaseConfigUpsert(BaseModel):
    track: Optional[Track] = None
    categories: List[ScoringCategory] = Field(min_length=1)
    min_score: float = 1.0
    max_score: float = 5.0
    min_reviewers_required: int = Field(default=2, ge=1)
    referral_weight: float = 0.5
    deferral_weight: float = -0.5

    @model_validator(mode="after")
    def _check_range(self) -> "PhaseConfigUpsert":
        if self.max_score <= self.min_score:
            raise ValueError("max_score must be greater than min_score")
        return self


class PhaseConfigRead(BaseModel):
    id: Optional[int] = None
    cycle_id: int
    phase: str
    track: Optional[str] = None
    categories: List[ScoringCategory]
    min_score: float
    max_score: float
    min_reviewers_required: int
    referral_weight: float
    deferral_weight: float
    status: str
    finalized_at: Optional[datetime] = None
    finalized_by: Optional[str] = None
    cutoff_applied_at: Optional[datetime] = None
    cutoff_applied_by: Optional[str] = None
    cutoff_criteria: Optional[Dict[str, Any]] = None

    model_config = {"from_attributes": True}


class PhaseReviewUpsert(BaseModel):
    scores: Dict[str, float] = Field(min_length=1)
    recommendation: Recommendation
    referral_signal: ReferralSignal = ReferralSignal.neutral
    comments: Optional[str] = None


class PhaseReviewRead(ReadModel):
    id: int
    application_id: int
    cycle_id: int
    phase: str
    reviewer_email: str
    reviewer_name: Optional[str] = None
    scores: Dict[str, float]
    recommendation: str
    referral_signal: str
    comments: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class ReviewSummary(BaseModel):
    review_count: int
    category_averages: Dict[str, float]
    avg_score: float
    weighted_score: float
    recommendations: Dict[str, int]
    referral_count: int
    deferral_count: int
    neutral_count: int = 0
    reviewers: List[str]


class RankingEntry(BaseModel):
    rank: int
    application_id: int
    user_email: str
    user_name: Optional[str] = None
    track: str
    stage: str
    review_count: int
    category_averages: Dict[str, float]
    average_score: float
    weighted_score: float
    referral_count: int
    deferral_count: int
    neutral_count: int = 0
    recommendations: Dict[str, int]


class PhaseRankingRead(BaseModel):
    cycle_id: int
    phase: str
    track: Optional[str] = None
    normalized: bool
    entries: List[RankingEntry]


class ManualOverride(BaseModel):
    decision: DecisionOutcome
    reason: Optional[str] = None


class CutoffCriteria(BaseModel):
    type: CutoffType
    top_n: Optional[int] = Field(default=None, ge=0)
    min_score: Optional[float] = None
    manual_overrides: Dict[int, ManualOverride] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_parameters(self) -> "CutoffCriteria":
        if self.type == CutoffType.top_n and self.top_n is None:
            raise ValueError("top_n is required for a top_n cutoff")
        if self.type == CutoffType.min_score and self.min_score is None:
            raise ValueError("min_score is required for a min_score cutoff")
        return self


class CutoffRequest(BaseModel):
    criteria: CutoffCriteria
    track: Optional[Track] = None
    normalize: bool = False
    finalize_after: bool = True
    force_finalize: bool = False
    send_emails: bool = False


class DecisionRead(ReadModel):
    application_id: int
    decision: str
    reason: Optional[str] = None
    previous_stage: str
    new_stage: str


class CutoffResult(BaseModel):
    advanced: int
    rejected: int
    decisions: List[DecisionRead]
    finalized: bool = False
    emails_sent: int = 0
    emails_failed: int = 0


class RevertResult(BaseModel):
    reverted: int


class ReviewerCompletion(BaseModel):
    email: str
    reviewed: int
    total: int
    percentage: float


class PhaseCompleteness(BaseModel):
    phase: str
    status: str
    total_applicants: int
    applicants_with_reviews: int
    applicants_fully_reviewed: int
    min_reviewers_required: int
    reviewer_completion: List[ReviewerCompletion]
