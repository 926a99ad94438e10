"""
Review scoring and ranking computations.

Pure functions over already-loaded reviews: summaries for a single
application, per-reviewer z-score normalization, and the ordered ranking a
cutoff is applied to. Database access lives in ``phases``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from abg_site.core.models.domain.enums import (
    CutoffType,
    DecisionOutcome,
    Recommendation,
    ReferralSignal,
    ReviewPhase,
)

# Built-in scoring rubrics used until an admin saves a phase config.
DEFAULT_CATEGORIES: Dict[str, List[dict]] = {
    ReviewPhase.application.value: [
        {"key": "overall", "label": "Overall", "weight": 0.30},
        {"key": "experience", "label": "Experience", "weight": 0.25},
        {"key": "motivation", "label": "Motivation", "weight": 0.25},
        {"key": "communication", "label": "Communication", "weight": 0.20},
    ],
    ReviewPhase.interview_round1.value: [
        {"key": "overall", "label": "Overall", "weight": 0.25},
        {"key": "technical", "label": "Technical", "weight": 0.30},
        {"key": "problem_solving", "label": "Problem Solving", "weight": 0.25},
        {"key": "communication", "label": "Communication", "weight": 0.20},
    ],
    ReviewPhase.interview_round2.value: [
        {"key": "overall", "label": "Overall", "weight": 0.20},
        {"key": "cultural_fit", "label": "Cultural Fit", "weight": 0.25},
        {"key": "leadership", "label": "Leadership", "weight": 0.20},
        {"key": "teamwork", "label": "Teamwork", "weight": 0.20},
        {"key": "motivation", "label": "Motivation", "weight": 0.15},
    ],
}

NORMALIZED_CENTER = 3.0


@dataclass(frozen=True)
class ScoringRules:
    """The parts of a phase config that scoring depends on."""

    categories: Sequence[Mapping[str, object]]
    min_score: float = 1.0
    max_score: float = 5.0
    referral_weight: float = 0.5
    deferral_weight: float = -0.5


@dataclass
class ReviewInput:
    """Minimal review shape consumed by the scoring functions."""

    reviewer_email: str
    scores: Mapping[str, float]
    recommendation: str
    referral_signal: str = ReferralSignal.neutral.value


@dataclass
class ReviewerStats:
    mean: float
    std_dev: float
    count: int


@dataclass
class ApplicantScore:
    application_id: int
    review_count: int = 0
    category_averages: Dict[str, float] = field(default_factory=dict)
    average_score: float = 0.0
    weighted_score: float = 0.0
    referral_count: int = 0
    deferral_count: int = 0
    neutral_count: int = 0
    recommendations: Dict[str, int] = field(default_factory=lambda: {r.value: 0 for r in Recommendation})
    reviewers: List[str] = field(default_factory=list)
    rank: int = 0


def weighted_average(category_averages: Mapping[str, float], categories: Iterable[Mapping[str, object]]) -> Optional[float]:
    """
    Weighted mean over the configured categories that were actually scored.

    Returns:
        None when no configured category has a score or the weights sum to zero.
    """
    total_weight = 0.0
    weighted_sum = 0.0
    for category in categories:
        key = str(category["key"])
        if key in category_averages:
            weight = float(category["weight"])
            weighted_sum += category_averages[key] * weight
            total_weight += weight
    if total_weight <= 0:
        return None
    return weighted_sum / total_weight


def reviewer_statistics(reviews: Iterable[ReviewInput]) -> Dict[str, ReviewerStats]:
    """Mean and population standard deviation of every score each reviewer gave."""
    values: Dict[str, List[float]] = {}
    for review in reviews:
        values.setdefault(review.reviewer_email, []).extend(float(v) for v in review.scores.values())

    stats: Dict[str, ReviewerStats] = {}
    for email, scores in values.items():
        if len(scores) < 2:
            stats[email] = ReviewerStats(mean=NORMALIZED_CENTER, std_dev=1.0, count=len(scores))
            continue
        mean = sum(scores) / len(scores)
        variance = sum((s - mean) ** 2 for s in scores) / len(scores)
        stats[email] = ReviewerStats(mean=mean, std_dev=math.sqrt(variance) or 1.0, count=len(scores))
    return stats


def normalize_score(score: float, stats: Optional[ReviewerStats], rules: ScoringRules) -> float:
    """
    Map a raw score onto a common scale centred at 3 with unit spread.

    Reviewers with fewer than two scores are left unnormalized.
    """
    if stats is None or stats.count < 2:
        return score
    normalized = NORMALIZED_CENTER + (score - stats.mean) / stats.std_dev
    return max(rules.min_score, min(rules.max_score, normalized))


def score_applicant(
    application_id: int,
    reviews: Sequence[ReviewInput],
    rules: ScoringRules,
    stats: Optional[Mapping[str, ReviewerStats]] = None,
) -> ApplicantScore:
    """
    Aggregate one applicant's reviews.

    ``average_score`` is the mean ``overall`` score. ``weighted_score`` is the
    weighted category mean plus the referral bonus and deferral penalty.
    Passing ``stats`` turns on per-reviewer normalization.
    """
    result = ApplicantScore(application_id=application_id, review_count=len(reviews))
    if not reviews:
        return result

    collected: Dict[str, List[float]] = {}
    for review in reviews:
        reviewer_stats = stats.get(review.reviewer_email) if stats is not None else None
        for key, raw in review.scores.items():
            value = normalize_score(float(raw), reviewer_stats, rules) if stats is not None else float(raw)
            collected.setdefault(key, []).append(value)

        if review.recommendation in result.recommendations:
            result.recommendations[review.recommendation] += 1

        signal = review.referral_signal or ReferralSignal.neutral.value
        if signal == ReferralSignal.referral.value:
            result.referral_count += 1
        elif signal == ReferralSignal.deferral.value:
            result.deferral_count += 1
        else:
            result.neutral_count += 1
        if review.reviewer_email not in result.reviewers:
            result.reviewers.append(review.reviewer_email)

    result.category_averages = {key: sum(vals) / len(vals) for key, vals in collected.items()}
    result.average_score = result.category_averages.get("overall", 0.0)

    weighted = weighted_average(result.category_averages, rules.categories)
    score = result.average_score if weighted is None else weighted
    score += result.referral_count * rules.referral_weight + result.deferral_count * rules.deferral_weight
    result.weighted_score = score
    return result


def rank_applicants(scores: List[ApplicantScore]) -> List[ApplicantScore]:
    """
    Order applicants and assign 1-based ranks.

    Sort keys: weighted score (high first), referrals (more first),
    deferrals (fewer first). Ties beyond that keep their input order.
    """
    ordered = sorted(scores, key=lambda s: (-s.weighted_score, -s.referral_count, s.deferral_count))
    for idx, entry in enumerate(ordered):
        entry.rank = idx + 1
    return ordered


def build_ranking(
    reviews_by_application: Mapping[int, Sequence[ReviewInput]],
    application_ids: Iterable[int],
    rules: ScoringRules,
    normalize: bool = False,
) -> List[ApplicantScore]:
    """Score every listed application and return them ranked.

    Normalization statistics are computed over all reviews of the listed
    applications, so a reviewer's bias is measured across the whole phase.
    """
    ids = list(application_ids)
    stats = None
    if normalize:
        stats = reviewer_statistics(review for app_id in ids for review in reviews_by_application.get(app_id, []))
    scores = [score_applicant(app_id, reviews_by_application.get(app_id, []), rules, stats) for app_id in ids]
    return rank_applicants(scores)


@dataclass
class Outcome:
    application_id: int
    decision: DecisionOutcome
    reason: Optional[str] = None


def decide_outcomes(
    ranked: Sequence[ApplicantScore],
    cutoff_type: CutoffType,
    top_n: Optional[int] = None,
    min_score: Optional[float] = None,
    overrides: Optional[Mapping[int, Tuple[DecisionOutcome, Optional[str]]]] = None,
) -> List[Outcome]:
    """
    Turn a ranking into advance/reject outcomes.

    Manual overrides win. Otherwise ``top_n`` advances the first ``top_n``
    ranked applicants, ``min_score`` advances weighted scores at or above the
    threshold, and ``manual`` rejects everyone not overridden.
    """
    overrides = overrides or {}
    outcomes = []
    for idx, entry in enumerate(ranked):
        if entry.application_id in overrides:
            decision, reason = overrides[entry.application_id]
            if decision == DecisionOutcome.advance:
                decision = DecisionOutcome.manual_advance
            elif decision == DecisionOutcome.reject:
                decision = DecisionOutcome.manual_reject
            outcomes.append(Outcome(entry.application_id, decision, reason))
            continue

        if cutoff_type == CutoffType.top_n:
            advance = idx < (top_n or 0)
        elif cutoff_type == CutoffType.min_score:
            advance = entry.weighted_score >= (min_score or 0)
        else:
            advance = False
        outcomes.append(Outcome(entry.application_id, DecisionOutcome.advance if advance else DecisionOutcome.reject))
    return outcomes
