"""
Review phase service.

Covers the life of a review phase: scoring configuration, reviewer scores,
rankings, applying a cutoff (stage changes plus a decision log), finalizing,
unlocking and reverting.

Phase status and cutoff stamps live on the phase's general configuration
(``track`` None), which is created from the built-in defaults the first time
a phase changes state.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from abg_site.core.database.base import utc_now
from abg_site.core.database.entities.applications import Application
from abg_site.core.database.entities.phases import PhaseConfig, PhaseDecision, PhaseRanking, PhaseReview
from abg_site.core.database.entities.users import User
from abg_site.core.database.repositories.applications import ApplicationRepository
from abg_site.core.database.repositories.phases import (
    PhaseConfigRepository,
    PhaseDecisionRepository,
    PhaseRankingRepository,
    PhaseReviewRepository,
)
from abg_site.core.database.repositories.users import UserRepository
from abg_site.core.logging_config import get_logger
from abg_site.core.models.domain.enums import (
    ApplicationStage,
    AuditAction,
    DecisionOutcome,
    PhaseStatus,
    ReviewPhase,
    UserRole,
    value_of,
)
from abg_site.core.models.io.phases import (
    CutoffRequest,
    CutoffResult,
    DecisionRead,
    PhaseCompleteness,
    PhaseConfigUpsert,
    PhaseRankingRead,
    PhaseReviewUpsert,
    RankingEntry,
    ReviewerCompletion,
    ReviewSummary,
)
from abg_site.core.monitoring import log_phase_event
from abg_site.server.core.config import settings
from abg_site.server.errors import NotFoundError, PhaseFinalizedError, ValidationFailedError

from .audit import AuditService
from .email import EmailService
from .scoring import (
    DEFAULT_CATEGORIES,
    ApplicantScore,
    ReviewInput,
    ScoringRules,
    build_ranking,
    decide_outcomes,
    score_applicant,
)

logger = get_logger(__name__)

# Stages an applicant must be in to be reviewed in each phase
ELIGIBLE_STAGES: Dict[str, Tuple[str, ...]] = {
    ReviewPhase.application.value: (ApplicationStage.submitted.value, ApplicationStage.under_review.value),
    ReviewPhase.interview_round1.value: (ApplicationStage.interview_round1.value,),
    ReviewPhase.interview_round2.value: (ApplicationStage.interview_round2.value,),
}

# (advance, reject) stage for each phase
NEXT_STAGES: Dict[str, Tuple[str, str]] = {
    ReviewPhase.application.value: (ApplicationStage.interview_round1.value, ApplicationStage.rejected.value),
    ReviewPhase.interview_round1.value: (ApplicationStage.interview_round2.value, ApplicationStage.rejected.value),
    ReviewPhase.interview_round2.value: (ApplicationStage.accepted.value, ApplicationStage.rejected.value),
}

# Stage an applicant returns to when a phase's cutoff is reverted
REVERT_STAGES: Dict[str, str] = {
    ReviewPhase.application.value: ApplicationStage.under_review.value,
    ReviewPhase.interview_round1.value: ApplicationStage.interview_round1.value,
    ReviewPhase.interview_round2.value: ApplicationStage.interview_round2.value,
}


def default_config(cycle_id: int, phase: str, track: Optional[str] = None) -> PhaseConfig:
    """Unsaved configuration built from the built-in rubric."""
    return PhaseConfig(
        cycle_id=cycle_id,
        phase=phase,
        track=track,
        categories=[dict(c) for c in DEFAULT_CATEGORIES[phase]],
        min_reviewers_required=settings.recruitment.min_reviewers_required,
    )


def rules_of(config: PhaseConfig) -> ScoringRules:
    return ScoringRules(
        categories=config.categories or DEFAULT_CATEGORIES[config.phase],
        min_score=config.min_score,
        max_score=config.max_score,
        referral_weight=config.referral_weight,
        deferral_weight=config.deferral_weight,
    )


def to_review_input(review: PhaseReview) -> ReviewInput:
    return ReviewInput(
        reviewer_email=review.reviewer_email,
        scores=review.scores or {},
        recommendation=review.recommendation,
        referral_signal=review.referral_signal,
    )


class PhaseService:
    def __init__(
        self,
        session: AsyncSession,
        audit: Optional[AuditService] = None,
        email_service: Optional[EmailService] = None,
    ):
        self.session = session
        self.configs = PhaseConfigRepository(session)
        self.reviews = PhaseReviewRepository(session)
        self.rankings = PhaseRankingRepository(session)
        self.decisions = PhaseDecisionRepository(session)
        self.applications = ApplicationRepository(session)
        self.audit = audit or AuditService(session)
        self.email_service = email_service

    # ------------------------------------------------------------------
    # Configuration and status
    # ------------------------------------------------------------------

    async def resolve_config(self, cycle_id: int, phase: ReviewPhase, track: Optional[str] = None) -> PhaseConfig:
        """Track-specific config, else the general one, else the built-in default (unsaved)."""
        phase_value = value_of(phase)
        if track:
            config = await self.configs.find(cycle_id, phase_value, track)
            if config:
                return config
        config = await self.configs.find(cycle_id, phase_value)
        return config or default_config(cycle_id, phase_value)

    async def upsert_config(self, cycle_id: int, phase: ReviewPhase, data: PhaseConfigUpsert) -> PhaseConfig:
        track = value_of(data.track) if data.track else None
        config = await self.configs.find(cycle_id, value_of(phase), track)
        values = data.model_dump(exclude={"track"})
        values["categories"] = [c.model_dump() for c in data.categories]
        if config is None:
            config = await self.configs.create(PhaseConfig(cycle_id=cycle_id, phase=value_of(phase), track=track, **values))
            logger.info(f"Created {config.phase} config for cycle {cycle_id} (track={track})")
            return config
        for key, value in values.items():
            setattr(config, key, value)
        return await self.configs.update(config)

    async def _status_config(self, cycle_id: int, phase: ReviewPhase) -> PhaseConfig:
        config = await self.configs.find(cycle_id, value_of(phase))
        if config is None:
            config = await self.configs.create(default_config(cycle_id, value_of(phase)))
        return config

    async def status(self, cycle_id: int, phase: ReviewPhase) -> str:
        config = await self.configs.find(cycle_id, value_of(phase))
        return config.status if config else PhaseStatus.not_started.value

    async def _ensure_not_finalized(self, cycle_id: int, phase: ReviewPhase) -> None:
        if await self.status(cycle_id, phase) == PhaseStatus.finalized.value:
            raise PhaseFinalizedError(value_of(phase))

    # ------------------------------------------------------------------
    # Reviews
    # ------------------------------------------------------------------

    async def upsert_review(
        self, application_id: int, phase: ReviewPhase, reviewer: User, data: PhaseReviewUpsert
    ) -> PhaseReview:
        """
        Create or replace the reviewer's scores for an application.

        Raises:
            NotFoundError: unknown application.
            PhaseFinalizedError: the phase is finalized.
            ValidationFailedError: a score lies outside the configured range.
        """
        application = await self.applications.get_by_id(application_id)
        if not application:
            raise NotFoundError("Application", application_id)
        await self._ensure_not_finalized(application.cycle_id, phase)

        config = await self.resolve_config(application.cycle_id, phase, application.track)
        out_of_range = {k: v for k, v in data.scores.items() if not config.min_score <= v <= config.max_score}
        if out_of_range:
            raise ValidationFailedError(
                f"Scores must be between {config.min_score:g} and {config.max_score:g}",
                details={"invalid_scores": out_of_range},
            )

        review = await self.reviews.get_for_reviewer(application.id, reviewer.email, value_of(phase))
        if review is None:
            review = PhaseReview(
                application_id=application.id,
                cycle_id=application.cycle_id,
                phase=value_of(phase),
                reviewer_email=reviewer.email,
            )
        review.reviewer_name = reviewer.name
        review.scores = dict(data.scores)
        review.recommendation = data.recommendation.value
        review.referral_signal = data.referral_signal.value
        review.comments = data.comments

        review = await self.reviews.update(review) if review.id else await self.reviews.create(review)
        logger.info(f"{reviewer.email} reviewed application {application.id} for {value_of(phase)}")
        return review

    async def delete_review(self, review_id: int) -> None:
        review = await self.reviews.get_by_id(review_id)
        if not review:
            raise NotFoundError("Review", review_id)
        await self._ensure_not_finalized(review.cycle_id, review.phase)
        await self.reviews.delete(review.id)

    async def summarize(self, application_id: int, phase: ReviewPhase) -> ReviewSummary:
        application = await self.applications.get_by_id(application_id)
        if not application:
            raise NotFoundError("Application", application_id)
        config = await self.resolve_config(application.cycle_id, phase, application.track)
        reviews = await self.reviews.list_for_application(application.id, value_of(phase))
        score = score_applicant(application.id, [to_review_input(r) for r in reviews], rules_of(config))
        return ReviewSummary(
            review_count=score.review_count,
            category_averages=score.category_averages,
            avg_score=score.average_score,
            weighted_score=score.weighted_score,
            recommendations=score.recommendations,
            referral_count=score.referral_count,
            deferral_count=score.deferral_count,
            neutral_count=score.neutral_count,
            reviewers=score.reviewers,
        )

    # ------------------------------------------------------------------
    # Ranking
    # ------------------------------------------------------------------

    async def eligible_applications(
        self, cycle_id: int, phase: ReviewPhase, track: Optional[str] = None
    ) -> List[Application]:
        return await self.applications.list_for_cycle(
            cycle_id, stages=ELIGIBLE_STAGES[value_of(phase)], track=track, include_both=True
        )

    async def _rank(
        self, cycle_id: int, phase: ReviewPhase, track: Optional[str], normalize: bool
    ) -> Tuple[List[ApplicantScore], Dict[int, Application]]:
        applications = await self.eligible_applications(cycle_id, phase, track)
        by_id = {a.id: a for a in applications}
        config = await self.resolve_config(cycle_id, phase, track)

        reviews_by_app: Dict[int, List[ReviewInput]] = {}
        for review in await self.reviews.list_for_phase(cycle_id, value_of(phase)):
            if review.application_id in by_id:
                reviews_by_app.setdefault(review.application_id, []).append(to_review_input(review))

        ranked = build_ranking(reviews_by_app, by_id.keys(), rules_of(config), normalize=normalize)
        return ranked, by_id

    @staticmethod
    def _entry(score: ApplicantScore, application: Application) -> RankingEntry:
        return RankingEntry(
            rank=score.rank,
            application_id=application.id,
            user_email=application.user_email,
            user_name=application.user_name,
            track=application.track,
            stage=application.stage,
            review_count=score.review_count,
            category_averages=score.category_averages,
            average_score=score.average_score,
            weighted_score=score.weighted_score,
            referral_count=score.referral_count,
            deferral_count=score.deferral_count,
            neutral_count=score.neutral_count,
            recommendations=score.recommendations,
        )

    async def generate_ranking(
        self, cycle_id: int, phase: ReviewPhase, track: Optional[str] = None, normalize: bool = False
    ) -> PhaseRankingRead:
        ranked, by_id = await self._rank(cycle_id, phase, track, normalize)
        return PhaseRankingRead(
            cycle_id=cycle_id,
            phase=value_of(phase),
            track=track,
            normalized=normalize,
            entries=[self._entry(s, by_id[s.application_id]) for s in ranked],
        )

    # ------------------------------------------------------------------
    # Completeness
    # ------------------------------------------------------------------

    async def completeness(self, cycle_id: int, phase: ReviewPhase, track: Optional[str] = None) -> PhaseCompleteness:
        applications = await self.eligible_applications(cycle_id, phase, track)
        eligible_ids = {a.id for a in applications}
        config = await self.resolve_config(cycle_id, phase, track)

        per_app: Dict[int, int] = {}
        per_reviewer: Dict[str, set] = {}
        for review in await self.reviews.list_for_phase(cycle_id, value_of(phase)):
            if review.application_id not in eligible_ids:
                continue
            per_app[review.application_id] = per_app.get(review.application_id, 0) + 1
            per_reviewer.setdefault(review.reviewer_email, set()).add(review.application_id)

        total = len(applications)
        reviewers = [
            ReviewerCompletion(
                email=email,
                reviewed=len(done),
                total=total,
                percentage=(len(done) / total * 100) if total else 0.0,
            )
            for email, done in per_reviewer.items()
        ]
        reviewers.sort(key=lambda r: r.percentage, reverse=True)

        return PhaseCompleteness(
            phase=value_of(phase),
            status=await self.status(cycle_id, phase),
            total_applicants=total,
            applicants_with_reviews=sum(1 for count in per_app.values() if count > 0),
            applicants_fully_reviewed=sum(1 for count in per_app.values() if count >= config.min_reviewers_required),
            min_reviewers_required=config.min_reviewers_required,
            reviewer_completion=reviewers,
        )

    async def incomplete_admins(self, cycle_id: int, phase: ReviewPhase, track: Optional[str] = None) -> List[dict]:
        """Admins who have not reviewed every eligible applicant."""
        completeness = await self.completeness(cycle_id, phase, track)
        done = {r.email.lower(): r.reviewed for r in completeness.reviewer_completion}
        admins = await UserRepository(self.session).list_with_role(UserRole.ADMIN.value)
        incomplete = []
        for admin in admins:
            reviewed = done.get(admin.email.lower(), 0)
            if reviewed < completeness.total_applicants:
                incomplete.append({"email": admin.email, "reviewed": reviewed, "total": completeness.total_applicants})
        return incomplete

    # ------------------------------------------------------------------
    # Cutoff, finalize, unlock, revert
    # ------------------------------------------------------------------

    async def apply_cutoff(self, cycle_id: int, phase: ReviewPhase, request: CutoffRequest, performed_by: str) -> CutoffResult:
        """
        Apply a cutoff to the phase ranking and move applicants to their next stage.

        With ``finalize_after`` the phase is finalized too; unless
        ``force_finalize`` is set, that requires every admin to have reviewed
        every eligible applicant, checked before anything changes.

        Raises:
            PhaseFinalizedError: the phase is already finalized.
            ValidationFailedError: finalization was requested but reviews are incomplete.
        """
        phase_value = value_of(phase)
        track = value_of(request.track) if request.track else None
        await self._ensure_not_finalized(cycle_id, phase)

        if request.finalize_after and not request.force_finalize:
            incomplete = await self.incomplete_admins(cycle_id, phase, track)
            if incomplete:
                raise ValidationFailedError(
                    "Cannot finalize: Not all admins have reviewed all applicants",
                    details={"incomplete_admins": incomplete},
                )

        ranked, by_id = await self._rank(cycle_id, phase, track, request.normalize)
        criteria = request.criteria
        overrides = {app_id: (o.decision, o.reason) for app_id, o in criteria.manual_overrides.items()}
        outcomes = decide_outcomes(ranked, criteria.type, criteria.top_n, criteria.min_score, overrides)
        config = await self._status_config(cycle_id, phase)

        advance_stage, reject_stage = NEXT_STAGES[phase_value]
        now = utc_now()
        decisions: List[PhaseDecision] = []
        email_targets: List[Tuple[Application, bool]] = []
        for outcome in outcomes:
            application = by_id[outcome.application_id]
            advances = outcome.decision.advances
            decision = PhaseDecision(
                cycle_id=cycle_id,
                phase=phase_value,
                application_id=application.id,
                decision=outcome.decision.value,
                reason=outcome.reason,
                previous_stage=application.stage,
                new_stage=advance_stage if advances else reject_stage,
                performed_by=performed_by,
                created_at=now,
            )
            application.stage = decision.new_stage
            application.updated_at = now
            self.session.add(application)
            self.session.add(decision)
            decisions.append(decision)
            email_targets.append((application, advances))

        entries = [self._entry(s, by_id[s.application_id]).model_dump() for s in ranked]
        decided = {d.application_id: d.decision for d in decisions}
        for entry in entries:
            entry["decision"] = decided.get(entry["application_id"])
        self.session.add(
            PhaseRanking(cycle_id=cycle_id, phase=phase_value, track=track, entries=entries, finalized_at=now)
        )

        config.cutoff_applied_at = now
        config.cutoff_applied_by = performed_by
        config.cutoff_criteria = criteria.model_dump(mode="json")
        if config.status == PhaseStatus.not_started.value:
            config.status = PhaseStatus.in_progress.value
        config.updated_at = now
        self.session.add(config)
        await self.session.commit()

        advanced = sum(1 for d in decisions if DecisionOutcome(d.decision).advances)
        result = CutoffResult(
            advanced=advanced,
            rejected=len(decisions) - advanced,
            decisions=[DecisionRead.model_validate(d) for d in decisions],
        )
        logger.info(
            f"Cutoff {criteria.type.value} applied to {phase_value} in cycle {cycle_id} by {performed_by}: "
            f"{result.advanced} advanced, {result.rejected} rejected"
        )
        log_phase_event("cutoff_applied", cycle_id, phase_value, advanced=result.advanced, rejected=result.rejected)
        await self.audit.log(
            AuditAction.phase_cutoff_applied,
            target_type="phase",
            target_id=f"{cycle_id}:{phase_value}",
            meta={"criteria": config.cutoff_criteria, "advanced": result.advanced, "rejected": result.rejected},
        )

        if request.finalize_after:
            await self.finalize(cycle_id, phase, performed_by)
            result.finalized = True

        if request.send_emails:
            if self.email_service is None:
                self.email_service = EmailService(self.session)
            result.emails_sent, result.emails_failed = await self.email_service.send_phase_results(
                phase_value, email_targets, sent_by=performed_by
            )
        return result

    async def finalize(self, cycle_id: int, phase: ReviewPhase, performed_by: str) -> PhaseConfig:
        config = await self._status_config(cycle_id, phase)
        config.status = PhaseStatus.finalized.value
        config.finalized_at = utc_now()
        config.finalized_by = performed_by
        config = await self.configs.update(config)
        logger.info(f"Phase {value_of(phase)} of cycle {cycle_id} finalized by {performed_by}")
        log_phase_event("finalized", cycle_id, value_of(phase))
        await self.audit.log(AuditAction.phase_finalized, target_type="phase", target_id=f"{cycle_id}:{value_of(phase)}")
        return config

    async def unlock(self, cycle_id: int, phase: ReviewPhase, performed_by: str) -> PhaseConfig:
        config = await self._status_config(cycle_id, phase)
        config.status = PhaseStatus.in_progress.value
        config.finalized_at = None
        config.finalized_by = None
        config.cutoff_applied_at = None
        config.cutoff_applied_by = None
        config.cutoff_criteria = None
        config = await self.configs.update(config)
        logger.info(f"Phase {value_of(phase)} of cycle {cycle_id} unlocked by {performed_by}")
        log_phase_event("unlocked", cycle_id, value_of(phase))
        await self.audit.log(AuditAction.phase_unlocked, target_type="phase", target_id=f"{cycle_id}:{value_of(phase)}")
        return config

    async def revert(self, cycle_id: int, phase: ReviewPhase, performed_by: str) -> int:
        """
        Undo the phase's cutoff.

        Applicants go back to the phase's review stage, but only those still in
        the stage the cutoff moved them to. Decisions and saved rankings are
        removed and the phase is reopened.

        Returns:
            Number of applications moved back.
        """
        phase_value = value_of(phase)
        target_stage = REVERT_STAGES[phase_value]
        decisions = await self.decisions.list_for_phase(cycle_id, phase_value)
        applications = {a.id: a for a in await self.applications.get_many(d.application_id for d in decisions)}

        now = utc_now()
        reverted = 0
        for decision in decisions:
            application = applications.get(decision.application_id)
            if application is None or application.stage != decision.new_stage:
                continue
            application.stage = target_stage
            application.updated_at = now
            self.session.add(application)
            reverted += 1

        await self.decisions.delete_for_phase(cycle_id, phase_value)
        await self.rankings.delete_for_phase(cycle_id, phase_value)
        config = await self.configs.find(cycle_id, phase_value)
        if config:
            config.status = PhaseStatus.in_progress.value
            config.finalized_at = None
            config.finalized_by = None
            config.cutoff_applied_at = None
            config.cutoff_applied_by = None
            config.cutoff_criteria = None
            config.updated_at = now
            self.session.add(config)
        await self.session.commit()

        logger.info(f"Phase {phase_value} of cycle {cycle_id} reverted by {performed_by}: {reverted} applications")
        log_phase_event("reverted", cycle_id, phase_value, reverted=reverted)
        await self.audit.log(
            AuditAction.phase_reverted,
            target_type="phase",
            target_id=f"{cycle_id}:{phase_value}",
            meta={"reverted": reverted},
        )
        return reverted

    async def list_decisions(self, cycle_id: int, phase: ReviewPhase) -> List[PhaseDecision]:
        return await self.decisions.list_for_phase(cycle_id, value_of(phase))
