"""
Review Phase Endpoints.

Scoring configuration, reviewer scores, rankings and the cutoff workflow
for the application and interview rounds of a cycle.

Reviewers (anyone with access to the recruitment pages) score applicants;
applying cutoffs and changing a phase's lifecycle is reserved for admins.
"""

from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends

from abg_site.core.database.entities.users import User
from abg_site.core.database.repositories.phases import PhaseReviewRepository
from abg_site.core.models.domain.enums import ReviewPhase, Track, value_of
from abg_site.core.models.io.common import MessageResponse
from abg_site.core.models.io.phases import (
    CutoffRequest,
    CutoffResult,
    DecisionRead,
    PhaseCompleteness,
    PhaseConfigRead,
    PhaseConfigUpsert,
    PhaseRankingRead,
    PhaseReviewRead,
    PhaseReviewUpsert,
    ReviewSummary,
    RevertResult,
)
from abg_site.server.services.audit import AuditService
from abg_site.server.services.deps import AdminUserDep, ClientInfoDep, SessionDep, require_page_access
from abg_site.server.services.phases import PhaseService

router = APIRouter()

ReviewerDep = Annotated[User, Depends(require_page_access("recruitment"))]


def _track(track: Optional[Track]) -> Optional[str]:
    return value_of(track) if track else None


# ----------------------------------------------------------------------
# Configuration
# ----------------------------------------------------------------------


@router.get(
    "/{cycle_id}/{phase}/config",
    response_model=PhaseConfigRead,
    summary="Get Phase Config",
    description="Scoring configuration for a phase: track-specific, else general, else the built-in default.",
    response_description="The effective configuration.",
)
async def get_phase_config(
    cycle_id: int, phase: ReviewPhase, session: SessionDep, _: ReviewerDep, track: Optional[Track] = None
) -> PhaseConfigRead:
    config = await PhaseService(session).resolve_config(cycle_id, phase, _track(track))
    return PhaseConfigRead.model_validate(config)


@router.put(
    "/{cycle_id}/{phase}/config",
    response_model=PhaseConfigRead,
    summary="Upsert Phase Config",
    description="Create or replace the scoring configuration of a phase, general or for one track.",
    response_description="The stored configuration.",
)
async def upsert_phase_config(
    cycle_id: int, phase: ReviewPhase, body: PhaseConfigUpsert, session: SessionDep, _: AdminUserDep
) -> PhaseConfigRead:
    """
    Upsert a phase configuration.

    - **track**: Omit for the general configuration.
    - **categories**: Scored categories with weights.
    - **min_score** / **max_score**: Allowed score range.
    - **referral_weight** / **deferral_weight**: Bonus and penalty per signal.
    """
    return PhaseConfigRead.model_validate(await PhaseService(session).upsert_config(cycle_id, phase, body))


# ----------------------------------------------------------------------
# Reviews
# ----------------------------------------------------------------------


@router.put(
    "/applications/{application_id}/{phase}/review",
    response_model=PhaseReviewRead,
    summary="Submit Review",
    description="Create or replace the signed-in reviewer's scores for an applicant.",
    response_description="The stored review.",
    responses={
        400: {"description": "Phase finalized or score out of range"},
        404: {"description": "Application not found"},
    },
)
async def upsert_review(
    application_id: int, phase: ReviewPhase, body: PhaseReviewUpsert, session: SessionDep, reviewer: ReviewerDep
) -> PhaseReviewRead:
    """
    Submit a review.

    - **scores**: Category key to score, within the configured range.
    - **recommendation**: `advance`, `hold` or `reject`.
    - **referral_signal**: `referral`, `neutral` (default) or `deferral`.
    """
    review = await PhaseService(session).upsert_review(application_id, phase, reviewer, body)
    return PhaseReviewRead.model_validate(review)


@router.get(
    "/applications/{application_id}/{phase}/reviews",
    response_model=List[PhaseReviewRead],
    summary="List Reviews",
    description="Every review of an applicant in a phase.",
    response_description="A list of reviews.",
)
async def list_reviews(
    application_id: int, phase: ReviewPhase, session: SessionDep, _: ReviewerDep
) -> List[PhaseReviewRead]:
    reviews = await PhaseReviewRepository(session).list_for_application(application_id, phase.value)
    return [PhaseReviewRead.model_validate(r) for r in reviews]


@router.get(
    "/applications/{application_id}/{phase}/summary",
    response_model=ReviewSummary,
    summary="Summarize Reviews",
    description="Category averages, weighted score and signal counts for one applicant.",
    response_description="The review summary.",
    responses={404: {"description": "Application not found"}},
)
async def summarize_reviews(
    application_id: int, phase: ReviewPhase, session: SessionDep, _: ReviewerDep
) -> ReviewSummary:
    return await PhaseService(session).summarize(application_id, phase)


@router.delete(
    "/reviews/{review_id}",
    response_model=MessageResponse,
    summary="Delete Review",
    description="Delete a review while its phase is still open.",
    response_description="Confirmation message.",
    responses={400: {"description": "Phase finalized"}, 404: {"description": "Review not found"}},
)
async def delete_review(review_id: int, session: SessionDep, _: AdminUserDep) -> MessageResponse:
    await PhaseService(session).delete_review(review_id)
    return MessageResponse(message="Review deleted", id=review_id)


# ----------------------------------------------------------------------
# Ranking and progress
# ----------------------------------------------------------------------


@router.get(
    "/{cycle_id}/{phase}/ranking",
    response_model=PhaseRankingRead,
    summary="Generate Ranking",
    description="Rank the phase's eligible applicants by weighted score.",
    response_description="The ranking.",
)
async def generate_ranking(
    cycle_id: int,
    phase: ReviewPhase,
    session: SessionDep,
    _: ReviewerDep,
    track: Optional[Track] = None,
    normalize: bool = False,
) -> PhaseRankingRead:
    """
    Generate a ranking.

    - **track**: Only applicants on this track (and the `both` track).
    - **normalize**: Z-score each reviewer's scores before averaging.
    """
    return await PhaseService(session).generate_ranking(cycle_id, phase, _track(track), normalize)


@router.get(
    "/{cycle_id}/{phase}/completeness",
    response_model=PhaseCompleteness,
    summary="Get Review Completeness",
    description="How many applicants are reviewed and how far each reviewer has got.",
    response_description="Completeness figures.",
)
async def get_completeness(
    cycle_id: int, phase: ReviewPhase, session: SessionDep, _: ReviewerDep, track: Optional[Track] = None
) -> PhaseCompleteness:
    return await PhaseService(session).completeness(cycle_id, phase, _track(track))


@router.get(
    "/{cycle_id}/{phase}/decisions",
    response_model=List[DecisionRead],
    summary="List Decisions",
    description="The advance/reject decisions recorded by the phase's cutoff.",
    response_description="A list of decisions.",
)
async def list_decisions(cycle_id: int, phase: ReviewPhase, session: SessionDep, _: ReviewerDep) -> List[DecisionRead]:
    return [DecisionRead.model_validate(d) for d in await PhaseService(session).list_decisions(cycle_id, phase)]


# ----------------------------------------------------------------------
# Lifecycle
# ----------------------------------------------------------------------


@router.post(
    "/{cycle_id}/{phase}/cutoff",
    response_model=CutoffResult,
    summary="Apply Cutoff",
    description="Turn the ranking into advance/reject decisions, move applicants on and optionally finalize and email.",
    response_description="Decision counts, the decisions and email results.",
    responses={400: {"description": "Phase finalized, or reviews incomplete for finalization"}},
)
async def apply_cutoff(
    cycle_id: int, phase: ReviewPhase, body: CutoffRequest, session: SessionDep, admin: AdminUserDep, client: ClientInfoDep
) -> CutoffResult:
    """
    Apply a cutoff.

    - **criteria**: `top_n`, `min_score` or `manual`, with manual overrides by application id.
    - **finalize_after**: Finalize the phase afterwards (default true).
    - **force_finalize**: Finalize even if not every admin reviewed every applicant.
    - **send_emails**: Email every applicant their outcome.
    """
    service = PhaseService(session, audit=AuditService(session, actor=admin, client=client))
    return await service.apply_cutoff(cycle_id, phase, body, performed_by=admin.email)


@router.post(
    "/{cycle_id}/{phase}/finalize",
    response_model=PhaseConfigRead,
    summary="Finalize Phase",
    description="Lock the phase against further reviews and cutoffs.",
    response_description="The phase configuration with its new status.",
)
async def finalize_phase(
    cycle_id: int, phase: ReviewPhase, session: SessionDep, admin: AdminUserDep, client: ClientInfoDep
) -> PhaseConfigRead:
    service = PhaseService(session, audit=AuditService(session, actor=admin, client=client))
    return PhaseConfigRead.model_validate(await service.finalize(cycle_id, phase, admin.email))


@router.post(
    "/{cycle_id}/{phase}/unlock",
    response_model=PhaseConfigRead,
    summary="Unlock Phase",
    description="Reopen a finalized phase and clear its cutoff stamps.",
    response_description="The phase configuration with its new status.",
)
async def unlock_phase(
    cycle_id: int, phase: ReviewPhase, session: SessionDep, admin: AdminUserDep, client: ClientInfoDep
) -> PhaseConfigRead:
    service = PhaseService(session, audit=AuditService(session, actor=admin, client=client))
    return PhaseConfigRead.model_validate(await service.unlock(cycle_id, phase, admin.email))


@router.post(
    "/{cycle_id}/{phase}/revert",
    response_model=RevertResult,
    summary="Revert Cutoff",
    description="Move applicants back to the phase's review stage and delete its decisions and rankings.",
    response_description="How many applications were moved back.",
)
async def revert_phase(
    cycle_id: int, phase: ReviewPhase, session: SessionDep, admin: AdminUserDep, client: ClientInfoDep
) -> RevertResult:
    service = PhaseService(session, audit=AuditService(session, actor=admin, client=client))
    return RevertResult(reverted=await service.revert(cycle_id, phase, admin.email))
