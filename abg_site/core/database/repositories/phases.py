"""
Review phase repositories.

Configurations, reviews, saved rankings and cutoff decisions, all scoped by
(cycle, phase).
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from abg_site.core.models.domain.enums import value_of

from ..entities.phases import PhaseConfig, PhaseDecision, PhaseRanking, PhaseReview
from .base import SQLModelRepository


class PhaseConfigRepository(SQLModelRepository[PhaseConfig]):
    """Repository for phase scoring configurations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, PhaseConfig)

    async def find(self, cycle_id: int, phase: str, track: Optional[str] = None) -> Optional[PhaseConfig]:
        """Exact lookup; ``track=None`` finds the general configuration."""
        stmt = select(PhaseConfig).where(PhaseConfig.cycle_id == cycle_id, PhaseConfig.phase == value_of(phase))
        if track:
            stmt = stmt.where(PhaseConfig.track == value_of(track))
        else:
            stmt = stmt.where(PhaseConfig.track.is_(None))
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list_for_phase(self, cycle_id: int, phase: str) -> List[PhaseConfig]:
        return await self.list(filters={"cycle_id": cycle_id, "phase": value_of(phase)})


class PhaseReviewRepository(SQLModelRepository[PhaseReview]):
    """Repository for reviewer scores."""

    order_by = "created_at"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, PhaseReview)

    async def get_for_reviewer(self, application_id: int, reviewer_email: str, phase: str) -> Optional[PhaseReview]:
        stmt = select(PhaseReview).where(
            PhaseReview.application_id == application_id,
            PhaseReview.reviewer_email == reviewer_email,
            PhaseReview.phase == value_of(phase),
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_application(self, application_id: int, phase: Optional[str] = None) -> List[PhaseReview]:
        filters = {"application_id": application_id, "phase": value_of(phase) if phase else None}
        return await self.list(filters=filters)

    async def list_for_phase(self, cycle_id: int, phase: str) -> List[PhaseReview]:
        return await self.list(filters={"cycle_id": cycle_id, "phase": value_of(phase)})


class PhaseRankingRepository(SQLModelRepository[PhaseRanking]):
    """Repository for saved ranking snapshots."""

    order_by = "created_at"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, PhaseRanking)

    async def latest(self, cycle_id: int, phase: str) -> Optional[PhaseRanking]:
        stmt = (
            select(PhaseRanking)
            .where(PhaseRanking.cycle_id == cycle_id, PhaseRanking.phase == value_of(phase))
            .order_by(PhaseRanking.created_at.desc(), PhaseRanking.id.desc())
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def delete_for_phase(self, cycle_id: int, phase: str) -> int:
        result = await self.session.execute(
            delete(PhaseRanking).where(PhaseRanking.cycle_id == cycle_id, PhaseRanking.phase == value_of(phase))
        )
        return result.rowcount or 0


class PhaseDecisionRepository(SQLModelRepository[PhaseDecision]):
    """Repository for cutoff decisions."""

    order_by = "created_at"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, PhaseDecision)

    async def list_for_phase(self, cycle_id: int, phase: str) -> List[PhaseDecision]:
        return await self.list(filters={"cycle_id": cycle_id, "phase": value_of(phase)})

    async def delete_for_phase(self, cycle_id: int, phase: str) -> int:
        result = await self.session.execute(
            delete(PhaseDecision).where(PhaseDecision.cycle_id == cycle_id, PhaseDecision.phase == value_of(phase))
        )
        return result.rowcount or 0
