"""
Recruitment cycle repository.

Provides the active-cycle lookup every portal operation starts from.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, Optional

from sqlalchemy import delete, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..base import utc_now
from ..entities.applications import Application
from ..entities.cycles import RecruitmentCycle
from ..entities.phases import PhaseConfig, PhaseDecision, PhaseRanking, PhaseReview
from ..entities.questions import ApplicationQuestions
from ..entities.recruitment_events import EventRsvp, RecruitmentEvent
from ..entities.slots import Slot, SlotBooking
from .base import SQLModelRepository

# Deletion order: rows referencing another child come before it.
_CYCLE_CHILDREN = (
    PhaseReview,
    PhaseDecision,
    PhaseRanking,
    PhaseConfig,
    SlotBooking,
    Slot,
    EventRsvp,
    RecruitmentEvent,
    ApplicationQuestions,
    Application,
)


class RecruitmentCycleRepository(SQLModelRepository[RecruitmentCycle]):
    """Repository for recruitment cycles."""

    order_by = "portal_open_at"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, RecruitmentCycle)

    async def get_by_slug(self, slug: str) -> Optional[RecruitmentCycle]:
        stmt = select(RecruitmentCycle).where(RecruitmentCycle.slug == slug)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_active(self) -> Optional[RecruitmentCycle]:
        stmt = select(RecruitmentCycle).where(RecruitmentCycle.is_active == True)  # noqa: E712
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_upcoming(self, now: Optional[datetime] = None) -> Optional[RecruitmentCycle]:
        """Earliest inactive cycle whose portal has not opened yet."""
        now = now or utc_now()
        stmt = (
            select(RecruitmentCycle)
            .where(RecruitmentCycle.is_active == False)  # noqa: E712
            .where(RecruitmentCycle.portal_open_at > now)
            .order_by(RecruitmentCycle.portal_open_at)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def set_active(self, cycle: RecruitmentCycle) -> RecruitmentCycle:
        """Activate ``cycle`` and deactivate every other cycle in one commit."""
        await self.session.execute(
            update(RecruitmentCycle)
            .where(RecruitmentCycle.id != cycle.id)
            .values(is_active=False, updated_at=utc_now())
        )
        cycle.is_active = True
        return await self.update(cycle)

    async def delete_with_children(self, cycle: RecruitmentCycle) -> Dict[str, int]:
        """
        Delete ``cycle`` and every row that belongs to it in one commit.

        Email logs are kept as history. Returns deleted row counts per table.
        """
        counts: Dict[str, int] = {}
        for model in _CYCLE_CHILDREN:
            result = await self.session.execute(delete(model).where(model.cycle_id == cycle.id))
            counts[model.__tablename__] = result.rowcount or 0
        await self.session.delete(cycle)
        await self.session.commit()
        return counts
