"""
Team member repository.
"""

from __future__ import annotations

from typing import List

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.team import TeamMember
from .base import SQLModelRepository


class TeamMemberRepository(SQLModelRepository[TeamMember]):
    """Repository for the team page."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, TeamMember)

    async def list_ordered(self, active_only: bool = True) -> List[TeamMember]:
        """Featured members first, then by sort order and join date."""
        stmt = select(TeamMember).order_by(
            TeamMember.featured.desc(), TeamMember.sort_order, TeamMember.join_date, TeamMember.id
        )
        if active_only:
            stmt = stmt.where(TeamMember.active == True)  # noqa: E712
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def max_sort_order(self) -> int:
        result = await self.session.execute(select(func.max(TeamMember.sort_order)))
        return int(result.scalar_one() or 0)
