"""
Application and question set repositories.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import or_, select

from abg_site.core.models.domain.enums import value_of

from ..entities.applications import Application
from ..entities.questions import ApplicationQuestions
from .base import SQLModelRepository


class ApplicationRepository(SQLModelRepository[Application]):
    """Repository for applications."""

    order_by = "created_at"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Application)

    async def get_for_user(self, cycle_id: int, user_id: int) -> Optional[Application]:
        stmt = select(Application).where(Application.cycle_id == cycle_id, Application.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_cycle(
        self,
        cycle_id: int,
        stages: Optional[Iterable[str]] = None,
        track: Optional[str] = None,
        include_both: bool = False,
    ) -> List[Application]:
        """List a cycle's applications filtered by stage set and track.

        Args:
            cycle_id: Recruitment cycle identifier
            stages: Keep only these stages when given
            track: Keep only this track when given
            include_both: With ``track``, also keep applications on the ``both`` track
        """
        stmt = select(Application).where(Application.cycle_id == cycle_id)
        if stages is not None:
            stmt = stmt.where(Application.stage.in_([value_of(s) for s in stages]))
        if track:
            if include_both:
                stmt = stmt.where(or_(Application.track == track, Application.track == "both"))
            else:
                stmt = stmt.where(Application.track == track)
        stmt = stmt.order_by(Application.created_at, Application.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_many(self, ids: Iterable[int]) -> List[Application]:
        id_list = list(ids)
        if not id_list:
            return []
        stmt = select(Application).where(Application.id.in_(id_list))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class QuestionRepository(SQLModelRepository[ApplicationQuestions]):
    """Repository for per-track question sets."""

    order_by = "track"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ApplicationQuestions)

    async def get_for_track(self, cycle_id: int, track: str) -> Optional[ApplicationQuestions]:
        stmt = select(ApplicationQuestions).where(
            ApplicationQuestions.cycle_id == cycle_id, ApplicationQuestions.track == track
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_cycle(self, cycle_id: int) -> List[ApplicationQuestions]:
        return await self.list(filters={"cycle_id": cycle_id})

    async def list_applicable(self, cycle_id: int, track: str) -> List[ApplicationQuestions]:
        """Question sets an applicant on ``track`` must answer."""
        stmt = select(ApplicationQuestions).where(
            ApplicationQuestions.cycle_id == cycle_id,
            or_(ApplicationQuestions.track == track, ApplicationQuestions.track == "both"),
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
