"""
Recruitment event and RSVP repositories.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.recruitment_events import EventRsvp, RecruitmentEvent
from .base import SQLModelRepository


class RecruitmentEventRepository(SQLModelRepository[RecruitmentEvent]):
    """Repository for recruitment events."""

    order_by = "start_time"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, RecruitmentEvent)

    async def list_for_cycle(self, cycle_id: int) -> List[RecruitmentEvent]:
        return await self.list(filters={"cycle_id": cycle_id})


class EventRsvpRepository(SQLModelRepository[EventRsvp]):
    """Repository for recruitment event RSVPs."""

    order_by = "rsvped_at"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, EventRsvp)

    async def get_for_user(self, event_id: int, user_id: int) -> Optional[EventRsvp]:
        stmt = select(EventRsvp).where(EventRsvp.event_id == event_id, EventRsvp.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def count_for_event(self, event_id: int) -> int:
        stmt = select(func.count()).select_from(EventRsvp).where(EventRsvp.event_id == event_id)
        return int((await self.session.execute(stmt)).scalar_one())

    async def list_for_user(self, cycle_id: int, user_id: int) -> List[EventRsvp]:
        return await self.list(filters={"cycle_id": cycle_id, "user_id": user_id})

    async def list_for_event(self, event_id: int) -> List[EventRsvp]:
        return await self.list(filters={"event_id": event_id})
