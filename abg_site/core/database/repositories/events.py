"""
Public event and attendee repositories.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from abg_site.core.models.domain.enums import AttendeeStatus

from ..entities.events import Event, EventAttendee
from .base import SQLModelRepository


class EventRepository(SQLModelRepository[Event]):
    """Repository for public events."""

    order_by = "start_time"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Event)

    async def get_by_slug(self, slug: str) -> Optional[Event]:
        result = await self.session.execute(select(Event).where(Event.slug == slug))
        return result.scalar_one_or_none()

    async def list_published(self) -> List[Event]:
        return await self.list(filters={"published": True})


class EventAttendeeRepository(SQLModelRepository[EventAttendee]):
    """Repository for event registrations and the waitlist."""

    order_by = "registered_at"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, EventAttendee)

    async def get_registration(self, event_id: int, email: str) -> Optional[EventAttendee]:
        """Current (non-cancelled) registration for an email."""
        stmt = select(EventAttendee).where(
            EventAttendee.event_id == event_id,
            func.lower(EventAttendee.email) == email.lower(),
            EventAttendee.status != AttendeeStatus.cancelled.value,
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_by_code(self, event_id: int, code: str) -> Optional[EventAttendee]:
        stmt = select(EventAttendee).where(
            EventAttendee.event_id == event_id, EventAttendee.check_in_code == code.upper()
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def count_by_status(self, event_id: int, status: AttendeeStatus) -> int:
        stmt = (
            select(func.count())
            .select_from(EventAttendee)
            .where(EventAttendee.event_id == event_id, EventAttendee.status == status.value)
        )
        return int((await self.session.execute(stmt)).scalar_one())

    async def counts(self, event_id: int) -> Dict[str, int]:
        stmt = (
            select(EventAttendee.status, func.count())
            .where(EventAttendee.event_id == event_id)
            .group_by(EventAttendee.status)
        )
        result = await self.session.execute(stmt)
        return {status: int(count) for status, count in result.all()}

    async def list_waitlisted(self, event_id: int) -> List[EventAttendee]:
        """Waitlisted attendees in queue order."""
        stmt = (
            select(EventAttendee)
            .where(EventAttendee.event_id == event_id, EventAttendee.status == AttendeeStatus.waitlisted.value)
            .order_by(EventAttendee.waitlist_position, EventAttendee.registered_at, EventAttendee.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_for_event(self, event_id: int, status: Optional[AttendeeStatus] = None) -> List[EventAttendee]:
        return await self.list(filters={"event_id": event_id, "status": status.value if status else None})
