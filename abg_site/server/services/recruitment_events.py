"""
Recruitment event service: admin management, applicant RSVPs and check-in.
"""

from __future__ import annotations

from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from abg_site.core.database.base import utc_now
from abg_site.core.database.entities.cycles import RecruitmentCycle
from abg_site.core.database.entities.recruitment_events import EventRsvp, RecruitmentEvent
from abg_site.core.database.entities.users import User
from abg_site.core.database.repositories.recruitment_events import EventRsvpRepository, RecruitmentEventRepository
from abg_site.core.logging_config import get_logger
from abg_site.core.models.io.recruitment_events import (
    PortalEventRead,
    RecruitmentEventCreate,
    RecruitmentEventUpdate,
)
from abg_site.server.errors import NotFoundError, ValidationFailedError

from .codes import generate_check_in_code

logger = get_logger(__name__)


class RecruitmentEventService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.events = RecruitmentEventRepository(session)
        self.rsvps = EventRsvpRepository(session)

    async def get(self, event_id: int) -> RecruitmentEvent:
        event = await self.events.get_by_id(event_id)
        if not event:
            raise NotFoundError("Event", event_id)
        return event

    async def create(self, cycle_id: int, data: RecruitmentEventCreate) -> RecruitmentEvent:
        event = RecruitmentEvent(cycle_id=cycle_id, **data.model_dump())
        if event.check_in_enabled and not event.check_in_code:
            event.check_in_code = generate_check_in_code()
        if event.check_in_code:
            event.check_in_code = event.check_in_code.upper()
        event = await self.events.create(event)
        logger.info(f"Created recruitment event {event.id} '{event.title}' in cycle {cycle_id}")
        return event

    async def update(self, event_id: int, data: RecruitmentEventUpdate) -> RecruitmentEvent:
        event = await self.get(event_id)
        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(event, key, value)
        if event.check_in_enabled and not event.check_in_code:
            event.check_in_code = generate_check_in_code()
        if event.check_in_code:
            event.check_in_code = event.check_in_code.upper()
        return await self.events.update(event)

    async def delete(self, event_id: int) -> None:
        event = await self.get(event_id)
        for rsvp in await self.rsvps.list_for_event(event.id):
            await self.session.delete(rsvp)
        await self.events.delete(event.id)

    async def _event_in_cycle(self, cycle: RecruitmentCycle, event_id: int) -> RecruitmentEvent:
        event = await self.get(event_id)
        if event.cycle_id != cycle.id:
            raise ValidationFailedError("Event not in current cycle")
        return event

    async def rsvp(self, cycle: RecruitmentCycle, event_id: int, user: User) -> EventRsvp:
        """
        RSVP the user to an event of the active cycle.

        Raises:
            NotFoundError: unknown event.
            ValidationFailedError: RSVP disabled, deadline passed, event full or
                an RSVP already exists.
        """
        event = await self._event_in_cycle(cycle, event_id)
        if not event.rsvp_enabled:
            raise ValidationFailedError("RSVP is not enabled for this event")
        if event.rsvp_deadline and utc_now() > event.rsvp_deadline:
            raise ValidationFailedError("RSVP deadline has passed")
        if event.capacity and await self.rsvps.count_for_event(event.id) >= event.capacity:
            raise ValidationFailedError("Event is at capacity")
        if await self.rsvps.get_for_user(event.id, user.id):
            raise ValidationFailedError("Already RSVPed to this event")

        rsvp = await self.rsvps.create(
            EventRsvp(
                cycle_id=cycle.id,
                event_id=event.id,
                user_id=user.id,
                user_email=user.email,
                user_name=user.name,
            )
        )
        logger.info(f"{user.email} RSVPed to recruitment event {event.id}")
        return rsvp

    async def cancel_rsvp(self, cycle: RecruitmentCycle, event_id: int, user: User) -> bool:
        rsvp = await self.rsvps.get_for_user(event_id, user.id)
        if rsvp is None or rsvp.cycle_id != cycle.id:
            return False
        return await self.rsvps.delete(rsvp.id)

    async def check_in(self, cycle: RecruitmentCycle, event_id: int, user: User, code: str) -> EventRsvp:
        event = await self._event_in_cycle(cycle, event_id)
        if not event.check_in_enabled:
            raise ValidationFailedError("Check-in is not enabled for this event")
        if not event.check_in_code or code.strip().upper() != event.check_in_code.upper():
            raise ValidationFailedError("Invalid check-in code")

        rsvp = await self.rsvps.get_for_user(event.id, user.id)
        if rsvp is None:
            raise ValidationFailedError("You must RSVP before checking in")
        if rsvp.checked_in_at:
            raise ValidationFailedError(
                "You have already checked in to this event",
                details={"checked_in_at": rsvp.checked_in_at.isoformat()},
            )

        now = utc_now()
        rsvp.checked_in_at = now
        rsvp.attended_at = now
        rsvp = await self.rsvps.update(rsvp)
        logger.info(f"{user.email} checked in to recruitment event {event.id}")
        return rsvp

    async def mark_attended(self, rsvp_id: int, attended: bool = True) -> EventRsvp:
        rsvp = await self.rsvps.get_by_id(rsvp_id)
        if not rsvp:
            raise NotFoundError("RSVP", rsvp_id)
        rsvp.attended_at = utc_now() if attended else None
        return await self.rsvps.update(rsvp)

    async def portal_events(self, cycle: RecruitmentCycle, user: User) -> List[PortalEventRead]:
        """Events that have not ended yet, with the user's RSVP state."""
        now = utc_now()
        mine = {r.event_id: r for r in await self.rsvps.list_for_user(cycle.id, user.id)}
        result = []
        for event in await self.events.list_for_cycle(cycle.id):
            ends_at = event.end_time or event.start_time
            if ends_at <= now:
                continue
            rsvp = mine.get(event.id)
            view = PortalEventRead.model_validate(event)
            view.rsvp_count = await self.rsvps.count_for_event(event.id)
            view.has_rsvped = rsvp is not None
            view.checked_in = bool(rsvp and rsvp.checked_in_at)
            result.append(view)
        return result
