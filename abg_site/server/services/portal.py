"""
Applicant portal dashboard.

Assembles everything the portal home page needs for the signed-in applicant
in the active cycle.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from abg_site.core.database.entities.users import User
from abg_site.core.database.repositories.applications import ApplicationRepository, QuestionRepository
from abg_site.core.database.repositories.recruitment_events import EventRsvpRepository
from abg_site.core.database.repositories.slots import SlotBookingRepository, SlotRepository
from abg_site.core.logging_config import get_logger
from abg_site.core.models.domain.enums import SlotKind
from abg_site.core.models.io.applications import ApplicationRead, QuestionSetRead
from abg_site.core.models.io.cycles import CycleRead
from abg_site.core.models.io.portal import PortalDashboard
from abg_site.core.models.io.recruitment_events import RsvpRead

from .booking import BookingService
from .cycles import CycleService
from .recruitment_events import RecruitmentEventService
from .round_tracker import build_round_tracker

logger = get_logger(__name__)

# Interview slots are only offered to applicants at the matching stage.
INTERVIEW_KINDS = (SlotKind.interview_round1, SlotKind.interview_round2)


class PortalService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.cycle_service = CycleService(session)
        self.booking_service = BookingService(session)
        self.event_service = RecruitmentEventService(session)

    async def dashboard(self, user: User) -> PortalDashboard:
        cycle = await self.cycle_service.require_active()
        CycleService.check_portal_window(cycle)

        application = await ApplicationRepository(self.session).get_for_user(cycle.id, user.id)

        available = await self.booking_service.available_slots(cycle.id, SlotKind.coffee_chat)
        if application:
            for kind in INTERVIEW_KINDS:
                if application.stage == kind.value:
                    available += await self.booking_service.available_slots(cycle.id, kind, application.track)

        bookings = await SlotBookingRepository(self.session).list_for_user(cycle.id, user.id)
        slots = await SlotRepository(self.session).get_many(b.slot_id for b in bookings)

        dashboard = PortalDashboard(
            active_cycle=CycleRead.model_validate(cycle),
            application=ApplicationRead.model_validate(application) if application else None,
            upcoming_events=await self.event_service.portal_events(cycle, user),
            my_rsvps=[
                RsvpRead.model_validate(r) for r in await EventRsvpRepository(self.session).list_for_user(cycle.id, user.id)
            ],
            available_slots=available,
            my_bookings=await self.booking_service.with_slot_details(bookings),
            questions=[
                QuestionSetRead.model_validate(q) for q in await QuestionRepository(self.session).list_for_cycle(cycle.id)
            ],
            round_tracker=build_round_tracker(application, bookings, slots, cycle.application_due_at),
        )
        logger.debug(f"Built portal dashboard for {user.email} in cycle {cycle.slug}")
        return dashboard
