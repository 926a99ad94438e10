"""
Applicant Portal Endpoints.

Everything a signed-in applicant does during the active cycle: the
dashboard, the application form, event RSVPs and check-in, and booking
coffee chats or interviews. Every endpoint refuses access outside the
cycle's portal window.
"""

from typing import Annotated, List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, status

from abg_site.core.database.entities.cycles import RecruitmentCycle
from abg_site.core.database.repositories.applications import ApplicationRepository
from abg_site.core.models.domain.enums import SlotKind, Track
from abg_site.core.models.io.applications import ApplicationDraft, ApplicationRead, QuestionField
from abg_site.core.models.io.common import MessageResponse
from abg_site.core.models.io.portal import PortalDashboard
from abg_site.core.models.io.recruitment_events import CheckInRequest, RsvpRead
from abg_site.core.models.io.slots import BookingRead, SlotRead
from abg_site.server.services.applications import ApplicationService, QuestionService
from abg_site.server.services.booking import BookingService
from abg_site.server.services.cycles import CycleService
from abg_site.server.services.deps import CurrentUserDep, SessionDep
from abg_site.server.services.portal import PortalService
from abg_site.server.services.recruitment_events import RecruitmentEventService

router = APIRouter()


async def get_open_cycle(session: SessionDep) -> RecruitmentCycle:
    cycle = await CycleService(session).require_active()
    CycleService.check_portal_window(cycle)
    return cycle


OpenCycleDep = Annotated[RecruitmentCycle, Depends(get_open_cycle)]


@router.get(
    "/dashboard",
    response_model=PortalDashboard,
    summary="Get Portal Dashboard",
    description="Everything the portal home page shows for the signed-in applicant in the active cycle.",
    response_description="The dashboard.",
    responses={
        403: {"description": "Portal not yet open or already closed"},
        404: {"description": "No active cycle; the body names the next upcoming cycle"},
    },
)
async def get_dashboard(session: SessionDep, user: CurrentUserDep) -> PortalDashboard:
    return await PortalService(session).dashboard(user)


@router.get(
    "/questions",
    response_model=List[QuestionField],
    summary="Get Application Questions",
    description="The questions an applicant on the given track answers.",
    response_description="A list of question fields.",
)
async def get_questions(track: Track, session: SessionDep, _: CurrentUserDep, cycle: OpenCycleDep) -> List[QuestionField]:
    return await QuestionService(session).fields_for_track(cycle.id, track.value)


@router.get(
    "/application",
    response_model=ApplicationRead,
    summary="Get My Application",
    description="The signed-in applicant's application in the active cycle.",
    response_description="The application.",
    responses={404: {"description": "No application yet"}},
)
async def get_my_application(session: SessionDep, user: CurrentUserDep, cycle: OpenCycleDep) -> ApplicationRead:
    application = await ApplicationRepository(session).get_for_user(cycle.id, user.id)
    if not application:
        raise HTTPException(status_code=404, detail="Application not found")
    return ApplicationRead.model_validate(application)


@router.put(
    "/application",
    response_model=ApplicationRead,
    summary="Save Application Draft",
    description="Create or update the draft. Files are only replaced when sent.",
    response_description="The saved application.",
    responses={
        400: {"description": "Application already submitted"},
        403: {"description": "Deadline passed"},
    },
)
async def save_draft(
    body: ApplicationDraft, session: SessionDep, user: CurrentUserDep, cycle: OpenCycleDep
) -> ApplicationRead:
    """
    Save the application draft.

    - **track**: The track applied to.
    - **answers**: Question key to answer.
    - **files**: Question key to uploaded file URL; omit to keep stored files.
    """
    return ApplicationRead.model_validate(await ApplicationService(session).save_draft(cycle, user, body))


@router.post(
    "/application/submit",
    response_model=ApplicationRead,
    summary="Submit Application",
    description="Submit the draft once every required question is answered within its word limit.",
    response_description="The submitted application.",
    responses={
        400: {"description": "Already submitted, missing required fields or word limit exceeded"},
        403: {"description": "Deadline passed"},
        404: {"description": "No application to submit"},
    },
)
async def submit_application(session: SessionDep, user: CurrentUserDep, cycle: OpenCycleDep) -> ApplicationRead:
    return ApplicationRead.model_validate(await ApplicationService(session).submit(cycle, user))


@router.post(
    "/application/withdraw",
    response_model=ApplicationRead,
    summary="Withdraw Application",
    description="Withdraw from the cycle. Decided applications cannot be withdrawn.",
    response_description="The withdrawn application.",
    responses={400: {"description": "Application already decided"}, 404: {"description": "No application"}},
)
async def withdraw_application(session: SessionDep, user: CurrentUserDep, cycle: OpenCycleDep) -> ApplicationRead:
    return ApplicationRead.model_validate(await ApplicationService(session).withdraw(cycle, user))


@router.post(
    "/events/{event_id}/rsvp",
    response_model=RsvpRead,
    status_code=status.HTTP_201_CREATED,
    summary="RSVP To Event",
    description="RSVP to a recruitment event of the active cycle.",
    response_description="The RSVP.",
    responses={
        400: {"description": "RSVP closed, event full or already RSVPed"},
        404: {"description": "Event not found"},
    },
)
async def rsvp(event_id: int, session: SessionDep, user: CurrentUserDep, cycle: OpenCycleDep) -> RsvpRead:
    return RsvpRead.model_validate(await RecruitmentEventService(session).rsvp(cycle, event_id, user))


@router.delete(
    "/events/{event_id}/rsvp",
    response_model=MessageResponse,
    summary="Cancel RSVP",
    description="Withdraw an RSVP.",
    response_description="Confirmation message.",
    responses={404: {"description": "No RSVP for this event"}},
)
async def cancel_rsvp(event_id: int, session: SessionDep, user: CurrentUserDep, cycle: OpenCycleDep) -> MessageResponse:
    if not await RecruitmentEventService(session).cancel_rsvp(cycle, event_id, user):
        raise HTTPException(status_code=404, detail="RSVP not found")
    return MessageResponse(message="RSVP cancelled", id=event_id)


@router.post(
    "/events/{event_id}/check-in",
    response_model=RsvpRead,
    summary="Check In To Event",
    description="Check in on site with the code shown at the event.",
    response_description="The RSVP with check-in time.",
    responses={400: {"description": "Check-in disabled, wrong code, no RSVP or already checked in"}},
)
async def check_in(
    event_id: int, body: CheckInRequest, session: SessionDep, user: CurrentUserDep, cycle: OpenCycleDep
) -> RsvpRead:
    rsvp = await RecruitmentEventService(session).check_in(cycle, event_id, user, body.code)
    return RsvpRead.model_validate(rsvp)


@router.get(
    "/slots",
    response_model=List[SlotRead],
    summary="List Available Slots",
    description="Future slots with free seats. Interview slots are filtered to the applicant's track.",
    response_description="A list of slots.",
)
async def list_available_slots(
    kind: SlotKind, session: SessionDep, user: CurrentUserDep, cycle: OpenCycleDep
) -> List[SlotRead]:
    application = await ApplicationRepository(session).get_for_user(cycle.id, user.id)
    track = application.track if application else None
    return await BookingService(session).available_slots(cycle.id, kind, track)


@router.post(
    "/slots/{slot_id}/book",
    response_model=BookingRead,
    status_code=status.HTTP_201_CREATED,
    summary="Book Slot",
    description="Book a seat in a coffee chat or interview slot.",
    response_description="The booking with slot details.",
    responses={
        400: {"description": "Slot unavailable, wrong stage, already booked or full"},
        403: {"description": "Slot is reserved for another track"},
        404: {"description": "Slot not found"},
    },
)
async def book_slot(
    slot_id: int,
    session: SessionDep,
    user: CurrentUserDep,
    cycle: OpenCycleDep,
    notes: Optional[str] = Body(default=None, embed=True),
) -> BookingRead:
    service = BookingService(session)
    booking = await service.book(cycle, slot_id, user, notes)
    return (await service.with_slot_details([booking]))[0]


@router.post(
    "/bookings/{booking_id}/cancel",
    response_model=BookingRead,
    summary="Cancel Booking",
    description="Cancel one of your own bookings before the slot starts.",
    response_description="The cancelled booking.",
    responses={
        400: {"description": "Already cancelled or slot already started"},
        403: {"description": "Not your booking"},
        404: {"description": "Booking not found"},
    },
)
async def cancel_booking(booking_id: int, session: SessionDep, user: CurrentUserDep, _: OpenCycleDep) -> BookingRead:
    service = BookingService(session)
    booking = await service.cancel(booking_id, user)
    return (await service.with_slot_details([booking]))[0]
