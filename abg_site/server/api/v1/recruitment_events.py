"""
Recruitment Event Endpoints (admin).

Manage the info sessions and socials of a cycle, view RSVPs and record
attendance.
"""

from typing import Annotated, List

from fastapi import APIRouter, Depends, status

from abg_site.core.database.entities.users import User
from abg_site.core.database.repositories.recruitment_events import EventRsvpRepository, RecruitmentEventRepository
from abg_site.core.models.io.common import MessageResponse
from abg_site.core.models.io.recruitment_events import (
    RecruitmentEventCreate,
    RecruitmentEventRead,
    RecruitmentEventUpdate,
    RsvpRead,
)
from abg_site.server.services.deps import SessionDep, require_page_access
from abg_site.server.services.recruitment_events import RecruitmentEventService

router = APIRouter()

RecruiterDep = Annotated[User, Depends(require_page_access("recruitment"))]


@router.get(
    "",
    response_model=List[RecruitmentEventRead],
    summary="List Recruitment Events",
    description="List the recruitment events of a cycle in start-time order.",
    response_description="A list of events.",
)
async def list_events(cycle_id: int, session: SessionDep, _: RecruiterDep) -> List[RecruitmentEventRead]:
    events = await RecruitmentEventRepository(session).list_for_cycle(cycle_id)
    return [RecruitmentEventRead.model_validate(e) for e in events]


@router.post(
    "",
    response_model=RecruitmentEventRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Recruitment Event",
    description="Create a recruitment event. A check-in code is generated when check-in is enabled without one.",
    response_description="The created event.",
)
async def create_event(
    cycle_id: int, body: RecruitmentEventCreate, session: SessionDep, _: RecruiterDep
) -> RecruitmentEventRead:
    """
    Create a recruitment event.

    - **cycle_id**: The recruitment cycle (query parameter).
    - **rsvp_enabled** / **rsvp_deadline** / **capacity**: RSVP rules.
    - **check_in_enabled** / **check_in_code**: On-site check-in.
    """
    return RecruitmentEventRead.model_validate(await RecruitmentEventService(session).create(cycle_id, body))


@router.get(
    "/{event_id}",
    response_model=RecruitmentEventRead,
    summary="Get Recruitment Event",
    description="Retrieve a recruitment event including its check-in code.",
    response_description="The event.",
    responses={404: {"description": "Event not found"}},
)
async def get_event(event_id: int, session: SessionDep, _: RecruiterDep) -> RecruitmentEventRead:
    return RecruitmentEventRead.model_validate(await RecruitmentEventService(session).get(event_id))


@router.patch(
    "/{event_id}",
    response_model=RecruitmentEventRead,
    summary="Update Recruitment Event",
    description="Change a recruitment event.",
    response_description="The updated event.",
    responses={404: {"description": "Event not found"}},
)
async def update_event(
    event_id: int, body: RecruitmentEventUpdate, session: SessionDep, _: RecruiterDep
) -> RecruitmentEventRead:
    return RecruitmentEventRead.model_validate(await RecruitmentEventService(session).update(event_id, body))


@router.delete(
    "/{event_id}",
    response_model=MessageResponse,
    summary="Delete Recruitment Event",
    description="Delete a recruitment event and its RSVPs.",
    response_description="Confirmation message.",
    responses={404: {"description": "Event not found"}},
)
async def delete_event(event_id: int, session: SessionDep, _: RecruiterDep) -> MessageResponse:
    await RecruitmentEventService(session).delete(event_id)
    return MessageResponse(message="Event deleted", id=event_id)


@router.get(
    "/{event_id}/rsvps",
    response_model=List[RsvpRead],
    summary="List RSVPs",
    description="List the RSVPs of a recruitment event.",
    response_description="A list of RSVPs.",
)
async def list_rsvps(event_id: int, session: SessionDep, _: RecruiterDep) -> List[RsvpRead]:
    return [RsvpRead.model_validate(r) for r in await EventRsvpRepository(session).list_for_event(event_id)]


@router.post(
    "/rsvps/{rsvp_id}/attendance",
    response_model=RsvpRead,
    summary="Mark Attendance",
    description="Record (or clear) that an applicant attended the event.",
    response_description="The updated RSVP.",
    responses={404: {"description": "RSVP not found"}},
)
async def mark_attendance(rsvp_id: int, session: SessionDep, _: RecruiterDep, attended: bool = True) -> RsvpRead:
    """
    Mark attendance.

    - **rsvp_id**: The RSVP to update.
    - **attended**: False clears a previous mark.
    """
    return RsvpRead.model_validate(await RecruitmentEventService(session).mark_attended(rsvp_id, attended))
