"""
Event Administration Endpoints.

Create and edit public events, see who registered, and manage waitlists.
"""

from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, status

from abg_site.core.database.entities.users import User
from abg_site.core.database.repositories.events import EventAttendeeRepository, EventRepository
from abg_site.core.models.domain.enums import AttendeeStatus
from abg_site.core.models.io.common import MessageResponse
from abg_site.core.models.io.events import (
    AttendeeList,
    AttendeeRead,
    EventCreate,
    EventRead,
    EventUpdate,
    WaitlistActionResult,
    WaitlistExpand,
    WaitlistPromote,
)
from abg_site.server.services.attendance import AttendanceService, EventService
from abg_site.server.services.audit import AuditService
from abg_site.server.services.deps import ClientInfoDep, SessionDep, require_page_access

from .events import to_event_read

router = APIRouter()

EventManagerDep = Annotated[User, Depends(require_page_access("events"))]
WaitlistManagerDep = Annotated[User, Depends(require_page_access("waitlists"))]


@router.get(
    "",
    response_model=List[EventRead],
    summary="List All Events",
    description="Every event, published or not, in start-time order.",
    response_description="A list of events.",
)
async def list_all_events(session: SessionDep, _: EventManagerDep) -> List[EventRead]:
    return [to_event_read(e) for e in await EventRepository(session).list()]


@router.post(
    "",
    response_model=EventRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Event",
    description="Create a public event.",
    response_description="The created event.",
    responses={409: {"description": "Slug already in use"}},
)
async def create_event(body: EventCreate, session: SessionDep, user: EventManagerDep, client: ClientInfoDep) -> EventRead:
    """
    Create an event.

    - **slug**: Unique URL-safe identifier.
    - **attendance_confirm_enabled** / **attendance_password**: Registration rules.
    - **capacity** / **waitlist_enabled** / **waitlist_max_size** / **waitlist_auto_promote**: Seat limits.
    - **required_roles_any**: Only users holding one of these roles may register.
    """
    event = await EventService(session, AuditService(session, actor=user, client=client)).create(body)
    return to_event_read(event)


@router.patch(
    "/{event_id}",
    response_model=EventRead,
    summary="Update Event",
    description="Change an event.",
    response_description="The updated event.",
    responses={404: {"description": "Event not found"}},
)
async def update_event(
    event_id: int, body: EventUpdate, session: SessionDep, user: EventManagerDep, client: ClientInfoDep
) -> EventRead:
    event = await EventService(session, AuditService(session, actor=user, client=client)).update(event_id, body)
    return to_event_read(event)


@router.delete(
    "/{event_id}",
    response_model=MessageResponse,
    summary="Delete Event",
    description="Delete an event and its registrations.",
    response_description="Confirmation message.",
    responses={404: {"description": "Event not found"}},
)
async def delete_event(event_id: int, session: SessionDep, user: EventManagerDep, client: ClientInfoDep) -> MessageResponse:
    await EventService(session, AuditService(session, actor=user, client=client)).delete(event_id)
    return MessageResponse(message="Event deleted", id=event_id)


@router.get(
    "/{event_id}/attendees",
    response_model=AttendeeList,
    summary="List Attendees",
    description="Registrations of an event with confirmed, waitlisted and checked-in counts.",
    response_description="Attendees and counts.",
    responses={404: {"description": "Event not found"}},
)
async def list_attendees(
    event_id: int, session: SessionDep, _: EventManagerDep, attendee_status: Optional[AttendeeStatus] = None
) -> AttendeeList:
    event = await EventService(session).get(event_id)
    attendees = await EventAttendeeRepository(session).list_for_event(event.id, attendee_status)
    return AttendeeList(
        attendees=[AttendeeRead.model_validate(a) for a in attendees],
        counts=await AttendanceService(session).attendee_counts(event),
    )


@router.post(
    "/{event_id}/waitlist/promote",
    response_model=WaitlistActionResult,
    summary="Promote From Waitlist",
    description="Confirm waitlisted attendees, front of the queue first unless ids are given, up to the free seats.",
    response_description="Promoted attendee ids.",
    responses={400: {"description": "Event at capacity or nobody waiting"}},
)
async def promote_waitlist(
    event_id: int, body: WaitlistPromote, session: SessionDep, user: WaitlistManagerDep, client: ClientInfoDep
) -> WaitlistActionResult:
    event = await EventService(session).get(event_id)
    service = AttendanceService(session, AuditService(session, actor=user, client=client))
    promoted = await service.promote(event, body.attendee_ids)
    return WaitlistActionResult(promoted=promoted, capacity=event.capacity, message=f"Promoted {len(promoted)} attendees")


@router.post(
    "/{event_id}/waitlist/expand",
    response_model=WaitlistActionResult,
    summary="Expand Capacity",
    description="Raise the event capacity; waitlisted attendees fill the new seats when auto-promotion is on.",
    response_description="New capacity and promoted attendee ids.",
    responses={400: {"description": "New capacity below the current one"}},
)
async def expand_capacity(
    event_id: int, body: WaitlistExpand, session: SessionDep, user: WaitlistManagerDep, client: ClientInfoDep
) -> WaitlistActionResult:
    event = await EventService(session).get(event_id)
    service = AttendanceService(session, AuditService(session, actor=user, client=client))
    promoted = await service.expand_capacity(event, body.new_capacity)
    return WaitlistActionResult(
        promoted=promoted,
        capacity=event.capacity,
        message=f"Capacity set to {event.capacity}; promoted {len(promoted)} attendees",
    )


@router.delete(
    "/{event_id}/waitlist/{attendee_id}",
    response_model=MessageResponse,
    summary="Remove From Waitlist",
    description="Cancel a waitlisted registration and close the gap in the queue.",
    response_description="Confirmation message.",
    responses={404: {"description": "Attendee not on the waitlist"}},
)
async def remove_from_waitlist(
    event_id: int, attendee_id: int, session: SessionDep, _: WaitlistManagerDep
) -> MessageResponse:
    event = await EventService(session).get(event_id)
    await AttendanceService(session).remove_from_waitlist(event, attendee_id)
    return MessageResponse(message="Removed from waitlist", id=attendee_id)


@router.post(
    "/{event_id}/waitlist/reorder",
    response_model=MessageResponse,
    summary="Reorder Waitlist",
    description="Renumber waitlist positions by registration time.",
    response_description="Confirmation message.",
)
async def reorder_waitlist(event_id: int, session: SessionDep, _: WaitlistManagerDep) -> MessageResponse:
    event = await EventService(session).get(event_id)
    await AttendanceService(session).reorder(event)
    return MessageResponse(message="Waitlist reordered", id=event_id)
