"""
Public Event Endpoints.

Published events are open to everyone. Where attendance confirmation is
enabled, visitors register with their campus email, may land on a
waitlist, and check in on the day with their personal code.
"""

from typing import List

from fastapi import APIRouter, HTTPException, status

from abg_site.core.database.entities.events import Event
from abg_site.core.database.repositories.events import EventRepository
from abg_site.core.models.io.events import (
    AttendanceCancel,
    AttendanceRegistration,
    AttendanceResult,
    AttendeeCheckIn,
    AttendeeRead,
    EventRead,
    WaitlistActionResult,
)
from abg_site.server.services.attendance import AttendanceService
from abg_site.server.services.audit import AuditService
from abg_site.server.services.deps import ClientInfoDep, SessionDep

router = APIRouter()


def to_event_read(event: Event) -> EventRead:
    view = EventRead.model_validate(event)
    view.password_protected = bool(event.attendance_password)
    return view


async def _published_event(session, event_id: int) -> Event:
    event = await EventRepository(session).get_by_id(event_id)
    if not event or not event.published:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


@router.get(
    "",
    response_model=List[EventRead],
    summary="List Events",
    description="Published events in start-time order.",
    response_description="A list of events.",
)
async def list_events(session: SessionDep) -> List[EventRead]:
    return [to_event_read(e) for e in await EventRepository(session).list_published()]


@router.get(
    "/{key}",
    response_model=EventRead,
    summary="Get Event",
    description="Retrieve a published event by numeric id or by slug.",
    response_description="The event.",
    responses={404: {"description": "Event not found"}},
)
async def get_event(key: str, session: SessionDep) -> EventRead:
    """
    Get an event.

    - **key**: The event id, or its slug.
    """
    repo = EventRepository(session)
    event = await repo.get_by_id(int(key)) if key.isdigit() else None
    # All-digit slugs such as "2026" are valid too
    if not event or not event.published:
        event = await repo.get_by_slug(key)
    if not event or not event.published:
        raise HTTPException(status_code=404, detail="Event not found")
    return to_event_read(event)


@router.post(
    "/{event_id}/attendance",
    response_model=AttendanceResult,
    status_code=status.HTTP_201_CREATED,
    summary="Register Attendance",
    description="Register for an event. When the event is full the registration joins the waitlist.",
    response_description="Registration status, waitlist position and check-in code.",
    responses={
        400: {"description": "Attendance disabled, wrong email domain, already registered, or full"},
        401: {"description": "Event password missing or wrong"},
        403: {"description": "Roles do not permit registration"},
        404: {"description": "Event not found"},
    },
)
async def register_attendance(
    event_id: int, body: AttendanceRegistration, session: SessionDep, client: ClientInfoDep
) -> AttendanceResult:
    """
    Register attendance.

    - **name** / **email**: The attendee; the email must be on the campus domain.
    - **umich_id** / **major** / **year**: Optional details.
    - **password**: Required when the event is password protected.
    """
    event = await _published_event(session, event_id)
    return await AttendanceService(session, AuditService(session, client=client)).register(event, body)


@router.get(
    "/{event_id}/attendance",
    response_model=AttendeeRead,
    summary="Get Registration",
    description="Look up the current registration for an email.",
    response_description="The registration.",
    responses={404: {"description": "Registration not found"}},
)
async def get_registration(event_id: int, email: str, session: SessionDep) -> AttendeeRead:
    event = await _published_event(session, event_id)
    return AttendeeRead.model_validate(await AttendanceService(session).get_registration(event, email))


@router.post(
    "/{event_id}/attendance/cancel",
    response_model=WaitlistActionResult,
    summary="Cancel Registration",
    description="Cancel a registration. A freed seat goes to the front of the waitlist when auto-promotion is on.",
    response_description="Confirmation and the attendees promoted into the freed seat.",
    responses={404: {"description": "Registration not found"}},
)
async def cancel_attendance(
    event_id: int, body: AttendanceCancel, session: SessionDep, client: ClientInfoDep
) -> WaitlistActionResult:
    event = await _published_event(session, event_id)
    promoted = await AttendanceService(session, AuditService(session, client=client)).cancel(event, body.email)
    message = "Registration cancelled"
    if promoted:
        message += f"; {len(promoted)} promoted from the waitlist"
    return WaitlistActionResult(promoted=promoted, capacity=event.capacity, message=message)


@router.post(
    "/{event_id}/check-in",
    response_model=AttendeeRead,
    summary="Check In",
    description="Check in with the personal code received at registration.",
    response_description="The registration with check-in time.",
    responses={400: {"description": "Already checked in"}, 404: {"description": "Unknown code"}},
)
async def check_in(event_id: int, body: AttendeeCheckIn, session: SessionDep) -> AttendeeRead:
    event = await _published_event(session, event_id)
    return AttendeeRead.model_validate(await AttendanceService(session).check_in(event, body.code))
