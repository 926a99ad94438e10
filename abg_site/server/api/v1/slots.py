"""
Slot and Booking Endpoints (admin).

Admins publish coffee chat and interview slots for a cycle and follow up on
the resulting bookings.
"""

from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, status

from abg_site.core.database.entities.users import User
from abg_site.core.models.domain.enums import BookingStatus, SlotKind
from abg_site.core.models.io.common import MessageResponse
from abg_site.core.models.io.slots import BookingRead, BookingStatusUpdate, SlotCreate, SlotRead, SlotUpdate
from abg_site.server.services.booking import BookingService
from abg_site.server.services.deps import SessionDep, require_page_access

router = APIRouter()

SchedulerDep = Annotated[User, Depends(require_page_access("interviews"))]


@router.get(
    "",
    response_model=List[SlotRead],
    summary="List Slots",
    description="List the slots of a cycle with their confirmed booking counts.",
    response_description="A list of slots.",
)
async def list_slots(
    cycle_id: int, session: SessionDep, _: SchedulerDep, kind: Optional[SlotKind] = None
) -> List[SlotRead]:
    """
    List slots.

    - **cycle_id**: The recruitment cycle.
    - **kind**: `coffee_chat`, `interview_round1` or `interview_round2`.
    """
    return await BookingService(session).list_slots(cycle_id, kind)


@router.post(
    "",
    response_model=SlotRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Slot",
    description="Publish a bookable slot in a cycle.",
    response_description="The created slot.",
)
async def create_slot(cycle_id: int, body: SlotCreate, session: SessionDep, _: SchedulerDep) -> SlotRead:
    return SlotRead.model_validate(await BookingService(session).create_slot(cycle_id, body))


@router.patch(
    "/{slot_id}",
    response_model=SlotRead,
    summary="Update Slot",
    description="Change a slot's time, place, host or capacity.",
    response_description="The updated slot.",
    responses={404: {"description": "Slot not found"}},
)
async def update_slot(slot_id: int, body: SlotUpdate, session: SessionDep, _: SchedulerDep) -> SlotRead:
    service = BookingService(session)
    slot = await service.update_slot(slot_id, body)
    return (await service.with_counts([slot]))[0]


@router.delete(
    "/{slot_id}",
    response_model=MessageResponse,
    summary="Delete Slot",
    description="Delete a slot that has no confirmed bookings.",
    response_description="Confirmation message.",
    responses={400: {"description": "Slot has confirmed bookings"}, 404: {"description": "Slot not found"}},
)
async def delete_slot(slot_id: int, session: SessionDep, _: SchedulerDep) -> MessageResponse:
    await BookingService(session).delete_slot(slot_id)
    return MessageResponse(message="Slot deleted", id=slot_id)


@router.get(
    "/bookings",
    response_model=List[BookingRead],
    summary="List Bookings",
    description="List bookings of a cycle, optionally for one slot, one application or one status.",
    response_description="A list of bookings with slot details.",
)
async def list_bookings(
    cycle_id: int,
    session: SessionDep,
    _: SchedulerDep,
    slot_id: Optional[int] = None,
    application_id: Optional[int] = None,
    booking_status: Optional[BookingStatus] = None,
) -> List[BookingRead]:
    service = BookingService(session)
    bookings = await service.list_bookings(cycle_id, slot_id, application_id, booking_status)
    return await service.with_slot_details(bookings)


@router.patch(
    "/bookings/{booking_id}",
    response_model=BookingRead,
    summary="Update Booking Status",
    description="Mark a booking completed or no-show, or cancel it on the applicant's behalf.",
    response_description="The updated booking.",
    responses={404: {"description": "Booking not found"}},
)
async def update_booking_status(
    booking_id: int, body: BookingStatusUpdate, session: SessionDep, _: SchedulerDep
) -> BookingRead:
    service = BookingService(session)
    booking = await service.set_status(booking_id, body.status, body.notes)
    return (await service.with_slot_details([booking]))[0]
