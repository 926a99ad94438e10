"""
Slot booking service.

Applicants book coffee chats and interviews into admin-created slots. Seats
are counted from confirmed bookings; the check and the insert run in the same
request-scoped session.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from abg_site.core.database.base import utc_now
from abg_site.core.database.entities.cycles import RecruitmentCycle
from abg_site.core.database.entities.slots import Slot, SlotBooking
from abg_site.core.database.entities.users import User
from abg_site.core.database.repositories.applications import ApplicationRepository
from abg_site.core.database.repositories.slots import SlotBookingRepository, SlotRepository
from abg_site.core.logging_config import get_logger
from abg_site.core.models.domain.enums import ApplicationStage, BookingStatus, SlotKind, value_of
from abg_site.core.models.io.slots import BookingRead, SlotCreate, SlotRead, SlotUpdate
from abg_site.server.errors import ForbiddenError, NotFoundError, ValidationFailedError

logger = get_logger(__name__)

COFFEE_CHAT_STAGES = (
    ApplicationStage.draft.value,
    ApplicationStage.submitted.value,
    ApplicationStage.under_review.value,
)


class BookingService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.slots = SlotRepository(session)
        self.bookings = SlotBookingRepository(session)
        self.applications = ApplicationRepository(session)

    # ------------------------------------------------------------------
    # Slots
    # ------------------------------------------------------------------

    async def get_slot(self, slot_id: int) -> Slot:
        slot = await self.slots.get_by_id(slot_id)
        if not slot:
            raise NotFoundError("Slot", slot_id)
        return slot

    async def create_slot(self, cycle_id: int, data: SlotCreate) -> Slot:
        slot = await self.slots.create(Slot(cycle_id=cycle_id, **data.model_dump()))
        logger.info(f"Created {slot.kind} slot {slot.id} at {slot.start_time} in cycle {cycle_id}")
        return slot

    async def update_slot(self, slot_id: int, data: SlotUpdate) -> Slot:
        slot = await self.get_slot(slot_id)
        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(slot, key, value)
        if slot.end_time <= slot.start_time:
            raise ValidationFailedError("end_time must be after start_time")
        return await self.slots.update(slot)

    async def delete_slot(self, slot_id: int) -> None:
        slot = await self.get_slot(slot_id)
        if await self.bookings.count_confirmed(slot.id):
            raise ValidationFailedError("Slot has confirmed bookings; cancel them first")
        for booking in await self.bookings.list(filters={"slot_id": slot.id}):
            await self.session.delete(booking)
        await self.slots.delete(slot.id)

    async def with_counts(self, slots: List[Slot]) -> List[SlotRead]:
        counts = await self.bookings.confirmed_counts(s.id for s in slots)
        views = []
        for slot in slots:
            view = SlotRead.model_validate(slot)
            view.booked_count = counts.get(slot.id, 0)
            views.append(view)
        return views

    async def list_slots(self, cycle_id: int, kind: Optional[SlotKind] = None) -> List[SlotRead]:
        return await self.with_counts(await self.slots.list_for_cycle(cycle_id, kind=kind))

    async def available_slots(
        self, cycle_id: int, kind: SlotKind, track: Optional[str] = None, now: Optional[datetime] = None
    ) -> List[SlotRead]:
        """Active, future slots with free seats, open to ``track`` or to every track."""
        candidates = await self.slots.list_for_cycle(cycle_id, kind=kind, active_only=True, starting_after=now or utc_now())
        if track:
            candidates = [s for s in candidates if not s.for_track or s.for_track == track]
        return [s for s in await self.with_counts(candidates) if not s.is_full]

    # ------------------------------------------------------------------
    # Bookings
    # ------------------------------------------------------------------

    async def book(self, cycle: RecruitmentCycle, slot_id: int, user: User, notes: Optional[str] = None) -> SlotBooking:
        """
        Book one seat in a slot for the user.

        Raises:
            NotFoundError: unknown slot.
            ForbiddenError: the slot is reserved for a different track.
            ValidationFailedError: the slot is not bookable, the user is not
                at the right stage, already holds a booking of this kind, or the
                slot is full.
        """
        slot = await self.get_slot(slot_id)
        if slot.cycle_id != cycle.id:
            raise ValidationFailedError("Slot not in current cycle")
        if not slot.is_active:
            raise ValidationFailedError("Slot is not available")
        if slot.start_time <= utc_now():
            raise ValidationFailedError("Slot has already started")

        application = await self.applications.get_for_user(cycle.id, user.id)
        if slot.kind != SlotKind.coffee_chat.value:
            if application is None:
                raise ValidationFailedError("You must submit an application first")
            if application.stage != slot.kind:
                raise ValidationFailedError(
                    "You are not eligible to book this slot at your current stage",
                    details={"current_stage": application.stage, "required_stage": slot.kind},
                )
        elif application is not None and application.stage not in COFFEE_CHAT_STAGES:
            raise ValidationFailedError(
                "Coffee chats are only available before interviews begin",
                details={"current_stage": application.stage},
            )

        if slot.for_track and application is not None and slot.for_track != application.track:
            raise ForbiddenError(
                "This slot is for a different track",
                details={"slot_track": slot.for_track, "your_track": application.track},
            )

        existing = await self.bookings.find_confirmed_of_kind(cycle.id, user.id, slot.kind)
        if existing:
            raise ValidationFailedError(
                "You already have a booking for this type", details={"existing_booking_id": existing.id}
            )
        if await self.bookings.count_confirmed(slot.id) >= slot.max_bookings:
            raise ValidationFailedError("Slot is full")

        booking = await self.bookings.create(
            SlotBooking(
                cycle_id=cycle.id,
                slot_id=slot.id,
                application_id=application.id if application else None,
                user_id=user.id,
                user_email=user.email,
                user_name=user.name,
                slot_kind=slot.kind,
                status=BookingStatus.confirmed.value,
                notes=notes,
            )
        )
        logger.info(f"{user.email} booked {slot.kind} slot {slot.id}")
        return booking

    async def cancel(self, booking_id: int, user: User) -> SlotBooking:
        booking = await self.bookings.get_by_id(booking_id)
        if not booking:
            raise NotFoundError("Booking", booking_id)
        if booking.user_id != user.id:
            raise ForbiddenError("You can only cancel your own bookings")
        if booking.status == BookingStatus.cancelled.value:
            raise ValidationFailedError("Booking already cancelled")
        slot = await self.slots.get_by_id(booking.slot_id)
        if slot and slot.start_time <= utc_now():
            raise ValidationFailedError("Cannot cancel past bookings")

        booking.status = BookingStatus.cancelled.value
        booking = await self.bookings.update(booking)
        logger.info(f"{user.email} cancelled booking {booking.id}")
        return booking

    async def set_status(self, booking_id: int, status: BookingStatus, notes: Optional[str] = None) -> SlotBooking:
        booking = await self.bookings.get_by_id(booking_id)
        if not booking:
            raise NotFoundError("Booking", booking_id)
        booking.status = value_of(status)
        if notes is not None:
            booking.notes = notes
        return await self.bookings.update(booking)

    async def list_bookings(
        self,
        cycle_id: int,
        slot_id: Optional[int] = None,
        application_id: Optional[int] = None,
        status: Optional[BookingStatus] = None,
    ) -> List[SlotBooking]:
        filters = {
            "cycle_id": cycle_id,
            "slot_id": slot_id,
            "application_id": application_id,
            "status": value_of(status) if status else None,
        }
        return await self.bookings.list(filters=filters)

    async def with_slot_details(self, bookings: List[SlotBooking]) -> List[BookingRead]:
        slots: Dict[int, Slot] = await self.slots.get_many(b.slot_id for b in bookings)
        views = []
        for booking in bookings:
            view = BookingRead.model_validate(booking)
            slot = slots.get(booking.slot_id)
            if slot:
                view.slot = SlotRead.model_validate(slot)
            views.append(view)
        return views
