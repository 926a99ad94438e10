"""
Slot and booking repositories.

Capacity is derived from confirmed bookings rather than a stored counter, so
cancelling a booking frees its seat without a separate decrement.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from abg_site.core.models.domain.enums import BookingStatus, value_of

from ..entities.slots import Slot, SlotBooking
from .base import SQLModelRepository


class SlotRepository(SQLModelRepository[Slot]):
    """Repository for coffee chat and interview slots."""

    order_by = "start_time"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Slot)

    async def list_for_cycle(
        self,
        cycle_id: int,
        kind: Optional[str] = None,
        active_only: bool = False,
        starting_after: Optional[datetime] = None,
    ) -> List[Slot]:
        stmt = select(Slot).where(Slot.cycle_id == cycle_id)
        if kind:
            stmt = stmt.where(Slot.kind == value_of(kind))
        if active_only:
            stmt = stmt.where(Slot.is_active == True)  # noqa: E712
        if starting_after is not None:
            stmt = stmt.where(Slot.start_time > starting_after)
        result = await self.session.execute(stmt.order_by(Slot.start_time, Slot.id))
        return list(result.scalars().all())

    async def get_many(self, ids: Iterable[int]) -> Dict[int, Slot]:
        id_list = list(set(ids))
        if not id_list:
            return {}
        result = await self.session.execute(select(Slot).where(Slot.id.in_(id_list)))
        return {slot.id: slot for slot in result.scalars().all()}


class SlotBookingRepository(SQLModelRepository[SlotBooking]):
    """Repository for slot bookings."""

    order_by = "created_at"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, SlotBooking)

    async def count_confirmed(self, slot_id: int) -> int:
        stmt = (
            select(func.count())
            .select_from(SlotBooking)
            .where(SlotBooking.slot_id == slot_id, SlotBooking.status == BookingStatus.confirmed.value)
        )
        return int((await self.session.execute(stmt)).scalar_one())

    async def confirmed_counts(self, slot_ids: Iterable[int]) -> Dict[int, int]:
        """Confirmed bookings per slot; slots without bookings are absent."""
        id_list = list(slot_ids)
        if not id_list:
            return {}
        stmt = (
            select(SlotBooking.slot_id, func.count())
            .where(SlotBooking.slot_id.in_(id_list), SlotBooking.status == BookingStatus.confirmed.value)
            .group_by(SlotBooking.slot_id)
        )
        result = await self.session.execute(stmt)
        return {slot_id: int(count) for slot_id, count in result.all()}

    async def find_confirmed_of_kind(self, cycle_id: int, user_id: int, kind: str) -> Optional[SlotBooking]:
        stmt = select(SlotBooking).where(
            SlotBooking.cycle_id == cycle_id,
            SlotBooking.user_id == user_id,
            SlotBooking.slot_kind == value_of(kind),
            SlotBooking.status == BookingStatus.confirmed.value,
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list_for_user(self, cycle_id: int, user_id: int) -> List[SlotBooking]:
        return await self.list(filters={"cycle_id": cycle_id, "user_id": user_id})
