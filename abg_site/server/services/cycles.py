"""
Recruitment cycle service.

Every portal operation runs against the single active cycle; this service
resolves it and enforces the portal's open/close window.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from abg_site.core.database.base import utc_now
from abg_site.core.database.entities.cycles import RecruitmentCycle
from abg_site.core.database.repositories.applications import ApplicationRepository
from abg_site.core.database.repositories.cycles import RecruitmentCycleRepository
from abg_site.core.logging_config import get_logger
from abg_site.core.models.io.cycles import CycleCreate, CycleRead, CycleUpdate
from abg_site.server.core.config import settings
from abg_site.server.errors import ConflictError, ForbiddenError, NotFoundError, SiteError

logger = get_logger(__name__)


class CycleService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.cycles = RecruitmentCycleRepository(session)

    async def get(self, cycle_id: int) -> RecruitmentCycle:
        cycle = await self.cycles.get_by_id(cycle_id)
        if not cycle:
            raise NotFoundError("Cycle", cycle_id)
        return cycle

    async def create(self, data: CycleCreate) -> RecruitmentCycle:
        if await self.cycles.get_by_slug(data.slug):
            raise ConflictError(f"Cycle slug '{data.slug}' is already in use")
        cycle = await self.cycles.create(RecruitmentCycle(**data.model_dump(exclude={"is_active"})))
        if data.is_active:
            cycle = await self.cycles.set_active(cycle)
        logger.info(f"Created recruitment cycle {cycle.slug} (active={cycle.is_active})")
        return cycle

    async def update(self, cycle_id: int, data: CycleUpdate) -> RecruitmentCycle:
        cycle = await self.get(cycle_id)
        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(cycle, key, value)
        if cycle.portal_close_at <= cycle.portal_open_at:
            raise SiteError("portal_close_at must be after portal_open_at")
        return await self.cycles.update(cycle)

    async def delete(self, cycle_id: int, cascade: bool = False) -> Dict[str, int]:
        """
        Delete a cycle with its applications, events, slots and reviews.

        Raises:
            ConflictError: the cycle has applications and ``cascade`` is False.
        """
        cycle = await self.get(cycle_id)
        applications = await ApplicationRepository(self.session).list(filters={"cycle_id": cycle.id})
        if applications and not cascade:
            raise ConflictError(
                "Cycle has existing data that will be deleted",
                details={"requires_confirmation": True, "counts": {"applications": len(applications)}},
            )
        counts = await self.cycles.delete_with_children(cycle)
        logger.info(f"Deleted recruitment cycle {cycle.slug}: {counts}")
        return counts

    async def set_active(self, cycle_id: int) -> RecruitmentCycle:
        cycle = await self.cycles.set_active(await self.get(cycle_id))
        logger.info(f"Recruitment cycle {cycle.slug} is now active")
        return cycle

    async def require_active(self) -> RecruitmentCycle:
        """
        The active cycle.

        Raises:
            NotFoundError: when no cycle is active; the body carries the next
                upcoming cycle, if any, so the portal can show a countdown.
        """
        cycle = await self.cycles.get_active()
        if cycle:
            return cycle
        upcoming = await self.cycles.get_upcoming()
        raise NotFoundError(
            "Active recruitment cycle",
            details={
                "upcoming_cycle": CycleRead.model_validate(upcoming).model_dump(mode="json") if upcoming else None
            },
        )

    @staticmethod
    def check_portal_window(cycle: RecruitmentCycle, now: Optional[datetime] = None) -> None:
        """Refuse access outside the cycle's portal window when enforcement is on."""
        if not settings.recruitment.enforce_portal_window:
            return
        now = now or utc_now()
        if now < cycle.portal_open_at:
            raise ForbiddenError("Portal not yet open", details={"opens_at": cycle.portal_open_at.isoformat()})
        if now > cycle.portal_close_at:
            raise ForbiddenError("Portal is closed", details={"closed_at": cycle.portal_close_at.isoformat()})
