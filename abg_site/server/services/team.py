"""
Team page service.

New members go to the end of the order; admins can reorder the whole page
in one request.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from abg_site.core.database.entities.team import TeamMember
from abg_site.core.database.repositories.team import TeamMemberRepository
from abg_site.core.logging_config import get_logger
from abg_site.core.models.domain.enums import AuditAction
from abg_site.core.models.io.team import TeamMemberCreate, TeamMemberUpdate, TeamReorder
from abg_site.server.errors import NotFoundError

from .audit import AuditService

logger = get_logger(__name__)


class TeamService:
    def __init__(self, session: AsyncSession, audit: Optional[AuditService] = None):
        self.session = session
        self.members = TeamMemberRepository(session)
        self.audit = audit or AuditService(session)

    async def get(self, member_id: int) -> TeamMember:
        member = await self.members.get_by_id(member_id)
        if not member:
            raise NotFoundError("Team member", member_id)
        return member

    async def list_active(self) -> List[TeamMember]:
        return await self.members.list_ordered(active_only=True)

    async def list_all(self) -> List[TeamMember]:
        return await self.members.list_ordered(active_only=False)

    async def create(self, data: TeamMemberCreate) -> TeamMember:
        sort_order = await self.members.max_sort_order() + 1
        member = await self.members.create(TeamMember(**data.model_dump(), sort_order=sort_order))
        await self.audit.log(
            AuditAction.content_created, target_type="team_member", target_id=member.id, meta={"name": member.name}
        )
        logger.info(f"Added team member {member.name} at position {sort_order}")
        return member

    async def update(self, member_id: int, data: TeamMemberUpdate) -> TeamMember:
        member = await self.get(member_id)
        changes = data.model_dump(exclude_unset=True)
        for key, value in changes.items():
            setattr(member, key, value)
        member = await self.members.update(member)
        await self.audit.log(
            AuditAction.content_updated, target_type="team_member", target_id=member.id, meta={"fields": sorted(changes)}
        )
        return member

    async def delete(self, member_id: int) -> None:
        member = await self.get(member_id)
        await self.members.delete(member.id)
        await self.audit.log(
            AuditAction.content_deleted, target_type="team_member", target_id=member_id, meta={"name": member.name}
        )

    async def reorder(self, data: TeamReorder) -> List[TeamMember]:
        """
        Apply new sort orders.

        Raises:
            NotFoundError: any listed member does not exist; nothing is changed.
        """
        members = [await self.get(item.id) for item in data.items]
        for member, item in zip(members, data.items):
            member.sort_order = item.sort_order
            self.session.add(member)
        await self.session.commit()
        await self.audit.log(
            AuditAction.content_updated, target_type="team_member", meta={"reordered": [m.id for m in members]}
        )
        return await self.list_all()
