"""
Project repository.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.projects import Project
from .base import SQLModelRepository


class ProjectRepository(SQLModelRepository[Project]):
    """Repository for showcase projects."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Project)

    async def get_by_slug(self, slug: str) -> Optional[Project]:
        result = await self.session.execute(select(Project).where(Project.slug == slug))
        return result.scalar_one_or_none()

    async def list_showcase(self, published_only: bool = True) -> List[Project]:
        """Featured projects first, then newest first."""
        stmt = select(Project).order_by(Project.featured.desc(), Project.created_at.desc(), Project.id.desc())
        if published_only:
            stmt = stmt.where(Project.published == True)  # noqa: E712
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
