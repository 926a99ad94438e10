"""
Project showcase service.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from abg_site.core.database.entities.projects import Project
from abg_site.core.database.entities.users import User
from abg_site.core.database.repositories.projects import ProjectRepository
from abg_site.core.logging_config import get_logger
from abg_site.core.models.domain.enums import AuditAction, value_of
from abg_site.core.models.io.projects import ProjectCreate, ProjectUpdate
from abg_site.server.errors import ConflictError, NotFoundError, ValidationFailedError

from .audit import AuditService
from .codes import unique_slug

logger = get_logger(__name__)


class ProjectService:
    def __init__(self, session: AsyncSession, audit: Optional[AuditService] = None):
        self.projects = ProjectRepository(session)
        self.audit = audit or AuditService(session)

    async def get(self, project_id: int) -> Project:
        project = await self.projects.get_by_id(project_id)
        if not project:
            raise NotFoundError("Project", project_id)
        return project

    async def get_published(self, slug: str) -> Project:
        project = await self.projects.get_by_slug(slug)
        if not project or not project.published:
            raise NotFoundError("Project", slug)
        return project

    async def list_public(self) -> List[Project]:
        return await self.projects.list_showcase(published_only=True)

    async def list_all(self) -> List[Project]:
        return await self.projects.list_showcase(published_only=False)

    async def create(self, data: ProjectCreate, creator: Optional[User] = None) -> Project:
        if data.end_date and data.end_date < data.start_date:
            raise ValidationFailedError("Project end date must not be before its start date")
        if data.slug:
            if await self.projects.get_by_slug(data.slug):
                raise ConflictError(f"Project slug '{data.slug}' is already in use")
            slug = data.slug
        else:
            slug = await unique_slug(data.title, self._slug_taken)

        values = data.model_dump(exclude={"slug"})
        values["status"] = value_of(data.status)
        project = await self.projects.create(
            Project(**values, slug=slug, created_by_id=creator.id if creator else None)
        )
        await self.audit.log(
            AuditAction.content_created, target_type="project", target_id=project.id, meta={"slug": project.slug}
        )
        logger.info(f"Created project {project.slug}")
        return project

    async def update(self, project_id: int, data: ProjectUpdate) -> Project:
        project = await self.get(project_id)
        changes = data.model_dump(exclude_unset=True)
        if "status" in changes and changes["status"] is not None:
            changes["status"] = value_of(changes["status"])
        start = changes.get("start_date") or project.start_date
        end = changes["end_date"] if "end_date" in changes else project.end_date
        if end and end < start:
            raise ValidationFailedError("Project end date must not be before its start date")
        for key, value in changes.items():
            setattr(project, key, value)
        project = await self.projects.update(project)
        await self.audit.log(
            AuditAction.content_updated, target_type="project", target_id=project.id, meta={"fields": sorted(changes)}
        )
        return project

    async def delete(self, project_id: int) -> None:
        project = await self.get(project_id)
        await self.projects.delete(project.id)
        await self.audit.log(
            AuditAction.content_deleted, target_type="project", target_id=project_id, meta={"slug": project.slug}
        )

    async def _slug_taken(self, slug: str) -> bool:
        return await self.projects.get_by_slug(slug) is not None
