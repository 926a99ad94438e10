"""
Project Endpoints.

``router`` serves the public showcase; ``admin_router`` lets the projects
page create, edit and remove projects.
"""

from typing import Annotated, List

from fastapi import APIRouter, Depends, status

from abg_site.core.database.entities.users import User
from abg_site.core.models.io.common import MessageResponse
from abg_site.core.models.io.projects import ProjectCreate, ProjectRead, ProjectUpdate
from abg_site.server.services.audit import AuditService
from abg_site.server.services.deps import ClientInfoDep, SessionDep, require_page_access
from abg_site.server.services.projects import ProjectService

router = APIRouter()
admin_router = APIRouter()

ProjectManagerDep = Annotated[User, Depends(require_page_access("projects"))]


@router.get(
    "",
    response_model=List[ProjectRead],
    summary="List Projects",
    description="Published projects, featured first, then newest first.",
    response_description="A list of projects.",
)
async def list_projects(session: SessionDep) -> List[ProjectRead]:
    return [ProjectRead.model_validate(p) for p in await ProjectService(session).list_public()]


@router.get(
    "/{slug}",
    response_model=ProjectRead,
    summary="Get Project",
    description="One published project.",
    response_description="The project.",
    responses={404: {"description": "Project not found or unpublished"}},
)
async def get_project(slug: str, session: SessionDep) -> ProjectRead:
    return ProjectRead.model_validate(await ProjectService(session).get_published(slug))


@admin_router.get(
    "",
    response_model=List[ProjectRead],
    summary="List All Projects",
    description="Every project, published or not, in showcase order.",
    response_description="A list of projects.",
)
async def list_all_projects(session: SessionDep, _: ProjectManagerDep) -> List[ProjectRead]:
    return [ProjectRead.model_validate(p) for p in await ProjectService(session).list_all()]


@admin_router.post(
    "",
    response_model=ProjectRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Project",
    description="Add a project to the showcase.",
    response_description="The created project.",
    responses={
        400: {"description": "End date before start date"},
        409: {"description": "Slug already in use"},
    },
)
async def create_project(
    body: ProjectCreate, session: SessionDep, user: ProjectManagerDep, client: ClientInfoDep
) -> ProjectRead:
    """
    Create a project.

    - **slug**: Optional; derived from the title when omitted.
    - **status**: PLANNING, ACTIVE, COMPLETED, ON_HOLD or CANCELLED.
    - **progress**: Percent complete.
    - **featured** / **published**: Showcase placement and visibility.
    """
    service = ProjectService(session, AuditService(session, actor=user, client=client))
    return ProjectRead.model_validate(await service.create(body, creator=user))


@admin_router.patch(
    "/{project_id}",
    response_model=ProjectRead,
    summary="Update Project",
    description="Change a project.",
    response_description="The updated project.",
    responses={400: {"description": "End date before start date"}, 404: {"description": "Project not found"}},
)
async def update_project(
    project_id: int, body: ProjectUpdate, session: SessionDep, user: ProjectManagerDep, client: ClientInfoDep
) -> ProjectRead:
    service = ProjectService(session, AuditService(session, actor=user, client=client))
    return ProjectRead.model_validate(await service.update(project_id, body))


@admin_router.delete(
    "/{project_id}",
    response_model=MessageResponse,
    summary="Delete Project",
    description="Remove a project.",
    response_description="Confirmation message.",
    responses={404: {"description": "Project not found"}},
)
async def delete_project(
    project_id: int, session: SessionDep, user: ProjectManagerDep, client: ClientInfoDep
) -> MessageResponse:
    await ProjectService(session, AuditService(session, actor=user, client=client)).delete(project_id)
    return MessageResponse(message="Project deleted", id=project_id)
