"""
Team Endpoints.

``router`` serves the public team page; ``admin_router`` manages members and
their order.
"""

from typing import Annotated, List

from fastapi import APIRouter, Depends, status

from abg_site.core.database.entities.users import User
from abg_site.core.models.io.common import MessageResponse
from abg_site.core.models.io.team import TeamMemberCreate, TeamMemberRead, TeamMemberUpdate, TeamReorder
from abg_site.server.services.audit import AuditService
from abg_site.server.services.deps import ClientInfoDep, SessionDep, require_page_access
from abg_site.server.services.team import TeamService

router = APIRouter()
admin_router = APIRouter()

TeamManagerDep = Annotated[User, Depends(require_page_access("team"))]


@router.get(
    "",
    response_model=List[TeamMemberRead],
    summary="List Team",
    description="Active members: featured first, then by sort order and join date.",
    response_description="A list of team members.",
)
async def list_team(session: SessionDep) -> List[TeamMemberRead]:
    return [TeamMemberRead.model_validate(m) for m in await TeamService(session).list_active()]


@admin_router.get(
    "",
    response_model=List[TeamMemberRead],
    summary="List All Team Members",
    description="Every member, including inactive ones, in page order.",
    response_description="A list of team members.",
)
async def list_all_members(session: SessionDep, _: TeamManagerDep) -> List[TeamMemberRead]:
    return [TeamMemberRead.model_validate(m) for m in await TeamService(session).list_all()]


@admin_router.post(
    "",
    response_model=TeamMemberRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add Team Member",
    description="Add a member at the end of the page.",
    response_description="The created member.",
)
async def create_member(
    body: TeamMemberCreate, session: SessionDep, user: TeamManagerDep, client: ClientInfoDep
) -> TeamMemberRead:
    """
    Add a team member.

    - **name** / **role** / **year**: Required, surrounding whitespace is trimmed.
    - **featured**: Featured members are listed first.
    """
    member = await TeamService(session, AuditService(session, actor=user, client=client)).create(body)
    return TeamMemberRead.model_validate(member)


@admin_router.put(
    "/reorder",
    response_model=List[TeamMemberRead],
    summary="Reorder Team",
    description="Set the sort order of several members at once.",
    response_description="Every member in the new order.",
    responses={404: {"description": "A listed member does not exist"}},
)
async def reorder_members(
    body: TeamReorder, session: SessionDep, user: TeamManagerDep, client: ClientInfoDep
) -> List[TeamMemberRead]:
    members = await TeamService(session, AuditService(session, actor=user, client=client)).reorder(body)
    return [TeamMemberRead.model_validate(m) for m in members]


@admin_router.patch(
    "/{member_id}",
    response_model=TeamMemberRead,
    summary="Update Team Member",
    description="Change a member; set `active` false to hide them from the public page.",
    response_description="The updated member.",
    responses={404: {"description": "Team member not found"}},
)
async def update_member(
    member_id: int, body: TeamMemberUpdate, session: SessionDep, user: TeamManagerDep, client: ClientInfoDep
) -> TeamMemberRead:
    member = await TeamService(session, AuditService(session, actor=user, client=client)).update(member_id, body)
    return TeamMemberRead.model_validate(member)


@admin_router.delete(
    "/{member_id}",
    response_model=MessageResponse,
    summary="Delete Team Member",
    description="Remove a member.",
    response_description="Confirmation message.",
    responses={404: {"description": "Team member not found"}},
)
async def delete_member(
    member_id: int, session: SessionDep, user: TeamManagerDep, client: ClientInfoDep
) -> MessageResponse:
    await TeamService(session, AuditService(session, actor=user, client=client)).delete(member_id)
    return MessageResponse(message="Team member deleted", id=member_id)
