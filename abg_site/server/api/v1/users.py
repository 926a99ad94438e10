"""
User and Role Management Endpoints.

Admins list site users and change their roles. Any signed-in user can read
their own profile together with the admin pages their roles unlock.
"""

from typing import List, Optional

from fastapi import APIRouter

from abg_site.core.database.repositories.users import UserRepository
from abg_site.core.models.domain.enums import UserRole
from abg_site.core.models.domain.permissions import accessible_pages
from abg_site.core.models.io.users import CurrentUserRead, UserRead, UserRolesUpdate
from abg_site.server.services.audit import AdminAuditDep
from abg_site.server.services.deps import AdminUserDep, CurrentUserDep, SessionDep
from abg_site.server.services.users import UserService

router = APIRouter()


@router.get(
    "",
    response_model=List[UserRead],
    summary="List Users",
    description="List site users, optionally only those holding a given role.",
    response_description="A list of users.",
    responses={403: {"description": "Admin access required"}},
)
async def list_users(session: SessionDep, _: AdminUserDep, role: Optional[UserRole] = None) -> List[UserRead]:
    """
    List users.

    - **role**: Only return users holding this role.
    """
    repo = UserRepository(session)
    users = await repo.list_with_role(role.value) if role else await repo.list()
    return [UserRead.model_validate(u) for u in users]


@router.get(
    "/me",
    response_model=CurrentUserRead,
    summary="Get Current User",
    description="Return the signed-in user and the admin pages their roles give access to.",
    response_description="The current user.",
    responses={401: {"description": "Not signed in"}},
)
async def get_me(user: CurrentUserDep) -> CurrentUserRead:
    view = CurrentUserRead.model_validate(user)
    view.accessible_pages = accessible_pages(user.roles)
    return view


@router.patch(
    "/{user_id}/roles",
    response_model=UserRead,
    summary="Update User Roles",
    description="Replace the role list of a user. Removing the last admin is refused.",
    response_description="The updated user.",
    responses={
        400: {"description": "The change would remove the last admin"},
        404: {"description": "User not found"},
    },
)
async def update_roles(user_id: int, body: UserRolesUpdate, session: SessionDep, audit: AdminAuditDep) -> UserRead:
    """
    Update user roles.

    - **user_id**: The user to change.
    - **roles**: The complete new role list.
    """
    user = await UserService(session, audit).update_roles(user_id, body.roles)
    return UserRead.model_validate(user)
