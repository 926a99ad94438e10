"""
Request Dependencies.

Provides the database session and the authenticated user to API endpoints.

Sign-in happens upstream; the identity provider forwards the signed-in
user's email in ``X-User-Email`` (and display name in ``X-User-Name``).
"""

from dataclasses import dataclass
from typing import Annotated, Callable, Optional

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from abg_site.core.database import get_session
from abg_site.core.database.entities.users import User
from abg_site.core.database.repositories.users import UserRepository
from abg_site.core.logging_config import get_logger
from abg_site.core.models.domain.permissions import can_access_page, is_admin
from abg_site.server.core import constant
from abg_site.server.errors import ForbiddenError, UnauthorizedError

logger = get_logger(__name__)

SessionDep = Annotated[AsyncSession, Depends(get_session)]


@dataclass(frozen=True)
class ClientInfo:
    """Caller network details recorded in audit entries."""

    ip: Optional[str]
    user_agent: Optional[str]


def get_client_info(request: Request) -> ClientInfo:
    forwarded = request.headers.get("x-forwarded-for")
    ip = forwarded.split(",")[0].strip() if forwarded else (request.client.host if request.client else None)
    return ClientInfo(ip=ip, user_agent=request.headers.get("user-agent"))


async def get_current_user(
    session: SessionDep,
    x_user_email: Annotated[Optional[str], Header(alias=constant.USER_EMAIL_HEADER)] = None,
    x_user_name: Annotated[Optional[str], Header(alias=constant.USER_NAME_HEADER)] = None,
) -> User:
    """
    Resolve the signed-in user, creating the record on first sight.

    Raises:
        UnauthorizedError: when the identity header is missing or blank.
    """
    if not x_user_email or "@" not in x_user_email:
        raise UnauthorizedError("Unauthorized")
    return await UserRepository(session).get_or_create(x_user_email.strip(), x_user_name)


CurrentUserDep = Annotated[User, Depends(get_current_user)]


async def get_optional_user(
    session: SessionDep,
    x_user_email: Annotated[Optional[str], Header(alias=constant.USER_EMAIL_HEADER)] = None,
    x_user_name: Annotated[Optional[str], Header(alias=constant.USER_NAME_HEADER)] = None,
) -> Optional[User]:
    """The signed-in user on endpoints that also serve anonymous visitors."""
    if not x_user_email or "@" not in x_user_email:
        return None
    return await UserRepository(session).get_or_create(x_user_email.strip(), x_user_name)


OptionalUserDep = Annotated[Optional[User], Depends(get_optional_user)]


async def require_admin(user: CurrentUserDep) -> User:
    if not is_admin(user.roles):
        logger.info(f"Admin access denied for {user.email}")
        raise ForbiddenError("Admin access required")
    return user


AdminUserDep = Annotated[User, Depends(require_admin)]


def require_page_access(page: str) -> Callable:
    """Build a dependency that admits users whose roles unlock ``page``."""

    async def _check(user: CurrentUserDep) -> User:
        if not can_access_page(user.roles, page):
            logger.info(f"Page access to '{page}' denied for {user.email}")
            raise ForbiddenError(f"Access to '{page}' is not permitted for your roles")
        return user

    return _check


ClientInfoDep = Annotated[ClientInfo, Depends(get_client_info)]
