"""
User role management.
"""

from __future__ import annotations

from typing import Iterable, List

from sqlalchemy.ext.asyncio import AsyncSession

from abg_site.core.database.entities.users import User
from abg_site.core.database.repositories.users import UserRepository
from abg_site.core.logging_config import get_logger
from abg_site.core.models.domain.enums import AuditAction, UserRole, value_of
from abg_site.server.errors import NotFoundError, ValidationFailedError

from .audit import AuditService

logger = get_logger(__name__)


class UserService:
    def __init__(self, session: AsyncSession, audit: AuditService):
        self.session = session
        self.users = UserRepository(session)
        self.audit = audit

    async def would_remove_last_admin(self, email: str, new_roles: Iterable[str]) -> bool:
        """True when ``new_roles`` drops ADMIN and no other user holds it."""
        if UserRole.ADMIN.value in {value_of(r) for r in new_roles}:
            return False
        return await self.users.count_admins_excluding(email) == 0

    async def update_roles(self, user_id: int, roles: List[UserRole]) -> User:
        """
        Replace a user's roles.

        Raises:
            NotFoundError: unknown user.
            ValidationFailedError: the change would leave the site without an admin.
        """
        user = await self.users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User", user_id)

        # Deduplicate while keeping the given order
        new_roles = list(dict.fromkeys(value_of(r) for r in roles))
        if await self.would_remove_last_admin(user.email, new_roles):
            raise ValidationFailedError("Cannot remove the last admin")

        old_roles = list(user.roles or [])
        user.roles = new_roles
        user = await self.users.update(user)
        logger.info(f"Roles of {user.email} changed from {old_roles} to {new_roles}")
        await self.audit.log(
            AuditAction.user_role_changed,
            target_type="user",
            target_id=user.id,
            meta={"email": user.email, "old_roles": old_roles, "new_roles": new_roles},
        )
        return user
