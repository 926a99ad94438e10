"""
User and audit log repositories.

Data access for site users (lookup by email, role queries) and for the
paginated, filterable audit log.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.users import AuditLog, User
from .base import AsyncQueryBuilder, SQLModelRepository


class UserRepository(SQLModelRepository[User]):
    """Repository for site users."""

    order_by = "email"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, User)

    async def get_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(func.lower(User.email) == email.lower())
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_or_create(self, email: str, name: Optional[str] = None) -> User:
        """Return the user for ``email``, creating it with the USER role on first sight."""
        user = await self.get_by_email(email)
        if user:
            if name and not user.name:
                user.name = name
                user = await self.update(user)
            return user
        return await self.create(User(email=email.lower(), name=name, roles=["USER"]))

    async def list_with_role(self, role: str) -> List[User]:
        # Roles live in a JSON array, so membership is checked in Python to stay portable.
        users = await self.list()
        return [u for u in users if role in (u.roles or [])]

    async def count_admins_excluding(self, email: str) -> int:
        admins = await self.list_with_role("ADMIN")
        return sum(1 for u in admins if u.email.lower() != email.lower())


class AuditLogRepository(SQLModelRepository[AuditLog]):
    """Repository for audit log entries."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, AuditLog)

    async def search(
        self,
        *,
        user_id: Optional[int] = None,
        action: Optional[str] = None,
        target_type: Optional[str] = None,
        target_id: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[AuditLog], int]:
        """Filter audit entries newest first.

        Returns:
            The requested page of entries and the total number of matches.
        """
        filters = {
            "user_id": user_id,
            "action": action,
            "target_type": target_type,
            "target_id": target_id,
        }
        stmt = AsyncQueryBuilder.apply_filters(select(AuditLog), AuditLog, filters)
        count_stmt = AsyncQueryBuilder.apply_filters(
            select(func.count()).select_from(AuditLog), AuditLog, filters
        )
        if start is not None:
            stmt = stmt.where(AuditLog.timestamp >= start)
            count_stmt = count_stmt.where(AuditLog.timestamp >= start)
        if end is not None:
            stmt = stmt.where(AuditLog.timestamp <= end)
            count_stmt = count_stmt.where(AuditLog.timestamp <= end)

        total = int((await self.session.execute(count_stmt)).scalar_one())
        stmt = AsyncQueryBuilder.apply_pagination(
            stmt.order_by(AuditLog.timestamp.desc(), AuditLog.id.desc()), limit, offset
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total
