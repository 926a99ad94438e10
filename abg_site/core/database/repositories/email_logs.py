"""
Email log repository.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.email_logs import EmailLog
from .base import AsyncQueryBuilder, SQLModelRepository


class EmailLogRepository(SQLModelRepository[EmailLog]):
    """Repository for outbound email records."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, EmailLog)

    async def list_recent(
        self,
        cycle_id: Optional[int] = None,
        application_id: Optional[int] = None,
        limit: Optional[int] = 100,
        offset: Optional[int] = None,
    ) -> List[EmailLog]:
        stmt = AsyncQueryBuilder.apply_filters(
            select(EmailLog), EmailLog, {"cycle_id": cycle_id, "application_id": application_id}
        )
        stmt = AsyncQueryBuilder.apply_pagination(stmt.order_by(EmailLog.sent_at.desc()), limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
