"""
Newsletter subscriber repository.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.newsletter import NewsletterSubscriber
from .base import SQLModelRepository


class NewsletterSubscriberRepository(SQLModelRepository[NewsletterSubscriber]):
    """Repository for newsletter subscribers."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, NewsletterSubscriber)

    async def get_by_email(self, email: str) -> Optional[NewsletterSubscriber]:
        stmt = select(NewsletterSubscriber).where(func.lower(NewsletterSubscriber.email) == email.lower())
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_active(self) -> List[NewsletterSubscriber]:
        """Active subscribers, newest first."""
        stmt = (
            select(NewsletterSubscriber)
            .where(NewsletterSubscriber.is_active == True)  # noqa: E712
            .order_by(NewsletterSubscriber.subscribed_at.desc(), NewsletterSubscriber.id.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
