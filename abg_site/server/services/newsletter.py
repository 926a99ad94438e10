"""
Newsletter subscription service.
"""

from __future__ import annotations

from typing import List, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from abg_site.core.database.base import utc_now
from abg_site.core.database.entities.newsletter import NewsletterSubscriber
from abg_site.core.database.repositories.newsletter import NewsletterSubscriberRepository
from abg_site.core.logging_config import get_logger
from abg_site.core.models.io.newsletter import SubscribeRequest
from abg_site.server.errors import NotFoundError

logger = get_logger(__name__)


class NewsletterService:
    def __init__(self, session: AsyncSession):
        self.subscribers = NewsletterSubscriberRepository(session)

    async def subscribe(self, data: SubscribeRequest) -> Tuple[NewsletterSubscriber, bool, str]:
        """
        Subscribe an email, reactivating a previous subscription if any.

        Returns:
            ``(subscriber, created, message)``; ``created`` is False for an
            existing row.
        """
        email = data.email.strip().lower()
        existing = await self.subscribers.get_by_email(email)
        if existing and existing.is_active:
            return existing, False, "Email is already subscribed"
        if existing:
            existing.is_active = True
            existing.subscribed_at = utc_now()
            existing.unsubscribed_at = None
            if data.name:
                existing.name = data.name
            subscriber = await self.subscribers.update(existing)
            logger.info(f"Reactivated newsletter subscription for {email}")
            return subscriber, False, "Subscription reactivated"

        subscriber = await self.subscribers.create(
            NewsletterSubscriber(email=email, name=data.name, source=data.source)
        )
        logger.info(f"New newsletter subscriber {email} from {data.source}")
        return subscriber, True, "Successfully subscribed"

    async def unsubscribe(self, email: str) -> NewsletterSubscriber:
        subscriber = await self.subscribers.get_by_email(email.strip())
        if not subscriber:
            raise NotFoundError("Subscriber", email)
        subscriber.is_active = False
        subscriber.unsubscribed_at = utc_now()
        return await self.subscribers.update(subscriber)

    async def list_active(self) -> List[NewsletterSubscriber]:
        return await self.subscribers.list_active()
