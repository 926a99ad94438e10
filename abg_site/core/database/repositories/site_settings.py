"""
Site setting repository.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.site_settings import SiteSetting
from .base import SQLModelRepository


class SiteSettingRepository(SQLModelRepository[SiteSetting]):
    """Repository for key/value site settings."""

    order_by = "key"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, SiteSetting)

    async def get_by_key(self, key: str) -> Optional[SiteSetting]:
        result = await self.session.execute(select(SiteSetting).where(SiteSetting.key == key))
        return result.scalar_one_or_none()

    async def list_by_keys(self, keys: Iterable[str]) -> List[SiteSetting]:
        stmt = select(SiteSetting).where(SiteSetting.key.in_(list(keys))).order_by(SiteSetting.key)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
