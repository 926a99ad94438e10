"""
Newsroom post and view repositories.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import delete, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.newsroom import NewsroomPost, NewsroomView
from .base import AsyncQueryBuilder, SQLModelRepository


@dataclass
class PostFilter:
    """Listing criteria; unset fields do not narrow the result."""

    status: Optional[str] = None
    type: Optional[str] = None
    tag: Optional[str] = None
    search: Optional[str] = None
    featured: Optional[bool] = None
    author: Optional[str] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None


SORTABLE_FIELDS = ("date_published", "created_at", "updated_at", "title", "views")


class NewsroomPostRepository(SQLModelRepository[NewsroomPost]):
    """Repository for newsroom posts."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, NewsroomPost)

    async def get_by_slug(self, slug: str) -> Optional[NewsroomPost]:
        result = await self.session.execute(select(NewsroomPost).where(NewsroomPost.slug == slug))
        return result.scalar_one_or_none()

    async def slug_taken(self, slug: str, exclude_id: Optional[int] = None) -> bool:
        stmt = select(NewsroomPost.id).where(NewsroomPost.slug == slug)
        if exclude_id is not None:
            stmt = stmt.where(NewsroomPost.id != exclude_id)
        result = await self.session.execute(stmt)
        return result.first() is not None

    async def search(
        self,
        criteria: PostFilter,
        sort_by: str = "date_published",
        ascending: bool = False,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> Tuple[List[NewsroomPost], int]:
        """
        Filtered, sorted page of posts.

        Tag matching happens in Python since tags are a JSON list.

        Returns:
            ``(posts on the page, total matching posts)``
        """
        stmt = select(NewsroomPost)
        stmt = AsyncQueryBuilder.apply_filters(
            stmt, NewsroomPost, {"status": criteria.status, "type": criteria.type, "featured": criteria.featured}
        )
        if criteria.search:
            pattern = f"%{criteria.search.lower()}%"
            stmt = stmt.where(
                or_(
                    func.lower(NewsroomPost.title).like(pattern),
                    func.lower(NewsroomPost.description).like(pattern),
                    func.lower(NewsroomPost.body).like(pattern),
                )
            )
        if criteria.author:
            stmt = stmt.where(func.lower(NewsroomPost.author).like(f"%{criteria.author.lower()}%"))
        if criteria.date_from:
            stmt = stmt.where(NewsroomPost.date_published >= criteria.date_from)
        if criteria.date_to:
            stmt = stmt.where(NewsroomPost.date_published <= criteria.date_to)

        column = getattr(NewsroomPost, sort_by if sort_by in SORTABLE_FIELDS else "date_published")
        stmt = stmt.order_by(column.asc() if ascending else column.desc(), NewsroomPost.id.desc())
        result = await self.session.execute(stmt)
        posts = list(result.scalars().all())
        if criteria.tag:
            posts = [p for p in posts if criteria.tag in (p.tags or [])]

        total = len(posts)
        start = offset or 0
        end = start + limit if limit is not None else None
        return posts[start:end], total

    async def available_tags(self, status: Optional[str] = None) -> List[str]:
        stmt = select(NewsroomPost.tags)
        if status:
            stmt = stmt.where(NewsroomPost.status == status)
        result = await self.session.execute(stmt)
        return sorted({tag for tags in result.scalars().all() for tag in (tags or [])})


class NewsroomViewRepository(SQLModelRepository[NewsroomView]):
    """Repository for recorded post views."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, NewsroomView)

    async def seen_since(self, post_id: int, session_id: str, since: datetime) -> bool:
        stmt = select(NewsroomView.id).where(
            NewsroomView.post_id == post_id,
            NewsroomView.session_id == session_id,
            NewsroomView.viewed_at >= since,
        )
        result = await self.session.execute(stmt)
        return result.first() is not None

    async def delete_for_post(self, post_id: int) -> int:
        result = await self.session.execute(delete(NewsroomView).where(NewsroomView.post_id == post_id))
        return result.rowcount or 0
