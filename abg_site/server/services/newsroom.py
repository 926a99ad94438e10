"""
Newsroom service.

Slugs are derived from titles and de-duplicated with a numeric suffix. A post
gets its publish date the first time it is published. Page views are counted
on every report; a view is unique when the same browser session has not
viewed the post in the last 24 hours.
"""

from __future__ import annotations

import math
import uuid
from datetime import timedelta
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from abg_site.core.database.base import utc_now
from abg_site.core.database.entities.newsroom import NewsroomPost, NewsroomView
from abg_site.core.database.entities.users import User
from abg_site.core.database.repositories.newsroom import (
    NewsroomPostRepository,
    NewsroomViewRepository,
    PostFilter,
)
from abg_site.core.logging_config import get_logger
from abg_site.core.models.domain.enums import AuditAction, PostStatus, value_of
from abg_site.core.models.io.newsroom import (
    Pagination,
    PostCreate,
    PostPage,
    PostRead,
    PostUpdate,
    PostViewRecord,
    PostViewResult,
)
from abg_site.server.errors import NotFoundError

from .audit import AuditService
from .codes import unique_slug
from .deps import ClientInfo

logger = get_logger(__name__)

UNIQUE_VIEW_WINDOW = timedelta(hours=24)


class NewsroomService:
    def __init__(self, session: AsyncSession, audit: Optional[AuditService] = None):
        self.session = session
        self.posts = NewsroomPostRepository(session)
        self.views = NewsroomViewRepository(session)
        self.audit = audit or AuditService(session)

    async def get(self, post_id: int) -> NewsroomPost:
        post = await self.posts.get_by_id(post_id)
        if not post:
            raise NotFoundError("Post", post_id)
        return post

    async def get_published(self, slug: str) -> NewsroomPost:
        post = await self.posts.get_by_slug(slug)
        if not post or post.status != PostStatus.published.value:
            raise NotFoundError("Post", slug)
        return post

    async def search(
        self,
        criteria: PostFilter,
        page: int = 1,
        limit: int = 12,
        sort_by: str = "date_published",
        ascending: bool = False,
        tags_status: Optional[str] = None,
    ) -> PostPage:
        """
        One page of posts with pagination details and the tags in use.

        ``tags_status`` narrows which posts contribute to ``available_tags``.
        """
        posts, total = await self.posts.search(
            criteria, sort_by=sort_by, ascending=ascending, limit=limit, offset=(page - 1) * limit
        )
        return PostPage(
            posts=[PostRead.model_validate(p) for p in posts],
            pagination=Pagination(page=page, limit=limit, total=total, pages=math.ceil(total / limit)),
            available_tags=await self.posts.available_tags(tags_status),
        )

    async def create(self, data: PostCreate, author: User) -> NewsroomPost:
        status = value_of(data.status)
        post = NewsroomPost(
            **data.model_dump(exclude={"type", "status", "seo_title", "seo_description"}),
            slug=await unique_slug(data.title, self.posts.slug_taken),
            type=value_of(data.type),
            status=status,
            author=author.name or "Admin",
            author_email=author.email,
            seo_title=data.seo_title or data.title,
            seo_description=data.seo_description or data.description,
            date_published=utc_now() if status == PostStatus.published.value else None,
        )
        post = await self.posts.create(post)
        await self.audit.log(
            AuditAction.content_created, target_type="newsroom_post", target_id=post.id, meta={"slug": post.slug}
        )
        logger.info(f"Created newsroom post {post.slug} ({post.status})")
        return post

    async def update(self, post_id: int, data: PostUpdate) -> NewsroomPost:
        post = await self.get(post_id)
        changes = data.model_dump(exclude_unset=True)
        for key in ("type", "status"):
            if changes.get(key) is not None:
                changes[key] = value_of(changes[key])

        if changes.get("title") and changes["title"] != post.title:

            async def taken(slug: str) -> bool:
                return await self.posts.slug_taken(slug, exclude_id=post.id)

            changes["slug"] = await unique_slug(changes["title"], taken)
        if changes.get("status") == PostStatus.published.value and post.status != PostStatus.published.value:
            changes["date_published"] = utc_now()

        for key, value in changes.items():
            setattr(post, key, value)
        post = await self.posts.update(post)
        await self.audit.log(
            AuditAction.content_updated, target_type="newsroom_post", target_id=post.id, meta={"fields": sorted(changes)}
        )
        return post

    async def delete(self, post_id: int) -> None:
        post = await self.get(post_id)
        await self.views.delete_for_post(post.id)
        await self.posts.delete(post.id)
        await self.audit.log(
            AuditAction.content_deleted, target_type="newsroom_post", target_id=post_id, meta={"slug": post.slug}
        )

    async def record_view(self, slug: str, report: PostViewRecord, client: Optional[ClientInfo] = None) -> PostViewResult:
        post = await self.get_published(slug)
        session_id = report.session_id or uuid.uuid4().hex
        now = utc_now()
        unique = not await self.views.seen_since(post.id, session_id, now - UNIQUE_VIEW_WINDOW)

        self.session.add(
            NewsroomView(
                post_id=post.id,
                session_id=session_id,
                referrer=report.referrer,
                time_on_page=report.time_on_page,
                scroll_depth=report.scroll_depth,
                ip=client.ip if client else None,
                user_agent=client.user_agent if client else None,
                viewed_at=now,
            )
        )
        post.views += 1
        if unique:
            post.unique_views += 1
        self.session.add(post)
        await self.session.commit()
        return PostViewResult(views=post.views, unique_views=post.unique_views, unique=unique)
