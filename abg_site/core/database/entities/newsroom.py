"""
Newsroom post and page-view entities.

Posts move from draft to published to archived; only published posts are
public. Each public view is recorded so the post's view and unique-view
counters can be kept.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlmodel import JSON, Field

from ..base import Base, TZDateTime, utc_now


class NewsroomPost(Base, table=True):
    """
    Table: newsroom_posts
    """

    __tablename__ = "newsroom_posts"

    id: Optional[int] = Field(default=None, primary_key=True)
    slug: str = Field(max_length=256, unique=True, index=True)
    title: str = Field(max_length=256)
    type: str = Field(max_length=32, index=True)
    status: str = Field(default="draft", max_length=16, index=True)
    description: str
    body: str
    thumbnail: Optional[str] = Field(default=None, max_length=1024)
    media_embed_link: Optional[str] = Field(default=None, max_length=1024)
    author: str = Field(max_length=256)
    author_email: Optional[str] = Field(default=None, max_length=320)
    featured: bool = Field(default=False)
    tags: List[str] = Field(default_factory=list, sa_type=JSON)
    seo_title: Optional[str] = Field(default=None, max_length=256)
    seo_description: Optional[str] = Field(default=None)
    views: int = Field(default=0)
    unique_views: int = Field(default=0)

    date_published: Optional[datetime] = Field(default=None, sa_type=TZDateTime)
    created_at: datetime = Field(default_factory=utc_now, sa_type=TZDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=TZDateTime)


class NewsroomView(Base, table=True):
    """
    Table: newsroom_views
    """

    __tablename__ = "newsroom_views"

    id: Optional[int] = Field(default=None, primary_key=True)
    post_id: int = Field(foreign_key="newsroom_posts.id", index=True)
    session_id: str = Field(max_length=128, index=True)
    referrer: Optional[str] = Field(default=None, max_length=1024)
    time_on_page: int = Field(default=0)
    scroll_depth: int = Field(default=0)
    ip: Optional[str] = Field(default=None, max_length=64)
    user_agent: Optional[str] = Field(default=None, max_length=512)
    viewed_at: datetime = Field(default_factory=utc_now, sa_type=TZDateTime)
