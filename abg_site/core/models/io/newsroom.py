"""
Newsroom I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from abg_site.core.models.domain.enums import PostStatus, PostType

from .common import ReadModel


class PostCreate(BaseModel):
    title: str = Field(min_length=1, max_length=256)
    type: PostType
    description: str = Field(min_length=1)
    body: str = Field(min_length=1)
    status: PostStatus = PostStatus.draft
    thumbnail: Optional[str] = None
    media_embed_link: Optional[str] = None
    featured: bool = False
    tags: List[str] = Field(default_factory=list)
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None


class PostUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=256)
    type: Optional[PostType] = None
    description: Optional[str] = None
    body: Optional[str] = None
    status: Optional[PostStatus] = None
    thumbnail: Optional[str] = None
    media_embed_link: Optional[str] = None
    featured: Optional[bool] = None
    tags: Optional[List[str]] = None
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None


class PostRead(ReadModel):
    id: int
    slug: str
    title: str
    type: str
    status: str
    description: str
    body: str
    thumbnail: Optional[str] = None
    media_embed_link: Optional[str] = None
    author: str
    featured: bool
    tags: List[str] = Field(default_factory=list)
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None
    views: int
    unique_views: int
    date_published: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class PostPage(BaseModel):
    posts: List[PostRead]
    pagination: Pagination
    available_tags: List[str]


class PostViewRecord(BaseModel):
    """A page view reported by the newsroom page."""

    # A fresh id is generated when the page sends none
    session_id: Optional[str] = Field(default=None, max_length=128)
    referrer: Optional[str] = Field(default=None, max_length=1024)
    time_on_page: int = Field(default=0, ge=0)
    scroll_depth: int = Field(default=0, ge=0, le=100)


class PostViewResult(BaseModel):
    views: int
    unique_views: int
    unique: bool
