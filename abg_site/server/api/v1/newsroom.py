"""
Newsroom Endpoints.

Public readers list and open published posts and report page views; the
newsroom page manages posts of every status through ``admin_router``.
"""

from datetime import datetime
from typing import Annotated, Literal, Optional

from fastapi import APIRouter, Depends, Query, status

from abg_site.core.database.base import as_utc
from abg_site.core.database.entities.users import User
from abg_site.core.database.repositories.newsroom import PostFilter
from abg_site.core.models.domain.enums import PostStatus, PostType
from abg_site.core.models.io.common import MessageResponse
from abg_site.core.models.io.newsroom import PostCreate, PostPage, PostRead, PostUpdate, PostViewRecord, PostViewResult
from abg_site.server.services.audit import AuditService
from abg_site.server.services.deps import ClientInfoDep, SessionDep, require_page_access
from abg_site.server.services.newsroom import NewsroomService

router = APIRouter()
admin_router = APIRouter()

NewsroomEditorDep = Annotated[User, Depends(require_page_access("newsroom"))]

SortField = Literal["date_published", "created_at", "updated_at", "title", "views"]


@router.get(
    "",
    response_model=PostPage,
    summary="List Posts",
    description="Published posts with filters and pagination, plus the tags in use.",
    response_description="A page of posts.",
)
async def list_posts(
    session: SessionDep,
    type: Optional[PostType] = None,
    tag: Optional[str] = None,
    search: Optional[str] = None,
    featured: Optional[bool] = None,
    author: Optional[str] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 12,
    sort_by: SortField = "date_published",
    sort_order: Literal["asc", "desc"] = "desc",
) -> PostPage:
    """
    List published posts.

    - **type**: blog, podcast, video, member-spotlight or project-update.
    - **tag**: Only posts carrying this tag.
    - **search**: Case-insensitive match on title, description or body.
    - **date_from** / **date_to**: Publish date range.
    """
    criteria = PostFilter(
        status=PostStatus.published.value,
        type=type.value if type else None,
        tag=tag,
        search=search,
        featured=True if featured else None,
        author=author,
        date_from=as_utc(date_from) if date_from else None,
        date_to=as_utc(date_to) if date_to else None,
    )
    return await NewsroomService(session).search(
        criteria, page, limit, sort_by, sort_order == "asc", tags_status=PostStatus.published.value
    )


@router.get(
    "/{slug}",
    response_model=PostRead,
    summary="Get Post",
    description="One published post.",
    response_description="The post.",
    responses={404: {"description": "Post not found or not published"}},
)
async def get_post(slug: str, session: SessionDep) -> PostRead:
    return PostRead.model_validate(await NewsroomService(session).get_published(slug))


@router.post(
    "/{slug}/views",
    response_model=PostViewResult,
    summary="Record View",
    description="Count a page view of a published post.",
    response_description="Updated view counters.",
    responses={404: {"description": "Post not found or not published"}},
)
async def record_view(slug: str, body: PostViewRecord, session: SessionDep, client: ClientInfoDep) -> PostViewResult:
    return await NewsroomService(session).record_view(slug, body, client)


@admin_router.get(
    "",
    response_model=PostPage,
    summary="List All Posts",
    description="Posts of any status with filters and pagination, newest first by default.",
    response_description="A page of posts.",
)
async def list_all_posts(
    session: SessionDep,
    _: NewsroomEditorDep,
    post_status: Annotated[Optional[PostStatus], Query(alias="status")] = None,
    type: Optional[PostType] = None,
    tag: Optional[str] = None,
    search: Optional[str] = None,
    featured: Optional[bool] = None,
    author: Optional[str] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 50,
    sort_by: SortField = "created_at",
    sort_order: Literal["asc", "desc"] = "desc",
) -> PostPage:
    criteria = PostFilter(
        status=post_status.value if post_status else None,
        type=type.value if type else None,
        tag=tag,
        search=search,
        featured=True if featured else None,
        author=author,
    )
    return await NewsroomService(session).search(criteria, page, limit, sort_by, sort_order == "asc")


@admin_router.get(
    "/{post_id}",
    response_model=PostRead,
    summary="Get Any Post",
    description="One post of any status.",
    response_description="The post.",
    responses={404: {"description": "Post not found"}},
)
async def get_any_post(post_id: int, session: SessionDep, _: NewsroomEditorDep) -> PostRead:
    return PostRead.model_validate(await NewsroomService(session).get(post_id))


@admin_router.post(
    "",
    response_model=PostRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Post",
    description="Write a post. The signed-in editor becomes its author.",
    response_description="The created post.",
)
async def create_post(body: PostCreate, session: SessionDep, user: NewsroomEditorDep, client: ClientInfoDep) -> PostRead:
    """
    Create a post.

    - **title**: The slug is derived from it, with a numeric suffix when taken.
    - **status**: draft, published or archived; publishing sets the publish date.
    - **seo_title** / **seo_description**: Default to the title and description.
    """
    post = await NewsroomService(session, AuditService(session, actor=user, client=client)).create(body, author=user)
    return PostRead.model_validate(post)


@admin_router.patch(
    "/{post_id}",
    response_model=PostRead,
    summary="Update Post",
    description="Change a post. A new title gives it a new slug.",
    response_description="The updated post.",
    responses={404: {"description": "Post not found"}},
)
async def update_post(
    post_id: int, body: PostUpdate, session: SessionDep, user: NewsroomEditorDep, client: ClientInfoDep
) -> PostRead:
    post = await NewsroomService(session, AuditService(session, actor=user, client=client)).update(post_id, body)
    return PostRead.model_validate(post)


@admin_router.delete(
    "/{post_id}",
    response_model=MessageResponse,
    summary="Delete Post",
    description="Delete a post and its recorded views.",
    response_description="Confirmation message.",
    responses={404: {"description": "Post not found"}},
)
async def delete_post(post_id: int, session: SessionDep, user: NewsroomEditorDep, client: ClientInfoDep) -> MessageResponse:
    await NewsroomService(session, AuditService(session, actor=user, client=client)).delete(post_id)
    return MessageResponse(message="Post deleted", id=post_id)
