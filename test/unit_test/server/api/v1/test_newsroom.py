from datetime import timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from abg_site.core.database.base import utc_now
from abg_site.core.database.entities.newsroom import NewsroomPost, NewsroomView

# Mark all tests in this module as async
pytestmark = pytest.mark.asyncio

NEWSROOM = "/api/v1/newsroom"
ADMIN_NEWSROOM = "/api/v1/admin/newsroom"


async def make_post(session: AsyncSession, slug: str, **overrides) -> NewsroomPost:
    values = dict(
        slug=slug,
        title=slug.replace("-", " ").title(),
        type="blog",
        status="published",
        description="Short summary",
        body="Long body",
        author="Admin",
        date_published=utc_now(),
    )
    values.update(overrides)
    post = NewsroomPost(**values)
    session.add(post)
    await session.commit()
    await session.refresh(post)
    return post


class TestPublicNewsroom:
    async def test_only_published_posts(self, client: AsyncClient, session):
        await make_post(session, "live", tags=["events"])
        await make_post(session, "draft", status="draft", date_published=None, tags=["secret"])

        response = await client.get(NEWSROOM)

        assert response.status_code == 200
        data = response.json()
        assert [p["slug"] for p in data["posts"]] == ["live"]
        assert data["available_tags"] == ["events"]
        assert data["pagination"] == {"page": 1, "limit": 12, "total": 1, "pages": 1}

    async def test_newest_first_with_pages(self, client: AsyncClient, session):
        now = utc_now()
        for day in range(3):
            await make_post(session, f"post-{day}", date_published=now - timedelta(days=day))

        first = await client.get(NEWSROOM, params={"limit": 2})
        second = await client.get(NEWSROOM, params={"limit": 2, "page": 2})

        assert [p["slug"] for p in first.json()["posts"]] == ["post-0", "post-1"]
        assert [p["slug"] for p in second.json()["posts"]] == ["post-2"]
        assert second.json()["pagination"]["pages"] == 2

    async def test_filter_by_tag_type_and_search(self, client: AsyncClient, session):
        await make_post(session, "fintech-recap", tags=["defi"], body="Notes on stablecoins")
        await make_post(session, "pod-1", type="podcast", tags=["defi", "audio"])
        await make_post(session, "other", tags=["social"])

        by_tag = await client.get(NEWSROOM, params={"tag": "defi"})
        by_type = await client.get(NEWSROOM, params={"type": "podcast"})
        by_search = await client.get(NEWSROOM, params={"search": "STABLECOIN"})

        assert {p["slug"] for p in by_tag.json()["posts"]} == {"fintech-recap", "pod-1"}
        assert by_tag.json()["pagination"]["total"] == 2
        assert [p["slug"] for p in by_type.json()["posts"]] == ["pod-1"]
        assert [p["slug"] for p in by_search.json()["posts"]] == ["fintech-recap"]

    async def test_draft_is_not_found(self, client: AsyncClient, session):
        await make_post(session, "draft", status="draft")
        assert (await client.get(f"{NEWSROOM}/draft")).status_code == 404

    async def test_views_unique_per_session(self, client: AsyncClient, session):
        await make_post(session, "live")

        first = await client.post(f"{NEWSROOM}/live/views", json={"session_id": "s1", "scroll_depth": 80})
        again = await client.post(f"{NEWSROOM}/live/views", json={"session_id": "s1"})
        other = await client.post(f"{NEWSROOM}/live/views", json={"session_id": "s2"})

        assert first.json() == {"views": 1, "unique_views": 1, "unique": True}
        assert again.json() == {"views": 2, "unique_views": 1, "unique": False}
        assert other.json() == {"views": 3, "unique_views": 2, "unique": True}

    async def test_old_view_does_not_block_unique(self, client: AsyncClient, session):
        post = await make_post(session, "live")
        session.add(NewsroomView(post_id=post.id, session_id="s1", viewed_at=utc_now() - timedelta(hours=25)))
        await session.commit()

        response = await client.post(f"{NEWSROOM}/live/views", json={"session_id": "s1"})

        assert response.json()["unique"] is True

    async def test_view_without_session_id(self, client: AsyncClient, session):
        await make_post(session, "live")

        response = await client.post(f"{NEWSROOM}/live/views", json={})

        assert response.status_code == 200
        assert response.json()["unique"] is True


class TestNewsroomAdmin:
    async def test_create_draft(self, client: AsyncClient, admin_headers):
        body = {"title": "Hello World", "type": "blog", "description": "Intro", "body": "Text"}

        response = await client.post(ADMIN_NEWSROOM, json=body, headers=admin_headers)

        assert response.status_code == 201
        data = response.json()
        assert (data["slug"], data["status"], data["author"]) == ("hello-world", "draft", "Admin")
        assert data["date_published"] is None
        assert (data["seo_title"], data["seo_description"]) == ("Hello World", "Intro")

    async def test_duplicate_title_gets_suffix(self, client: AsyncClient, session, admin_headers):
        await make_post(session, "hello-world")
        body = {"title": "Hello, World!", "type": "video", "description": "Intro", "body": "Text"}

        response = await client.post(ADMIN_NEWSROOM, json=body, headers=admin_headers)

        assert response.json()["slug"] == "hello-world-1"

    async def test_publish_sets_date_once(self, client: AsyncClient, session, admin_headers):
        post = await make_post(session, "draft", status="draft", date_published=None)

        published = await client.patch(
            f"{ADMIN_NEWSROOM}/{post.id}", json={"status": "published"}, headers=admin_headers
        )
        first_date = published.json()["date_published"]
        retitled = await client.patch(f"{ADMIN_NEWSROOM}/{post.id}", json={"title": "New Name"}, headers=admin_headers)

        assert first_date is not None
        assert retitled.json()["date_published"] == first_date
        assert retitled.json()["slug"] == "new-name"

    async def test_admin_list_filters_status(self, client: AsyncClient, session, admin_headers):
        await make_post(session, "live")
        await make_post(session, "draft", status="draft")

        everything = await client.get(ADMIN_NEWSROOM, headers=admin_headers)
        drafts = await client.get(ADMIN_NEWSROOM, params={"status": "draft"}, headers=admin_headers)

        assert everything.json()["pagination"]["total"] == 2
        assert [p["slug"] for p in drafts.json()["posts"]] == ["draft"]

    async def test_delete_removes_views(self, client: AsyncClient, session, admin_headers):
        post = await make_post(session, "live")
        await client.post(f"{NEWSROOM}/live/views", json={"session_id": "s1"})

        response = await client.delete(f"{ADMIN_NEWSROOM}/{post.id}", headers=admin_headers)

        assert response.json()["message"] == "Post deleted"
        views = (await session.execute(select(NewsroomView))).scalars().all()
        assert views == []

    async def test_requires_newsroom_page(self, client: AsyncClient, applicant_headers):
        response = await client.get(ADMIN_NEWSROOM, headers=applicant_headers)
        assert response.status_code == 403
