import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from abg_site.core.database.entities.site_settings import SiteSetting
from abg_site.server.services.site_settings import DEFAULT_MAINTENANCE_MESSAGE

# Mark all tests in this module as async
pytestmark = pytest.mark.asyncio

SETTINGS = "/api/v1/settings"
ADMIN_SETTINGS = "/api/v1/admin/settings"
EVENTS = "/api/v1/events"


async def set_values(session: AsyncSession, **values: str) -> None:
    for key, value in values.items():
        session.add(SiteSetting(key=key, value=value))
    await session.commit()


class TestSettingsAdmin:
    async def test_list_seeds_maintenance_defaults(self, client: AsyncClient, admin_headers):
        response = await client.get(ADMIN_SETTINGS, headers=admin_headers)

        assert response.status_code == 200
        settings = {s["key"]: s for s in response.json()}
        assert set(settings) == {"maintenance_exempt_paths", "maintenance_message", "maintenance_mode"}
        assert settings["maintenance_mode"]["value"] == "false"
        assert settings["maintenance_mode"]["type"] == "BOOLEAN"

    async def test_seeding_keeps_existing_values(self, client: AsyncClient, session, admin_headers):
        await set_values(session, maintenance_mode="true")

        response = await client.get(ADMIN_SETTINGS, headers=admin_headers)

        values = {s["key"]: s["value"] for s in response.json()}
        assert values["maintenance_mode"] == "true"

    async def test_put_creates_then_updates(self, client: AsyncClient, admin_headers):
        created = await client.put(
            ADMIN_SETTINGS, json={"key": "hero_title", "value": "Build on chain"}, headers=admin_headers
        )
        updated = await client.put(
            ADMIN_SETTINGS, json={"key": "hero_title", "value": "Learn", "type": "JSON"}, headers=admin_headers
        )

        assert created.json()["type"] == "TEXT"
        assert (updated.json()["value"], updated.json()["type"]) == ("Learn", "TEXT")

    async def test_requires_settings_page(self, client: AsyncClient, applicant_headers):
        response = await client.put(ADMIN_SETTINGS, json={"key": "k", "value": "v"}, headers=applicant_headers)
        assert response.status_code == 403


class TestPublicSettings:
    async def test_filter_by_key(self, client: AsyncClient, session):
        await set_values(session, hero_title="Hi", footer="Bye", accent="blue")

        response = await client.get(SETTINGS, params=[("key", "hero_title"), ("key", "accent")])

        assert sorted(s["key"] for s in response.json()) == ["accent", "hero_title"]

    async def test_maintenance_status_defaults(self, client: AsyncClient):
        response = await client.get(f"{SETTINGS}/maintenance")

        assert response.status_code == 200
        assert response.json() == {
            "enabled": False,
            "message": DEFAULT_MAINTENANCE_MESSAGE,
            "exempt_paths": ["/admin", "/api/v1/admin", "/auth"],
        }


class TestMaintenanceMode:
    async def test_public_pages_unavailable(self, client: AsyncClient, session):
        await set_values(session, maintenance_mode="true", maintenance_message="Back at noon")

        response = await client.get(EVENTS)

        assert response.status_code == 503
        assert response.json() == {"detail": "Back at noon", "maintenance": True}

    async def test_off_by_default(self, client: AsyncClient):
        assert (await client.get(EVENTS)).status_code == 200

    async def test_admins_pass(self, client: AsyncClient, session, admin_headers):
        await set_values(session, maintenance_mode="TRUE")

        response = await client.get(EVENTS, headers=admin_headers)

        assert response.status_code == 200

    async def test_signed_in_non_admin_blocked(self, client: AsyncClient, session, applicant_headers):
        await set_values(session, maintenance_mode="true")

        response = await client.get("/api/v1/projects", headers=applicant_headers)

        assert response.status_code == 503
        assert response.json()["detail"] == DEFAULT_MAINTENANCE_MESSAGE

    async def test_exempt_paths(self, client: AsyncClient, session):
        await set_values(session, maintenance_mode="true", maintenance_exempt_paths="/api/v1/newsroom, /auth")

        exempt = await client.get("/api/v1/newsroom")
        blocked = await client.get("/api/v1/team")
        status = await client.get(f"{SETTINGS}/maintenance")

        assert exempt.status_code == 200
        assert blocked.status_code == 503
        assert status.json()["enabled"] is True
        assert status.json()["exempt_paths"] == ["/api/v1/newsroom", "/auth"]
