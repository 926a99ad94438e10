"""Unit tests for server request dependencies.

Tests verify identity resolution from the upstream headers, the admin and
page-access guards, and client info extraction.
"""

from unittest.mock import AsyncMock, Mock

import pytest
from fastapi import Request

from abg_site.core.database import get_session
from abg_site.core.database.entities.users import User
from abg_site.server.errors import ForbiddenError, UnauthorizedError
from abg_site.server.services.deps import (
    AdminUserDep,
    CurrentUserDep,
    SessionDep,
    get_client_info,
    get_current_user,
    require_admin,
    require_page_access,
)


class TestAnnotatedDeps:
    """Test the Annotated dependency aliases."""

    def test_session_dep_uses_get_session(self):
        assert SessionDep.__metadata__[0].dependency == get_session

    def test_current_user_dep_uses_get_current_user(self):
        assert CurrentUserDep.__metadata__[0].dependency == get_current_user

    def test_admin_dep_uses_require_admin(self):
        assert AdminUserDep.__metadata__[0].dependency == require_admin


class TestGetCurrentUser:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("email", [None, "", "not-an-email"])
    async def test_rejects_missing_identity(self, email):
        with pytest.raises(UnauthorizedError):
            await get_current_user(AsyncMock(), x_user_email=email)

    @pytest.mark.asyncio
    async def test_creates_user_on_first_request(self, session):
        user = await get_current_user(session, x_user_email=" New@UMich.edu ", x_user_name="New Person")

        assert user.id is not None
        assert user.email == "new@umich.edu"
        assert user.name == "New Person"
        assert user.roles == ["USER"]

    @pytest.mark.asyncio
    async def test_returns_existing_user(self, session, admin_user):
        user = await get_current_user(session, x_user_email=admin_user.email)
        assert user.id == admin_user.id
        assert "ADMIN" in user.roles


class TestRoleGuards:
    @pytest.mark.asyncio
    async def test_require_admin(self):
        admin = User(email="a@umich.edu", roles=["USER", "ADMIN"])
        assert await require_admin(admin) is admin

        with pytest.raises(ForbiddenError):
            await require_admin(User(email="b@umich.edu", roles=["USER", "PRESIDENT"]))

    @pytest.mark.asyncio
    async def test_page_access_by_role(self):
        check = require_page_access("waitlists")
        recruiter = User(email="vp@umich.edu", roles=["USER", "VP_RECRUITMENT"])
        marketer = User(email="mk@umich.edu", roles=["USER", "VP_MARKETING"])

        assert await check(recruiter) is recruiter
        with pytest.raises(ForbiddenError) as exc_info:
            await check(marketer)
        assert "waitlists" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_admin_opens_every_page(self):
        admin = User(email="a@umich.edu", roles=["ADMIN"])
        assert await require_page_access("companies")(admin) is admin


class TestClientInfo:
    def _request(self, headers, host="10.0.0.5"):
        request = Mock(spec=Request)
        request.headers = headers
        request.client = Mock(host=host) if host else None
        return request

    def test_prefers_forwarded_for(self):
        info = get_client_info(self._request({"x-forwarded-for": "1.2.3.4, 10.0.0.1", "user-agent": "pytest"}))
        assert info.ip == "1.2.3.4"
        assert info.user_agent == "pytest"

    def test_falls_back_to_peer(self):
        assert get_client_info(self._request({})).ip == "10.0.0.5"

    def test_no_client(self):
        assert get_client_info(self._request({}, host=None)).ip is None
