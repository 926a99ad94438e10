from datetime import timedelta
from typing import AsyncGenerator, Callable, Dict
from unittest.mock import patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel.pool import StaticPool

from abg_site.core.database import create_all
from abg_site.core.database.base import utc_now
from abg_site.core.database.entities.cycles import RecruitmentCycle
from abg_site.core.database.entities.users import User
from abg_site.server.core import constant

# Use in-memory SQLite for testing
# Note: We use check_same_thread=False for SQLite with async
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

ADMIN_EMAIL = "admin@umich.edu"
APPLICANT_EMAIL = "applicant@umich.edu"


def identity(email: str, name: str = "") -> Dict[str, str]:
    """Headers the upstream identity provider would attach for ``email``."""
    headers = {constant.USER_EMAIL_HEADER: email}
    if name:
        headers[constant.USER_NAME_HEADER] = name
    return headers


@pytest_asyncio.fixture
async def test_engine():
    """A fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(engine)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(name="session")
async def session_fixture(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a new session for each test."""
    async_session_maker = async_sessionmaker(test_engine, expire_on_commit=False)

    async with async_session_maker() as session:
        yield session


@pytest_asyncio.fixture(name="client")
async def client_fixture(session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client with mocked lifespan and overridden dependencies."""
    from abg_site.core.database import get_session
    from abg_site.server.main import app

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        yield session

    app.dependency_overrides[get_session] = get_session_override

    # Mock the lifespan to prevent database initialization during tests
    async def mock_lifespan(app):
        yield

    with patch("abg_site.server.main.lifespan", mock_lifespan):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
            yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def admin_user(session: AsyncSession) -> User:
    user = User(email=ADMIN_EMAIL, name="Admin", roles=["USER", "ADMIN"])
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


@pytest_asyncio.fixture
async def applicant(session: AsyncSession) -> User:
    user = User(email=APPLICANT_EMAIL, name="Ada Applicant", roles=["USER"])
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


@pytest.fixture(name="identity")
def identity_fixture() -> Callable[..., Dict[str, str]]:
    """The ``identity`` header builder, for tests that sign in as ad hoc users."""
    return identity


@pytest.fixture
def admin_headers(admin_user: User) -> Dict[str, str]:
    return identity(admin_user.email)


@pytest.fixture
def applicant_headers(applicant: User) -> Dict[str, str]:
    return identity(applicant.email)


@pytest_asyncio.fixture
async def active_cycle(session: AsyncSession) -> RecruitmentCycle:
    """An active cycle whose portal is open and whose deadline is a week away."""
    now = utc_now()
    cycle = RecruitmentCycle(
        slug="fall-2026",
        name="Fall 2026",
        is_active=True,
        portal_open_at=now - timedelta(days=1),
        portal_close_at=now + timedelta(days=30),
        application_due_at=now + timedelta(days=7),
    )
    session.add(cycle)
    await session.commit()
    await session.refresh(cycle)
    return cycle
