"""Test configuration for database unit tests.

This module provides common fixtures for testing the database layer with
in-memory SQLite.
"""

from __future__ import annotations

from datetime import timedelta
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlmodel.pool import StaticPool

from abg_site.core.database import create_all, create_sessionmaker
from abg_site.core.database.base import utc_now


@pytest_asyncio.fixture(scope="function")
async def in_memory_engine() -> AsyncGenerator:
    """Create in-memory SQLite engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(engine)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def in_memory_session(in_memory_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create in-memory SQLite session for testing."""
    async with create_sessionmaker(in_memory_engine)() as session:
        yield session


@pytest.fixture(scope="function")
def sample_event_data() -> dict:
    """Sample public event data for testing."""
    start = utc_now() + timedelta(days=7)
    return {
        "slug": "ai-speaker-night",
        "title": "AI Speaker Night",
        "description": "Industry speakers on applied AI",
        "location": "Ross School of Business",
        "start_time": start,
        "end_time": start + timedelta(hours=2),
        "published": True,
        "attendance_confirm_enabled": True,
        "capacity": 2,
        "waitlist_enabled": True,
        "waitlist_max_size": 3,
    }


@pytest.fixture(scope="function")
def sample_cycle_data() -> dict:
    """Sample recruitment cycle data for testing."""
    now = utc_now()
    return {
        "slug": "winter-2027",
        "name": "Winter 2027",
        "portal_open_at": now + timedelta(days=60),
        "portal_close_at": now + timedelta(days=90),
        "application_due_at": now + timedelta(days=75),
    }
