"""Unit tests for EventRepository and EventAttendeeRepository."""

from __future__ import annotations

from datetime import timedelta

import pytest
import pytest_asyncio

from abg_site.core.database.entities.events import Event, EventAttendee
from abg_site.core.database.repositories.events import EventAttendeeRepository, EventRepository
from abg_site.core.models.domain.enums import AttendeeStatus

pytestmark = pytest.mark.asyncio


@pytest_asyncio.fixture
async def event(in_memory_session, sample_event_data) -> Event:
    return await EventRepository(in_memory_session).create(Event(**sample_event_data))


def attendee(event_id: int, email: str, status: AttendeeStatus, position=None, code="CODE00") -> EventAttendee:
    return EventAttendee(
        event_id=event_id,
        name=email.split("@")[0],
        email=email,
        status=status.value,
        waitlist_position=position,
        check_in_code=code,
    )


class TestEventRepository:
    async def test_get_by_slug(self, in_memory_session, event):
        repo = EventRepository(in_memory_session)

        assert (await repo.get_by_slug("ai-speaker-night")).id == event.id
        assert await repo.get_by_slug("missing") is None

    async def test_list_published_orders_by_start(self, in_memory_session, event, sample_event_data):
        repo = EventRepository(in_memory_session)
        earlier = dict(sample_event_data, slug="kickoff", start_time=event.start_time - timedelta(days=3))
        draft = dict(sample_event_data, slug="draft", published=False)
        await repo.create(Event(**earlier))
        await repo.create(Event(**draft))

        published = await repo.list_published()
        assert [e.slug for e in published] == ["kickoff", "ai-speaker-night"]

    async def test_update_touches_updated_at(self, in_memory_session, event):
        before = event.updated_at
        event.title = "Renamed"
        updated = await EventRepository(in_memory_session).update(event)
        assert updated.title == "Renamed"
        assert updated.updated_at >= before

    async def test_delete(self, in_memory_session, event):
        repo = EventRepository(in_memory_session)
        assert await repo.delete(event.id) is True
        assert await repo.delete(event.id) is False


class TestEventAttendeeRepository:
    async def test_get_registration_ignores_cancelled_and_case(self, in_memory_session, event):
        repo = EventAttendeeRepository(in_memory_session)
        await repo.create(attendee(event.id, "ada@umich.edu", AttendeeStatus.cancelled))
        assert await repo.get_registration(event.id, "ada@umich.edu") is None

        active = await repo.create(attendee(event.id, "Ada@umich.edu", AttendeeStatus.confirmed))
        found = await repo.get_registration(event.id, "ADA@UMICH.EDU")
        assert found.id == active.id

    async def test_get_by_code_is_case_insensitive(self, in_memory_session, event):
        repo = EventAttendeeRepository(in_memory_session)
        created = await repo.create(attendee(event.id, "ada@umich.edu", AttendeeStatus.confirmed, code="XK42P9"))

        assert (await repo.get_by_code(event.id, "xk42p9")).id == created.id
        assert await repo.get_by_code(event.id, "ZZZZZZ") is None

    async def test_counts(self, in_memory_session, event):
        repo = EventAttendeeRepository(in_memory_session)
        await repo.create(attendee(event.id, "a@umich.edu", AttendeeStatus.confirmed))
        await repo.create(attendee(event.id, "b@umich.edu", AttendeeStatus.confirmed))
        await repo.create(attendee(event.id, "c@umich.edu", AttendeeStatus.waitlisted, position=1))

        assert await repo.count_by_status(event.id, AttendeeStatus.confirmed) == 2
        assert await repo.counts(event.id) == {"confirmed": 2, "waitlisted": 1}

    async def test_list_waitlisted_in_queue_order(self, in_memory_session, event):
        repo = EventAttendeeRepository(in_memory_session)
        await repo.create(attendee(event.id, "second@umich.edu", AttendeeStatus.waitlisted, position=2))
        await repo.create(attendee(event.id, "first@umich.edu", AttendeeStatus.waitlisted, position=1))
        await repo.create(attendee(event.id, "in@umich.edu", AttendeeStatus.confirmed))

        queue = await repo.list_waitlisted(event.id)
        assert [a.email for a in queue] == ["first@umich.edu", "second@umich.edu"]

    async def test_list_for_event_with_status(self, in_memory_session, event):
        repo = EventAttendeeRepository(in_memory_session)
        await repo.create(attendee(event.id, "a@umich.edu", AttendeeStatus.confirmed))
        await repo.create(attendee(event.id, "b@umich.edu", AttendeeStatus.cancelled))

        assert len(await repo.list_for_event(event.id)) == 2
        only_cancelled = await repo.list_for_event(event.id, AttendeeStatus.cancelled)
        assert [a.email for a in only_cancelled] == ["b@umich.edu"]
