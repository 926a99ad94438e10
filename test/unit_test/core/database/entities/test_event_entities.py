"""Unit tests for Event and EventAttendee entities."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from abg_site.core.database.entities.events import Event, EventAttendee


class TestEventEntity:
    def test_defaults(self, sample_event_data):
        event = Event(slug="x", title="X", start_time=sample_event_data["start_time"])

        assert event.published is False
        assert event.attendance_confirm_enabled is False
        assert event.capacity is None
        assert event.waitlist_enabled is False
        assert event.waitlist_auto_promote is True
        assert event.required_roles_any == []
        assert event.created_at is not None

    @pytest.mark.asyncio
    async def test_persist_and_reload(self, in_memory_session, sample_event_data):
        event = Event(**sample_event_data, required_roles_any=["GENERAL_MEMBER"])
        in_memory_session.add(event)
        await in_memory_session.commit()

        result = await in_memory_session.execute(select(Event).where(Event.slug == "ai-speaker-night"))
        loaded = result.scalar_one()
        assert loaded.id is not None
        assert loaded.capacity == 2
        assert loaded.required_roles_any == ["GENERAL_MEMBER"]

    @pytest.mark.asyncio
    async def test_slug_is_unique(self, in_memory_session, sample_event_data):
        in_memory_session.add(Event(**sample_event_data))
        await in_memory_session.commit()

        in_memory_session.add(Event(**sample_event_data))
        with pytest.raises(IntegrityError):
            await in_memory_session.commit()


class TestEventAttendeeEntity:
    def test_defaults(self):
        attendee = EventAttendee(event_id=1, name="Ada", email="ada@umich.edu", check_in_code="ABC123")

        assert attendee.status == "confirmed"
        assert attendee.waitlist_position is None
        assert attendee.checked_in_at is None
        assert attendee.registered_at is not None
