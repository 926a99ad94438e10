"""
Applicant portal endpoint tests.

Tests cover:
- Active cycle resolution and the portal window
- Drafts, submission checks and withdrawal
- Recruitment event RSVPs and check-in
- Coffee chat and interview booking rules
"""

from datetime import timedelta

import pytest
import pytest_asyncio
from httpx import AsyncClient

from abg_site.core.database.base import utc_now
from abg_site.core.database.entities.applications import Application
from abg_site.core.database.entities.questions import ApplicationQuestions
from abg_site.core.database.entities.recruitment_events import RecruitmentEvent
from abg_site.core.database.entities.slots import Slot
from abg_site.server.core.config import settings

pytestmark = pytest.mark.asyncio

PORTAL = "/api/v1/portal"


@pytest_asyncio.fixture
async def questions(session, active_cycle):
    """An engineering set with a word limit and a shared set with a required resume."""
    session.add(
        ApplicationQuestions(
            cycle_id=active_cycle.id,
            track="engineering",
            fields=[
                {"key": "why_abg", "label": "Why ABG?", "type": "textarea", "required": True, "word_limit": 5},
                {"key": "github", "label": "GitHub", "type": "url"},
            ],
        )
    )
    session.add(
        ApplicationQuestions(
            cycle_id=active_cycle.id,
            track="both",
            fields=[{"key": "resume", "label": "Resume", "type": "file", "required": True}],
        )
    )
    await session.commit()


async def add_application(session, cycle, user, stage="submitted", track="engineering") -> Application:
    application = Application(
        cycle_id=cycle.id, user_id=user.id, user_email=user.email, user_name=user.name, track=track, stage=stage
    )
    session.add(application)
    await session.commit()
    await session.refresh(application)
    return application


async def add_slot(session, cycle, kind="coffee_chat", hours_from_now=48, **overrides) -> Slot:
    start = utc_now() + timedelta(hours=hours_from_now)
    values = dict(cycle_id=cycle.id, kind=kind, start_time=start, end_time=start + timedelta(minutes=30))
    values.update(overrides)
    slot = Slot(**values)
    session.add(slot)
    await session.commit()
    await session.refresh(slot)
    return slot


class TestPortalWindow:
    async def test_no_active_cycle(self, client: AsyncClient, applicant_headers):
        response = await client.get(f"{PORTAL}/dashboard", headers=applicant_headers)

        assert response.status_code == 404
        assert response.json()["upcoming_cycle"] is None

    async def test_requires_identity(self, client: AsyncClient, active_cycle):
        response = await client.get(f"{PORTAL}/dashboard")
        assert response.status_code == 401

    async def test_not_yet_open(self, client: AsyncClient, session, applicant_headers, active_cycle):
        active_cycle.portal_open_at = utc_now() + timedelta(days=2)
        session.add(active_cycle)
        await session.commit()

        response = await client.get(f"{PORTAL}/dashboard", headers=applicant_headers)

        assert response.status_code == 403
        assert response.json()["detail"] == "Portal not yet open"
        assert "opens_at" in response.json()

    async def test_closed(self, client: AsyncClient, session, applicant_headers, active_cycle):
        active_cycle.portal_close_at = utc_now() - timedelta(hours=1)
        session.add(active_cycle)
        await session.commit()

        dashboard = await client.get(f"{PORTAL}/dashboard", headers=applicant_headers)
        draft = await client.put(f"{PORTAL}/application", json={"track": "business"}, headers=applicant_headers)

        assert dashboard.json()["detail"] == "Portal is closed"
        assert draft.status_code == 403

    async def test_window_enforcement_can_be_disabled(
        self, client: AsyncClient, session, applicant_headers, active_cycle, monkeypatch
    ):
        active_cycle.portal_close_at = utc_now() - timedelta(hours=1)
        session.add(active_cycle)
        await session.commit()
        monkeypatch.setattr(settings, "enforce_portal_window", False)

        response = await client.get(f"{PORTAL}/dashboard", headers=applicant_headers)

        assert response.status_code == 200


class TestDashboard:
    async def test_new_applicant(self, client: AsyncClient, applicant_headers, active_cycle, questions):
        response = await client.get(f"{PORTAL}/dashboard", headers=applicant_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["active_cycle"]["slug"] == "fall-2026"
        assert data["application"] is None
        assert {q["track"] for q in data["questions"]} == {"engineering", "both"}
        assert data["round_tracker"]["current_round"] == 1
        assert data["round_tracker"]["status"] == "waiting"
        assert data["round_tracker"]["next_action"]["type"] == "finish_application"

    async def test_interview_slots_follow_stage_and_track(
        self, client: AsyncClient, session, applicant, applicant_headers, active_cycle
    ):
        await add_application(session, active_cycle, applicant, stage="interview_round1")
        chat = await add_slot(session, active_cycle)
        mine = await add_slot(session, active_cycle, kind="interview_round1", for_track="engineering")
        await add_slot(session, active_cycle, kind="interview_round1", for_track="business")
        await add_slot(session, active_cycle, kind="interview_round2")

        response = await client.get(f"{PORTAL}/dashboard", headers=applicant_headers)

        assert {s["id"] for s in response.json()["available_slots"]} == {chat.id, mine.id}

    async def test_upcoming_events_hide_check_in_code(
        self, client: AsyncClient, session, applicant_headers, active_cycle
    ):
        session.add(
            RecruitmentEvent(
                cycle_id=active_cycle.id,
                title="Info Session",
                start_time=utc_now() + timedelta(days=1),
                check_in_enabled=True,
                check_in_code="ABCD12",
            )
        )
        session.add(RecruitmentEvent(cycle_id=active_cycle.id, title="Past", start_time=utc_now() - timedelta(days=1)))
        await session.commit()

        events = (await client.get(f"{PORTAL}/dashboard", headers=applicant_headers)).json()["upcoming_events"]

        assert [e["title"] for e in events] == ["Info Session"]
        assert "check_in_code" not in events[0]
        assert events[0]["has_rsvped"] is False


class TestApplicationForm:
    async def test_questions_for_track(self, client: AsyncClient, applicant_headers, active_cycle, questions):
        response = await client.get(f"{PORTAL}/questions", params={"track": "engineering"}, headers=applicant_headers)

        assert [q["key"] for q in response.json()] == ["why_abg", "github", "resume"]

    async def test_save_draft_keeps_files_when_omitted(self, client: AsyncClient, applicant_headers, active_cycle):
        first = await client.put(
            f"{PORTAL}/application",
            json={"track": "engineering", "answers": {"why_abg": "AI"}, "files": {"resume": "https://cdn/r.pdf"}},
            headers=applicant_headers,
        )
        second = await client.put(
            f"{PORTAL}/application",
            json={"track": "engineering", "answers": {"why_abg": "AI and markets"}},
            headers=applicant_headers,
        )

        assert first.json()["stage"] == "draft"
        assert second.json()["id"] == first.json()["id"]
        assert second.json()["answers"] == {"why_abg": "AI and markets"}
        assert second.json()["files"] == {"resume": "https://cdn/r.pdf"}
        assert second.json()["last_saved_at"] is not None

        mine = await client.get(f"{PORTAL}/application", headers=applicant_headers)
        assert mine.json()["user_email"] == "applicant@umich.edu"

    async def test_no_application_yet(self, client: AsyncClient, applicant_headers, active_cycle):
        assert (await client.get(f"{PORTAL}/application", headers=applicant_headers)).status_code == 404
        assert (await client.post(f"{PORTAL}/application/submit", headers=applicant_headers)).status_code == 404

    async def test_submit_reports_missing_fields(self, client: AsyncClient, applicant_headers, active_cycle, questions):
        await client.put(f"{PORTAL}/application", json={"track": "engineering"}, headers=applicant_headers)

        response = await client.post(f"{PORTAL}/application/submit", headers=applicant_headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "Missing required fields"
        assert response.json()["missing_fields"] == ["Why ABG?", "Resume"]

    async def test_submit_enforces_word_limit(self, client: AsyncClient, applicant_headers, active_cycle, questions):
        await client.put(
            f"{PORTAL}/application",
            json={
                "track": "engineering",
                "answers": {"why_abg": "one two three four five six"},
                "files": {"resume": "https://cdn/r.pdf"},
            },
            headers=applicant_headers,
        )

        response = await client.post(f"{PORTAL}/application/submit", headers=applicant_headers)

        assert response.status_code == 400
        assert response.json()["over_limit_fields"] == ["Why ABG?"]

    async def test_submit_locks_application(self, client: AsyncClient, applicant_headers, active_cycle, questions):
        await client.put(
            f"{PORTAL}/application",
            json={"track": "engineering", "answers": {"why_abg": "I love AI"}, "files": {"resume": "https://cdn/r.pdf"}},
            headers=applicant_headers,
        )

        submitted = await client.post(f"{PORTAL}/application/submit", headers=applicant_headers)
        edit = await client.put(f"{PORTAL}/application", json={"track": "business"}, headers=applicant_headers)
        again = await client.post(f"{PORTAL}/application/submit", headers=applicant_headers)

        assert submitted.status_code == 200
        assert submitted.json()["stage"] == "submitted"
        assert submitted.json()["submitted_at"] is not None
        assert (edit.status_code, edit.json()["detail"]) == (400, "Cannot modify submitted application")
        assert again.json()["detail"] == "Application already submitted"

    async def test_deadline_passed(self, client: AsyncClient, session, applicant_headers, active_cycle):
        active_cycle.application_due_at = utc_now() - timedelta(minutes=1)
        session.add(active_cycle)
        await session.commit()

        response = await client.put(f"{PORTAL}/application", json={"track": "business"}, headers=applicant_headers)

        assert response.status_code == 403
        assert response.json()["detail"] == "Application deadline has passed"

    async def test_withdraw(self, client: AsyncClient, session, applicant, applicant_headers, active_cycle):
        application = await add_application(session, active_cycle, applicant, stage="under_review")

        response = await client.post(f"{PORTAL}/application/withdraw", headers=applicant_headers)

        assert response.json()["id"] == application.id
        assert response.json()["stage"] == "withdrawn"

    async def test_decided_application_cannot_be_withdrawn(
        self, client: AsyncClient, session, applicant, applicant_headers, active_cycle
    ):
        await add_application(session, active_cycle, applicant, stage="accepted")

        response = await client.post(f"{PORTAL}/application/withdraw", headers=applicant_headers)

        assert response.status_code == 400


class TestRsvpAndCheckIn:
    @pytest_asyncio.fixture
    async def info_session(self, session, active_cycle) -> RecruitmentEvent:
        event = RecruitmentEvent(
            cycle_id=active_cycle.id,
            title="Info Session",
            start_time=utc_now() + timedelta(hours=2),
            capacity=1,
            check_in_enabled=True,
            check_in_code="ABCD12",
        )
        session.add(event)
        await session.commit()
        await session.refresh(event)
        return event

    async def test_rsvp_once(self, client: AsyncClient, session, applicant_headers, info_session):
        info_session.capacity = 10
        session.add(info_session)
        await session.commit()

        first = await client.post(f"{PORTAL}/events/{info_session.id}/rsvp", headers=applicant_headers)
        second = await client.post(f"{PORTAL}/events/{info_session.id}/rsvp", headers=applicant_headers)

        assert first.status_code == 201
        assert first.json()["user_email"] == "applicant@umich.edu"
        assert second.json()["detail"] == "Already RSVPed to this event"

    async def test_rsvp_capacity(self, client: AsyncClient, applicant_headers, identity, info_session):
        await client.post(f"{PORTAL}/events/{info_session.id}/rsvp", headers=applicant_headers)

        response = await client.post(f"{PORTAL}/events/{info_session.id}/rsvp", headers=identity("late@umich.edu"))

        assert response.status_code == 400
        assert response.json()["detail"] == "Event is at capacity"

    async def test_rsvp_deadline(self, client: AsyncClient, session, applicant_headers, info_session):
        info_session.rsvp_deadline = utc_now() - timedelta(minutes=5)
        session.add(info_session)
        await session.commit()

        response = await client.post(f"{PORTAL}/events/{info_session.id}/rsvp", headers=applicant_headers)

        assert response.json()["detail"] == "RSVP deadline has passed"

    async def test_cancel_rsvp(self, client: AsyncClient, applicant_headers, info_session):
        await client.post(f"{PORTAL}/events/{info_session.id}/rsvp", headers=applicant_headers)

        cancelled = await client.delete(f"{PORTAL}/events/{info_session.id}/rsvp", headers=applicant_headers)
        missing = await client.delete(f"{PORTAL}/events/{info_session.id}/rsvp", headers=applicant_headers)

        assert cancelled.json()["message"] == "RSVP cancelled"
        assert missing.status_code == 404

    async def test_check_in(self, client: AsyncClient, applicant_headers, info_session):
        url = f"{PORTAL}/events/{info_session.id}/check-in"
        no_rsvp = await client.post(url, json={"code": "ABCD12"}, headers=applicant_headers)
        await client.post(f"{PORTAL}/events/{info_session.id}/rsvp", headers=applicant_headers)

        wrong = await client.post(url, json={"code": "ZZZZ99"}, headers=applicant_headers)
        ok = await client.post(url, json={"code": " abcd12 "}, headers=applicant_headers)
        twice = await client.post(url, json={"code": "ABCD12"}, headers=applicant_headers)

        assert no_rsvp.json()["detail"] == "You must RSVP before checking in"
        assert wrong.json()["detail"] == "Invalid check-in code"
        assert ok.status_code == 200
        assert ok.json()["checked_in_at"] is not None
        assert ok.json()["attended_at"] is not None
        assert twice.status_code == 400
        assert "checked_in_at" in twice.json()

        events = (await client.get(f"{PORTAL}/dashboard", headers=applicant_headers)).json()["upcoming_events"]
        assert events[0]["has_rsvped"] is True
        assert events[0]["checked_in"] is True


class TestBooking:
    async def test_book_coffee_chat(self, client: AsyncClient, session, applicant_headers, active_cycle):
        slot = await add_slot(session, active_cycle, host_name="Grace")

        response = await client.post(
            f"{PORTAL}/slots/{slot.id}/book", json={"notes": "Curious about projects"}, headers=applicant_headers
        )

        assert response.status_code == 201
        booking = response.json()
        assert booking["status"] == "confirmed"
        assert booking["notes"] == "Curious about projects"
        assert booking["slot"]["host_name"] == "Grace"

    async def test_one_booking_per_kind(self, client: AsyncClient, session, applicant_headers, active_cycle):
        first = await add_slot(session, active_cycle)
        second = await add_slot(session, active_cycle, hours_from_now=72)
        booked = await client.post(f"{PORTAL}/slots/{first.id}/book", headers=applicant_headers)

        response = await client.post(f"{PORTAL}/slots/{second.id}/book", headers=applicant_headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "You already have a booking for this type"
        assert response.json()["existing_booking_id"] == booked.json()["id"]

    async def test_full_slot(self, client: AsyncClient, session, applicant_headers, identity, active_cycle):
        slot = await add_slot(session, active_cycle)
        await client.post(f"{PORTAL}/slots/{slot.id}/book", headers=applicant_headers)

        response = await client.post(f"{PORTAL}/slots/{slot.id}/book", headers=identity("other@umich.edu"))
        available = await client.get(
            f"{PORTAL}/slots", params={"kind": "coffee_chat"}, headers=identity("other@umich.edu")
        )

        assert response.json()["detail"] == "Slot is full"
        assert available.json() == []

    async def test_started_or_inactive_slots(self, client: AsyncClient, session, applicant_headers, active_cycle):
        started = await add_slot(session, active_cycle, hours_from_now=-1)
        inactive = await add_slot(session, active_cycle, is_active=False)

        assert (await client.post(f"{PORTAL}/slots/{started.id}/book", headers=applicant_headers)).json()[
            "detail"
        ] == "Slot has already started"
        assert (await client.post(f"{PORTAL}/slots/{inactive.id}/book", headers=applicant_headers)).json()[
            "detail"
        ] == "Slot is not available"

    async def test_interview_requires_application(self, client: AsyncClient, session, applicant_headers, active_cycle):
        slot = await add_slot(session, active_cycle, kind="interview_round1")

        response = await client.post(f"{PORTAL}/slots/{slot.id}/book", headers=applicant_headers)

        assert response.json()["detail"] == "You must submit an application first"

    async def test_interview_requires_matching_stage(
        self, client: AsyncClient, session, applicant, applicant_headers, active_cycle
    ):
        await add_application(session, active_cycle, applicant, stage="submitted")
        slot = await add_slot(session, active_cycle, kind="interview_round1")

        response = await client.post(f"{PORTAL}/slots/{slot.id}/book", headers=applicant_headers)

        assert response.status_code == 400
        assert response.json()["current_stage"] == "submitted"
        assert response.json()["required_stage"] == "interview_round1"

    async def test_coffee_chats_close_once_interviews_begin(
        self, client: AsyncClient, session, applicant, applicant_headers, active_cycle
    ):
        await add_application(session, active_cycle, applicant, stage="interview_round1")
        slot = await add_slot(session, active_cycle)

        response = await client.post(f"{PORTAL}/slots/{slot.id}/book", headers=applicant_headers)

        assert response.json()["detail"] == "Coffee chats are only available before interviews begin"

    async def test_track_reserved_slot(self, client: AsyncClient, session, applicant, applicant_headers, active_cycle):
        await add_application(session, active_cycle, applicant, stage="interview_round1", track="business")
        slot = await add_slot(session, active_cycle, kind="interview_round1", for_track="engineering")

        response = await client.post(f"{PORTAL}/slots/{slot.id}/book", headers=applicant_headers)

        assert response.status_code == 403
        assert response.json()["your_track"] == "business"

    async def test_cancel_booking(self, client: AsyncClient, session, applicant_headers, identity, active_cycle):
        slot = await add_slot(session, active_cycle)
        booking = (await client.post(f"{PORTAL}/slots/{slot.id}/book", headers=applicant_headers)).json()
        url = f"{PORTAL}/bookings/{booking['id']}/cancel"

        stranger = await client.post(url, headers=identity("other@umich.edu"))
        mine = await client.post(url, headers=applicant_headers)
        again = await client.post(url, headers=applicant_headers)

        assert stranger.status_code == 403
        assert mine.json()["status"] == "cancelled"
        assert again.json()["detail"] == "Booking already cancelled"

        # The freed seat can be booked again
        rebook = await client.post(f"{PORTAL}/slots/{slot.id}/book", headers=identity("other@umich.edu"))
        assert rebook.status_code == 201

    async def test_cannot_cancel_once_slot_started(self, client: AsyncClient, session, applicant_headers, active_cycle):
        slot = await add_slot(session, active_cycle)
        booking = (await client.post(f"{PORTAL}/slots/{slot.id}/book", headers=applicant_headers)).json()
        slot.start_time = utc_now() - timedelta(minutes=5)
        session.add(slot)
        await session.commit()

        response = await client.post(f"{PORTAL}/bookings/{booking['id']}/cancel", headers=applicant_headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "Cannot cancel past bookings"
