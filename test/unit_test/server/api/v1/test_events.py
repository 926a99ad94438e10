from datetime import timedelta
from typing import Dict, Optional

import pytest
import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from abg_site.core.database.base import utc_now
from abg_site.core.database.entities.events import Event, EventAttendee
from abg_site.core.database.entities.users import User

# Mark all tests in this module as async
pytestmark = pytest.mark.asyncio

EVENTS = "/api/v1/events"
ADMIN_EVENTS = "/api/v1/admin/events"


async def make_event(session: AsyncSession, **overrides) -> Event:
    values = dict(
        slug="speaker-night",
        title="Speaker Night",
        start_time=utc_now() + timedelta(days=5),
        published=True,
        attendance_confirm_enabled=True,
    )
    values.update(overrides)
    event = Event(**values)
    session.add(event)
    await session.commit()
    await session.refresh(event)
    return event


async def register(client: AsyncClient, event_id: int, email: str, password: Optional[str] = None):
    body: Dict[str, str] = {"name": email.split("@")[0], "email": email}
    if password is not None:
        body["password"] = password
    return await client.post(f"{EVENTS}/{event_id}/attendance", json=body)


@pytest_asyncio.fixture
async def full_event(session: AsyncSession) -> Event:
    """Capacity 2 with a waitlist of up to 2."""
    return await make_event(session, capacity=2, waitlist_enabled=True, waitlist_max_size=2)


class TestPublicEvents:
    async def test_only_published_events_are_listed(self, client: AsyncClient, session):
        await make_event(session)
        await make_event(session, slug="draft", title="Draft", published=False)

        response = await client.get(EVENTS)

        assert response.status_code == 200
        assert [e["slug"] for e in response.json()] == ["speaker-night"]

    async def test_get_by_id_or_slug(self, client: AsyncClient, session):
        event = await make_event(session, attendance_password="secret")

        by_id = await client.get(f"{EVENTS}/{event.id}")
        by_slug = await client.get(f"{EVENTS}/speaker-night")

        assert by_id.json()["id"] == by_slug.json()["id"] == event.id
        assert by_slug.json()["password_protected"] is True
        assert "attendance_password" not in by_slug.json()

    async def test_unpublished_event_is_hidden(self, client: AsyncClient, session):
        event = await make_event(session, published=False)
        assert (await client.get(f"{EVENTS}/{event.id}")).status_code == 404

    async def test_numeric_slug(self, client: AsyncClient, session):
        event = await make_event(session, slug="2026", title="Annual Gala")

        response = await client.get(f"{EVENTS}/2026")

        assert response.status_code == 200
        assert response.json()["id"] == event.id
        assert response.json()["title"] == "Annual Gala"


class TestRegistration:
    async def test_confirmed_registration(self, client: AsyncClient, session):
        event = await make_event(session, capacity=10)

        response = await register(client, event.id, "Ada@umich.edu")

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "confirmed"
        assert data["message"] == "Registration confirmed"
        assert data["waitlist_position"] is None
        assert len(data["check_in_code"]) == 6

        lookup = await client.get(f"{EVENTS}/{event.id}/attendance", params={"email": "ada@umich.edu"})
        assert lookup.status_code == 200
        assert lookup.json()["email"] == "ada@umich.edu"

    async def test_attendance_disabled(self, client: AsyncClient, session):
        event = await make_event(session, attendance_confirm_enabled=False)

        response = await register(client, event.id, "ada@umich.edu")

        assert response.status_code == 400
        assert response.json()["detail"] == "Attendance confirmation is not enabled for this event"

    async def test_password(self, client: AsyncClient, session):
        event = await make_event(session, attendance_password="secret")

        missing = await register(client, event.id, "ada@umich.edu")
        wrong = await register(client, event.id, "ada@umich.edu", password="guess")
        right = await register(client, event.id, "ada@umich.edu", password="secret")

        assert (missing.status_code, missing.json()["detail"]) == (401, "Password is required for this event")
        assert (wrong.status_code, wrong.json()["detail"]) == (401, "Invalid password")
        assert right.status_code == 201

    async def test_campus_email_required(self, client: AsyncClient, session):
        event = await make_event(session)

        response = await register(client, event.id, "ada@gmail.com")

        assert response.status_code == 400
        assert response.json()["detail"] == "Must use an @umich.edu email address"

    async def test_duplicate_registration(self, client: AsyncClient, session):
        event = await make_event(session)
        await register(client, event.id, "ada@umich.edu")

        response = await register(client, event.id, "ADA@umich.edu")

        assert response.status_code == 400
        assert response.json()["detail"] == "Already registered for this event"

    async def test_required_roles(self, client: AsyncClient, session):
        event = await make_event(session, required_roles_any=["GENERAL_MEMBER"])
        session.add(User(email="member@umich.edu", roles=["USER", "GENERAL_MEMBER"]))
        await session.commit()

        outsider = await register(client, event.id, "outsider@umich.edu")
        member = await register(client, event.id, "member@umich.edu")

        assert outsider.status_code == 403
        assert member.status_code == 201

    async def test_full_without_waitlist(self, client: AsyncClient, session):
        event = await make_event(session, capacity=1)
        await register(client, event.id, "a@umich.edu")

        response = await register(client, event.id, "b@umich.edu")

        assert response.status_code == 400
        assert response.json()["detail"] == "Event is full"

    async def test_waitlist_positions_and_limit(self, client: AsyncClient, full_event):
        for email in ("a@umich.edu", "b@umich.edu"):
            assert (await register(client, full_event.id, email)).json()["status"] == "confirmed"

        first = await register(client, full_event.id, "c@umich.edu")
        second = await register(client, full_event.id, "d@umich.edu")
        overflow = await register(client, full_event.id, "e@umich.edu")

        assert first.json()["status"] == "waitlisted"
        assert first.json()["waitlist_position"] == 1
        assert first.json()["message"] == "Event is full. You have been added to the waitlist at position 1."
        assert second.json()["waitlist_position"] == 2
        assert (overflow.status_code, overflow.json()["detail"]) == (400, "Waitlist is also full")

    async def test_waitlist_without_limit_is_unbounded(self, client: AsyncClient, session):
        event = await make_event(session, capacity=1, waitlist_enabled=True)
        for position in range(1, 61):
            session.add(
                EventAttendee(
                    event_id=event.id,
                    name=f"waiting {position}",
                    email=f"w{position}@umich.edu",
                    status="waitlisted",
                    waitlist_position=position,
                    check_in_code=f"W{position:05d}",
                )
            )
        await session.commit()
        await register(client, event.id, "a@umich.edu")

        response = await register(client, event.id, "late@umich.edu")

        assert response.status_code == 201
        assert response.json()["status"] == "waitlisted"
        assert response.json()["waitlist_position"] == 61

    async def test_zero_waitlist_limit_takes_nobody(self, client: AsyncClient, session):
        event = await make_event(session, capacity=1, waitlist_enabled=True, waitlist_max_size=0)
        await register(client, event.id, "a@umich.edu")

        response = await register(client, event.id, "b@umich.edu")

        assert (response.status_code, response.json()["detail"]) == (400, "Waitlist is also full")

    async def test_zero_capacity_is_unlimited(self, client: AsyncClient, session):
        event = await make_event(session, capacity=0)

        statuses = [(await register(client, event.id, f"{name}@umich.edu")).json()["status"] for name in "abcd"]

        assert statuses == ["confirmed"] * 4


class TestCancellation:
    async def test_cancel_confirmed_promotes_head_of_waitlist(self, client: AsyncClient, full_event):
        for email in ("a@umich.edu", "b@umich.edu", "c@umich.edu", "d@umich.edu"):
            await register(client, full_event.id, email)
        head = await client.get(f"{EVENTS}/{full_event.id}/attendance", params={"email": "c@umich.edu"})

        response = await client.post(f"{EVENTS}/{full_event.id}/attendance/cancel", json={"email": "a@umich.edu"})

        assert response.status_code == 200
        assert response.json()["promoted"] == [head.json()["id"]]

        promoted = await client.get(f"{EVENTS}/{full_event.id}/attendance", params={"email": "c@umich.edu"})
        remaining = await client.get(f"{EVENTS}/{full_event.id}/attendance", params={"email": "d@umich.edu"})
        assert promoted.json()["status"] == "confirmed"
        assert promoted.json()["waitlist_position"] is None
        assert remaining.json()["waitlist_position"] == 1

    async def test_cancel_waitlisted_closes_gap(self, client: AsyncClient, session):
        event = await make_event(session, capacity=1, waitlist_enabled=True)
        for email in ("a@umich.edu", "b@umich.edu", "c@umich.edu", "d@umich.edu"):
            await register(client, event.id, email)

        response = await client.post(f"{EVENTS}/{event.id}/attendance/cancel", json={"email": "b@umich.edu"})

        assert response.json()["promoted"] == []
        positions = [
            (await client.get(f"{EVENTS}/{event.id}/attendance", params={"email": e})).json()["waitlist_position"]
            for e in ("c@umich.edu", "d@umich.edu")
        ]
        assert positions == [1, 2]

    async def test_no_auto_promote(self, client: AsyncClient, session):
        event = await make_event(session, capacity=1, waitlist_enabled=True, waitlist_auto_promote=False)
        await register(client, event.id, "a@umich.edu")
        await register(client, event.id, "b@umich.edu")

        response = await client.post(f"{EVENTS}/{event.id}/attendance/cancel", json={"email": "a@umich.edu"})

        assert response.json()["promoted"] == []

    async def test_cancel_unknown_registration(self, client: AsyncClient, session):
        event = await make_event(session)
        response = await client.post(f"{EVENTS}/{event.id}/attendance/cancel", json={"email": "x@umich.edu"})
        assert response.status_code == 404


class TestCheckIn:
    async def test_check_in_once(self, client: AsyncClient, session):
        event = await make_event(session)
        code = (await register(client, event.id, "ada@umich.edu")).json()["check_in_code"]

        first = await client.post(f"{EVENTS}/{event.id}/check-in", json={"code": code.lower()})
        second = await client.post(f"{EVENTS}/{event.id}/check-in", json={"code": code})

        assert first.status_code == 200
        assert first.json()["checked_in_at"] is not None
        assert second.status_code == 400
        assert second.json()["detail"] == "Already checked in"
        assert "checked_in_at" in second.json()

    async def test_unknown_code(self, client: AsyncClient, session):
        event = await make_event(session)
        response = await client.post(f"{EVENTS}/{event.id}/check-in", json={"code": "NOPE00"})
        assert response.status_code == 404


class TestEventAdministration:
    async def test_create_requires_events_page(self, client: AsyncClient, applicant_headers):
        body = {"slug": "kickoff", "title": "Kickoff", "start_time": "2026-11-01T18:00:00Z"}
        response = await client.post(ADMIN_EVENTS, json=body, headers=applicant_headers)
        assert response.status_code == 403

    async def test_create_update_delete(self, client: AsyncClient, admin_headers):
        body = {
            "slug": "kickoff",
            "title": "Kickoff",
            "start_time": "2026-11-01T18:00:00-04:00",
            "capacity": 50,
            "required_roles_any": ["GENERAL_MEMBER"],
        }
        created = await client.post(ADMIN_EVENTS, json=body, headers=admin_headers)
        assert created.status_code == 201
        event = created.json()
        # Offsets are normalised to UTC
        assert event["start_time"] in ("2026-11-01T22:00:00Z", "2026-11-01T22:00:00+00:00")
        assert event["required_roles_any"] == ["GENERAL_MEMBER"]

        duplicate = await client.post(ADMIN_EVENTS, json=body, headers=admin_headers)
        assert duplicate.status_code == 409

        updated = await client.patch(
            f"{ADMIN_EVENTS}/{event['id']}", json={"published": True, "title": "Fall Kickoff"}, headers=admin_headers
        )
        assert updated.json()["title"] == "Fall Kickoff"
        assert updated.json()["capacity"] == 50

        audit = await client.get("/api/v1/audit", params={"action": "event.updated"}, headers=admin_headers)
        assert audit.json()["logs"][0]["meta"]["fields"] == ["published", "title"]

        deleted = await client.delete(f"{ADMIN_EVENTS}/{event['id']}", headers=admin_headers)
        assert deleted.json() == {"message": "Event deleted", "id": event["id"]}
        assert (await client.get(f"{EVENTS}/{event['id']}")).status_code == 404

    async def test_events_page_role_can_manage(self, client: AsyncClient, session, identity):
        session.add(User(email="vpc@umich.edu", roles=["USER", "VP_CONFERENCES"]))
        await session.commit()

        response = await client.get(ADMIN_EVENTS, headers=identity("vpc@umich.edu"))
        assert response.status_code == 200

    async def test_list_attendees_with_counts(self, client: AsyncClient, admin_headers, full_event):
        for email in ("a@umich.edu", "b@umich.edu", "c@umich.edu"):
            await register(client, full_event.id, email)
        code = (await client.get(f"{EVENTS}/{full_event.id}/attendance", params={"email": "a@umich.edu"})).json()[
            "check_in_code"
        ]
        await client.post(f"{EVENTS}/{full_event.id}/check-in", json={"code": code})

        response = await client.get(f"{ADMIN_EVENTS}/{full_event.id}/attendees", headers=admin_headers)
        waitlisted = await client.get(
            f"{ADMIN_EVENTS}/{full_event.id}/attendees",
            params={"attendee_status": "waitlisted"},
            headers=admin_headers,
        )

        assert response.json()["counts"] == {"confirmed": 2, "waitlisted": 1, "checked_in": 1}
        assert [a["email"] for a in waitlisted.json()["attendees"]] == ["c@umich.edu"]


class TestWaitlistAdministration:
    async def _fill(self, client, event):
        for email in ("a@umich.edu", "b@umich.edu", "c@umich.edu", "d@umich.edu"):
            await register(client, event.id, email)

    async def test_promote_at_capacity(self, client: AsyncClient, admin_headers, full_event):
        await self._fill(client, full_event)

        response = await client.post(
            f"{ADMIN_EVENTS}/{full_event.id}/waitlist/promote", json={}, headers=admin_headers
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Event is at capacity"

    async def test_expand_promotes_waitlist(self, client: AsyncClient, admin_headers, full_event):
        await self._fill(client, full_event)

        response = await client.post(
            f"{ADMIN_EVENTS}/{full_event.id}/waitlist/expand", json={"new_capacity": 3}, headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json()["capacity"] == 3
        assert len(response.json()["promoted"]) == 1
        remaining = await client.get(f"{EVENTS}/{full_event.id}/attendance", params={"email": "d@umich.edu"})
        assert remaining.json()["waitlist_position"] == 1

    async def test_expand_cannot_shrink(self, client: AsyncClient, admin_headers, full_event):
        response = await client.post(
            f"{ADMIN_EVENTS}/{full_event.id}/waitlist/expand", json={"new_capacity": 1}, headers=admin_headers
        )
        assert response.status_code == 400

    async def test_manual_promote_specific_attendee(self, client: AsyncClient, session, admin_headers):
        event = await make_event(session, capacity=1, waitlist_enabled=True, waitlist_auto_promote=False)
        await register(client, event.id, "a@umich.edu")
        await register(client, event.id, "b@umich.edu")
        await register(client, event.id, "c@umich.edu")
        await client.post(f"{EVENTS}/{event.id}/attendance/cancel", json={"email": "a@umich.edu"})
        second = (await client.get(f"{EVENTS}/{event.id}/attendance", params={"email": "c@umich.edu"})).json()

        response = await client.post(
            f"{ADMIN_EVENTS}/{event.id}/waitlist/promote", json={"attendee_ids": [second["id"]]}, headers=admin_headers
        )

        assert response.json()["promoted"] == [second["id"]]
        head = await client.get(f"{EVENTS}/{event.id}/attendance", params={"email": "b@umich.edu"})
        assert head.json()["waitlist_position"] == 1

    async def test_nobody_to_promote(self, client: AsyncClient, session, admin_headers):
        event = await make_event(session, capacity=5, waitlist_enabled=True)

        response = await client.post(f"{ADMIN_EVENTS}/{event.id}/waitlist/promote", json={}, headers=admin_headers)

        assert response.json()["detail"] == "No one on the waitlist to promote"

    async def test_remove_from_waitlist(self, client: AsyncClient, admin_headers, full_event):
        await self._fill(client, full_event)
        head = (await client.get(f"{EVENTS}/{full_event.id}/attendance", params={"email": "c@umich.edu"})).json()

        response = await client.delete(f"{ADMIN_EVENTS}/{full_event.id}/waitlist/{head['id']}", headers=admin_headers)
        again = await client.delete(f"{ADMIN_EVENTS}/{full_event.id}/waitlist/{head['id']}", headers=admin_headers)

        assert response.status_code == 200
        assert again.status_code == 404
        moved_up = await client.get(f"{EVENTS}/{full_event.id}/attendance", params={"email": "d@umich.edu"})
        assert moved_up.json()["waitlist_position"] == 1

    async def test_waitlist_page_role_required(self, client: AsyncClient, session, identity, full_event):
        session.add(User(email="vpc@umich.edu", roles=["USER", "VP_CONFERENCES"]))
        await session.commit()

        response = await client.post(
            f"{ADMIN_EVENTS}/{full_event.id}/waitlist/reorder", headers=identity("vpc@umich.edu")
        )
        assert response.status_code == 403

    async def test_reorder(self, client: AsyncClient, admin_headers, full_event):
        await self._fill(client, full_event)

        response = await client.post(f"{ADMIN_EVENTS}/{full_event.id}/waitlist/reorder", headers=admin_headers)

        assert response.status_code == 200
        queue = await client.get(
            f"{ADMIN_EVENTS}/{full_event.id}/attendees",
            params={"attendee_status": "waitlisted"},
            headers=admin_headers,
        )
        assert sorted(a["waitlist_position"] for a in queue.json()["attendees"]) == [1, 2]
