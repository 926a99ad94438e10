from datetime import timedelta

import pytest
from httpx import AsyncClient

from abg_site.core.database.base import utc_now
from abg_site.core.database.entities.users import User

pytestmark = pytest.mark.asyncio

SLOTS = "/api/v1/slots"
RECRUITMENT_EVENTS = "/api/v1/recruitment-events"
PORTAL = "/api/v1/portal"


def slot_body(kind: str = "coffee_chat", hours: int = 48, **extra) -> dict:
    start = utc_now() + timedelta(hours=hours)
    body = {
        "kind": kind,
        "start_time": start.isoformat(),
        "end_time": (start + timedelta(minutes=30)).isoformat(),
        "host_name": "Grace",
        "location": "Ross 2240",
    }
    body.update(extra)
    return body


class TestSlotAdministration:
    async def test_interviews_page_required(self, client: AsyncClient, session, identity, active_cycle):
        session.add(User(email="mk@umich.edu", roles=["USER", "VP_MARKETING"]))
        await session.commit()

        response = await client.post(
            SLOTS, params={"cycle_id": active_cycle.id}, json=slot_body(), headers=identity("mk@umich.edu")
        )

        assert response.status_code == 403

    async def test_create_and_list_with_counts(self, client: AsyncClient, admin_headers, applicant_headers, active_cycle):
        created = await client.post(
            SLOTS, params={"cycle_id": active_cycle.id}, json=slot_body(max_bookings=3), headers=admin_headers
        )
        await client.post(
            SLOTS, params={"cycle_id": active_cycle.id}, json=slot_body("interview_round1"), headers=admin_headers
        )
        await client.post(f"{PORTAL}/slots/{created.json()['id']}/book", headers=applicant_headers)

        chats = await client.get(SLOTS, params={"cycle_id": active_cycle.id, "kind": "coffee_chat"}, headers=admin_headers)

        assert created.status_code == 201
        assert [(s["id"], s["booked_count"]) for s in chats.json()] == [(created.json()["id"], 1)]

    async def test_end_before_start(self, client: AsyncClient, admin_headers, active_cycle):
        body = slot_body()
        body["end_time"], body["start_time"] = body["start_time"], body["end_time"]

        response = await client.post(SLOTS, params={"cycle_id": active_cycle.id}, json=body, headers=admin_headers)

        assert response.status_code == 422

    async def test_update(self, client: AsyncClient, admin_headers, active_cycle):
        slot = (await client.post(SLOTS, params={"cycle_id": active_cycle.id}, json=slot_body(), headers=admin_headers)).json()

        moved = await client.patch(
            f"{SLOTS}/{slot['id']}", json={"location": "Zoom", "for_track": "business"}, headers=admin_headers
        )
        inverted = await client.patch(
            f"{SLOTS}/{slot['id']}", json={"end_time": (utc_now() - timedelta(days=1)).isoformat()}, headers=admin_headers
        )

        assert moved.json()["location"] == "Zoom"
        assert moved.json()["for_track"] == "business"
        assert inverted.status_code == 400

    async def test_delete_refused_while_booked(
        self, client: AsyncClient, admin_headers, applicant_headers, active_cycle
    ):
        slot = (await client.post(SLOTS, params={"cycle_id": active_cycle.id}, json=slot_body(), headers=admin_headers)).json()
        booking = (await client.post(f"{PORTAL}/slots/{slot['id']}/book", headers=applicant_headers)).json()

        refused = await client.delete(f"{SLOTS}/{slot['id']}", headers=admin_headers)
        await client.patch(f"{SLOTS}/bookings/{booking['id']}", json={"status": "cancelled"}, headers=admin_headers)
        deleted = await client.delete(f"{SLOTS}/{slot['id']}", headers=admin_headers)

        assert refused.status_code == 400
        assert deleted.json()["message"] == "Slot deleted"

    async def test_bookings_and_status(self, client: AsyncClient, admin_headers, applicant_headers, active_cycle):
        slot = (await client.post(SLOTS, params={"cycle_id": active_cycle.id}, json=slot_body(), headers=admin_headers)).json()
        booking = (await client.post(f"{PORTAL}/slots/{slot['id']}/book", headers=applicant_headers)).json()

        marked = await client.patch(
            f"{SLOTS}/bookings/{booking['id']}", json={"status": "no_show", "notes": "Did not join"}, headers=admin_headers
        )
        no_shows = await client.get(
            f"{SLOTS}/bookings",
            params={"cycle_id": active_cycle.id, "booking_status": "no_show"},
            headers=admin_headers,
        )

        assert marked.json()["status"] == "no_show"
        assert marked.json()["notes"] == "Did not join"
        assert [b["id"] for b in no_shows.json()] == [booking["id"]]
        assert no_shows.json()[0]["slot"]["host_name"] == "Grace"


class TestRecruitmentEventAdministration:
    def _event(self, **extra) -> dict:
        body = {"title": "Info Session", "start_time": (utc_now() + timedelta(days=2)).isoformat()}
        body.update(extra)
        return body

    async def test_check_in_code_generated(self, client: AsyncClient, admin_headers, active_cycle):
        response = await client.post(
            RECRUITMENT_EVENTS,
            params={"cycle_id": active_cycle.id},
            json=self._event(check_in_enabled=True),
            headers=admin_headers,
        )

        assert response.status_code == 201
        assert len(response.json()["check_in_code"]) == 6

    async def test_given_code_is_uppercased(self, client: AsyncClient, admin_headers, active_cycle):
        response = await client.post(
            RECRUITMENT_EVENTS,
            params={"cycle_id": active_cycle.id},
            json=self._event(check_in_enabled=True, check_in_code="social"),
            headers=admin_headers,
        )

        assert response.json()["check_in_code"] == "SOCIAL"

    async def test_rsvps_and_attendance(self, client: AsyncClient, admin_headers, applicant_headers, active_cycle):
        event = (
            await client.post(
                RECRUITMENT_EVENTS, params={"cycle_id": active_cycle.id}, json=self._event(), headers=admin_headers
            )
        ).json()
        await client.post(f"{PORTAL}/events/{event['id']}/rsvp", headers=applicant_headers)

        rsvps = (await client.get(f"{RECRUITMENT_EVENTS}/{event['id']}/rsvps", headers=admin_headers)).json()
        attended = await client.post(f"{RECRUITMENT_EVENTS}/rsvps/{rsvps[0]['id']}/attendance", headers=admin_headers)
        cleared = await client.post(
            f"{RECRUITMENT_EVENTS}/rsvps/{rsvps[0]['id']}/attendance", params={"attended": False}, headers=admin_headers
        )

        assert [r["user_email"] for r in rsvps] == ["applicant@umich.edu"]
        assert attended.json()["attended_at"] is not None
        assert cleared.json()["attended_at"] is None

    async def test_rsvp_disabled(self, client: AsyncClient, admin_headers, applicant_headers, active_cycle):
        event = (
            await client.post(
                RECRUITMENT_EVENTS,
                params={"cycle_id": active_cycle.id},
                json=self._event(rsvp_enabled=False),
                headers=admin_headers,
            )
        ).json()

        response = await client.post(f"{PORTAL}/events/{event['id']}/rsvp", headers=applicant_headers)

        assert response.json()["detail"] == "RSVP is not enabled for this event"

    async def test_update_and_delete(self, client: AsyncClient, admin_headers, applicant_headers, active_cycle):
        event = (
            await client.post(
                RECRUITMENT_EVENTS, params={"cycle_id": active_cycle.id}, json=self._event(), headers=admin_headers
            )
        ).json()
        await client.post(f"{PORTAL}/events/{event['id']}/rsvp", headers=applicant_headers)

        updated = await client.patch(
            f"{RECRUITMENT_EVENTS}/{event['id']}", json={"check_in_enabled": True}, headers=admin_headers
        )
        deleted = await client.delete(f"{RECRUITMENT_EVENTS}/{event['id']}", headers=admin_headers)

        assert updated.json()["check_in_code"]
        assert deleted.json()["message"] == "Event deleted"
        assert (await client.get(f"{RECRUITMENT_EVENTS}/{event['id']}", headers=admin_headers)).status_code == 404
        listed = await client.get(RECRUITMENT_EVENTS, params={"cycle_id": active_cycle.id}, headers=admin_headers)
        assert listed.json() == []
