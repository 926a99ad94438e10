"""Unit tests for the applicant round tracker."""

from datetime import datetime, timedelta, timezone

import pytest

from abg_site.core.database.entities.applications import Application
from abg_site.core.database.entities.slots import Slot, SlotBooking
from abg_site.core.models.domain.enums import ApplicationStage, BookingStatus, SlotKind
from abg_site.server.services.round_tracker import build_round_tracker

NOW = datetime(2026, 10, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_application(stage: ApplicationStage) -> Application:
    return Application(
        id=1, cycle_id=1, user_id=1, user_email="ada@umich.edu", track="business", stage=stage.value
    )


def make_slot(slot_id: int, kind: SlotKind, start: datetime) -> Slot:
    return Slot(
        id=slot_id,
        cycle_id=1,
        kind=kind.value,
        start_time=start,
        end_time=start + timedelta(minutes=30),
        location="Ross B2540",
        host_name="Grace",
    )


def make_booking(slot: Slot, status: BookingStatus = BookingStatus.confirmed) -> SlotBooking:
    return SlotBooking(
        id=slot.id * 10,
        cycle_id=1,
        slot_id=slot.id,
        application_id=1,
        user_id=1,
        user_email="ada@umich.edu",
        slot_kind=slot.kind,
        status=status.value,
    )


def statuses(tracker):
    return [r.status for r in tracker.rounds]


class TestApplicationRound:
    def test_no_application(self):
        due = NOW + timedelta(days=3)
        tracker = build_round_tracker(None, [], {}, application_due_at=due, now=NOW)

        assert tracker.current_round == 1
        assert tracker.status == "waiting"
        assert tracker.next_action.type == "finish_application"
        assert tracker.next_action.title == "Start Your Application"
        assert tracker.next_action.deadline == due
        assert statuses(tracker) == ["in_progress", "not_started", "not_started"]

    def test_draft(self):
        tracker = build_round_tracker(make_application(ApplicationStage.draft), [], {}, now=NOW)
        assert tracker.next_action.title == "Complete Your Application"

    @pytest.mark.parametrize(
        "stage", [ApplicationStage.submitted, ApplicationStage.under_review, ApplicationStage.coffee_chat]
    )
    def test_waiting_for_review(self, stage):
        tracker = build_round_tracker(make_application(stage), [], {}, now=NOW)

        assert tracker.next_action.type == "wait_for_review"
        assert statuses(tracker) == ["completed", "not_started", "not_started"]


class TestInterviewRounds:
    def test_invited_without_booking(self):
        tracker = build_round_tracker(make_application(ApplicationStage.interview_round1), [], {}, now=NOW)

        assert tracker.current_round == 2
        assert tracker.status == "invited"
        assert tracker.next_action.type == "schedule_interview"
        assert statuses(tracker) == ["advanced", "in_progress", "not_started"]

    def test_cancelled_booking_counts_as_unscheduled(self):
        slot = make_slot(1, SlotKind.interview_round1, NOW + timedelta(days=1))
        booking = make_booking(slot, BookingStatus.cancelled)
        tracker = build_round_tracker(
            make_application(ApplicationStage.interview_round1), [booking], {slot.id: slot}, now=NOW
        )
        assert tracker.status == "invited"

    def test_upcoming_interview(self):
        slot = make_slot(1, SlotKind.interview_round1, NOW + timedelta(days=1))
        tracker = build_round_tracker(
            make_application(ApplicationStage.interview_round1), [make_booking(slot)], {slot.id: slot}, now=NOW
        )

        assert tracker.status == "scheduled"
        assert tracker.next_action.type == "attend_interview"
        scheduled = tracker.rounds[1].scheduled_interview
        assert scheduled is not None
        assert scheduled.time == slot.start_time
        assert scheduled.interviewers == ["Grace"]

    def test_past_final_interview(self):
        slot = make_slot(2, SlotKind.interview_round2, NOW - timedelta(hours=2))
        tracker = build_round_tracker(
            make_application(ApplicationStage.interview_round2), [make_booking(slot)], {slot.id: slot}, now=NOW
        )

        assert tracker.current_round == 3
        assert tracker.status == "completed"
        assert tracker.next_action.title == "Final Interview Complete"
        assert statuses(tracker) == ["advanced", "advanced", "completed"]


class TestDecisions:
    def test_waitlisted(self):
        tracker = build_round_tracker(make_application(ApplicationStage.waitlisted), [], {}, now=NOW)
        assert tracker.round_name == "Waitlisted"
        assert tracker.status == "decision_pending"

    def test_accepted(self):
        tracker = build_round_tracker(make_application(ApplicationStage.accepted), [], {}, now=NOW)
        assert tracker.next_action.type == "accepted_next_steps"
        assert statuses(tracker) == ["advanced", "advanced", "advanced"]

    def test_rejected_after_first_interview(self):
        slot = make_slot(1, SlotKind.interview_round1, NOW - timedelta(days=3))
        tracker = build_round_tracker(
            make_application(ApplicationStage.rejected), [make_booking(slot)], {slot.id: slot}, now=NOW
        )

        assert tracker.current_round == 2
        assert statuses(tracker) == ["advanced", "not_advanced", "not_started"]

    def test_rejected_at_application(self):
        tracker = build_round_tracker(make_application(ApplicationStage.rejected), [], {}, now=NOW)
        assert statuses(tracker) == ["not_advanced", "not_started", "not_started"]

    def test_withdrawn(self):
        tracker = build_round_tracker(make_application(ApplicationStage.withdrawn), [], {}, now=NOW)
        assert tracker.round_name == "Withdrawn"
        assert tracker.status == "not_advanced"
