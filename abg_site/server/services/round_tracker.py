"""
Round tracker for the applicant dashboard.

Maps an application's stage, plus its interview bookings, to the three-round
progress view shown in the portal.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple

from abg_site.core.database.base import utc_now
from abg_site.core.database.entities.applications import Application
from abg_site.core.database.entities.slots import Slot, SlotBooking
from abg_site.core.models.domain.enums import ApplicationStage, BookingStatus, ReviewPhase, SlotKind
from abg_site.core.models.io.portal import NextAction, RoundStatus, RoundTracker, ScheduledInterview

ROUNDS: List[Tuple[int, str, str]] = [
    (1, "Application", ReviewPhase.application.value),
    (2, "Technical Interview", ReviewPhase.interview_round1.value),
    (3, "Behavioral Interview", ReviewPhase.interview_round2.value),
]

_WAITING_STAGES: Dict[str, Tuple[str, str, str, Optional[str]]] = {
    ApplicationStage.submitted.value: (
        "Application Review",
        "Application Under Review",
        "Your application has been submitted and is being reviewed. We will notify you of the next steps.",
        None,
    ),
    ApplicationStage.under_review.value: (
        "Application Review",
        "Application Under Review",
        "Our team is carefully reviewing your application. You will hear back soon.",
        None,
    ),
    ApplicationStage.coffee_chat.value: (
        "Application Review",
        "Coffee Chat Stage",
        "You are in the coffee chat stage. Book a chat with a current member if you have not already.",
        "/portal/schedule",
    ),
}


def _rounds(*statuses: str) -> List[RoundStatus]:
    return [RoundStatus(round=r, name=name, phase=phase, status=s) for (r, name, phase), s in zip(ROUNDS, statuses)]


def _active_booking(
    bookings: Sequence[SlotBooking], kind: SlotKind, slots: Dict[int, Slot]
) -> Tuple[Optional[SlotBooking], Optional[Slot]]:
    for booking in bookings:
        if booking.slot_kind == kind.value and booking.status != BookingStatus.cancelled.value:
            return booking, slots.get(booking.slot_id)
    return None, None


def _interview_round(
    round_no: int,
    kind: SlotKind,
    bookings: Sequence[SlotBooking],
    slots: Dict[int, Slot],
    now: datetime,
) -> RoundTracker:
    booking, slot = _active_booking(bookings, kind, slots)
    name = ROUNDS[round_no - 1][1]
    final = round_no == 3

    if booking is None or slot is None:
        status = "invited"
        round_status = "in_progress"
        action = NextAction(
            type="schedule_interview",
            title="Schedule Final Interview" if final else "Schedule Your Interview",
            description=f"You have been invited to interview. Schedule your Round {round_no - 1} ({name}) now.",
            action_url="/portal/schedule",
        )
        scheduled = None
    else:
        past = slot.start_time < now
        status = "completed" if past else "scheduled"
        round_status = "completed" if past else "in_progress"
        if past:
            action = NextAction(
                type="wait_for_decision",
                title="Final Interview Complete" if final else "Interview Complete",
                description="Your interview has been completed. We are reviewing your performance.",
            )
        else:
            action = NextAction(
                type="attend_interview",
                title="Attend Your Final Interview" if final else "Attend Your Interview",
                description=f"Your {name.lower()} is scheduled for {slot.start_time:%Y-%m-%d %H:%M} UTC.",
            )
        scheduled = ScheduledInterview(
            booking_id=booking.id,
            time=slot.start_time,
            location=slot.location,
            interviewers=[slot.host_name] if slot.host_name else [],
        )

    statuses = ["advanced", "advanced" if final else round_status, round_status if final else "not_started"]
    rounds = _rounds(*statuses)
    rounds[round_no - 1].scheduled_interview = scheduled
    return RoundTracker(current_round=round_no, round_name=name, status=status, next_action=action, rounds=rounds)


def build_round_tracker(
    application: Optional[Application],
    bookings: Sequence[SlotBooking],
    slots: Dict[int, Slot],
    application_due_at: Optional[datetime] = None,
    now: Optional[datetime] = None,
) -> RoundTracker:
    """
    Summarize an applicant's progress.

    Args:
        application: The applicant's application in the active cycle, if any
        bookings: The applicant's bookings in the cycle
        slots: Slots referenced by ``bookings`` keyed by id
        application_due_at: Deadline shown while the application is unfinished
        now: Reference time, defaults to the current UTC time
    """
    now = now or utc_now()
    stage = application.stage if application else ApplicationStage.not_started.value

    if stage in (ApplicationStage.not_started.value, ApplicationStage.draft.value):
        started = stage == ApplicationStage.draft.value
        return RoundTracker(
            current_round=1,
            round_name="Application",
            status="waiting",
            next_action=NextAction(
                type="finish_application",
                title="Complete Your Application" if started else "Start Your Application",
                description=(
                    "Your application is saved as a draft. Finish and submit it before the deadline."
                    if started
                    else "Complete and submit your application to be considered for membership."
                ),
                action_url="/portal/application",
                deadline=application_due_at,
            ),
            rounds=_rounds("in_progress", "not_started", "not_started"),
        )

    if stage in _WAITING_STAGES:
        round_name, title, description, url = _WAITING_STAGES[stage]
        return RoundTracker(
            current_round=1,
            round_name=round_name,
            status="waiting",
            next_action=NextAction(type="wait_for_review", title=title, description=description, action_url=url),
            rounds=_rounds("completed", "not_started", "not_started"),
        )

    if stage == ApplicationStage.interview_round1.value:
        return _interview_round(2, SlotKind.interview_round1, bookings, slots, now)
    if stage == ApplicationStage.interview_round2.value:
        return _interview_round(3, SlotKind.interview_round2, bookings, slots, now)

    if stage in (ApplicationStage.final_review.value, ApplicationStage.waitlisted.value):
        waitlisted = stage == ApplicationStage.waitlisted.value
        return RoundTracker(
            current_round=3,
            round_name="Waitlisted" if waitlisted else "Final Review",
            status="decision_pending",
            next_action=NextAction(
                type="wait_for_decision",
                title="You Are On The Waitlist" if waitlisted else "Final Decisions Pending",
                description=(
                    "You have been placed on our waitlist. We will reach out if a spot opens up."
                    if waitlisted
                    else "All interviews are complete. Final decisions will be announced soon."
                ),
            ),
            rounds=_rounds("advanced", "advanced", "completed"),
        )

    if stage == ApplicationStage.accepted.value:
        return RoundTracker(
            current_round=3,
            round_name="Accepted",
            status="advanced",
            next_action=NextAction(
                type="accepted_next_steps",
                title="Welcome to ABG!",
                description="Congratulations! Look out for onboarding details in your email.",
            ),
            rounds=_rounds("advanced", "advanced", "advanced"),
        )

    if stage == ApplicationStage.rejected.value:
        kinds = {b.slot_kind for b in bookings}
        rejected_at = 3 if SlotKind.interview_round2.value in kinds else 2 if SlotKind.interview_round1.value in kinds else 1
        statuses = [
            "advanced" if rejected_at > r else "not_advanced" if rejected_at == r else "not_started" for r in (1, 2, 3)
        ]
        return RoundTracker(
            current_round=rejected_at,
            round_name="Not Advanced",
            status="not_advanced",
            next_action=NextAction(
                type="not_advanced",
                title="Thank You for Applying",
                description="We are unable to move forward with your application this cycle. We hope you apply again.",
            ),
            rounds=_rounds(*statuses),
        )

    # withdrawn
    return RoundTracker(
        current_round=1,
        round_name="Withdrawn",
        status="not_advanced",
        next_action=NextAction(
            type="not_advanced",
            title="Application Withdrawn",
            description="You have withdrawn your application for this cycle.",
        ),
        rounds=_rounds("not_advanced", "not_started", "not_started"),
    )
