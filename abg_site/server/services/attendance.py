"""
Public events, attendance registration and waitlists.

Registrations past an event's capacity join an ordered waitlist. Positions
are 1-based and kept gap-free: every removal closes the gap behind it, and
freed seats are filled from the front of the queue when auto-promotion is on.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from abg_site.core.database.base import utc_now
from abg_site.core.database.entities.events import Event, EventAttendee
from abg_site.core.database.repositories.events import EventAttendeeRepository, EventRepository
from abg_site.core.database.repositories.users import UserRepository
from abg_site.core.logging_config import get_logger
from abg_site.core.models.domain.enums import AttendeeStatus, AuditAction, value_of
from abg_site.core.models.domain.permissions import can_register_for_event
from abg_site.core.models.io.events import (
    AttendanceRegistration,
    AttendanceResult,
    EventCreate,
    EventUpdate,
)
from abg_site.server.core.config import settings
from abg_site.server.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
    ValidationFailedError,
)

from .audit import AuditService
from .codes import generate_check_in_code

logger = get_logger(__name__)


class EventService:
    """Admin management of public events."""

    def __init__(self, session: AsyncSession, audit: Optional[AuditService] = None):
        self.session = session
        self.events = EventRepository(session)
        self.audit = audit or AuditService(session)

    async def get(self, event_id: int) -> Event:
        event = await self.events.get_by_id(event_id)
        if not event:
            raise NotFoundError("Event", event_id)
        return event

    async def get_by_slug(self, slug: str) -> Event:
        event = await self.events.get_by_slug(slug)
        if not event:
            raise NotFoundError("Event", slug)
        return event

    async def create(self, data: EventCreate) -> Event:
        if await self.events.get_by_slug(data.slug):
            raise ConflictError(f"Event slug '{data.slug}' is already in use")
        values = data.model_dump()
        values["required_roles_any"] = [value_of(r) for r in data.required_roles_any]
        event = await self.events.create(Event(**values))
        await self.audit.log(AuditAction.event_created, target_type="event", target_id=event.id, meta={"slug": event.slug})
        return event

    async def update(self, event_id: int, data: EventUpdate) -> Event:
        event = await self.get(event_id)
        changes = data.model_dump(exclude_unset=True)
        if "required_roles_any" in changes:
            changes["required_roles_any"] = [value_of(r) for r in (data.required_roles_any or [])]
        for key, value in changes.items():
            setattr(event, key, value)
        event = await self.events.update(event)
        await self.audit.log(
            AuditAction.event_updated, target_type="event", target_id=event.id, meta={"fields": sorted(changes)}
        )
        return event

    async def delete(self, event_id: int) -> None:
        event = await self.get(event_id)
        for attendee in await EventAttendeeRepository(self.session).list_for_event(event.id):
            await self.session.delete(attendee)
        await self.events.delete(event.id)
        await self.audit.log(AuditAction.event_deleted, target_type="event", target_id=event_id, meta={"slug": event.slug})


class AttendanceService:
    """Public registration, check-in and waitlist management for one event at a time."""

    def __init__(self, session: AsyncSession, audit: Optional[AuditService] = None):
        self.session = session
        self.attendees = EventAttendeeRepository(session)
        self.audit = audit or AuditService(session)

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    async def register(self, event: Event, form: AttendanceRegistration) -> AttendanceResult:
        """
        Register for an event, joining the waitlist when it is full.

        Raises:
            NotFoundError: the event is not published.
            UnauthorizedError: the event password is missing or wrong.
            ForbiddenError: the attendee's roles do not permit registration.
            ValidationFailedError: attendance is disabled, the email is not on
                the campus domain, a registration exists, or the event and its
                waitlist are full.
        """
        if not event.published:
            raise NotFoundError("Event", event.id)
        if not event.attendance_confirm_enabled:
            raise ValidationFailedError("Attendance confirmation is not enabled for this event")
        if event.attendance_password and form.password != event.attendance_password:
            raise UnauthorizedError("Password is required for this event" if not form.password else "Invalid password")

        email = form.email.strip().lower()
        domain = settings.recruitment.attendance_email_domain.lower()
        if not email.endswith(f"@{domain}"):
            raise ValidationFailedError(f"Must use an @{domain} email address")

        if event.required_roles_any:
            user = await UserRepository(self.session).get_by_email(email)
            if not can_register_for_event(user.roles if user else [], event.required_roles_any):
                raise ForbiddenError("Your roles do not permit registration for this event")

        if await self.attendees.get_registration(event.id, email):
            raise ValidationFailedError("Already registered for this event")

        status = AttendeeStatus.confirmed
        position: Optional[int] = None
        # A capacity of zero, like no capacity, means unlimited seats
        if event.capacity:
            confirmed = await self.attendees.count_by_status(event.id, AttendeeStatus.confirmed)
            if confirmed >= event.capacity:
                if not event.waitlist_enabled:
                    raise ValidationFailedError("Event is full")
                waitlisted = await self.attendees.count_by_status(event.id, AttendeeStatus.waitlisted)
                if event.waitlist_max_size is not None and waitlisted >= event.waitlist_max_size:
                    raise ValidationFailedError("Waitlist is also full")
                status = AttendeeStatus.waitlisted
                position = waitlisted + 1

        now = utc_now()
        attendee = await self.attendees.create(
            EventAttendee(
                event_id=event.id,
                name=form.name,
                email=email,
                umich_id=form.umich_id,
                major=form.major,
                year=form.year,
                status=status.value,
                waitlist_position=position,
                check_in_code=generate_check_in_code(),
                registered_at=now,
                confirmed_at=now if status == AttendeeStatus.confirmed else None,
            )
        )
        await self.audit.log(
            AuditAction.event_registration_created,
            target_type="event",
            target_id=event.id,
            meta={"email": email, "status": status.value, "waitlist_position": position},
        )
        logger.info(f"{email} registered for event {event.id} as {status.value}")

        if status == AttendeeStatus.waitlisted:
            message = f"Event is full. You have been added to the waitlist at position {position}."
        else:
            message = "Registration confirmed"
        return AttendanceResult(
            status=status.value,
            message=message,
            waitlist_position=position,
            check_in_code=attendee.check_in_code,
            attendee_id=attendee.id,
        )

    async def get_registration(self, event: Event, email: str) -> EventAttendee:
        attendee = await self.attendees.get_registration(event.id, email.strip())
        if not attendee:
            raise NotFoundError("Registration")
        return attendee

    async def cancel(self, event: Event, email: str) -> List[int]:
        """
        Cancel a registration.

        Returns:
            Ids of waitlisted attendees promoted into the freed seat.
        """
        attendee = await self.attendees.get_registration(event.id, email.strip())
        if not attendee:
            raise NotFoundError("Registration")

        was_confirmed = attendee.status == AttendeeStatus.confirmed.value
        position = attendee.waitlist_position
        await self.session.delete(attendee)
        if position is not None:
            await self._close_gap(event.id, position)
        await self.session.commit()

        await self.audit.log(
            AuditAction.event_registration_cancelled,
            target_type="event",
            target_id=event.id,
            meta={"email": attendee.email, "was_confirmed": was_confirmed},
        )
        promoted: List[int] = []
        if was_confirmed and event.waitlist_auto_promote:
            promoted = await self.auto_promote(event)
        logger.info(f"{attendee.email} cancelled registration for event {event.id}; promoted {promoted}")
        return promoted

    async def check_in(self, event: Event, code: str) -> EventAttendee:
        attendee = await self.attendees.get_by_code(event.id, code.strip())
        if not attendee or attendee.status == AttendeeStatus.cancelled.value:
            raise NotFoundError("Registration for code", code)
        if attendee.checked_in_at:
            raise ValidationFailedError(
                "Already checked in", details={"checked_in_at": attendee.checked_in_at.isoformat()}
            )
        attendee.checked_in_at = utc_now()
        return await self.attendees.update(attendee)

    async def attendee_counts(self, event: Event) -> dict:
        counts = await self.attendees.counts(event.id)
        attendees = await self.attendees.list_for_event(event.id)
        return {
            AttendeeStatus.confirmed.value: counts.get(AttendeeStatus.confirmed.value, 0),
            AttendeeStatus.waitlisted.value: counts.get(AttendeeStatus.waitlisted.value, 0),
            "checked_in": sum(1 for a in attendees if a.checked_in_at),
        }

    # ------------------------------------------------------------------
    # Waitlist
    # ------------------------------------------------------------------

    async def _close_gap(self, event_id: int, removed_position: int) -> None:
        """Move everyone behind ``removed_position`` up one place. Does not commit."""
        for attendee in await self.attendees.list_waitlisted(event_id):
            if attendee.waitlist_position and attendee.waitlist_position > removed_position:
                attendee.waitlist_position -= 1
                self.session.add(attendee)

    async def _renumber(self, event_id: int) -> None:
        for idx, attendee in enumerate(await self.attendees.list_waitlisted(event_id), start=1):
            if attendee.waitlist_position != idx:
                attendee.waitlist_position = idx
                self.session.add(attendee)

    async def _available_spots(self, event: Event) -> Optional[int]:
        if not event.capacity:
            return None
        confirmed = await self.attendees.count_by_status(event.id, AttendeeStatus.confirmed)
        return max(event.capacity - confirmed, 0)

    async def _promote(self, event: Event, attendees: List[EventAttendee]) -> List[int]:
        now = utc_now()
        for attendee in attendees:
            attendee.status = AttendeeStatus.confirmed.value
            attendee.waitlist_position = None
            attendee.confirmed_at = now
            self.session.add(attendee)
        await self.session.flush()
        await self._renumber(event.id)
        await self.session.commit()

        promoted = [a.id for a in attendees]
        for attendee in attendees:
            await self.audit.log(
                AuditAction.event_registration_promoted,
                target_type="event",
                target_id=event.id,
                meta={"email": attendee.email, "attendee_id": attendee.id},
            )
        if promoted:
            logger.info(f"Promoted {len(promoted)} attendees from the waitlist of event {event.id}")
        return promoted

    async def auto_promote(self, event: Event) -> List[int]:
        """Fill free seats from the front of the waitlist."""
        spots = await self._available_spots(event)
        if spots is None or spots <= 0:
            return []
        waitlisted = await self.attendees.list_waitlisted(event.id)
        return await self._promote(event, waitlisted[:spots])

    async def promote(self, event: Event, attendee_ids: Optional[List[int]] = None) -> List[int]:
        """
        Promote waitlisted attendees, front of the queue first unless ids are given.

        At most as many as there are free seats are promoted.
        """
        spots = await self._available_spots(event)
        if spots is not None and spots <= 0:
            raise ValidationFailedError("Event is at capacity")
        waitlisted = await self.attendees.list_waitlisted(event.id)
        if attendee_ids:
            wanted = set(attendee_ids)
            waitlisted = [a for a in waitlisted if a.id in wanted]
        if not waitlisted:
            raise ValidationFailedError("No one on the waitlist to promote")
        if spots is not None:
            waitlisted = waitlisted[:spots]
        return await self._promote(event, waitlisted)

    async def expand_capacity(self, event: Event, new_capacity: int) -> List[int]:
        if event.capacity is not None and new_capacity < event.capacity:
            raise ValidationFailedError("New capacity must not be lower than the current capacity")
        event.capacity = new_capacity
        event.updated_at = utc_now()
        self.session.add(event)
        await self.session.commit()
        logger.info(f"Capacity of event {event.id} raised to {new_capacity}")
        if event.waitlist_auto_promote:
            return await self.auto_promote(event)
        return []

    async def remove_from_waitlist(self, event: Event, attendee_id: int) -> None:
        attendee = await self.attendees.get_by_id(attendee_id)
        if not attendee or attendee.event_id != event.id or attendee.status != AttendeeStatus.waitlisted.value:
            raise NotFoundError("Waitlisted attendee", attendee_id)
        position = attendee.waitlist_position
        attendee.status = AttendeeStatus.cancelled.value
        attendee.waitlist_position = None
        self.session.add(attendee)
        await self.session.flush()
        if position is not None:
            await self._close_gap(event.id, position)
        await self.session.commit()

    async def reorder(self, event: Event) -> None:
        """Renumber waitlist positions by registration time."""
        waitlisted = sorted(await self.attendees.list_waitlisted(event.id), key=lambda a: (a.registered_at, a.id))
        for idx, attendee in enumerate(waitlisted, start=1):
            attendee.waitlist_position = idx
            self.session.add(attendee)
        await self.session.commit()
