"""
Generic forms and their submissions.

Submission rules, checked in order: the form must be active and before its
deadline; sign-in forms take the applicant's identity from the signed-in user
and require a campus email; attendance forms require a reported location
within the venue radius; single-submission forms refuse a second submission
from the same email; ``max_submissions`` caps the total; every required
question needs a non-empty answer.
"""

from __future__ import annotations

import math
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from abg_site.core.database.base import utc_now
from abg_site.core.database.entities.forms import Form, FormSubmission
from abg_site.core.database.entities.users import User
from abg_site.core.database.repositories.forms import FormRepository, FormSubmissionRepository
from abg_site.core.logging_config import get_logger
from abg_site.core.models.domain.enums import AuditAction, FormQuestionType
from abg_site.core.models.io.forms import (
    AnswerRead,
    FormCreate,
    FormRead,
    FormSubmit,
    FormUpdate,
    PublicFormRead,
    SubmissionRead,
    SubmissionSummary,
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
from .deps import ClientInfo

logger = get_logger(__name__)

EARTH_RADIUS_METERS = 6_371_000


def distance_meters(lat_a: float, lon_a: float, lat_b: float, lon_b: float) -> float:
    """Great-circle (haversine) distance between two coordinates."""
    d_lat = math.radians(lat_a - lat_b)
    d_lon = math.radians(lon_a - lon_b)
    a = math.sin(d_lat / 2) ** 2 + math.cos(math.radians(lat_a)) * math.cos(math.radians(lat_b)) * math.sin(d_lon / 2) ** 2
    return 2 * EARTH_RADIUS_METERS * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def _is_blank(value: Any) -> bool:
    return value is None or value == "" or value == []


def coerce_answer(question_type: str, value: Any) -> Any:
    """Store an answer in the shape its question type implies."""
    if question_type == FormQuestionType.NUMBER.value:
        try:
            return float(value)
        except (TypeError, ValueError):
            raise ValidationFailedError(f"'{value}' is not a number")
    if question_type == FormQuestionType.BOOLEAN.value:
        return value is True or value == "true"
    if question_type == FormQuestionType.CHECKBOX.value:
        return value if isinstance(value, list) else [value]
    return value


class FormService:
    def __init__(self, session: AsyncSession, audit: Optional[AuditService] = None):
        self.forms = FormRepository(session)
        self.submissions = FormSubmissionRepository(session)
        self.audit = audit or AuditService(session)

    # ------------------------------------------------------------------
    # Administration
    # ------------------------------------------------------------------

    async def get(self, form_id: int) -> Form:
        form = await self.forms.get_by_id(form_id)
        if not form:
            raise NotFoundError("Form", form_id)
        return form

    async def get_by_slug(self, slug: str) -> Form:
        form = await self.forms.get_by_slug(slug)
        if not form:
            raise NotFoundError("Form", slug)
        return form

    async def to_read(self, form: Form, submission_count: Optional[int] = None) -> FormRead:
        view = FormRead.model_validate(form)
        if submission_count is None:
            submission_count = await self.submissions.count_for_form(form.id)
        view.submission_count = submission_count
        return view

    async def list_with_counts(self) -> List[FormRead]:
        counts = await self.submissions.counts_by_form()
        return [await self.to_read(f, counts.get(f.id, 0)) for f in await self.forms.list()]

    async def create(self, data: FormCreate, creator: Optional[User] = None) -> Form:
        if await self.forms.get_by_slug(data.slug):
            raise ConflictError(f"Form slug '{data.slug}' is already in use")
        values = data.model_dump(mode="json", exclude={"deadline"})
        form = await self.forms.create(
            Form(**values, deadline=data.deadline, created_by_id=creator.id if creator else None)
        )
        await self.audit.log(AuditAction.content_created, target_type="form", target_id=form.id, meta={"slug": form.slug})
        logger.info(f"Created form {form.slug} with {len(form.questions)} questions")
        return form

    async def update(self, form_id: int, data: FormUpdate) -> Form:
        form = await self.get(form_id)
        changes = data.model_dump(exclude_unset=True)
        if "questions" in changes:
            changes["questions"] = [q.model_dump(mode="json") for q in (data.questions or [])]
        for key, value in changes.items():
            setattr(form, key, value)
        form = await self.forms.update(form)
        await self.audit.log(
            AuditAction.content_updated, target_type="form", target_id=form.id, meta={"fields": sorted(changes)}
        )
        return form

    async def delete(self, form_id: int) -> int:
        """Delete a form and its submissions; returns how many submissions went with it."""
        form = await self.get(form_id)
        removed = await self.submissions.delete_for_form(form.id)
        await self.forms.delete(form.id)
        await self.audit.log(
            AuditAction.content_deleted,
            target_type="form",
            target_id=form_id,
            meta={"slug": form.slug, "submissions": removed},
        )
        return removed

    async def list_submissions(self, form_id: int) -> SubmissionSummary:
        form = await self.get(form_id)
        return self._summary(form, await self.submissions.list_for_form(form.id))

    # ------------------------------------------------------------------
    # Public
    # ------------------------------------------------------------------

    async def get_public(self, slug: str) -> PublicFormRead:
        form = await self.get_by_slug(slug)
        if not form.is_public:
            raise ForbiddenError("This form is not publicly accessible")
        return PublicFormRead(
            id=form.id,
            slug=form.slug,
            title=form.title,
            description=form.description,
            category=form.category,
            is_active=form.is_active,
            deadline=form.deadline,
            require_auth=form.require_auth,
            is_attendance_form=form.is_attendance_form,
            questions=form.questions,
            submission_count=await self.submissions.count_for_form(form.id),
        )

    async def submit(
        self, slug: str, data: FormSubmit, user: Optional[User] = None, client: Optional[ClientInfo] = None
    ) -> FormSubmission:
        """
        Record a submission.

        Raises:
            NotFoundError: no form has this slug.
            UnauthorizedError: the form requires sign-in and there is no user.
            ForbiddenError: the form is closed, past its deadline, full, or
                the signed-in email is not on the campus domain.
            ValidationFailedError: location missing or too far, a repeated
                submission, or a required question left blank.
        """
        form = await self.get_by_slug(slug)
        if not form.is_active:
            raise ForbiddenError("This form is no longer accepting submissions")
        if form.deadline and utc_now() > form.deadline:
            raise ForbiddenError("The submission deadline has passed")

        name, email = data.applicant_name, str(data.applicant_email).lower()
        if form.require_auth:
            if user is None:
                raise UnauthorizedError("Authentication required. Please sign in with your campus account.")
            domain = settings.recruitment.attendance_email_domain.lower()
            if not user.email.lower().endswith(f"@{domain}"):
                raise ForbiddenError(f"This form requires an @{domain} email address.")
            name, email = user.name or name, user.email.lower()

        if form.is_attendance_form and self._has_venue(form):
            if not self._near_venue(form, data.latitude, data.longitude):
                raise ValidationFailedError(
                    "Location required to submit attendance form. Please enable location services."
                )

        if not form.allow_multiple and await self.submissions.count_for_form(form.id, email):
            raise ValidationFailedError("You have already submitted this form")
        if form.max_submissions and await self.submissions.count_for_form(form.id) >= form.max_submissions:
            raise ForbiddenError("This form has reached its maximum number of submissions")

        answers = {a.question_id: a.value for a in data.responses}
        responses = []
        for question in form.questions:
            value = answers.get(question["id"])
            if _is_blank(value):
                if question.get("required"):
                    raise ValidationFailedError(f"Please answer the required question: {question['title']}")
                continue
            responses.append(
                {"question_id": question["id"], "value": coerce_answer(question.get("type", "TEXT"), value)}
            )

        submission = await self.submissions.create(
            FormSubmission(
                form_id=form.id,
                applicant_name=name,
                applicant_email=email,
                applicant_phone=data.applicant_phone,
                responses=responses,
                ip=client.ip if client else None,
                user_agent=client.user_agent if client else None,
            )
        )
        await self.audit.log(
            AuditAction.form_submitted, target_type="form", target_id=form.id, meta={"submission_id": submission.id}
        )
        logger.info(f"Form {form.slug} received submission {submission.id} from {email}")
        return submission

    async def submissions_for(self, slug: str, user: User) -> Tuple[Form, List[FormSubmission]]:
        """The signed-in user's submissions to a form, newest first."""
        form = await self.get_by_slug(slug)
        return form, await self.submissions.list_for_form(form.id, user.email)

    async def own_submission(self, slug: str, user: User, submission_id: Optional[int] = None) -> SubmissionRead:
        form, submissions = await self.submissions_for(slug, user)
        if submission_id is not None:
            submissions = [s for s in submissions if s.id == submission_id]
        if not submissions:
            raise NotFoundError("Submission")
        return self._render(form, submissions[0])

    async def own_submissions(self, slug: str, user: User) -> SubmissionSummary:
        form, submissions = await self.submissions_for(slug, user)
        return self._summary(form, submissions)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _has_venue(form: Form) -> bool:
        return None not in (form.attendance_latitude, form.attendance_longitude, form.attendance_radius_meters)

    @staticmethod
    def _near_venue(form: Form, latitude: Optional[float], longitude: Optional[float]) -> bool:
        if latitude is None or longitude is None:
            return False
        distance = distance_meters(latitude, longitude, form.attendance_latitude, form.attendance_longitude)
        return distance <= form.attendance_radius_meters

    def _summary(self, form: Form, submissions: List[FormSubmission]) -> SubmissionSummary:
        return SubmissionSummary(
            form_id=form.id, form_title=form.title, submissions=[self._render(form, s) for s in submissions]
        )

    @staticmethod
    def _render(form: Form, submission: FormSubmission) -> SubmissionRead:
        questions: Dict[str, Dict[str, Any]] = {q["id"]: q for q in form.questions}
        answers = []
        for response in submission.responses:
            question = questions.get(response["question_id"], {})
            answers.append(
                AnswerRead(
                    question_id=response["question_id"],
                    question_title=question.get("title", "Untitled question"),
                    type=question.get("type", FormQuestionType.TEXT.value),
                    value=response.get("value"),
                )
            )
        return SubmissionRead(
            submission_id=submission.id,
            submitted_at=submission.submitted_at,
            status=submission.status,
            applicant_name=submission.applicant_name,
            applicant_email=submission.applicant_email,
            responses=answers,
        )
