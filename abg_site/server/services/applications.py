"""
Application service.

Handles the applicant side (autosaved drafts, submission with required-field
and word-limit checks) and the admin side (stage changes, notes, bulk stage
updates) of recruitment applications, plus the per-track question sets.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from abg_site.core.database.base import utc_now
from abg_site.core.database.entities.applications import Application
from abg_site.core.database.entities.cycles import RecruitmentCycle
from abg_site.core.database.entities.questions import ApplicationQuestions
from abg_site.core.database.entities.users import User
from abg_site.core.database.repositories.applications import ApplicationRepository, QuestionRepository
from abg_site.core.database.repositories.phases import PhaseReviewRepository
from abg_site.core.logging_config import get_logger
from abg_site.core.models.domain.enums import ApplicationStage, Track, value_of
from abg_site.core.models.io.applications import ApplicationDraft, QuestionField, QuestionSetUpsert
from abg_site.server.errors import ForbiddenError, NotFoundError, ValidationFailedError

logger = get_logger(__name__)

EDITABLE_STAGES = (ApplicationStage.not_started.value, ApplicationStage.draft.value)


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, dict)):
        return len(value) == 0
    return False


def missing_required_fields(application: Application, fields: List[QuestionField]) -> List[str]:
    """Labels of required fields the application leaves empty. File fields are looked up in ``files``."""
    missing = []
    for field in fields:
        if not field.required:
            continue
        store = application.files if field.type == "file" else application.answers
        if _is_blank((store or {}).get(field.key)):
            missing.append(field.label)
    return missing


def over_word_limit_fields(application: Application, fields: List[QuestionField]) -> List[str]:
    over = []
    for field in fields:
        if not field.word_limit:
            continue
        answer = (application.answers or {}).get(field.key)
        if isinstance(answer, str) and len(answer.split()) > field.word_limit:
            over.append(field.label)
    return over


class QuestionService:
    def __init__(self, session: AsyncSession):
        self.questions = QuestionRepository(session)

    async def upsert(self, cycle_id: int, data: QuestionSetUpsert) -> ApplicationQuestions:
        fields = [f.model_dump() for f in data.fields]
        existing = await self.questions.get_for_track(cycle_id, data.track.value)
        if existing:
            existing.fields = fields
            return await self.questions.update(existing)
        return await self.questions.create(
            ApplicationQuestions(cycle_id=cycle_id, track=data.track.value, fields=fields)
        )

    async def fields_for_track(self, cycle_id: int, track: str) -> List[QuestionField]:
        """Every question an applicant on ``track`` answers, own-track sets first."""
        sets = await self.questions.list_applicable(cycle_id, track)
        sets.sort(key=lambda s: s.track == Track.both.value)
        return [QuestionField.model_validate(f) for qs in sets for f in (qs.fields or [])]


class ApplicationService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.applications = ApplicationRepository(session)
        self.question_service = QuestionService(session)

    async def get(self, application_id: int) -> Application:
        application = await self.applications.get_by_id(application_id)
        if not application:
            raise NotFoundError("Application", application_id)
        return application

    async def save_draft(self, cycle: RecruitmentCycle, user: User, data: ApplicationDraft) -> Application:
        """
        Create or update the user's application for the cycle.

        Files are replaced only when the request carries them.

        Raises:
            ForbiddenError: the deadline has passed.
            ValidationFailedError: the application was already submitted.
        """
        now = utc_now()
        if now > cycle.application_due_at:
            raise ForbiddenError("Application deadline has passed")

        application = await self.applications.get_for_user(cycle.id, user.id)
        if application is None:
            application = Application(
                cycle_id=cycle.id,
                user_id=user.id,
                user_email=user.email,
                user_name=user.name,
                track=data.track.value,
                stage=ApplicationStage.draft.value,
                answers=data.answers,
                files=data.files or {},
                last_saved_at=now,
            )
            application = await self.applications.create(application)
            logger.info(f"Created application {application.id} for {user.email} in cycle {cycle.slug}")
            return application

        if application.stage not in EDITABLE_STAGES:
            raise ValidationFailedError("Cannot modify submitted application")

        application.track = data.track.value
        application.answers = data.answers
        if data.files is not None:
            application.files = data.files
        if application.stage == ApplicationStage.not_started.value:
            application.stage = ApplicationStage.draft.value
        application.last_saved_at = now
        return await self.applications.update(application)

    async def submit(self, cycle: RecruitmentCycle, user: User) -> Application:
        if utc_now() > cycle.application_due_at:
            raise ForbiddenError("Application deadline has passed")

        application = await self.applications.get_for_user(cycle.id, user.id)
        if application is None:
            raise NotFoundError("Application")
        if application.stage not in EDITABLE_STAGES:
            raise ValidationFailedError("Application already submitted")

        fields = await self.question_service.fields_for_track(cycle.id, application.track)
        missing = missing_required_fields(application, fields)
        if missing:
            raise ValidationFailedError("Missing required fields", details={"missing_fields": missing})
        over = over_word_limit_fields(application, fields)
        if over:
            raise ValidationFailedError("Word limit exceeded", details={"over_limit_fields": over})

        application.stage = ApplicationStage.submitted.value
        application.submitted_at = utc_now()
        application = await self.applications.update(application)
        logger.info(f"Application {application.id} submitted by {user.email}")
        return application

    async def withdraw(self, cycle: RecruitmentCycle, user: User) -> Application:
        application = await self.applications.get_for_user(cycle.id, user.id)
        if application is None:
            raise NotFoundError("Application")
        if application.stage in (ApplicationStage.accepted.value, ApplicationStage.rejected.value):
            raise ValidationFailedError(f"Cannot withdraw an application that is {application.stage}")
        application.stage = ApplicationStage.withdrawn.value
        return await self.applications.update(application)

    async def set_stage(self, application_id: int, stage: ApplicationStage) -> Application:
        application = await self.get(application_id)
        previous = application.stage
        application.stage = value_of(stage)
        if application.stage == ApplicationStage.submitted.value and not application.submitted_at:
            application.submitted_at = utc_now()
        application = await self.applications.update(application)
        logger.info(f"Application {application.id} moved from {previous} to {application.stage}")
        return application

    async def set_notes(self, application_id: int, notes: Optional[str]) -> Application:
        application = await self.get(application_id)
        application.admin_notes = notes
        return await self.applications.update(application)

    async def bulk_set_stage(self, application_ids: List[int], stage: ApplicationStage) -> Dict[str, Any]:
        """Move several applications to ``stage`` in one commit."""
        found = {a.id: a for a in await self.applications.get_many(application_ids)}
        now = utc_now()
        for application in found.values():
            application.stage = value_of(stage)
            application.updated_at = now
            self.session.add(application)
        await self.session.commit()
        not_found = [i for i in application_ids if i not in found]
        logger.info(f"Bulk stage update to {value_of(stage)}: {len(found)} updated, {len(not_found)} missing")
        return {"updated": len(found), "not_found": not_found}

    async def delete(self, application_id: int) -> None:
        application = await self.applications.get_by_id(application_id)
        if not application:
            raise NotFoundError("Application", application_id)
        for review in await PhaseReviewRepository(self.session).list_for_application(application.id):
            await self.session.delete(review)
        await self.applications.delete(application.id)
        logger.info(f"Deleted application {application.id} of {application.user_email}")
