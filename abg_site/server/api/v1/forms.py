"""
Form Endpoints.

Visitors open public forms, submit answers and read back what they
submitted; the forms page builds forms and reads submissions through
``admin_router``.
"""

from typing import Annotated, List, Optional, Union

from fastapi import APIRouter, Depends, status

from abg_site.core.database.entities.users import User
from abg_site.core.models.io.common import MessageResponse
from abg_site.core.models.io.forms import (
    FormCreate,
    FormRead,
    FormSubmit,
    FormSubmitResult,
    FormUpdate,
    PublicFormRead,
    SubmissionRead,
    SubmissionSummary,
)
from abg_site.server.services.audit import AuditService
from abg_site.server.services.deps import (
    ClientInfoDep,
    CurrentUserDep,
    OptionalUserDep,
    SessionDep,
    require_page_access,
)
from abg_site.server.services.forms import FormService

router = APIRouter()
admin_router = APIRouter()

FormManagerDep = Annotated[User, Depends(require_page_access("forms"))]


@router.get(
    "/{slug}",
    response_model=PublicFormRead,
    summary="Get Form",
    description="A public form with its questions and submission count.",
    response_description="The form.",
    responses={403: {"description": "Form is not public"}, 404: {"description": "Form not found"}},
)
async def get_form(slug: str, session: SessionDep) -> PublicFormRead:
    return await FormService(session).get_public(slug)


@router.post(
    "/{slug}/submit",
    response_model=FormSubmitResult,
    status_code=status.HTTP_201_CREATED,
    summary="Submit Form",
    description="Submit answers to a form.",
    response_description="The stored submission id.",
    responses={
        400: {"description": "Location check failed, already submitted, or a required answer is missing"},
        401: {"description": "The form requires sign-in"},
        403: {"description": "Form closed, past its deadline, full, or wrong email domain"},
        404: {"description": "Form not found"},
    },
)
async def submit_form(
    slug: str, body: FormSubmit, session: SessionDep, user: OptionalUserDep, client: ClientInfoDep
) -> FormSubmitResult:
    """
    Submit a form.

    - **responses**: `{question_id, value}` pairs; unknown question ids are ignored.
    - **latitude** / **longitude**: Required by attendance forms.

    Sign-in forms take the applicant's name and email from the signed-in user.
    """
    submission = await FormService(session).submit(slug, body, user=user, client=client)
    return FormSubmitResult(message="Form submitted successfully", submission_id=submission.id)


@router.get(
    "/{slug}/submission",
    response_model=Union[SubmissionRead, SubmissionSummary],
    summary="Get My Submission",
    description="The signed-in user's latest submission, a specific one, or all of them with `all=true`.",
    response_description="One submission, or every submission of the user.",
    responses={401: {"description": "Not signed in"}, 404: {"description": "Form or submission not found"}},
)
async def get_my_submission(
    slug: str,
    session: SessionDep,
    user: CurrentUserDep,
    submission_id: Optional[int] = None,
    all: bool = False,
) -> Union[SubmissionRead, SubmissionSummary]:
    service = FormService(session)
    if all:
        return await service.own_submissions(slug, user)
    return await service.own_submission(slug, user, submission_id)


@admin_router.get(
    "",
    response_model=List[FormRead],
    summary="List Forms",
    description="Every form with its submission count.",
    response_description="A list of forms.",
)
async def list_forms(session: SessionDep, _: FormManagerDep) -> List[FormRead]:
    return await FormService(session).list_with_counts()


@admin_router.post(
    "",
    response_model=FormRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Form",
    description="Build a form.",
    response_description="The created form.",
    responses={409: {"description": "Slug already in use"}},
)
async def create_form(body: FormCreate, session: SessionDep, user: FormManagerDep, client: ClientInfoDep) -> FormRead:
    """
    Create a form.

    - **questions**: Each needs an id unique within the form.
    - **require_auth**: Only signed-in campus users may submit.
    - **allow_multiple** / **max_submissions**: Submission limits.
    - **is_attendance_form** with **attendance_latitude**, **attendance_longitude** and
      **attendance_radius_meters**: Submissions must be made near the venue.
    """
    service = FormService(session, AuditService(session, actor=user, client=client))
    return await service.to_read(await service.create(body, creator=user), submission_count=0)


@admin_router.patch(
    "/{form_id}",
    response_model=FormRead,
    summary="Update Form",
    description="Change a form.",
    response_description="The updated form.",
    responses={404: {"description": "Form not found"}},
)
async def update_form(
    form_id: int, body: FormUpdate, session: SessionDep, user: FormManagerDep, client: ClientInfoDep
) -> FormRead:
    service = FormService(session, AuditService(session, actor=user, client=client))
    return await service.to_read(await service.update(form_id, body))


@admin_router.delete(
    "/{form_id}",
    response_model=MessageResponse,
    summary="Delete Form",
    description="Delete a form together with its submissions.",
    response_description="Confirmation message.",
    responses={404: {"description": "Form not found"}},
)
async def delete_form(form_id: int, session: SessionDep, user: FormManagerDep, client: ClientInfoDep) -> MessageResponse:
    removed = await FormService(session, AuditService(session, actor=user, client=client)).delete(form_id)
    return MessageResponse(message=f"Form deleted with {removed} submissions", id=form_id)


@admin_router.get(
    "/{form_id}/submissions",
    response_model=SubmissionSummary,
    summary="List Submissions",
    description="Every submission of a form, newest first.",
    response_description="The form's submissions.",
    responses={404: {"description": "Form not found"}},
)
async def list_submissions(form_id: int, session: SessionDep, _: FormManagerDep) -> SubmissionSummary:
    return await FormService(session).list_submissions(form_id)
