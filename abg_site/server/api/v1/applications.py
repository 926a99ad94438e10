"""
Application Review Endpoints.

Admin access to submitted applications: filtering, stage moves (single and
bulk), private notes and deletion.
"""

from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, HTTPException

from abg_site.core.database.entities.users import User
from abg_site.core.database.repositories.applications import ApplicationRepository
from abg_site.core.models.domain.enums import ApplicationStage, Track
from abg_site.core.models.io.applications import (
    ApplicationAdminRead,
    BulkStageResult,
    BulkStageUpdate,
    NotesUpdate,
    StageUpdate,
)
from abg_site.core.models.io.common import MessageResponse
from abg_site.server.services.applications import ApplicationService
from abg_site.server.services.deps import SessionDep, require_page_access

router = APIRouter()

RecruiterDep = Annotated[User, Depends(require_page_access("recruitment"))]


@router.get(
    "",
    response_model=List[ApplicationAdminRead],
    summary="List Applications",
    description="List the applications of a cycle, optionally filtered by stage and track.",
    response_description="A list of applications.",
)
async def list_applications(
    cycle_id: int,
    session: SessionDep,
    _: RecruiterDep,
    stage: Optional[ApplicationStage] = None,
    track: Optional[Track] = None,
) -> List[ApplicationAdminRead]:
    """
    List applications.

    - **cycle_id**: The recruitment cycle.
    - **stage**: Only applications at this stage.
    - **track**: Only applications on this track.
    """
    applications = await ApplicationRepository(session).list_for_cycle(
        cycle_id, stages=[stage] if stage else None, track=track.value if track else None
    )
    return [ApplicationAdminRead.model_validate(a) for a in applications]


@router.post(
    "/bulk-stage",
    response_model=BulkStageResult,
    summary="Bulk Update Stage",
    description="Move several applications to the same stage at once.",
    response_description="How many were updated and which ids were not found.",
)
async def bulk_update_stage(body: BulkStageUpdate, session: SessionDep, _: RecruiterDep) -> BulkStageResult:
    result = await ApplicationService(session).bulk_set_stage(body.application_ids, body.stage)
    return BulkStageResult(**result)


@router.get(
    "/{application_id}",
    response_model=ApplicationAdminRead,
    summary="Get Application",
    description="Retrieve one application including admin notes.",
    response_description="The application.",
    responses={404: {"description": "Application not found"}},
)
async def get_application(application_id: int, session: SessionDep, _: RecruiterDep) -> ApplicationAdminRead:
    application = await ApplicationRepository(session).get_by_id(application_id)
    if not application:
        raise HTTPException(status_code=404, detail="Application not found")
    return ApplicationAdminRead.model_validate(application)


@router.patch(
    "/{application_id}/stage",
    response_model=ApplicationAdminRead,
    summary="Update Stage",
    description="Move an application to another stage.",
    response_description="The updated application.",
    responses={404: {"description": "Application not found"}},
)
async def update_stage(
    application_id: int, body: StageUpdate, session: SessionDep, _: RecruiterDep
) -> ApplicationAdminRead:
    return ApplicationAdminRead.model_validate(await ApplicationService(session).set_stage(application_id, body.stage))


@router.patch(
    "/{application_id}/notes",
    response_model=ApplicationAdminRead,
    summary="Update Notes",
    description="Replace the private admin notes of an application.",
    response_description="The updated application.",
    responses={404: {"description": "Application not found"}},
)
async def update_notes(
    application_id: int, body: NotesUpdate, session: SessionDep, _: RecruiterDep
) -> ApplicationAdminRead:
    application = await ApplicationService(session).set_notes(application_id, body.admin_notes)
    return ApplicationAdminRead.model_validate(application)


@router.delete(
    "/{application_id}",
    response_model=MessageResponse,
    summary="Delete Application",
    description="Delete an application permanently.",
    response_description="Confirmation message.",
    responses={404: {"description": "Application not found"}},
)
async def delete_application(application_id: int, session: SessionDep, _: RecruiterDep) -> MessageResponse:
    await ApplicationService(session).delete(application_id)
    return MessageResponse(message="Application deleted", id=application_id)
