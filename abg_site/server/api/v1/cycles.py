"""
Recruitment Cycle Endpoints.

Admins create recruiting seasons and choose which one is active. The active
cycle drives the applicant portal.
"""

from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from abg_site.core.database.entities.users import User
from abg_site.core.database.repositories.cycles import RecruitmentCycleRepository
from abg_site.core.models.io.cycles import CycleCreate, CycleDeleteResponse, CycleRead, CycleUpdate
from abg_site.server.services.cycles import CycleService
from abg_site.server.services.deps import SessionDep, require_page_access

router = APIRouter()

RecruiterDep = Annotated[User, Depends(require_page_access("recruitment"))]


@router.get(
    "",
    response_model=List[CycleRead],
    summary="List Cycles",
    description="List every recruitment cycle ordered by portal opening time.",
    response_description="A list of cycles.",
)
async def list_cycles(session: SessionDep, _: RecruiterDep) -> List[CycleRead]:
    return [CycleRead.model_validate(c) for c in await RecruitmentCycleRepository(session).list()]


@router.post(
    "",
    response_model=CycleRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Cycle",
    description="Create a recruitment cycle. Creating it active deactivates every other cycle.",
    response_description="The created cycle.",
    responses={409: {"description": "Slug already in use"}},
)
async def create_cycle(body: CycleCreate, session: SessionDep, _: RecruiterDep) -> CycleRead:
    """
    Create a recruitment cycle.

    - **slug**: Unique URL-safe identifier, e.g. `fall-2025`.
    - **portal_open_at** / **portal_close_at**: The portal window.
    - **application_due_at**: Submission deadline.
    - **is_active**: Make this the active cycle.
    """
    return CycleRead.model_validate(await CycleService(session).create(body))


@router.get(
    "/active",
    response_model=CycleRead,
    summary="Get Active Cycle",
    description="Return the active cycle. When none is active the 404 body names the next upcoming cycle.",
    response_description="The active cycle.",
    responses={404: {"description": "No active cycle"}},
)
async def get_active_cycle(session: SessionDep) -> CycleRead:
    return CycleRead.model_validate(await CycleService(session).require_active())


@router.get(
    "/{cycle_id}",
    response_model=CycleRead,
    summary="Get Cycle",
    description="Retrieve a recruitment cycle by id.",
    response_description="The cycle.",
    responses={404: {"description": "Cycle not found"}},
)
async def get_cycle(cycle_id: int, session: SessionDep, _: RecruiterDep) -> CycleRead:
    cycle = await RecruitmentCycleRepository(session).get_by_id(cycle_id)
    if not cycle:
        raise HTTPException(status_code=404, detail="Cycle not found")
    return CycleRead.model_validate(cycle)


@router.patch(
    "/{cycle_id}",
    response_model=CycleRead,
    summary="Update Cycle",
    description="Change the name, portal window, deadline or settings of a cycle.",
    response_description="The updated cycle.",
    responses={404: {"description": "Cycle not found"}},
)
async def update_cycle(cycle_id: int, body: CycleUpdate, session: SessionDep, _: RecruiterDep) -> CycleRead:
    return CycleRead.model_validate(await CycleService(session).update(cycle_id, body))


@router.delete(
    "/{cycle_id}",
    response_model=CycleDeleteResponse,
    summary="Delete Cycle",
    description=(
        "Delete a recruitment cycle and everything recorded in it. A cycle with applications "
        "is only deleted when `confirm=cascade` is passed."
    ),
    response_description="Confirmation message with deleted row counts.",
    responses={404: {"description": "Cycle not found"}, 409: {"description": "Cycle has applications"}},
)
async def delete_cycle(
    cycle_id: int, session: SessionDep, _: RecruiterDep, confirm: Optional[str] = None
) -> CycleDeleteResponse:
    """
    Delete a cycle.

    - **cycle_id**: The cycle to delete.
    - **confirm**: `cascade` to delete a cycle that already has applications.
    """
    counts = await CycleService(session).delete(cycle_id, cascade=confirm == "cascade")
    return CycleDeleteResponse(message="Cycle deleted", id=cycle_id, deleted_counts=counts)


@router.post(
    "/{cycle_id}/activate",
    response_model=CycleRead,
    summary="Activate Cycle",
    description="Make this the active cycle. Every other cycle is deactivated.",
    response_description="The now-active cycle.",
    responses={404: {"description": "Cycle not found"}},
)
async def activate_cycle(cycle_id: int, session: SessionDep, _: RecruiterDep) -> CycleRead:
    return CycleRead.model_validate(await CycleService(session).set_active(cycle_id))
