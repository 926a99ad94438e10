"""
Application Question Endpoints.

Each cycle has one question set per track; applicants on a track answer
their own set plus the set shared by every track.
"""

from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends

from abg_site.core.database.entities.users import User
from abg_site.core.database.repositories.applications import QuestionRepository
from abg_site.core.models.domain.enums import Track
from abg_site.core.models.io.applications import QuestionSetRead, QuestionSetUpsert
from abg_site.server.services.applications import QuestionService
from abg_site.server.services.deps import SessionDep, require_page_access

router = APIRouter()

RecruiterDep = Annotated[User, Depends(require_page_access("recruitment"))]


@router.get(
    "/{cycle_id}",
    response_model=List[QuestionSetRead],
    summary="List Question Sets",
    description="List the question sets of a cycle. With a track, only the sets that apply to it.",
    response_description="A list of question sets.",
)
async def list_question_sets(
    cycle_id: int, session: SessionDep, _: RecruiterDep, track: Optional[Track] = None
) -> List[QuestionSetRead]:
    """
    List question sets.

    - **cycle_id**: The recruitment cycle.
    - **track**: Only sets for this track and the shared `both` set.
    """
    repo = QuestionRepository(session)
    sets = await repo.list_applicable(cycle_id, track.value) if track else await repo.list_for_cycle(cycle_id)
    return [QuestionSetRead.model_validate(s) for s in sets]


@router.put(
    "/{cycle_id}",
    response_model=QuestionSetRead,
    summary="Upsert Question Set",
    description="Create or replace the question set for one track of a cycle.",
    response_description="The stored question set.",
)
async def upsert_question_set(
    cycle_id: int, body: QuestionSetUpsert, session: SessionDep, _: RecruiterDep
) -> QuestionSetRead:
    return QuestionSetRead.model_validate(await QuestionService(session).upsert(cycle_id, body))
