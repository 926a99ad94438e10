"""
Applicant Email Endpoints.

Send a templated message to a set of applicants and review the log of
every attempted email.
"""

from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Query

from abg_site.core.database.entities.users import User
from abg_site.core.database.repositories.applications import ApplicationRepository
from abg_site.core.database.repositories.email_logs import EmailLogRepository
from abg_site.core.models.io.emails import BulkEmailRequest, BulkEmailResult, EmailLogRead
from abg_site.server.services.deps import SessionDep, require_page_access
from abg_site.server.services.email import EmailService

router = APIRouter()

RecruiterDep = Annotated[User, Depends(require_page_access("recruitment"))]


@router.get(
    "",
    response_model=List[EmailLogRead],
    summary="List Email Logs",
    description="Sent and failed emails, newest first.",
    response_description="A list of email log entries.",
)
async def list_email_logs(
    session: SessionDep,
    _: RecruiterDep,
    cycle_id: Optional[int] = None,
    application_id: Optional[int] = None,
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
) -> List[EmailLogRead]:
    logs = await EmailLogRepository(session).list_recent(
        cycle_id=cycle_id, application_id=application_id, limit=limit, offset=offset
    )
    return [EmailLogRead.model_validate(entry) for entry in logs]


@router.post(
    "/bulk",
    response_model=BulkEmailResult,
    summary="Send Bulk Email",
    description="Send the same message to several applicants. `{{name}}` and `{{track}}` are filled per applicant.",
    response_description="How many emails were sent and how many failed.",
)
async def send_bulk_email(body: BulkEmailRequest, session: SessionDep, sender: RecruiterDep) -> BulkEmailResult:
    """
    Send a bulk email.

    - **application_ids**: Recipients.
    - **subject** / **body**: Message text with placeholders.
    - **template**: Name recorded in the email log.
    """
    applications = await ApplicationRepository(session).get_many(body.application_ids)
    sent, failed = await EmailService(session).send_bulk(
        applications, body.subject, body.body, body.template, sent_by=sender.email
    )
    return BulkEmailResult(sent=sent, failed=failed)
