"""
Audit Log Endpoints.

Read-only, paginated access to the audit trail of privileged actions.
"""

import math
from typing import Optional

from fastapi import APIRouter, Query

from abg_site.core.database.repositories.users import AuditLogRepository
from abg_site.core.models.io.common import UtcDateTime
from abg_site.core.models.io.users import AuditLogPage, AuditLogRead
from abg_site.server.core import constant
from abg_site.server.services.deps import AdminUserDep, SessionDep

router = APIRouter()


@router.get(
    "",
    response_model=AuditLogPage,
    summary="Search Audit Log",
    description="Filter audit entries by actor, action, target and time range. Newest entries come first.",
    response_description="One page of audit entries with paging totals.",
    responses={403: {"description": "Admin access required"}},
)
async def search_audit_log(
    session: SessionDep,
    _: AdminUserDep,
    user_id: Optional[int] = None,
    action: Optional[str] = None,
    target_type: Optional[str] = None,
    target_id: Optional[str] = None,
    start: Optional[UtcDateTime] = None,
    end: Optional[UtcDateTime] = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=50, ge=1, le=constant.AUDIT_PAGE_LIMIT_MAX),
) -> AuditLogPage:
    """
    Search the audit log.

    - **user_id**: Actor user id.
    - **action**: Action name, e.g. `user.role_changed`.
    - **target_type** / **target_id**: The affected record.
    - **start** / **end**: Inclusive time range.
    - **page** / **limit**: 1-based page and page size (at most 100).
    """
    logs, total = await AuditLogRepository(session).search(
        user_id=user_id,
        action=action,
        target_type=target_type,
        target_id=target_id,
        start=start,
        end=end,
        limit=limit,
        offset=(page - 1) * limit,
    )
    return AuditLogPage(
        logs=[AuditLogRead.model_validate(entry) for entry in logs],
        total=total,
        page=page,
        limit=limit,
        total_pages=math.ceil(total / limit) if total else 0,
    )
