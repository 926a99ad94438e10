"""
Audit trail service.

Records privileged actions. Writing an audit entry must never break the
operation being audited, so failures are logged and rolled back instead of
raised.
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, Optional

from fastapi import Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from abg_site.core.database.entities.users import AuditLog, User
from abg_site.core.logging_config import get_logger
from abg_site.core.models.domain.enums import AuditAction

from .deps import AdminUserDep, ClientInfo, ClientInfoDep, SessionDep

logger = get_logger(__name__)


class AuditService:
    """Writes audit log entries for the acting user."""

    def __init__(self, session: AsyncSession, actor: Optional[User] = None, client: Optional[ClientInfo] = None):
        self.session = session
        self.actor = actor
        self.client = client

    async def log(
        self,
        action: AuditAction,
        target_type: Optional[str] = None,
        target_id: Any = None,
        meta: Optional[Dict[str, Any]] = None,
    ) -> Optional[AuditLog]:
        """
        Persist one audit entry.

        Returns:
            The stored entry, or None when it could not be written.
        """
        entry = AuditLog(
            user_id=self.actor.id if self.actor else None,
            user_email=self.actor.email if self.actor else None,
            action=action.value,
            target_type=target_type,
            target_id=str(target_id) if target_id is not None else None,
            meta=meta or {},
            ip=self.client.ip if self.client else None,
            user_agent=self.client.user_agent if self.client else None,
        )
        try:
            self.session.add(entry)
            await self.session.commit()
            await self.session.refresh(entry)
        except SQLAlchemyError as e:
            logger.error(f"Failed to write audit entry {action.value} for {target_type}:{target_id}: {e}")
            await self.session.rollback()
            return None
        logger.debug(f"Audit {action.value} by {entry.user_email} on {target_type}:{target_id}")
        return entry


async def get_admin_audit(session: SessionDep, user: AdminUserDep, client: ClientInfoDep) -> AuditService:
    return AuditService(session, actor=user, client=client)


AdminAuditDep = Annotated[AuditService, Depends(get_admin_audit)]
