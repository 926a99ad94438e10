"""
User, role and audit log I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from abg_site.core.models.domain.enums import UserRole

from .common import ReadModel


class UserRead(ReadModel):
    id: int
    email: str
    name: Optional[str] = None
    roles: List[str]
    created_at: datetime
    updated_at: datetime


class CurrentUserRead(UserRead):
    """The signed-in user plus the admin pages their roles unlock."""

    accessible_pages: List[str] = Field(default_factory=list)


class UserRolesUpdate(BaseModel):
    roles: List[UserRole] = Field(min_length=1, description="Complete new role list for the user")


class AuditLogRead(ReadModel):
    id: int
    user_id: Optional[int] = None
    user_email: Optional[str] = None
    action: str
    target_type: Optional[str] = None
    target_id: Optional[str] = None
    meta: Dict[str, Any] = Field(default_factory=dict)
    ip: Optional[str] = None
    user_agent: Optional[str] = None
    timestamp: datetime


class AuditLogPage(BaseModel):
    logs: List[AuditLogRead]
    total: int
    page: int
    limit: int
    total_pages: int
