"""
User and audit log entity models.

Users are created on first authenticated request and carry a list of role
names. Audit log entries record privileged actions performed by users.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlmodel import JSON, Field

from ..base import Base, TZDateTime, utc_now


class User(Base, table=True):
    """Site user with one or more roles.

    Table: users
    """

    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(max_length=320, unique=True, index=True)
    name: Optional[str] = Field(default=None, max_length=256)
    roles: List[str] = Field(default_factory=lambda: ["USER"], sa_type=JSON)

    created_at: datetime = Field(default_factory=utc_now, sa_type=TZDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=TZDateTime)

    def __repr__(self) -> str:
        return f"User(id={self.id}, email={self.email}, roles={self.roles})"


class AuditLog(Base, table=True):
    """Append-only record of a privileged action.

    Table: audit_logs
    """

    __tablename__ = "audit_logs"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: Optional[int] = Field(default=None, index=True)
    user_email: Optional[str] = Field(default=None, max_length=320, index=True)
    action: str = Field(max_length=64, index=True)
    target_type: Optional[str] = Field(default=None, max_length=64, index=True)
    target_id: Optional[str] = Field(default=None, max_length=128)
    meta: Dict[str, Any] = Field(default_factory=dict, sa_type=JSON)
    ip: Optional[str] = Field(default=None, max_length=64)
    user_agent: Optional[str] = Field(default=None, max_length=512)
    timestamp: datetime = Field(default_factory=utc_now, index=True, sa_type=TZDateTime)

    def __repr__(self) -> str:
        return f"AuditLog(id={self.id}, action={self.action}, target={self.target_type}:{self.target_id})"
