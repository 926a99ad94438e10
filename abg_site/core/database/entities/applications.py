"""
Application entity model.

An application is keyed by (cycle, user). It is autosaved as a draft, then
submitted, then moved through review stages by admins and phase cutoffs.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import JSON, Field

from ..base import Base, TZDateTime, utc_now


class Application(Base, table=True):
    """
    Table: applications
    """

    __tablename__ = "applications"
    __table_args__ = (UniqueConstraint("cycle_id", "user_id", name="uq_application_cycle_user"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    cycle_id: int = Field(foreign_key="recruitment_cycles.id", index=True)
    user_id: int = Field(index=True)
    user_email: str = Field(max_length=320, index=True)
    user_name: Optional[str] = Field(default=None, max_length=256)

    track: str = Field(max_length=32, index=True)
    stage: str = Field(default="draft", max_length=32, index=True)

    answers: Dict[str, Any] = Field(default_factory=dict, sa_type=JSON)
    # Field key -> stored file URL
    files: Dict[str, str] = Field(default_factory=dict, sa_type=JSON)
    admin_notes: Optional[str] = Field(default=None)

    last_saved_at: Optional[datetime] = Field(default=None, sa_type=TZDateTime)
    submitted_at: Optional[datetime] = Field(default=None, sa_type=TZDateTime)
    created_at: datetime = Field(default_factory=utc_now, sa_type=TZDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=TZDateTime)

    def __repr__(self) -> str:
        return f"Application(id={self.id}, cycle={self.cycle_id}, user={self.user_email}, stage={self.stage})"
