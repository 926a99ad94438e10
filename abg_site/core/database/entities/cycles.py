"""
Recruitment cycle entity.

A cycle is one recruiting season. At most one cycle is active at a time and
every portal operation is scoped to the active cycle.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from sqlmodel import JSON, Field

from ..base import Base, TZDateTime, utc_now


class RecruitmentCycle(Base, table=True):
    """
    Table: recruitment_cycles
    """

    __tablename__ = "recruitment_cycles"

    id: Optional[int] = Field(default=None, primary_key=True)
    slug: str = Field(max_length=128, unique=True, index=True)
    name: str = Field(max_length=256)
    is_active: bool = Field(default=False, index=True)

    portal_open_at: datetime = Field(sa_type=TZDateTime)
    portal_close_at: datetime = Field(sa_type=TZDateTime)
    application_due_at: datetime = Field(sa_type=TZDateTime)

    settings: Dict[str, Any] = Field(default_factory=dict, sa_type=JSON)

    created_at: datetime = Field(default_factory=utc_now, sa_type=TZDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=TZDateTime)

    def __repr__(self) -> str:
        return f"RecruitmentCycle(id={self.id}, slug={self.slug}, active={self.is_active})"
