"""
Application question sets.

Each cycle holds one question set per track; the ``both`` track carries
questions every applicant answers.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import JSON, Field

from ..base import Base, TZDateTime, utc_now


class ApplicationQuestions(Base, table=True):
    """
    Table: application_questions
    """

    __tablename__ = "application_questions"
    __table_args__ = (UniqueConstraint("cycle_id", "track", name="uq_questions_cycle_track"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    cycle_id: int = Field(foreign_key="recruitment_cycles.id", index=True)
    track: str = Field(max_length=32)
    # Serialized QuestionField dicts, in display order
    fields: List[Dict[str, Any]] = Field(default_factory=list, sa_type=JSON)

    created_at: datetime = Field(default_factory=utc_now, sa_type=TZDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=TZDateTime)
