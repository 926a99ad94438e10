"""
Generic form and submission entities.

A form carries its questions inline as a JSON list of
``{"id", "title", "type", "required", "options"}`` objects; a submission
stores the answers as ``{"question_id", "value"}`` pairs.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlmodel import JSON, Field

from ..base import Base, TZDateTime, utc_now


class Form(Base, table=True):
    """
    Table: forms
    """

    __tablename__ = "forms"

    id: Optional[int] = Field(default=None, primary_key=True)
    slug: str = Field(max_length=128, unique=True, index=True)
    title: str = Field(max_length=256)
    description: Optional[str] = Field(default=None)
    category: str = Field(default="general", max_length=64)
    questions: List[Dict[str, Any]] = Field(default_factory=list, sa_type=JSON)

    is_public: bool = Field(default=True)
    is_active: bool = Field(default=True)
    deadline: Optional[datetime] = Field(default=None, sa_type=TZDateTime)
    require_auth: bool = Field(default=False)
    allow_multiple: bool = Field(default=False)
    max_submissions: Optional[int] = Field(default=None)

    # Attendance forms only accept submissions made near the venue
    is_attendance_form: bool = Field(default=False)
    attendance_latitude: Optional[float] = Field(default=None)
    attendance_longitude: Optional[float] = Field(default=None)
    attendance_radius_meters: Optional[float] = Field(default=None)

    created_by_id: Optional[int] = Field(default=None, foreign_key="users.id")
    created_at: datetime = Field(default_factory=utc_now, sa_type=TZDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=TZDateTime)


class FormSubmission(Base, table=True):
    """
    Table: form_submissions
    """

    __tablename__ = "form_submissions"

    id: Optional[int] = Field(default=None, primary_key=True)
    form_id: int = Field(foreign_key="forms.id", index=True)
    applicant_name: str = Field(max_length=256)
    applicant_email: str = Field(max_length=320, index=True)
    applicant_phone: Optional[str] = Field(default=None, max_length=64)
    responses: List[Dict[str, Any]] = Field(default_factory=list, sa_type=JSON)
    status: str = Field(default="SUBMITTED", max_length=32)
    ip: Optional[str] = Field(default=None, max_length=64)
    user_agent: Optional[str] = Field(default=None, max_length=512)
    submitted_at: datetime = Field(default_factory=utc_now, sa_type=TZDateTime)
