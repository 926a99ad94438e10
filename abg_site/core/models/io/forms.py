"""
Generic form I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, EmailStr, Field, model_validator

from abg_site.core.models.domain.enums import FormQuestionType

from .common import ReadModel, UtcDateTime


class FormQuestion(BaseModel):
    id: str = Field(min_length=1, max_length=64)
    title: str = Field(min_length=1)
    type: FormQuestionType = FormQuestionType.TEXT
    required: bool = False
    description: Optional[str] = None
    options: List[str] = Field(default_factory=list)


class _FormFields(BaseModel):
    @model_validator(mode="after")
    def unique_question_ids(self):
        questions = getattr(self, "questions", None) or []
        ids = [q.id for q in questions]
        if len(ids) != len(set(ids)):
            raise ValueError("question ids must be unique")
        return self


class FormCreate(_FormFields):
    slug: str = Field(min_length=1, max_length=128, pattern=r"^[a-z0-9][a-z0-9-]*$")
    title: str = Field(min_length=1, max_length=256)
    description: Optional[str] = None
    category: str = Field(default="general", max_length=64)
    questions: List[FormQuestion] = Field(default_factory=list)
    is_public: bool = True
    is_active: bool = True
    deadline: Optional[UtcDateTime] = None
    require_auth: bool = False
    allow_multiple: bool = False
    max_submissions: Optional[int] = Field(default=None, ge=1)
    is_attendance_form: bool = False
    attendance_latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    attendance_longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    attendance_radius_meters: Optional[float] = Field(default=None, gt=0)


class FormUpdate(_FormFields):
    title: Optional[str] = Field(default=None, min_length=1, max_length=256)
    description: Optional[str] = None
    category: Optional[str] = Field(default=None, max_length=64)
    questions: Optional[List[FormQuestion]] = None
    is_public: Optional[bool] = None
    is_active: Optional[bool] = None
    deadline: Optional[UtcDateTime] = None
    require_auth: Optional[bool] = None
    allow_multiple: Optional[bool] = None
    max_submissions: Optional[int] = Field(default=None, ge=1)
    is_attendance_form: Optional[bool] = None
    attendance_latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    attendance_longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    attendance_radius_meters: Optional[float] = Field(default=None, gt=0)


class FormRead(ReadModel):
    """Admin view of a form."""

    id: int
    slug: str
    title: str
    description: Optional[str] = None
    category: str
    questions: List[FormQuestion] = Field(default_factory=list)
    is_public: bool
    is_active: bool
    deadline: Optional[datetime] = None
    require_auth: bool
    allow_multiple: bool
    max_submissions: Optional[int] = None
    is_attendance_form: bool
    attendance_latitude: Optional[float] = None
    attendance_longitude: Optional[float] = None
    attendance_radius_meters: Optional[float] = None
    submission_count: int = 0
    created_at: datetime


class PublicFormRead(BaseModel):
    """What a visitor sees; venue coordinates stay private."""

    id: int
    slug: str
    title: str
    description: Optional[str] = None
    category: str
    is_active: bool
    deadline: Optional[datetime] = None
    require_auth: bool
    is_attendance_form: bool
    questions: List[FormQuestion] = Field(default_factory=list)
    submission_count: int


class FormAnswer(BaseModel):
    question_id: str
    value: Any = None


class FormSubmit(BaseModel):
    applicant_name: str = Field(min_length=1, max_length=256)
    applicant_email: EmailStr
    applicant_phone: Optional[str] = Field(default=None, max_length=64)
    responses: List[FormAnswer] = Field(default_factory=list)
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class FormSubmitResult(BaseModel):
    message: str
    submission_id: int


class AnswerRead(BaseModel):
    question_id: str
    question_title: str
    type: str
    value: Any = None


class SubmissionRead(BaseModel):
    submission_id: int
    submitted_at: datetime
    status: str
    applicant_name: str
    applicant_email: str
    responses: List[AnswerRead]


class SubmissionSummary(BaseModel):
    form_id: int
    form_title: str
    submissions: List[SubmissionRead]
