"""
Application and question set I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from abg_site.core.models.domain.enums import ApplicationStage, Track

from .common import ReadModel


class QuestionField(BaseModel):
    """One question in a track's application form."""

    key: str = Field(min_length=1, max_length=64, pattern=r"^[A-Za-z0-9_]+$")
    label: str
    type: str = Field(default="text", pattern=r"^(text|textarea|select|file|url|email)$")
    required: bool = False
    options: List[str] = Field(default_factory=list)
    max_length: Optional[int] = Field(default=None, ge=1)
    word_limit: Optional[int] = Field(default=None, ge=1)


class QuestionSetUpsert(BaseModel):
    track: Track
    fields: List[QuestionField]


class QuestionSetRead(ReadModel):
    id: int
    cycle_id: int
    track: str
    fields: List[QuestionField]
    updated_at: datetime


class ApplicationDraft(BaseModel):
    track: Track
    answers: Dict[str, Any] = Field(default_factory=dict)
    # Only replaces stored files when present
    files: Optional[Dict[str, str]] = None


class ApplicationRead(ReadModel):
    id: int
    cycle_id: int
    user_id: int
    user_email: str
    user_name: Optional[str] = None
    track: str
    stage: str
    answers: Dict[str, Any]
    files: Dict[str, str]
    last_saved_at: Optional[datetime] = None
    submitted_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class ApplicationAdminRead(ApplicationRead):
    admin_notes: Optional[str] = None


class StageUpdate(BaseModel):
    stage: ApplicationStage


class NotesUpdate(BaseModel):
    admin_notes: Optional[str] = None


class BulkStageUpdate(BaseModel):
    application_ids: List[int] = Field(min_length=1)
    stage: ApplicationStage


class BulkStageResult(BaseModel):
    updated: int
    not_found: List[int] = Field(default_factory=list)
