"""
Recruitment cycle I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, model_validator

from .common import ReadModel, UtcDateTime


class CycleCreate(BaseModel):
    slug: str = Field(min_length=1, max_length=128, pattern=r"^[a-z0-9][a-z0-9-]*$")
    name: str = Field(min_length=1, max_length=256)
    is_active: bool = False
    portal_open_at: UtcDateTime
    portal_close_at: UtcDateTime
    application_due_at: UtcDateTime
    settings: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_window(self) -> "CycleCreate":
        if self.portal_close_at <= self.portal_open_at:
            raise ValueError("portal_close_at must be after portal_open_at")
        return self


class CycleUpdate(BaseModel):
    name: Optional[str] = None
    portal_open_at: Optional[UtcDateTime] = None
    portal_close_at: Optional[UtcDateTime] = None
    application_due_at: Optional[UtcDateTime] = None
    settings: Optional[Dict[str, Any]] = None


class CycleRead(ReadModel):
    id: int
    slug: str
    name: str
    is_active: bool
    portal_open_at: datetime
    portal_close_at: datetime
    application_due_at: datetime
    settings: Dict[str, Any]
    created_at: datetime
    updated_at: datetime


class CycleDeleteResponse(BaseModel):
    message: str
    id: int
    deleted_counts: Dict[str, int] = Field(default_factory=dict)
