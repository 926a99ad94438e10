"""
Email log and bulk email I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from .common import ReadModel


class EmailLogRead(ReadModel):
    id: int
    cycle_id: Optional[int] = None
    application_id: Optional[int] = None
    to_email: str
    subject: str
    template: str
    status: str
    error: Optional[str] = None
    sent_by: Optional[str] = None
    sent_at: datetime


class BulkEmailRequest(BaseModel):
    application_ids: List[int] = Field(min_length=1)
    subject: str = Field(min_length=1, max_length=512)
    body: str = Field(min_length=1, description="Body text; {{name}} and {{track}} are substituted")
    template: str = Field(default="custom", max_length=64)


class BulkEmailResult(BaseModel):
    sent: int
    failed: int
