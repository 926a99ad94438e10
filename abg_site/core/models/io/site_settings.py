"""
Site settings and maintenance mode I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from abg_site.core.models.domain.enums import SettingType

from .common import ReadModel


class SettingRead(ReadModel):
    key: str
    value: str
    type: str
    description: Optional[str] = None
    updated_at: datetime


class SettingWrite(BaseModel):
    key: str = Field(min_length=1, max_length=128)
    value: str
    # Only used when the key is new
    type: SettingType = SettingType.TEXT
    description: Optional[str] = None


class MaintenanceStatus(BaseModel):
    enabled: bool
    message: str
    exempt_paths: List[str]
