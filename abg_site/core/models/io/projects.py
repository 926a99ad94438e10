"""
Project showcase I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from abg_site.core.models.domain.enums import ProjectStatus

from .common import ReadModel, UtcDateTime


class ProjectCreate(BaseModel):
    title: str = Field(min_length=1, max_length=256)
    # Derived from the title when omitted
    slug: Optional[str] = Field(default=None, min_length=1, max_length=128, pattern=r"^[a-z0-9][a-z0-9-]*$")
    description: str = Field(min_length=1)
    status: ProjectStatus = ProjectStatus.PLANNING
    start_date: UtcDateTime
    end_date: Optional[UtcDateTime] = None
    budget: Optional[float] = Field(default=None, ge=0)
    progress: int = Field(default=0, ge=0, le=100)
    objectives: str = ""
    outcomes: Optional[str] = None
    technologies: List[str] = Field(default_factory=list)
    links: List[Dict[str, str]] = Field(default_factory=list)
    image_url: Optional[str] = None
    featured: bool = False
    published: bool = True


class ProjectUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=256)
    description: Optional[str] = None
    status: Optional[ProjectStatus] = None
    start_date: Optional[UtcDateTime] = None
    end_date: Optional[UtcDateTime] = None
    budget: Optional[float] = Field(default=None, ge=0)
    progress: Optional[int] = Field(default=None, ge=0, le=100)
    objectives: Optional[str] = None
    outcomes: Optional[str] = None
    technologies: Optional[List[str]] = None
    links: Optional[List[Dict[str, str]]] = None
    image_url: Optional[str] = None
    featured: Optional[bool] = None
    published: Optional[bool] = None


class ProjectRead(ReadModel):
    id: int
    slug: str
    title: str
    description: str
    status: str
    start_date: datetime
    end_date: Optional[datetime] = None
    budget: Optional[float] = None
    progress: int
    objectives: str
    outcomes: Optional[str] = None
    technologies: List[str] = Field(default_factory=list)
    links: List[Dict[str, str]] = Field(default_factory=list)
    image_url: Optional[str] = None
    featured: bool
    published: bool
    created_at: datetime
    updated_at: datetime
