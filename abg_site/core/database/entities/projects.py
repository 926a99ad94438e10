"""
Project showcase entity.

Projects the organization runs with partner companies. Published projects are
listed publicly, featured ones first.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from sqlmodel import JSON, Field

from ..base import Base, TZDateTime, utc_now


class Project(Base, table=True):
    """
    Table: projects
    """

    __tablename__ = "projects"

    id: Optional[int] = Field(default=None, primary_key=True)
    slug: str = Field(max_length=128, unique=True, index=True)
    title: str = Field(max_length=256)
    description: str
    status: str = Field(default="PLANNING", max_length=16, index=True)
    start_date: datetime = Field(sa_type=TZDateTime)
    end_date: Optional[datetime] = Field(default=None, sa_type=TZDateTime)
    budget: Optional[float] = Field(default=None)
    # Percent complete, 0-100
    progress: int = Field(default=0)
    objectives: str = Field(default="")
    outcomes: Optional[str] = Field(default=None)
    technologies: List[str] = Field(default_factory=list, sa_type=JSON)
    links: List[Dict[str, str]] = Field(default_factory=list, sa_type=JSON)
    image_url: Optional[str] = Field(default=None, max_length=1024)
    featured: bool = Field(default=False)
    published: bool = Field(default=True, index=True)

    created_by_id: Optional[int] = Field(default=None, foreign_key="users.id")
    created_at: datetime = Field(default_factory=utc_now, sa_type=TZDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=TZDateTime)
