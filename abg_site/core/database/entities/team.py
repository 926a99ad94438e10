"""
Team member entity for the public "meet the team" page.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from ..base import Base, TZDateTime, utc_now


class TeamMember(Base, table=True):
    """
    Table: team_members
    """

    __tablename__ = "team_members"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=256)
    role: str = Field(max_length=128)
    year: str = Field(max_length=32)
    major: Optional[str] = Field(default=None, max_length=128)
    bio: Optional[str] = Field(default=None)
    email: Optional[str] = Field(default=None, max_length=320)
    linkedin_url: Optional[str] = Field(default=None, max_length=1024)
    github_url: Optional[str] = Field(default=None, max_length=1024)
    image_url: Optional[str] = Field(default=None, max_length=1024)
    featured: bool = Field(default=False)
    active: bool = Field(default=True, index=True)
    sort_order: int = Field(default=0)
    join_date: datetime = Field(default_factory=utc_now, sa_type=TZDateTime)

    created_at: datetime = Field(default_factory=utc_now, sa_type=TZDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=TZDateTime)
