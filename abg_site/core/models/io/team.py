"""
Team page I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from .common import ReadModel


def _strip(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip() or None


class TeamMemberCreate(BaseModel):
    name: str = Field(min_length=1, max_length=256)
    role: str = Field(min_length=1, max_length=128)
    year: str = Field(min_length=1, max_length=32)
    major: Optional[str] = None
    bio: Optional[str] = None
    email: Optional[str] = None
    linkedin_url: Optional[str] = None
    github_url: Optional[str] = None
    image_url: Optional[str] = None
    featured: bool = False

    @field_validator("name", "role", "year")
    @classmethod
    def required_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("major", "bio", "email", "linkedin_url", "github_url", "image_url")
    @classmethod
    def optional_text(cls, value: Optional[str]) -> Optional[str]:
        return _strip(value)


class TeamMemberUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=256)
    role: Optional[str] = Field(default=None, min_length=1, max_length=128)
    year: Optional[str] = Field(default=None, min_length=1, max_length=32)
    major: Optional[str] = None
    bio: Optional[str] = None
    email: Optional[str] = None
    linkedin_url: Optional[str] = None
    github_url: Optional[str] = None
    image_url: Optional[str] = None
    featured: Optional[bool] = None
    active: Optional[bool] = None
    sort_order: Optional[int] = None

    @field_validator("major", "bio", "email", "linkedin_url", "github_url", "image_url")
    @classmethod
    def optional_text(cls, value: Optional[str]) -> Optional[str]:
        return _strip(value)


class TeamMemberRead(ReadModel):
    id: int
    name: str
    role: str
    year: str
    major: Optional[str] = None
    bio: Optional[str] = None
    email: Optional[str] = None
    linkedin_url: Optional[str] = None
    github_url: Optional[str] = None
    image_url: Optional[str] = None
    featured: bool
    active: bool
    sort_order: int
    join_date: datetime


class TeamOrderItem(BaseModel):
    id: int
    sort_order: int


class TeamReorder(BaseModel):
    items: List[TeamOrderItem] = Field(min_length=1)
