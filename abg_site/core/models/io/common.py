"""
Shared pieces of the API I/O schemas.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict

from abg_site.core.database.base import as_utc

# Aware inputs are converted to UTC; naive inputs are taken as UTC.
UtcDateTime = Annotated[datetime, AfterValidator(as_utc)]


class ReadModel(BaseModel):
    """Base for response schemas built from entity instances."""

    model_config = ConfigDict(from_attributes=True)


class MessageResponse(BaseModel):
    message: str
    id: Optional[int] = None
