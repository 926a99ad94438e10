"""
Form and form submission repositories.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from sqlalchemy import delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.forms import Form, FormSubmission
from .base import SQLModelRepository


class FormRepository(SQLModelRepository[Form]):
    """Repository for generic forms."""

    order_by = "created_at"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Form)

    async def get_by_slug(self, slug: str) -> Optional[Form]:
        result = await self.session.execute(select(Form).where(Form.slug == slug))
        return result.scalar_one_or_none()


class FormSubmissionRepository(SQLModelRepository[FormSubmission]):
    """Repository for form submissions."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, FormSubmission)

    async def list_for_form(self, form_id: int, email: Optional[str] = None) -> List[FormSubmission]:
        """Submissions of a form, newest first, optionally for one applicant."""
        stmt = select(FormSubmission).where(FormSubmission.form_id == form_id)
        if email:
            stmt = stmt.where(func.lower(FormSubmission.applicant_email) == email.lower())
        stmt = stmt.order_by(FormSubmission.submitted_at.desc(), FormSubmission.id.desc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_for_form(self, form_id: int, email: Optional[str] = None) -> int:
        stmt = select(func.count()).select_from(FormSubmission).where(FormSubmission.form_id == form_id)
        if email:
            stmt = stmt.where(func.lower(FormSubmission.applicant_email) == email.lower())
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def counts_by_form(self) -> Dict[int, int]:
        stmt = select(FormSubmission.form_id, func.count()).group_by(FormSubmission.form_id)
        result = await self.session.execute(stmt)
        return {form_id: count for form_id, count in result.all()}

    async def delete_for_form(self, form_id: int) -> int:
        result = await self.session.execute(delete(FormSubmission).where(FormSubmission.form_id == form_id))
        return result.rowcount or 0
