"""Saved report repository."""

from __future__ import annotations

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from ..entities.saved_reports import SavedReport
from .base import UserScopedRepository


class SavedReportRepository(UserScopedRepository[SavedReport]):
    """Repository for saved report configurations, most recent first."""

    default_order = (SavedReport.created_at.desc(),)

    def __init__(self, session: AsyncSession, user_id: uuid.UUID) -> None:
        super().__init__(session, SavedReport, user_id)
