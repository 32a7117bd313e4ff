"""Driver repository."""

from __future__ import annotations

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from ..entities.drivers import Driver
from .base import UserScopedRepository


class DriverRepository(UserScopedRepository[Driver]):
    """Repository for driver data access operations using SQLModel."""

    default_order = (Driver.name,)

    def __init__(self, session: AsyncSession, user_id: uuid.UUID) -> None:
        super().__init__(session, Driver, user_id)
