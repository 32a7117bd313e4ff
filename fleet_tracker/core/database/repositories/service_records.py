"""Service record repository."""

from __future__ import annotations

import uuid

from sqlalchemy import update as sa_update
from sqlalchemy.ext.asyncio import AsyncSession

from ..entities.documents import Document
from ..entities.service_records import ServiceRecord
from .base import VehicleOwnedRepository


class ServiceRecordRepository(VehicleOwnedRepository[ServiceRecord]):
    """Repository for service record data access operations, newest first."""

    default_order = (ServiceRecord.service_date.desc(),)

    def __init__(self, session: AsyncSession, user_id: uuid.UUID) -> None:
        super().__init__(session, ServiceRecord, user_id)

    async def delete(self, entity_id: uuid.UUID) -> bool:
        """Delete a service record, detaching any documents linked to it."""
        record = await self.get_by_id(entity_id)
        if record is None:
            return False
        await self.session.execute(
            sa_update(Document).where(Document.service_record_id == entity_id).values(service_record_id=None)
        )
        await self.session.delete(record)
        await self.session.commit()
        return True
