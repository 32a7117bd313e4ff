"""Document repository."""

from __future__ import annotations

import uuid
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from fleet_tracker.core.errors import OwnershipError

from ..entities.documents import Document
from ..entities.service_records import ServiceRecord
from .base import VehicleOwnedRepository


class DocumentRepository(VehicleOwnedRepository[Document]):
    """Repository for uploaded document metadata, newest first."""

    default_order = (Document.created_at.desc(),)

    def __init__(self, session: AsyncSession, user_id: uuid.UUID) -> None:
        super().__init__(session, Document, user_id)

    async def _before_write(self, entity: Document) -> None:
        await super()._before_write(entity)
        if entity.service_record_id is not None:
            record = await self.session.get(ServiceRecord, entity.service_record_id)
            if record is None or record.vehicle_id != entity.vehicle_id:
                raise OwnershipError("Service record does not belong to this vehicle")

    async def list_with_costs(self) -> List[Document]:
        """Documents that have an AI-extracted cost."""
        stmt = self._scoped(select(Document).where(Document.extracted_cost.is_not(None)))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
