"""Fuel record repository."""

from __future__ import annotations

import uuid
from datetime import date
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.fuel_records import FuelRecord
from .base import VehicleOwnedRepository


class FuelRecordRepository(VehicleOwnedRepository[FuelRecord]):
    """Repository for fuel fill-ups, newest first."""

    default_order = (FuelRecord.fill_date.desc(), FuelRecord.created_at.desc())

    def __init__(self, session: AsyncSession, user_id: uuid.UUID) -> None:
        super().__init__(session, FuelRecord, user_id)

    async def list_for_day(self, vehicle_id: uuid.UUID, fill_date: date) -> List[FuelRecord]:
        """Fill-ups for one vehicle on one day, used for duplicate checks."""
        stmt = self._scoped(
            select(FuelRecord).where((FuelRecord.vehicle_id == vehicle_id) & (FuelRecord.fill_date == fill_date))
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_with_invoices(self) -> List[FuelRecord]:
        stmt = self._scoped(select(FuelRecord).where(FuelRecord.invoice_file_path.is_not(None)))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
