"""Mileage record repository."""

from __future__ import annotations

import uuid
from datetime import date
from typing import Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.mileage_records import MileageRecord
from .base import VehicleOwnedRepository


class MileageRecordRepository(VehicleOwnedRepository[MileageRecord]):
    """Repository for daily mileage, newest first."""

    default_order = (MileageRecord.record_date.desc(),)

    def __init__(self, session: AsyncSession, user_id: uuid.UUID) -> None:
        super().__init__(session, MileageRecord, user_id)

    async def get_for_day(self, vehicle_id: uuid.UUID, record_date: date) -> Optional[MileageRecord]:
        stmt = self._scoped(
            select(MileageRecord).where(
                (MileageRecord.vehicle_id == vehicle_id) & (MileageRecord.record_date == record_date)
            )
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def latest_odometers(self) -> Dict[uuid.UUID, int]:
        """Most recent odometer reading per vehicle, from records that have one."""
        stmt = self._scoped(
            select(MileageRecord)
            .where(MileageRecord.odometer_reading.is_not(None))
            .order_by(MileageRecord.record_date.desc())
        )
        result = await self.session.execute(stmt)
        latest: Dict[uuid.UUID, int] = {}
        for record in result.scalars().all():
            latest.setdefault(record.vehicle_id, record.odometer_reading)
        return latest

    async def upsert(
        self,
        vehicle_id: uuid.UUID,
        record_date: date,
        daily_mileage: int,
        odometer_reading: Optional[int] = None,
        source: str = "manual",
    ) -> MileageRecord:
        """Insert or replace the record for (vehicle, day).

        Args:
            vehicle_id: Vehicle the mileage belongs to (must be the user's)
            record_date: Day the mileage was driven
            daily_mileage: Miles driven that day
            odometer_reading: Odometer at the end of the day, if known
            source: Where the reading came from

        Returns:
            The inserted or updated record
        """
        existing = await self.get_for_day(vehicle_id, record_date)
        if existing is None:
            return await self.create(
                MileageRecord(
                    vehicle_id=vehicle_id,
                    record_date=record_date,
                    daily_mileage=daily_mileage,
                    odometer_reading=odometer_reading,
                    source=source,
                )
            )

        existing.daily_mileage = daily_mileage
        existing.odometer_reading = odometer_reading
        existing.source = source
        return await self.update(existing)
