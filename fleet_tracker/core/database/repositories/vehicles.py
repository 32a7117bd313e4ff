"""
Vehicle repository.

Besides CRUD, this provides registration lookups for the import webhooks and
removes a vehicle's dependent rows on delete so the behaviour does not depend
on the database enforcing ``ON DELETE CASCADE`` (SQLite does not by default).
"""

from __future__ import annotations

import uuid
from typing import List, Optional

from sqlalchemy import delete as sa_delete
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from fleet_tracker.core.registration import normalize_registration

from ..entities.documents import Document
from ..entities.fuel_records import FuelRecord
from ..entities.maintenance_schedules import MaintenanceSchedule
from ..entities.mileage_records import MileageRecord
from ..entities.service_records import ServiceRecord
from ..entities.vehicles import Vehicle
from .base import UserScopedRepository


# Whitespace removed in SQL, matching ``normalize_registration`` for stored plates
_REGISTRATION_WHITESPACE = (" ", "\t", "\n", "\r", "\v", "\f", "\u00a0")


def _normalized_registration_column():
    column = Vehicle.registration
    for char in _REGISTRATION_WHITESPACE:
        column = func.replace(column, char, "")
    return func.upper(column)


class VehicleRepository(UserScopedRepository[Vehicle]):
    """Repository for vehicle data access operations using SQLModel."""

    default_order = (Vehicle.registration,)

    def __init__(self, session: AsyncSession, user_id: uuid.UUID) -> None:
        super().__init__(session, Vehicle, user_id)

    async def list_active(self) -> List[Vehicle]:
        return await self.list(filters={"is_active": True})

    async def find_by_registration(self, registration: str) -> Optional[Vehicle]:
        """Find one of this user's vehicles by registration, ignoring whitespace and case."""
        stmt = self._scoped(
            select(Vehicle).where(_normalized_registration_column() == normalize_registration(registration))
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def registration_owned_elsewhere(self, registration: str) -> bool:
        """Whether the registration matches a vehicle that belongs to a different user."""
        stmt = select(Vehicle.id).where(
            (_normalized_registration_column() == normalize_registration(registration))
            & (Vehicle.user_id != self.user_id)
        )
        result = await self.session.execute(stmt)
        return result.first() is not None

    async def delete(self, entity_id: uuid.UUID) -> bool:
        vehicle = await self.get_by_id(entity_id)
        if vehicle is None:
            return False
        for model in (Document, ServiceRecord, FuelRecord, MileageRecord, MaintenanceSchedule):
            await self.session.execute(sa_delete(model).where(model.vehicle_id == entity_id))
        await self.session.delete(vehicle)
        await self.session.commit()
        return True
