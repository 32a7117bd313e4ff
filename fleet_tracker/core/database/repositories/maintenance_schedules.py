"""
Maintenance schedule repository.

Schedules carry their own ``user_id``; a schedule may also point at a vehicle,
which then has to belong to the same user.
"""

from __future__ import annotations

import uuid
from datetime import date
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from fleet_tracker.core.status import next_due_after_completion

from ..entities.maintenance_schedules import MaintenanceSchedule
from .base import UserScopedRepository, ensure_vehicle_access


class MaintenanceScheduleRepository(UserScopedRepository[MaintenanceSchedule]):
    """Repository for maintenance schedules, soonest due first."""

    default_order = (
        MaintenanceSchedule.next_due_date.is_(None),
        MaintenanceSchedule.next_due_date,
    )

    def __init__(self, session: AsyncSession, user_id: uuid.UUID) -> None:
        super().__init__(session, MaintenanceSchedule, user_id)

    async def _before_write(self, entity: MaintenanceSchedule) -> None:
        if entity.vehicle_id is not None:
            await ensure_vehicle_access(self.session, self.user_id, entity.vehicle_id)

    async def mark_completed(
        self,
        schedule_id: uuid.UUID,
        completed_date: date,
        completed_mileage: Optional[int] = None,
    ) -> Optional[MaintenanceSchedule]:
        """Record a completion and roll the next due date and mileage forward.

        Returns:
            The updated schedule, or None if it does not exist for this user
        """
        schedule = await self.get_by_id(schedule_id)
        if schedule is None:
            return None

        next_date, next_mileage = next_due_after_completion(
            schedule.interval_months,
            schedule.interval_miles,
            completed_date,
            completed_mileage,
        )
        schedule.last_completed_date = completed_date
        schedule.last_completed_mileage = completed_mileage
        schedule.next_due_date = next_date
        schedule.next_due_mileage = next_mileage
        return await self.update(schedule)
