"""
Repository bundle for dependency injection.

This module provides a convenience bundle of all repository instances bound to
one session and one user, for injection into routers and services.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from .documents import DocumentRepository
from .drivers import DriverRepository
from .fuel_records import FuelRecordRepository
from .maintenance_schedules import MaintenanceScheduleRepository
from .mileage_records import MileageRecordRepository
from .saved_reports import SavedReportRepository
from .service_records import ServiceRecordRepository
from .vehicles import VehicleRepository


@dataclass(frozen=True)
class SqlRepoBundle:
    """Convenience bundle of all SQL repositories for one user."""

    user_id: uuid.UUID
    vehicles: VehicleRepository
    drivers: DriverRepository
    service_records: ServiceRecordRepository
    documents: DocumentRepository
    fuel_records: FuelRecordRepository
    mileage_records: MileageRecordRepository
    maintenance_schedules: MaintenanceScheduleRepository
    saved_reports: SavedReportRepository


def build_sql_repos(*, session: AsyncSession, user_id: uuid.UUID) -> SqlRepoBundle:
    """Build a SqlRepoBundle from an existing session.

    Args:
        session: Existing async session
        user_id: The user every repository is scoped to

    Returns:
        Bundle containing all repository instances
    """
    return SqlRepoBundle(
        user_id=user_id,
        vehicles=VehicleRepository(session, user_id),
        drivers=DriverRepository(session, user_id),
        service_records=ServiceRecordRepository(session, user_id),
        documents=DocumentRepository(session, user_id),
        fuel_records=FuelRecordRepository(session, user_id),
        mileage_records=MileageRecordRepository(session, user_id),
        maintenance_schedules=MaintenanceScheduleRepository(session, user_id),
        saved_reports=SavedReportRepository(session, user_id),
    )
