"""
User-scoped repositories, one module per table.

Every repository is constructed for a single user and never returns or
modifies another user's rows.
"""

from .base import BaseRepository, QueryBuilder, UserScopedRepository, VehicleOwnedRepository, ensure_vehicle_access
from .bundle import SqlRepoBundle, build_sql_repos
from .documents import DocumentRepository
from .drivers import DriverRepository
from .fuel_records import FuelRecordRepository
from .maintenance_schedules import MaintenanceScheduleRepository
from .mileage_records import MileageRecordRepository
from .saved_reports import SavedReportRepository
from .service_records import ServiceRecordRepository
from .vehicles import VehicleRepository

__all__ = [
    "BaseRepository",
    "DocumentRepository",
    "DriverRepository",
    "FuelRecordRepository",
    "MaintenanceScheduleRepository",
    "MileageRecordRepository",
    "QueryBuilder",
    "SavedReportRepository",
    "ServiceRecordRepository",
    "SqlRepoBundle",
    "UserScopedRepository",
    "VehicleOwnedRepository",
    "VehicleRepository",
    "build_sql_repos",
    "ensure_vehicle_access",
]
