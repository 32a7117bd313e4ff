"""
Database entities, one module per table.

Importing this package registers every table on ``Base.metadata``.
"""

from .documents import Document
from .drivers import Driver
from .fuel_records import FuelRecord
from .maintenance_schedules import MaintenanceSchedule
from .mileage_records import MileageRecord
from .saved_reports import SavedReport
from .service_records import ServiceRecord
from .vehicles import Vehicle

__all__ = [
    "Document",
    "Driver",
    "FuelRecord",
    "MaintenanceSchedule",
    "MileageRecord",
    "SavedReport",
    "ServiceRecord",
    "Vehicle",
]
