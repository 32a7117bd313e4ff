"""
I/O models for API requests and responses.

This package contains Pydantic-based I/O schemas that define the contract
between API endpoints and clients. These models are separate from database
entities so that computed statuses and request validation live apart from
the table definitions.

Modules:
- vehicles, drivers: fleet assets with computed MOT / check code status
- service_records, documents, fuel_records, mileage_records: vehicle history
- maintenance: schedules, completion requests and the type catalogue
- reports: saved report configurations
- webhooks: import and scan payloads and results
"""

from .documents import (
    DocumentCreate,
    DocumentRead,
    DocumentUpdate,
    DuplicateCheckItem,
    DuplicateCheckRequest,
    DuplicateCheckResponse,
    ExistingFileRead,
    FileToCheck,
)
from .drivers import DriverCreate, DriverRead, DriverUpdate
from .fuel_records import FuelRecordCreate, FuelRecordRead, FuelRecordUpdate
from .maintenance import (
    MaintenanceCompletion,
    MaintenanceScheduleCreate,
    MaintenanceScheduleRead,
    MaintenanceScheduleUpdate,
    MaintenanceTypeRead,
)
from .mileage_records import MileageRecordCreate, MileageRecordRead, MileageRecordUpdate
from .reports import ReportConfig, SavedReportCreate, SavedReportRead, SavedReportUpdate
from .service_records import ServiceRecordCreate, ServiceRecordRead, ServiceRecordUpdate
from .vehicles import VehicleCreate, VehicleRead, VehicleUpdate
from .webhooks import (
    ExcelImportResponse,
    FailedFuelItem,
    FuelEmailResult,
    ImportRowResult,
    MileageImportPayload,
    ScanRequest,
    ValidatedFuelInvoice,
)

__all__ = [
    "DocumentCreate",
    "DocumentRead",
    "DocumentUpdate",
    "DriverCreate",
    "DriverRead",
    "DriverUpdate",
    "DuplicateCheckItem",
    "DuplicateCheckRequest",
    "DuplicateCheckResponse",
    "ExcelImportResponse",
    "ExistingFileRead",
    "FailedFuelItem",
    "FileToCheck",
    "FuelEmailResult",
    "FuelRecordCreate",
    "FuelRecordRead",
    "FuelRecordUpdate",
    "ImportRowResult",
    "MaintenanceCompletion",
    "MaintenanceScheduleCreate",
    "MaintenanceScheduleRead",
    "MaintenanceScheduleUpdate",
    "MaintenanceTypeRead",
    "MileageImportPayload",
    "MileageRecordCreate",
    "MileageRecordRead",
    "MileageRecordUpdate",
    "ReportConfig",
    "SavedReportCreate",
    "SavedReportRead",
    "SavedReportUpdate",
    "ScanRequest",
    "ServiceRecordCreate",
    "ServiceRecordRead",
    "ServiceRecordUpdate",
    "ValidatedFuelInvoice",
    "VehicleCreate",
    "VehicleRead",
    "VehicleUpdate",
]
