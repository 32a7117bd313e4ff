"""Domain models: enums, analytics results and AI extraction schemas."""

from .enums import (
    DueStatus,
    FuelType,
    ImportRowStatus,
    MaintenanceStatus,
    MileageSource,
    ProcessingStatus,
    ReminderKind,
    ReportGroupBy,
    ReportType,
)
from .extraction import (
    FuelInvoiceExtraction,
    FuelInvoiceLineItem,
    RejectedFuelLineItem,
    ServiceDocumentExtraction,
    ServiceLineItem,
)

__all__ = [
    "FuelInvoiceExtraction",
    "FuelInvoiceLineItem",
    "RejectedFuelLineItem",
    "ServiceDocumentExtraction",
    "ServiceLineItem",
    "DueStatus",
    "FuelType",
    "ImportRowStatus",
    "MaintenanceStatus",
    "MileageSource",
    "ProcessingStatus",
    "ReminderKind",
    "ReportGroupBy",
    "ReportType",
]
