"""
Webhook and scan I/O models.

Webhook payloads are validated in the routers and every failure is reported
as a 400 JSON envelope. These models only describe shapes.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from fleet_tracker.core.models.domain.enums import ImportRowStatus
from fleet_tracker.core.models.domain.extraction import (
    FuelInvoiceExtraction,
    FuelInvoiceLineItem,
    RejectedFuelLineItem,
)


class MileageImportPayload(BaseModel):
    """Body of ``POST /webhooks/import-mileage``."""

    registration: Optional[str] = None
    daily_mileage: Optional[int] = None
    record_date: Optional[str] = Field(default=None, description="YYYY-MM-DD, defaults to today")
    odometer_reading: Optional[int] = None


class ImportRowResult(BaseModel):
    vehicle: str
    status: ImportRowStatus
    error: Optional[str] = None


class ExcelImportResponse(BaseModel):
    message: str = "Import complete"
    results: List[ImportRowResult]
    processed: int
    skipped: int
    errors: int


class ScanRequest(BaseModel):
    """Body of the scan endpoints. Content is a ``data:`` URL for images, plain text otherwise."""

    model_config = ConfigDict(populate_by_name=True)

    file_content: Optional[str] = Field(default=None, alias="fileContent")
    file_name: Optional[str] = Field(default=None, alias="fileName")
    vehicle_registrations: List[str] = Field(default_factory=list, alias="vehicleRegistrations")


class ValidatedFuelInvoice(FuelInvoiceExtraction):
    """Fuel invoice after line item validation; failed items move to ``rejectedLineItems``."""

    line_items: List[FuelInvoiceLineItem] = Field(default_factory=list)
    rejected_line_items: List[RejectedFuelLineItem] = Field(default_factory=list)


class FailedFuelItem(FuelInvoiceLineItem):
    reason: str


class FuelEmailResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message: str
    created_records: List[Dict[str, Any]] = Field(default_factory=list, alias="createdRecords")
    failed_records: List[FailedFuelItem] = Field(default_factory=list, alias="failedRecords")
    extracted_data: Optional[FuelInvoiceExtraction] = Field(default=None, alias="extractedData")
