"""Domain enums for fleet records and derived statuses."""

from __future__ import annotations

from enum import Enum


class DueStatus(str, Enum):
    """
    Status of a date-based deadline such as an MOT or a licence check code.

    Classified from the number of days until the due date.
    """

    valid = "valid"  # More than the warning window away.
    due_soon = "due-soon"  # Due today or within the warning window.
    overdue = "overdue"  # Due date has passed.
    unknown = "unknown"  # No due date recorded.


class MaintenanceStatus(str, Enum):
    """Status of a maintenance schedule, driven by date and mileage."""

    ok = "ok"
    due_soon = "due-soon"
    overdue = "overdue"


class FuelType(str, Enum):
    petrol = "petrol"
    diesel = "diesel"
    hybrid = "hybrid"
    plug_in_hybrid = "plug-in hybrid"
    electric = "electric"


class ProcessingStatus(str, Enum):
    """Lifecycle of an uploaded document's AI extraction."""

    pending = "pending"
    processing = "processing"
    completed = "completed"
    failed = "failed"


class MileageSource(str, Enum):
    """Where a mileage record came from."""

    manual = "manual"
    zapier = "zapier"
    n8n_excel = "n8n_excel"


class ReportType(str, Enum):
    comparison = "comparison"
    carbon = "carbon"
    costs = "costs"
    fuel = "fuel"
    custom = "custom"


class ReportGroupBy(str, Enum):
    day = "day"
    week = "week"
    month = "month"
    year = "year"


class ReminderKind(str, Enum):
    """Source of an entry in the combined reminders list."""

    mot = "mot"
    check_code = "check_code"
    maintenance = "maintenance"


class ImportRowStatus(str, Enum):
    """Outcome of one row in a batch mileage import."""

    success = "success"
    skipped = "skipped"
    validation_error = "validation_error"
    not_found = "not_found"
    unauthorized = "unauthorized"
    error = "error"
