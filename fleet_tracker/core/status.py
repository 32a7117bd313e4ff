"""
Deadline status classification.

Pure functions that turn a due date (and for maintenance, a due mileage) into a
status. Every function takes an optional ``today`` so callers and tests can pin
the reference date; it defaults to the current local date.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from dateutil.relativedelta import relativedelta

from fleet_tracker.core.models.domain.enums import DueStatus, MaintenanceStatus

DUE_SOON_DAYS = 30
MAINTENANCE_DUE_SOON_DAYS = 14
MAINTENANCE_DUE_SOON_MILES = 500


@dataclass(frozen=True)
class MaintenanceType:
    """Default intervals for a common maintenance task."""

    value: str
    label: str
    interval_miles: Optional[int]
    interval_months: Optional[int]


COMMON_MAINTENANCE_TYPES: tuple[MaintenanceType, ...] = (
    MaintenanceType("oil-change", "Oil Change", 10000, 12),
    MaintenanceType("brake-inspection", "Brake Inspection", 20000, 24),
    MaintenanceType("tire-rotation", "Tyre Rotation", 5000, 6),
    MaintenanceType("air-filter", "Air Filter Replacement", 15000, 12),
    MaintenanceType("spark-plugs", "Spark Plugs", 30000, 36),
    MaintenanceType("coolant-flush", "Coolant Flush", 30000, 36),
    MaintenanceType("transmission-service", "Transmission Service", 60000, 48),
    MaintenanceType("timing-belt", "Timing Belt", 60000, 60),
    MaintenanceType("battery-check", "Battery Check", None, 12),
    MaintenanceType("custom", "Custom", None, None),
)


def days_until(due_date: Optional[date], today: Optional[date] = None) -> Optional[int]:
    """Whole days from ``today`` to ``due_date``; negative once it has passed.

    Returns None when there is no due date.
    """
    if due_date is None:
        return None
    today = today or date.today()
    return (due_date - today).days


def _classify_due(due_date: Optional[date], today: Optional[date], window: int) -> DueStatus:
    days = days_until(due_date, today)
    if days is None:
        return DueStatus.unknown
    if days < 0:
        return DueStatus.overdue
    if days <= window:
        return DueStatus.due_soon
    return DueStatus.valid


def mot_status(due_date: Optional[date], today: Optional[date] = None) -> DueStatus:
    """Classify an MOT expiry date.

    Day 0 (due today) through day 30 are ``due-soon``; day 31 onwards is
    ``valid``; any past date is ``overdue``.
    """
    return _classify_due(due_date, today, DUE_SOON_DAYS)


def check_code_status(due_date: Optional[date], today: Optional[date] = None) -> DueStatus:
    """Classify a driver's next licence check code date. Same thresholds as MOTs."""
    return _classify_due(due_date, today, DUE_SOON_DAYS)


def maintenance_status(
    next_due_date: Optional[date],
    next_due_mileage: Optional[int] = None,
    current_mileage: Optional[int] = None,
    today: Optional[date] = None,
) -> MaintenanceStatus:
    """Classify a maintenance schedule.

    The date is checked first: past is overdue, within 14 days is due soon.
    Mileage is only considered when both the due and current readings are
    known; fewer than zero miles remaining is overdue, up to 500 is due soon.
    """
    days = days_until(next_due_date, today)
    if days is not None:
        if days < 0:
            return MaintenanceStatus.overdue
        if days <= MAINTENANCE_DUE_SOON_DAYS:
            return MaintenanceStatus.due_soon

    if next_due_mileage and current_mileage:
        remaining = next_due_mileage - current_mileage
        if remaining < 0:
            return MaintenanceStatus.overdue
        if remaining <= MAINTENANCE_DUE_SOON_MILES:
            return MaintenanceStatus.due_soon

    return MaintenanceStatus.ok


def add_months(start: date, months: int) -> date:
    """Calendar month addition, clamped to the end of shorter months (31 Jan + 1 = 28/29 Feb)."""
    return start + relativedelta(months=months)


def next_due_after_completion(
    interval_months: Optional[int],
    interval_miles: Optional[int],
    completed_date: date,
    completed_mileage: Optional[int] = None,
) -> tuple[Optional[date], Optional[int]]:
    """Next due date and mileage once a schedule has been completed.

    Either value is None when the schedule has no interval of that kind, or
    (for mileage) when no completion reading was given.
    """
    next_date = add_months(completed_date, interval_months) if interval_months else None
    next_mileage = (
        completed_mileage + interval_miles if interval_miles and completed_mileage is not None else None
    )
    return next_date, next_mileage
