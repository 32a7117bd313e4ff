"""
Duplicate detection for uploads and fuel records.

Two heuristics:

- Files: same name (case-insensitive) and same size as an existing document,
  or a stored fuel invoice whose path contains the dashed file name.
- Fuel records: same vehicle and fill date with litres and total cost within
  a small tolerance of an existing record.
"""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Optional, Sequence

from fleet_tracker.core.database.entities import Document, FuelRecord

LITRES_TOLERANCE = 0.5
COST_TOLERANCE = 1.0

DOCUMENTS_TABLE = "documents"
FUEL_RECORDS_TABLE = "fuel_records"

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class ExistingFile:
    file_name: str
    table_name: str
    created_at: Optional[datetime]


@dataclass(frozen=True)
class DuplicateCheckResult:
    file_name: str
    is_duplicate: bool
    existing_file: Optional[ExistingFile] = None


def normalize_file_name(file_name: str) -> str:
    return file_name.strip().lower()


def check_file(
    file_name: str,
    file_size: Optional[int],
    documents: Iterable[Document],
    fuel_records: Iterable[FuelRecord],
) -> DuplicateCheckResult:
    """Check one upload against existing documents and fuel invoices.

    Documents are checked first. Fuel invoices are stored with a timestamp
    prefix and dashes instead of spaces, hence the containment test on the
    last path segment.
    """
    normalized = normalize_file_name(file_name)
    if not normalized:
        return DuplicateCheckResult(file_name=file_name, is_duplicate=False)

    for document in documents:
        if normalize_file_name(document.file_name) == normalized and document.file_size == file_size:
            return DuplicateCheckResult(
                file_name=file_name,
                is_duplicate=True,
                existing_file=ExistingFile(document.file_name, DOCUMENTS_TABLE, document.created_at),
            )

    dashed = _WHITESPACE.sub("-", normalized)
    for record in fuel_records:
        if not record.invoice_file_path:
            continue
        stored = record.invoice_file_path.rsplit("/", 1)[-1]
        if dashed in stored.lower():
            return DuplicateCheckResult(
                file_name=file_name,
                is_duplicate=True,
                existing_file=ExistingFile(stored, FUEL_RECORDS_TABLE, record.created_at),
            )

    return DuplicateCheckResult(file_name=file_name, is_duplicate=False)


def check_files(
    files: Sequence[tuple[str, Optional[int]]],
    documents: Sequence[Document],
    fuel_records: Sequence[FuelRecord],
) -> list[DuplicateCheckResult]:
    """Check several uploads against one snapshot of existing rows."""
    return [check_file(name, size, documents, fuel_records) for name, size in files]


def format_duplicate_message(results: Sequence[DuplicateCheckResult]) -> str:
    """User-facing summary of the duplicates found; empty when there are none.

    The source named is the table of the first duplicate.
    """
    duplicates = [r for r in results if r.is_duplicate]
    if not duplicates:
        return ""

    names = ", ".join(r.file_name for r in duplicates)
    first = duplicates[0].existing_file
    source = "fuel records" if first and first.table_name == FUEL_RECORDS_TABLE else "service documents"
    lead = "This file appears" if len(duplicates) == 1 else "These files appear"
    return f"{lead} to already exist in {source}: {names}"


def is_duplicate_fuel_record(
    vehicle_id: uuid.UUID,
    fill_date: date,
    litres: float,
    total_cost: float,
    existing: FuelRecord,
) -> bool:
    """Same vehicle and day, litres within 0.5 and cost within 1 (both inclusive)."""
    return (
        existing.vehicle_id == vehicle_id
        and existing.fill_date == fill_date
        and abs(existing.litres - litres) <= LITRES_TOLERANCE
        and abs(existing.total_cost - total_cost) <= COST_TOLERANCE
    )


def find_duplicate_fuel_record(
    vehicle_id: uuid.UUID,
    fill_date: date,
    litres: float,
    total_cost: float,
    existing: Iterable[FuelRecord],
) -> Optional[FuelRecord]:
    return next(
        (r for r in existing if is_duplicate_fuel_record(vehicle_id, fill_date, litres, total_cost, r)),
        None,
    )
