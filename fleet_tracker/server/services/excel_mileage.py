"""
Excel mileage import for tracker exports (n8n webhook).

The workbook's first sheet has a title row, then a header row with at least
``Device``, ``Route Length``, ``Mileage``, ``First Movement`` and ``Last
Stop``. Each data row is one device's day: the route length is the day's
distance and the mileage column the odometer. Devices are named after the
vehicle ("Ford Transit") rather than its registration, so rows are matched to
vehicles by make and model.
"""

from __future__ import annotations

import re
import uuid
import zipfile
from dataclasses import dataclass
from datetime import date, datetime
from io import BytesIO
from typing import Any, Dict, List, Optional

from dateutil.relativedelta import relativedelta
from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException
from sqlalchemy.exc import SQLAlchemyError

from fleet_tracker.core.database.repositories import SqlRepoBundle
from fleet_tracker.core.errors import ImportValidationError, OwnershipError
from fleet_tracker.core.logging_config import get_logger
from fleet_tracker.core.models.domain.enums import ImportRowStatus, MileageSource
from fleet_tracker.core.models.io.webhooks import ExcelImportResponse, ImportRowResult
from fleet_tracker.core.registration import match_device_to_vehicle

logger = get_logger(__name__)

MAX_FILE_SIZE = 10 * 1024 * 1024
MAX_ROWS = 500
MAX_DAILY_MILEAGE = 2000
MAX_ODOMETER = 1_000_000
HEADER_ROW = 2

DEVICE = "Device"
ROUTE_LENGTH = "Route Length"
MILEAGE = "Mileage"
FIRST_MOVEMENT = "First Movement"
LAST_STOP = "Last Stop"

_LEADING_NUMBER = re.compile(r"^([\d.]+)")
_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

_ERROR_STATUSES = {
    ImportRowStatus.error,
    ImportRowStatus.not_found,
    ImportRowStatus.validation_error,
    ImportRowStatus.unauthorized,
}


@dataclass
class MileageRow:
    device: str
    daily_mileage: int
    odometer_reading: Optional[int]
    record_date: str


@dataclass(frozen=True)
class VehicleRef:
    """Plain copy of the vehicle fields used for matching.

    A failed upsert rolls the session back and expires loaded vehicles, so
    rows after it must not read ORM attributes.
    """

    id: uuid.UUID
    make: str
    model: str


def read_rows(content: bytes) -> List[Dict[str, Any]]:
    """Data rows of the first sheet keyed by the header row; blank rows are dropped.

    Raises:
        ImportValidationError: the file is not a readable workbook or has too many rows
    """
    if len(content) > MAX_FILE_SIZE:
        raise ImportValidationError(f"File too large. Maximum size is {MAX_FILE_SIZE // 1024 // 1024}MB")
    try:
        workbook = load_workbook(BytesIO(content), read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError) as e:
        raise ImportValidationError(f"Could not read Excel file: {e}")

    try:
        sheet = workbook.worksheets[0]
        values = list(sheet.iter_rows(values_only=True))
    finally:
        workbook.close()

    if len(values) < HEADER_ROW:
        return []
    headers = [str(h).strip() if h is not None else "" for h in values[HEADER_ROW - 1]]

    rows = []
    for raw in values[HEADER_ROW:]:
        if all(cell is None or str(cell).strip() == "" for cell in raw):
            continue
        rows.append({header: cell for header, cell in zip(headers, raw) if header})

    if len(rows) > MAX_ROWS:
        raise ImportValidationError(f"Too many rows. Maximum is {MAX_ROWS} rows.")
    return rows


def _leading_number(value: Any) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, (int, float)):
        return round(value)
    match = _LEADING_NUMBER.match(str(value).strip())
    if match is None:
        return None
    try:
        return round(float(match.group(1)))
    except ValueError:
        return None


def _date_part(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value).strip().split(" ")[0] or None


def parse_row(row: Dict[str, Any], today: Optional[date] = None) -> Optional[MileageRow]:
    """Turn a sheet row into a mileage reading; None for rows without a device."""
    device = row.get(DEVICE)
    device = str(device).strip() if device is not None else ""
    if not device or device == DEVICE:
        return None

    record_date = _date_part(row.get(LAST_STOP)) or _date_part(row.get(FIRST_MOVEMENT))
    return MileageRow(
        device=device,
        daily_mileage=_leading_number(row.get(ROUTE_LENGTH)) or 0,
        odometer_reading=_leading_number(row.get(MILEAGE)),
        record_date=record_date or (today or date.today()).isoformat(),
    )


def validate_row(row: MileageRow, today: Optional[date] = None) -> List[str]:
    today = today or date.today()
    errors = []
    if not 0 <= row.daily_mileage <= MAX_DAILY_MILEAGE:
        errors.append(f"Daily mileage out of range (0-{MAX_DAILY_MILEAGE}): {row.daily_mileage}")
    if row.odometer_reading is not None and not 0 <= row.odometer_reading <= MAX_ODOMETER:
        errors.append(f"Odometer reading out of range (0-{MAX_ODOMETER}): {row.odometer_reading}")

    if not _ISO_DATE.match(row.record_date):
        errors.append(f"Invalid date format: {row.record_date}")
    else:
        try:
            parsed = date.fromisoformat(row.record_date)
        except ValueError:
            errors.append(f"Invalid date format: {row.record_date}")
        else:
            if parsed > today or parsed < today - relativedelta(years=1):
                errors.append(f"Date out of acceptable range: {row.record_date}")
    return errors


async def import_workbook(
    repos: SqlRepoBundle,
    content: bytes,
    today: Optional[date] = None,
) -> Dict[str, Any]:
    """Import every row of a tracker export for the repositories' user.

    Returns:
        ``{"error": ..., "results": []}`` when the user has no vehicles,
        otherwise the per-row results with processed/skipped/errors counts
    """
    today = today or date.today()
    rows = read_rows(content)

    vehicles = [VehicleRef(v.id, v.make, v.model) for v in await repos.vehicles.list()]
    if not vehicles:
        return {"error": "No vehicles found for this user", "results": []}

    results: List[ImportRowResult] = []
    for raw in rows:
        row = parse_row(raw, today)
        if row is None:
            continue

        errors = validate_row(row, today)
        if errors:
            results.append(
                ImportRowResult(vehicle=row.device, status=ImportRowStatus.validation_error, error="; ".join(errors))
            )
            continue

        if row.daily_mileage == 0 and not row.odometer_reading:
            results.append(ImportRowResult(vehicle=row.device, status=ImportRowStatus.skipped, error="No mileage data"))
            continue

        vehicle = match_device_to_vehicle(row.device, vehicles)
        if vehicle is None:
            results.append(
                ImportRowResult(
                    vehicle=row.device, status=ImportRowStatus.not_found, error="No matching vehicle in user's fleet"
                )
            )
            continue

        try:
            await repos.mileage_records.upsert(
                vehicle.id,
                date.fromisoformat(row.record_date),
                row.daily_mileage,
                row.odometer_reading,
                MileageSource.n8n_excel.value,
            )
        except OwnershipError as e:
            results.append(ImportRowResult(vehicle=row.device, status=ImportRowStatus.unauthorized, error=e.message))
            continue
        except SQLAlchemyError as e:
            await repos.mileage_records.session.rollback()
            logger.error(f"Error upserting mileage for {row.device}: {e}")
            results.append(ImportRowResult(vehicle=row.device, status=ImportRowStatus.error, error=str(e)))
            continue

        results.append(ImportRowResult(vehicle=row.device, status=ImportRowStatus.success))

    response = ExcelImportResponse(
        results=results,
        processed=sum(1 for r in results if r.status == ImportRowStatus.success),
        skipped=sum(1 for r in results if r.status == ImportRowStatus.skipped),
        errors=sum(1 for r in results if r.status in _ERROR_STATUSES),
    )
    logger.info(
        f"Excel mileage import for user {repos.user_id}: {response.processed} processed, "
        f"{response.skipped} skipped, {response.errors} errors"
    )
    return response.model_dump(mode="json")
