"""
Single-record mileage import used by the Zapier webhook.

The vehicle is resolved by normalized registration among the caller's own
vehicles, then the day's record is upserted with source ``zapier``.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from fleet_tracker.core.database.entities.mileage_records import MileageRecord
from fleet_tracker.core.database.repositories import SqlRepoBundle
from fleet_tracker.core.errors import ImportValidationError, OwnershipError, VehicleNotFoundError
from fleet_tracker.core.logging_config import get_logger
from fleet_tracker.core.models.domain.enums import MileageSource
from fleet_tracker.core.models.io.webhooks import MileageImportPayload

logger = get_logger(__name__)


def parse_record_date(value: Optional[str], today: Optional[date] = None) -> date:
    if not value:
        return today or date.today()
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ImportValidationError(f"Invalid record_date: {value}. Expected YYYY-MM-DD")


async def import_mileage(
    repos: SqlRepoBundle,
    payload: MileageImportPayload,
    today: Optional[date] = None,
) -> MileageRecord:
    """Validate a payload and upsert the mileage record it describes.

    Raises:
        ImportValidationError: registration or daily_mileage missing, or a bad date
        VehicleNotFoundError: no vehicle matches the registration
        OwnershipError: the registration only matches another user's vehicle
    """
    if not payload.registration or payload.daily_mileage is None:
        raise ImportValidationError("Missing required fields: registration, daily_mileage")

    record_date = parse_record_date(payload.record_date, today)

    vehicle = await repos.vehicles.find_by_registration(payload.registration)
    if vehicle is None:
        if await repos.vehicles.registration_owned_elsewhere(payload.registration):
            raise OwnershipError("Unauthorized: vehicle does not belong to user")
        logger.warning(f"Vehicle not found: {payload.registration}")
        raise VehicleNotFoundError(f"Vehicle not found: {payload.registration}")

    record = await repos.mileage_records.upsert(
        vehicle.id,
        record_date,
        payload.daily_mileage,
        payload.odometer_reading or None,
        MileageSource.zapier.value,
    )
    logger.info(f"Mileage record saved for {vehicle.registration} on {record_date}: {record.daily_mileage} miles")
    return record
