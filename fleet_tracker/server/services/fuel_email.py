"""
Fuel invoice email import.

An automation forwards an emailed fuel invoice; the invoice is extracted with
the AI extractor and one fuel record is created per line item whose
registration matches one of the owner's vehicles.
"""

from __future__ import annotations

from datetime import date
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from fleet_tracker.core.database.entities.fuel_records import FuelRecord
from fleet_tracker.core.database.repositories import SqlRepoBundle
from fleet_tracker.core.logging_config import get_logger
from fleet_tracker.core.models.domain.extraction import FuelInvoiceExtraction
from fleet_tracker.core.models.io.fuel_records import FuelRecordRead
from fleet_tracker.core.models.io.webhooks import FailedFuelItem, FuelEmailResult
from fleet_tracker.core.registration import normalize_registration

from .invoice_extraction import InvoiceExtractor

logger = get_logger(__name__)

DEFAULT_FILE_NAME = "zapier-invoice"


def _fill_date(extraction: FuelInvoiceExtraction, today: date) -> date:
    if not extraction.invoice_date:
        return today
    try:
        return date.fromisoformat(extraction.invoice_date)
    except ValueError:
        logger.warning(f"Unparseable invoice date {extraction.invoice_date!r}, using {today}")
        return today


async def process_fuel_email(
    repos: SqlRepoBundle,
    extractor: InvoiceExtractor,
    file_content: str,
    file_name: str = DEFAULT_FILE_NAME,
    today: Optional[date] = None,
) -> FuelEmailResult:
    """Extract a forwarded invoice and record its fuel purchases.

    Line items whose registration is not in the fleet, or that fail to save,
    are returned in ``failed_records`` with a reason.
    """
    today = today or date.today()
    vehicles = await repos.vehicles.list()
    # Plain values: a failed insert rolls back and expires the loaded vehicles
    registrations = [v.registration for v in vehicles]
    vehicle_ids = {normalize_registration(v.registration): v.id for v in vehicles}

    extraction = await extractor.extract_email_invoice(file_content, file_name, registrations)
    if not extraction.line_items:
        return FuelEmailResult(
            success=False,
            message="No fuel data could be extracted from the invoice",
            extracted_data=extraction,
        )

    fill_date = _fill_date(extraction, today)
    created: List[dict] = []
    failed: List[FailedFuelItem] = []

    for item in extraction.line_items:
        vehicle_id = vehicle_ids.get(normalize_registration(item.registration))
        if vehicle_id is None:
            failed.append(
                FailedFuelItem(
                    **item.model_dump(), reason=f'Vehicle registration "{item.registration}" not found in fleet'
                )
            )
            continue

        litres = item.litres or 0
        cost_per_litre = item.cost_per_litre or 0
        record = FuelRecord(
            vehicle_id=vehicle_id,
            fill_date=fill_date,
            litres=litres,
            cost_per_litre=cost_per_litre,
            total_cost=item.total_cost or litres * cost_per_litre,
            mileage=round(item.mileage) if item.mileage else None,
            station=extraction.station,
            notes=f"Auto-imported from email: {file_name}",
        )
        try:
            record = await repos.fuel_records.create(record)
        except SQLAlchemyError as e:
            await repos.fuel_records.session.rollback()
            logger.error(f"Failed to insert fuel record: {e}")
            failed.append(FailedFuelItem(**item.model_dump(), reason=f"Database error: {e}"))
            continue
        created.append(FuelRecordRead.model_validate(record).model_dump(mode="json"))

    logger.info(f"Processed invoice {file_name}: {len(created)} records created, {len(failed)} failed")
    return FuelEmailResult(
        success=True,
        message=f"Processed invoice: {len(created)} records created, {len(failed)} failed",
        created_records=created,
        failed_records=failed,
        extracted_data=extraction,
    )
