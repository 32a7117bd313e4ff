"""
API endpoints for fuel records.

Creating a fill-up that matches an existing one on the same vehicle and day
(within the litres and cost tolerance) is refused with 409 unless the caller
explicitly allows duplicates.
"""

from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Response, status

from fleet_tracker.core.database.entities.fuel_records import FuelRecord
from fleet_tracker.core.duplicates import find_duplicate_fuel_record
from fleet_tracker.core.errors import DuplicateRecordError
from fleet_tracker.core.logging_config import get_logger
from fleet_tracker.core.models.io.fuel_records import FuelRecordCreate, FuelRecordRead, FuelRecordUpdate
from fleet_tracker.server.services.deps import ReposDep

logger = get_logger(__name__)

router = APIRouter(tags=["fuel-records"])


@router.get(
    "",
    response_model=list[FuelRecordRead],
    summary="List Fuel Records",
    description="Retrieve fuel records ordered by fill date, newest first.",
)
async def list_fuel_records(
    repos: ReposDep,
    vehicle_id: Optional[uuid.UUID] = None,
    limit: Optional[int] = Query(default=None, ge=1, le=1000),
    offset: Optional[int] = Query(default=None, ge=0),
) -> list[FuelRecordRead]:
    records = await repos.fuel_records.list(limit=limit, offset=offset, filters={"vehicle_id": vehicle_id})
    logger.debug(f"Retrieved {len(records)} fuel records (vehicle_id={vehicle_id})")
    return [FuelRecordRead.model_validate(r) for r in records]


@router.post(
    "",
    response_model=FuelRecordRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Fuel Record",
    description="Record a fill-up. Near-identical fill-ups on the same day are rejected unless allowed.",
    responses={
        201: {"description": "Fuel record created successfully"},
        403: {"description": "Vehicle belongs to another user"},
        404: {"description": "Vehicle not found"},
        409: {"description": "A matching fuel record already exists"},
    },
)
async def create_fuel_record(
    payload: FuelRecordCreate,
    repos: ReposDep,
    allow_duplicate: bool = False,
) -> FuelRecordRead:
    """
    Create a fuel record.

    - **litres** / **cost_per_litre** / **total_cost**: Fill-up amounts.
    - **mileage**: Odometer at the pump; used for MPG.
    - **allow_duplicate**: Skip the same-day duplicate check.
    """
    if not allow_duplicate:
        same_day = await repos.fuel_records.list_for_day(payload.vehicle_id, payload.fill_date)
        duplicate = find_duplicate_fuel_record(
            payload.vehicle_id, payload.fill_date, payload.litres, payload.total_cost, same_day
        )
        if duplicate:
            logger.info(f"Rejected duplicate fuel record for vehicle {payload.vehicle_id} on {payload.fill_date}")
            raise DuplicateRecordError(
                f"A similar fuel record already exists for this vehicle on {payload.fill_date}",
                details={"existing_record_id": str(duplicate.id)},
            )

    record = await repos.fuel_records.create(FuelRecord(**payload.model_dump()))
    return FuelRecordRead.model_validate(record)


@router.get("/{record_id}", response_model=FuelRecordRead, summary="Get Fuel Record")
async def get_fuel_record(record_id: uuid.UUID, repos: ReposDep) -> FuelRecordRead:
    record = await repos.fuel_records.get_by_id(record_id)
    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Fuel record {record_id} not found")
    return FuelRecordRead.model_validate(record)


@router.patch("/{record_id}", response_model=FuelRecordRead, summary="Update Fuel Record")
async def update_fuel_record(record_id: uuid.UUID, payload: FuelRecordUpdate, repos: ReposDep) -> FuelRecordRead:
    record = await repos.fuel_records.get_by_id(record_id)
    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Fuel record {record_id} not found")

    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(record, key, value)
    record = await repos.fuel_records.update(record)
    return FuelRecordRead.model_validate(record)


@router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete Fuel Record")
async def delete_fuel_record(record_id: uuid.UUID, repos: ReposDep) -> Response:
    if not await repos.fuel_records.delete(record_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Fuel record {record_id} not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
