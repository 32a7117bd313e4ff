"""
API endpoints for daily mileage records.

There is at most one record per vehicle and day; creating a record for a day
that already has one replaces its values.
"""

from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Response, status

from fleet_tracker.core.models.io.mileage_records import (
    MileageRecordCreate,
    MileageRecordRead,
    MileageRecordUpdate,
)
from fleet_tracker.server.services.deps import ReposDep

router = APIRouter(tags=["mileage-records"])


@router.get(
    "",
    response_model=list[MileageRecordRead],
    summary="List Mileage Records",
    description="Retrieve mileage records ordered by date, newest first.",
)
async def list_mileage_records(
    repos: ReposDep,
    vehicle_id: Optional[uuid.UUID] = None,
    limit: Optional[int] = Query(default=None, ge=1, le=1000),
    offset: Optional[int] = Query(default=None, ge=0),
) -> list[MileageRecordRead]:
    records = await repos.mileage_records.list(limit=limit, offset=offset, filters={"vehicle_id": vehicle_id})
    return [MileageRecordRead.model_validate(r) for r in records]


@router.post(
    "",
    response_model=MileageRecordRead,
    summary="Record Daily Mileage",
    description="Insert the mileage for a vehicle and day, or replace the existing record for that day.",
    responses={
        403: {"description": "Vehicle belongs to another user"},
        404: {"description": "Vehicle not found"},
    },
)
async def upsert_mileage_record(payload: MileageRecordCreate, repos: ReposDep) -> MileageRecordRead:
    record = await repos.mileage_records.upsert(
        payload.vehicle_id,
        payload.record_date,
        payload.daily_mileage,
        odometer_reading=payload.odometer_reading,
        source=payload.source.value,
    )
    return MileageRecordRead.model_validate(record)


@router.get("/{record_id}", response_model=MileageRecordRead, summary="Get Mileage Record")
async def get_mileage_record(record_id: uuid.UUID, repos: ReposDep) -> MileageRecordRead:
    record = await repos.mileage_records.get_by_id(record_id)
    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Mileage record {record_id} not found")
    return MileageRecordRead.model_validate(record)


@router.patch("/{record_id}", response_model=MileageRecordRead, summary="Update Mileage Record")
async def update_mileage_record(
    record_id: uuid.UUID, payload: MileageRecordUpdate, repos: ReposDep
) -> MileageRecordRead:
    record = await repos.mileage_records.get_by_id(record_id)
    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Mileage record {record_id} not found")

    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(record, key, value)
    record = await repos.mileage_records.update(record)
    return MileageRecordRead.model_validate(record)


@router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete Mileage Record")
async def delete_mileage_record(record_id: uuid.UUID, repos: ReposDep) -> Response:
    if not await repos.mileage_records.delete(record_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Mileage record {record_id} not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
