"""
API endpoints for vehicle service records.

Records are owned through their vehicle: creating or moving a record onto a
vehicle the user does not own is rejected with 403 (404 for an unknown
vehicle).
"""

from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Response, status

from fleet_tracker.core.database.entities.service_records import ServiceRecord
from fleet_tracker.core.logging_config import get_logger
from fleet_tracker.core.models.io.service_records import (
    ServiceRecordCreate,
    ServiceRecordRead,
    ServiceRecordUpdate,
)
from fleet_tracker.server.services.deps import ReposDep

logger = get_logger(__name__)

router = APIRouter(tags=["service-records"])

_OWNERSHIP_RESPONSES = {
    403: {"description": "Vehicle belongs to another user"},
    404: {"description": "Service record or vehicle not found"},
}


@router.get(
    "",
    response_model=list[ServiceRecordRead],
    summary="List Service Records",
    description="Retrieve service records, newest first, optionally for one vehicle.",
)
async def list_service_records(
    repos: ReposDep,
    vehicle_id: Optional[uuid.UUID] = None,
    limit: Optional[int] = Query(default=None, ge=1, le=1000),
    offset: Optional[int] = Query(default=None, ge=0),
) -> list[ServiceRecordRead]:
    """
    List service records.

    - **vehicle_id**: Optional filter for a single vehicle.
    """
    records = await repos.service_records.list(limit=limit, offset=offset, filters={"vehicle_id": vehicle_id})
    logger.debug(f"Retrieved {len(records)} service records (vehicle_id={vehicle_id})")
    return [ServiceRecordRead.model_validate(r) for r in records]


@router.post(
    "",
    response_model=ServiceRecordRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Service Record",
    responses=_OWNERSHIP_RESPONSES,
)
async def create_service_record(payload: ServiceRecordCreate, repos: ReposDep) -> ServiceRecordRead:
    record = await repos.service_records.create(ServiceRecord(**payload.model_dump()))
    return ServiceRecordRead.model_validate(record)


@router.get("/{record_id}", response_model=ServiceRecordRead, summary="Get Service Record")
async def get_service_record(record_id: uuid.UUID, repos: ReposDep) -> ServiceRecordRead:
    record = await repos.service_records.get_by_id(record_id)
    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Service record {record_id} not found")
    return ServiceRecordRead.model_validate(record)


@router.patch(
    "/{record_id}",
    response_model=ServiceRecordRead,
    summary="Update Service Record",
    responses=_OWNERSHIP_RESPONSES,
)
async def update_service_record(
    record_id: uuid.UUID, payload: ServiceRecordUpdate, repos: ReposDep
) -> ServiceRecordRead:
    record = await repos.service_records.get_by_id(record_id)
    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Service record {record_id} not found")

    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(record, key, value)
    record = await repos.service_records.update(record)
    return ServiceRecordRead.model_validate(record)


@router.delete(
    "/{record_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Service Record",
    description="Delete a service record. Documents attached to it are kept and detached.",
)
async def delete_service_record(record_id: uuid.UUID, repos: ReposDep) -> Response:
    if not await repos.service_records.delete(record_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Service record {record_id} not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
