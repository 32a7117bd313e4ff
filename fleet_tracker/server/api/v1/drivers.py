"""
API endpoints for managing drivers.

Drivers are tracked for their licence details and the periodic licence check
code; responses include the check code status.
"""

from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Response, status

from fleet_tracker.core.database.entities.drivers import Driver
from fleet_tracker.core.logging_config import get_logger
from fleet_tracker.core.models.io.drivers import DriverCreate, DriverRead, DriverUpdate
from fleet_tracker.server.services.deps import ReposDep

logger = get_logger(__name__)

router = APIRouter(tags=["drivers"])


@router.get(
    "",
    response_model=list[DriverRead],
    summary="List Drivers",
    description="Retrieve the user's drivers ordered by name, with licence check code status.",
)
async def list_drivers(
    repos: ReposDep,
    limit: Optional[int] = Query(default=None, ge=1, le=1000),
    offset: Optional[int] = Query(default=None, ge=0),
) -> list[DriverRead]:
    drivers = await repos.drivers.list(limit=limit, offset=offset)
    logger.debug(f"Retrieved {len(drivers)} drivers")
    return [DriverRead.model_validate(d) for d in drivers]


@router.post(
    "",
    response_model=DriverRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Driver",
    responses={201: {"description": "Driver created successfully"}},
)
async def create_driver(payload: DriverCreate, repos: ReposDep) -> DriverRead:
    """
    Create a driver.

    - **name**: Driver's full name.
    - **license_number** / **license_expiry_date**: Licence details.
    - **last_check_code_date**: When the DVLA check code was last generated.
    - **next_check_code_due**: When a new check code is due; drives the reminder status.
    """
    driver = await repos.drivers.create(Driver(**payload.model_dump(), user_id=repos.user_id))
    return DriverRead.model_validate(driver)


@router.get("/{driver_id}", response_model=DriverRead, summary="Get Driver")
async def get_driver(driver_id: uuid.UUID, repos: ReposDep) -> DriverRead:
    driver = await repos.drivers.get_by_id(driver_id)
    if not driver:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Driver {driver_id} not found")
    return DriverRead.model_validate(driver)


@router.patch("/{driver_id}", response_model=DriverRead, summary="Update Driver")
async def update_driver(driver_id: uuid.UUID, payload: DriverUpdate, repos: ReposDep) -> DriverRead:
    driver = await repos.drivers.get_by_id(driver_id)
    if not driver:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Driver {driver_id} not found")

    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(driver, key, value)
    driver = await repos.drivers.update(driver)
    return DriverRead.model_validate(driver)


@router.delete("/{driver_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete Driver")
async def delete_driver(driver_id: uuid.UUID, repos: ReposDep) -> Response:
    if not await repos.drivers.delete(driver_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Driver {driver_id} not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
