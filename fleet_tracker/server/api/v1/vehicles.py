"""
API endpoints for managing fleet vehicles.

Provides CRUD operations for the authenticated user's vehicles. Responses
include the MOT status computed from the MOT due date.
"""

from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Response, status

from fleet_tracker.core.database.entities.vehicles import Vehicle
from fleet_tracker.core.logging_config import get_logger
from fleet_tracker.core.models.io.vehicles import VehicleCreate, VehicleRead, VehicleUpdate
from fleet_tracker.server.services.deps import ReposDep

logger = get_logger(__name__)

router = APIRouter(tags=["vehicles"])


@router.get(
    "",
    response_model=list[VehicleRead],
    summary="List Vehicles",
    description="Retrieve the user's vehicles ordered by registration.",
    response_description="A list of vehicle objects with MOT status.",
)
async def list_vehicles(
    repos: ReposDep,
    active_only: bool = False,
    limit: Optional[int] = Query(default=None, ge=1, le=1000),
    offset: Optional[int] = Query(default=None, ge=0),
) -> list[VehicleRead]:
    """
    List vehicles.

    - **active_only**: If True, inactive (historical) vehicles are left out.
    - **limit** / **offset**: Optional pagination.
    """
    vehicles = await repos.vehicles.list(limit=limit, offset=offset, filters={"is_active": True if active_only else None})
    logger.debug(f"Retrieved {len(vehicles)} vehicles (active_only={active_only})")
    return [VehicleRead.model_validate(v) for v in vehicles]


@router.post(
    "",
    response_model=VehicleRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Vehicle",
    description="Add a vehicle to the user's fleet.",
    response_description="The created vehicle.",
    responses={
        201: {"description": "Vehicle created successfully"},
        422: {"description": "Invalid vehicle data"},
    },
)
async def create_vehicle(payload: VehicleCreate, repos: ReposDep) -> VehicleRead:
    """
    Create a vehicle.

    - **registration**: Registration plate as displayed, e.g. 'AB12 CDE'.
    - **make** / **model**: Used to match tracker devices in mileage imports.
    - **mot_due_date**: Date the current MOT expires.
    - **annual_tax** / **monthly_finance**: Fixed costs used in reports.
    - **fuel_type**: petrol, diesel, hybrid, plug-in hybrid or electric.
    """
    vehicle = await repos.vehicles.create(Vehicle(**payload.model_dump(), user_id=repos.user_id))
    logger.info(f"Created vehicle {vehicle.registration} ({vehicle.id})")
    return VehicleRead.model_validate(vehicle)


@router.get(
    "/{vehicle_id}",
    response_model=VehicleRead,
    summary="Get Vehicle",
    responses={404: {"description": "Vehicle not found"}},
)
async def get_vehicle(vehicle_id: uuid.UUID, repos: ReposDep) -> VehicleRead:
    vehicle = await repos.vehicles.get_by_id(vehicle_id)
    if not vehicle:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Vehicle {vehicle_id} not found")
    return VehicleRead.model_validate(vehicle)


@router.patch(
    "/{vehicle_id}",
    response_model=VehicleRead,
    summary="Update Vehicle",
    description="Update fields of a vehicle. Only provided fields are changed.",
    responses={404: {"description": "Vehicle not found"}},
)
async def update_vehicle(vehicle_id: uuid.UUID, payload: VehicleUpdate, repos: ReposDep) -> VehicleRead:
    vehicle = await repos.vehicles.get_by_id(vehicle_id)
    if not vehicle:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Vehicle {vehicle_id} not found")

    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(vehicle, key, value)
    vehicle = await repos.vehicles.update(vehicle)
    return VehicleRead.model_validate(vehicle)


@router.delete(
    "/{vehicle_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Vehicle",
    description="Delete a vehicle together with its service, document, fuel, mileage and maintenance records.",
    responses={404: {"description": "Vehicle not found"}},
)
async def delete_vehicle(vehicle_id: uuid.UUID, repos: ReposDep) -> Response:
    if not await repos.vehicles.delete(vehicle_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Vehicle {vehicle_id} not found")
    logger.info(f"Deleted vehicle {vehicle_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
