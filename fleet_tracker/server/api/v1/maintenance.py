"""
API endpoints for maintenance schedules.

Schedules are either tied to a vehicle or fleet-wide (no vehicle). Responses
carry a status computed from the next due date and, for vehicle schedules,
the vehicle's latest recorded odometer against the next due mileage.
"""

from __future__ import annotations

import uuid
from typing import Dict, Optional

from fastapi import APIRouter, HTTPException, Response, status

from fleet_tracker.core.database.entities.maintenance_schedules import MaintenanceSchedule
from fleet_tracker.core.logging_config import get_logger
from fleet_tracker.core.models.io.maintenance import (
    MaintenanceCompletion,
    MaintenanceScheduleCreate,
    MaintenanceScheduleRead,
    MaintenanceScheduleUpdate,
    MaintenanceTypeRead,
)
from fleet_tracker.core.status import COMMON_MAINTENANCE_TYPES
from fleet_tracker.server.services.deps import ReposDep

logger = get_logger(__name__)

router = APIRouter(tags=["maintenance"])


def _to_read(schedule: MaintenanceSchedule, odometers: Dict[uuid.UUID, int]) -> MaintenanceScheduleRead:
    current = odometers.get(schedule.vehicle_id) if schedule.vehicle_id else None
    return MaintenanceScheduleRead.model_validate(schedule).model_copy(update={"current_mileage": current})


def _not_found(schedule_id: uuid.UUID) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND, detail=f"Maintenance schedule {schedule_id} not found"
    )


@router.get(
    "/types",
    response_model=list[MaintenanceTypeRead],
    summary="List Common Maintenance Types",
    description="Common maintenance tasks with their default mileage and month intervals.",
)
async def list_maintenance_types() -> list[MaintenanceTypeRead]:
    return [
        MaintenanceTypeRead(
            value=t.value,
            label=t.label,
            default_interval_miles=t.interval_miles,
            default_interval_months=t.interval_months,
        )
        for t in COMMON_MAINTENANCE_TYPES
    ]


@router.get(
    "",
    response_model=list[MaintenanceScheduleRead],
    summary="List Maintenance Schedules",
    description="Retrieve schedules ordered by next due date (schedules with no due date last).",
)
async def list_schedules(
    repos: ReposDep,
    vehicle_id: Optional[uuid.UUID] = None,
    active_only: bool = False,
) -> list[MaintenanceScheduleRead]:
    """
    List maintenance schedules.

    - **vehicle_id**: Only schedules tied to this vehicle.
    - **active_only**: Leave out paused schedules.
    """
    schedules = await repos.maintenance_schedules.list(
        filters={"vehicle_id": vehicle_id, "is_active": True if active_only else None}
    )
    odometers = await repos.mileage_records.latest_odometers()
    logger.debug(f"Retrieved {len(schedules)} maintenance schedules")
    return [_to_read(s, odometers) for s in schedules]


@router.post(
    "",
    response_model=MaintenanceScheduleRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Maintenance Schedule",
    responses={
        403: {"description": "Vehicle belongs to another user"},
        404: {"description": "Vehicle not found"},
    },
)
async def create_schedule(payload: MaintenanceScheduleCreate, repos: ReposDep) -> MaintenanceScheduleRead:
    """
    Create a maintenance schedule.

    - **vehicle_id**: Vehicle the schedule applies to; omit for a fleet-wide schedule.
    - **maintenance_type**: One of the common types or a custom name.
    - **interval_miles** / **interval_months**: Used to roll the next due values forward on completion.
    """
    schedule = await repos.maintenance_schedules.create(
        MaintenanceSchedule(**payload.model_dump(), user_id=repos.user_id)
    )
    odometers = await repos.mileage_records.latest_odometers()
    return _to_read(schedule, odometers)


@router.get("/{schedule_id}", response_model=MaintenanceScheduleRead, summary="Get Maintenance Schedule")
async def get_schedule(schedule_id: uuid.UUID, repos: ReposDep) -> MaintenanceScheduleRead:
    schedule = await repos.maintenance_schedules.get_by_id(schedule_id)
    if not schedule:
        raise _not_found(schedule_id)
    odometers = await repos.mileage_records.latest_odometers()
    return _to_read(schedule, odometers)


@router.patch("/{schedule_id}", response_model=MaintenanceScheduleRead, summary="Update Maintenance Schedule")
async def update_schedule(
    schedule_id: uuid.UUID, payload: MaintenanceScheduleUpdate, repos: ReposDep
) -> MaintenanceScheduleRead:
    schedule = await repos.maintenance_schedules.get_by_id(schedule_id)
    if not schedule:
        raise _not_found(schedule_id)

    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(schedule, key, value)
    schedule = await repos.maintenance_schedules.update(schedule)
    odometers = await repos.mileage_records.latest_odometers()
    return _to_read(schedule, odometers)


@router.post(
    "/{schedule_id}/complete",
    response_model=MaintenanceScheduleRead,
    summary="Mark Maintenance Completed",
    description=(
        "Record that the maintenance was done. The next due date and mileage are "
        "recomputed from the completion and the schedule's intervals."
    ),
)
async def complete_schedule(
    schedule_id: uuid.UUID, payload: MaintenanceCompletion, repos: ReposDep
) -> MaintenanceScheduleRead:
    schedule = await repos.maintenance_schedules.mark_completed(
        schedule_id, payload.completed_date, payload.completed_mileage
    )
    if not schedule:
        raise _not_found(schedule_id)
    logger.info(f"Maintenance schedule {schedule_id} completed on {payload.completed_date}")
    odometers = await repos.mileage_records.latest_odometers()
    return _to_read(schedule, odometers)


@router.delete("/{schedule_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete Maintenance Schedule")
async def delete_schedule(schedule_id: uuid.UUID, repos: ReposDep) -> Response:
    if not await repos.maintenance_schedules.delete(schedule_id):
        raise _not_found(schedule_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
