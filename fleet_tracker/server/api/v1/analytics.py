"""
Fleet analytics API.

Each endpoint loads the user's rows through the repositories and hands them to
the pure aggregation functions in ``fleet_tracker.core.analytics``.
"""

from __future__ import annotations

import uuid
from datetime import date
from typing import Optional

from dateutil.relativedelta import relativedelta
from fastapi import APIRouter, HTTPException, Query, status
from pydantic import ValidationError

from fleet_tracker.core import analytics
from fleet_tracker.core.models.domain.analytics import (
    CarbonReport,
    CostBreakdown,
    DateRange,
    FleetAnalytics,
    FuelEfficiency,
    MileageAnalytics,
    Reminder,
    VehicleComparison,
)
from fleet_tracker.server.services.deps import ReposDep

router = APIRouter(tags=["analytics"])


def _date_range(start: Optional[date], end: Optional[date]) -> Optional[DateRange]:
    if start is None or end is None:
        return None
    try:
        return DateRange(start=start, end=end)
    except ValidationError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="end date must not be before start date"
        )


@router.get(
    "/fleet",
    response_model=FleetAnalytics,
    summary="Fleet Overview",
    description=(
        "Headline fleet numbers: total and per-vehicle cost, trailing twelve-month costs, "
        "MOT status counts, upcoming and overdue MOTs."
    ),
)
async def get_fleet_analytics(repos: ReposDep) -> FleetAnalytics:
    vehicles = await repos.vehicles.list()
    service_records = await repos.service_records.list()
    documents = await repos.documents.list_with_costs()
    fuel_records = await repos.fuel_records.list()
    return analytics.fleet_analytics(vehicles, service_records, documents, fuel_records)


@router.get(
    "/costs/by-type",
    response_model=CostBreakdown,
    summary="Service Costs By Type",
    description="Top service types by spend, with their share of the total.",
)
async def get_cost_breakdown(repos: ReposDep) -> CostBreakdown:
    service_records = await repos.service_records.list()
    documents = await repos.documents.list_with_costs()
    return analytics.cost_breakdown_by_type(service_records, documents)


@router.get(
    "/mileage",
    response_model=MileageAnalytics,
    summary="Mileage Analytics",
    description="Mileage totals per vehicle and month, plus MPG and cost per mile by vehicle.",
)
async def get_mileage_analytics(repos: ReposDep) -> MileageAnalytics:
    mileage_records = await repos.mileage_records.list()
    vehicles = await repos.vehicles.list()
    fuel_records = await repos.fuel_records.list()
    return analytics.mileage_analytics(mileage_records, vehicles, fuel_records)


@router.get(
    "/fuel-efficiency",
    response_model=FuelEfficiency,
    summary="Rolling Fuel Efficiency",
    description="Fleet MPG over the last window compared with the window before it.",
)
async def get_fuel_efficiency(
    repos: ReposDep,
    days: int = Query(default=30, ge=1, le=365, description="Window length in days"),
) -> FuelEfficiency:
    mileage_records = await repos.mileage_records.list()
    fuel_records = await repos.fuel_records.list()
    return analytics.fuel_efficiency(mileage_records, fuel_records, days=days)


@router.get(
    "/comparison",
    response_model=VehicleComparison,
    summary="Vehicle Cost Comparison",
    description="Cost, economy and emissions for one vehicle, optionally within a date range.",
    responses={404: {"description": "Vehicle not found"}},
)
async def get_vehicle_comparison(
    repos: ReposDep,
    vehicle_id: uuid.UUID,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> VehicleComparison:
    """
    Compare a vehicle's running costs.

    - **vehicle_id**: Vehicle to report on.
    - **start** / **end**: Optional inclusive range; both are needed for the range to apply.
    """
    vehicle = await repos.vehicles.get_by_id(vehicle_id)
    if not vehicle:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Vehicle {vehicle_id} not found")

    date_range = _date_range(start, end)
    filters = {"vehicle_id": vehicle_id}
    fuel_records = await repos.fuel_records.list(filters=filters)
    service_records = await repos.service_records.list(filters=filters)
    documents = await repos.documents.list(filters=filters)
    return analytics.vehicle_comparison(vehicle, fuel_records, service_records, documents, date_range)


@router.get(
    "/carbon",
    response_model=CarbonReport,
    summary="Carbon Footprint",
    description="CO2 emissions per active vehicle and for the fleet. Defaults to the last twelve months.",
)
async def get_carbon_footprint(
    repos: ReposDep,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> CarbonReport:
    end = end or date.today()
    start = start or end - relativedelta(years=1)
    date_range = _date_range(start, end)

    vehicles = await repos.vehicles.list()
    fuel_records = await repos.fuel_records.list()
    return analytics.carbon_footprint(vehicles, fuel_records, date_range)


@router.get(
    "/reminders",
    response_model=list[Reminder],
    summary="Upcoming Reminders",
    description="MOT, licence check code and maintenance deadlines, most urgent first.",
)
async def get_reminders(repos: ReposDep) -> list[Reminder]:
    vehicles = await repos.vehicles.list_active()
    drivers = await repos.drivers.list()
    schedules = await repos.maintenance_schedules.list(filters={"is_active": True})
    return analytics.combined_reminders(vehicles, drivers, schedules)
