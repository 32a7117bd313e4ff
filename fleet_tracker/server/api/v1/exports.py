"""
CSV download endpoints.
"""

from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter, Response

from fleet_tracker.core import exports
from fleet_tracker.server.services.deps import ReposDep

router = APIRouter(tags=["exports"])

CSV_MEDIA_TYPE = "text/csv; charset=utf-8"


def _csv_response(content: str, prefix: str) -> Response:
    return Response(
        content=content,
        media_type=CSV_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{exports.export_filename(prefix)}"'},
    )


@router.get(
    "/fuel-records.csv",
    summary="Export Fuel Records",
    description="Download fuel records as CSV, optionally for one vehicle.",
    response_class=Response,
    responses={200: {"content": {"text/csv": {}}}},
)
async def export_fuel_records(repos: ReposDep, vehicle_id: Optional[uuid.UUID] = None) -> Response:
    records = await repos.fuel_records.list(filters={"vehicle_id": vehicle_id})
    vehicles = await repos.vehicles.list()
    return _csv_response(exports.fuel_records_csv(records, vehicles), "fuel-records")


@router.get(
    "/service-records.csv",
    summary="Export Service Records",
    description="Download service records as CSV, optionally for one vehicle.",
    response_class=Response,
    responses={200: {"content": {"text/csv": {}}}},
)
async def export_service_records(repos: ReposDep, vehicle_id: Optional[uuid.UUID] = None) -> Response:
    records = await repos.service_records.list(filters={"vehicle_id": vehicle_id})
    vehicles = await repos.vehicles.list()
    return _csv_response(exports.service_records_csv(records, vehicles), "service-records")


@router.get(
    "/fleet-summary.csv",
    summary="Export Fleet Summary",
    description=(
        "Download a sectioned fleet report: cost breakdown, fuel statistics, "
        "then vehicle, fuel and service listings."
    ),
    response_class=Response,
    responses={200: {"content": {"text/csv": {}}}},
)
async def export_fleet_summary(repos: ReposDep) -> Response:
    vehicles = await repos.vehicles.list()
    fuel_records = await repos.fuel_records.list()
    service_records = await repos.service_records.list()
    documents = await repos.documents.list_with_costs()
    return _csv_response(
        exports.fleet_summary_csv(vehicles, fuel_records, service_records, documents),
        "fleet-summary",
    )
