"""
API endpoints for saved report configurations.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, HTTPException, Response, status

from fleet_tracker.core.database.entities.saved_reports import SavedReport
from fleet_tracker.core.models.io.reports import SavedReportCreate, SavedReportRead, SavedReportUpdate
from fleet_tracker.server.services.deps import ReposDep

router = APIRouter(tags=["reports"])


@router.get(
    "",
    response_model=list[SavedReportRead],
    summary="List Saved Reports",
    description="Retrieve the user's saved report configurations, newest first.",
)
async def list_reports(repos: ReposDep) -> list[SavedReportRead]:
    reports = await repos.saved_reports.list()
    return [SavedReportRead.model_validate(r) for r in reports]


@router.post(
    "",
    response_model=SavedReportRead,
    status_code=status.HTTP_201_CREATED,
    summary="Save Report Configuration",
)
async def create_report(payload: SavedReportCreate, repos: ReposDep) -> SavedReportRead:
    """
    Save a report configuration.

    - **report_type**: comparison, carbon, costs, fuel or custom.
    - **config**: `vehicleIds`, `dateRange`, `metrics`, `groupBy` and `includeInactive`.
    """
    report = await repos.saved_reports.create(
        SavedReport(
            user_id=repos.user_id,
            name=payload.name,
            description=payload.description,
            report_type=payload.report_type.value,
            config=payload.config.to_json(),
        )
    )
    return SavedReportRead.model_validate(report)


@router.get("/{report_id}", response_model=SavedReportRead, summary="Get Saved Report")
async def get_report(report_id: uuid.UUID, repos: ReposDep) -> SavedReportRead:
    report = await repos.saved_reports.get_by_id(report_id)
    if not report:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Report {report_id} not found")
    return SavedReportRead.model_validate(report)


@router.patch("/{report_id}", response_model=SavedReportRead, summary="Update Saved Report")
async def update_report(report_id: uuid.UUID, payload: SavedReportUpdate, repos: ReposDep) -> SavedReportRead:
    report = await repos.saved_reports.get_by_id(report_id)
    if not report:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Report {report_id} not found")

    updates = payload.model_dump(exclude_unset=True, exclude={"config", "report_type"})
    for key, value in updates.items():
        setattr(report, key, value)
    if payload.report_type is not None:
        report.report_type = payload.report_type.value
    if payload.config is not None:
        report.config = payload.config.to_json()

    report = await repos.saved_reports.update(report)
    return SavedReportRead.model_validate(report)


@router.delete("/{report_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete Saved Report")
async def delete_report(report_id: uuid.UUID, repos: ReposDep) -> Response:
    if not await repos.saved_reports.delete(report_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Report {report_id} not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
