"""
Saved report I/O models.

The report ``config`` is stored as JSON with camelCase keys (``vehicleIds``,
``dateRange``, ``metrics``, ``groupBy``, ``includeInactive``); ``ReportConfig``
validates it on the way in and out.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from fleet_tracker.core.models.domain.analytics import DateRange
from fleet_tracker.core.models.domain.enums import ReportGroupBy, ReportType


class ReportConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    vehicle_ids: List[uuid.UUID] = Field(default_factory=list, alias="vehicleIds")
    date_range: Optional[DateRange] = Field(default=None, alias="dateRange")
    metrics: List[str] = Field(default_factory=list)
    group_by: ReportGroupBy = Field(default=ReportGroupBy.month, alias="groupBy")
    include_inactive: bool = Field(default=False, alias="includeInactive")

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class SavedReportRead(BaseModel):
    """Schema for reading a saved report configuration."""

    id: uuid.UUID
    user_id: uuid.UUID
    name: str
    description: Optional[str] = None
    report_type: ReportType
    config: ReportConfig
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class SavedReportCreate(BaseModel):
    name: str = Field(min_length=1, max_length=128)
    description: Optional[str] = None
    report_type: ReportType
    config: ReportConfig = Field(default_factory=ReportConfig)


class SavedReportUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=128)
    description: Optional[str] = None
    report_type: Optional[ReportType] = None
    config: Optional[ReportConfig] = None
