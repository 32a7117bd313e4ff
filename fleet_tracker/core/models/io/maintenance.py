"""
Maintenance schedule I/O models for API requests and responses.

``MaintenanceScheduleRead`` reports the schedule status from its next due
date; the mileage half of the status needs the vehicle's current odometer,
which the router fills in as ``current_mileage`` when it knows it.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, computed_field

from fleet_tracker.core.models.domain.enums import MaintenanceStatus
from fleet_tracker.core.status import days_until, maintenance_status


class MaintenanceScheduleRead(BaseModel):
    """Schema for reading a maintenance schedule from API."""

    id: uuid.UUID
    user_id: uuid.UUID
    vehicle_id: Optional[uuid.UUID] = None
    maintenance_type: str
    interval_miles: Optional[int] = None
    interval_months: Optional[int] = None
    last_completed_date: Optional[date] = None
    last_completed_mileage: Optional[int] = None
    next_due_date: Optional[date] = None
    next_due_mileage: Optional[int] = None
    is_active: bool
    notes: Optional[str] = None
    current_mileage: Optional[int] = Field(default=None, description="Latest known odometer of the vehicle")
    created_at: datetime
    updated_at: datetime

    @computed_field
    @property
    def status(self) -> MaintenanceStatus:
        return maintenance_status(self.next_due_date, self.next_due_mileage, self.current_mileage)

    @computed_field
    @property
    def days_until_due(self) -> Optional[int]:
        return days_until(self.next_due_date)

    class Config:
        from_attributes = True


class MaintenanceScheduleCreate(BaseModel):
    """Schema for creating a maintenance schedule. A null vehicle applies it to the whole fleet."""

    vehicle_id: Optional[uuid.UUID] = None
    maintenance_type: str = Field(min_length=1, max_length=64, description="e.g. 'oil-change', see /types")
    interval_miles: Optional[int] = Field(default=None, gt=0)
    interval_months: Optional[int] = Field(default=None, gt=0)
    last_completed_date: Optional[date] = None
    last_completed_mileage: Optional[int] = Field(default=None, ge=0)
    next_due_date: Optional[date] = None
    next_due_mileage: Optional[int] = Field(default=None, ge=0)
    is_active: bool = True
    notes: Optional[str] = None


class MaintenanceScheduleUpdate(BaseModel):
    vehicle_id: Optional[uuid.UUID] = None
    maintenance_type: Optional[str] = None
    interval_miles: Optional[int] = None
    interval_months: Optional[int] = None
    last_completed_date: Optional[date] = None
    last_completed_mileage: Optional[int] = None
    next_due_date: Optional[date] = None
    next_due_mileage: Optional[int] = None
    is_active: Optional[bool] = None
    notes: Optional[str] = None


class MaintenanceCompletion(BaseModel):
    """Body of a mark-complete request."""

    completed_date: date
    completed_mileage: Optional[int] = Field(default=None, ge=0)


class MaintenanceTypeRead(BaseModel):
    value: str
    label: str
    default_interval_miles: Optional[int] = None
    default_interval_months: Optional[int] = None
