"""
Vehicle I/O models for API requests and responses.

Read models carry the MOT status derived from ``mot_due_date`` so clients do
not have to re-implement the thresholds.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, computed_field

from fleet_tracker.core.models.domain.enums import DueStatus, FuelType
from fleet_tracker.core.status import days_until, mot_status


class VehicleRead(BaseModel):
    """Schema for reading a vehicle from API."""

    id: uuid.UUID
    user_id: uuid.UUID
    registration: str
    make: str
    model: str
    year: Optional[int] = None
    vin: Optional[str] = None
    mot_due_date: Optional[date] = None
    annual_tax: Optional[float] = None
    tax_paid_monthly: bool = False
    monthly_finance: Optional[float] = None
    fuel_type: str
    is_active: bool
    created_at: datetime
    updated_at: datetime

    @computed_field
    @property
    def mot_status(self) -> DueStatus:
        return mot_status(self.mot_due_date)

    @computed_field
    @property
    def days_until_mot(self) -> Optional[int]:
        return days_until(self.mot_due_date)

    class Config:
        from_attributes = True


class VehicleCreate(BaseModel):
    """Schema for creating a vehicle via API."""

    registration: str = Field(min_length=1, max_length=16, description="Registration plate, e.g. 'AB12 CDE'")
    make: str = Field(min_length=1, max_length=64)
    model: str = Field(min_length=1, max_length=64)
    year: Optional[int] = Field(default=None, ge=1900, le=2100)
    vin: Optional[str] = Field(default=None, max_length=32)
    mot_due_date: Optional[date] = None
    annual_tax: Optional[float] = Field(default=0, ge=0)
    tax_paid_monthly: bool = False
    monthly_finance: Optional[float] = Field(default=None, ge=0)
    fuel_type: FuelType = FuelType.petrol
    is_active: bool = True


class VehicleUpdate(BaseModel):
    """Schema for updating a vehicle via API."""

    registration: Optional[str] = Field(default=None, min_length=1, max_length=16)
    make: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = None
    vin: Optional[str] = None
    mot_due_date: Optional[date] = None
    annual_tax: Optional[float] = None
    tax_paid_monthly: Optional[bool] = None
    monthly_finance: Optional[float] = None
    fuel_type: Optional[FuelType] = None
    is_active: Optional[bool] = None
