"""Fuel record I/O models for API requests and responses."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field


class FuelRecordRead(BaseModel):
    """Schema for reading a fuel record from API."""

    id: uuid.UUID
    vehicle_id: uuid.UUID
    fill_date: date
    litres: float
    cost_per_litre: float
    total_cost: float
    mileage: Optional[int] = None
    station: Optional[str] = None
    notes: Optional[str] = None
    invoice_file_path: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class FuelRecordCreate(BaseModel):
    """Schema for creating a fuel record via API."""

    vehicle_id: uuid.UUID
    fill_date: date
    litres: float = Field(gt=0)
    cost_per_litre: float = Field(ge=0)
    total_cost: float = Field(ge=0)
    mileage: Optional[int] = Field(default=None, ge=0, description="Odometer reading at the pump")
    station: Optional[str] = Field(default=None, max_length=128)
    notes: Optional[str] = None
    invoice_file_path: Optional[str] = Field(default=None, max_length=512)


class FuelRecordUpdate(BaseModel):
    """Schema for updating a fuel record via API."""

    vehicle_id: Optional[uuid.UUID] = None
    fill_date: Optional[date] = None
    litres: Optional[float] = Field(default=None, gt=0)
    cost_per_litre: Optional[float] = None
    total_cost: Optional[float] = None
    mileage: Optional[int] = None
    station: Optional[str] = None
    notes: Optional[str] = None
    invoice_file_path: Optional[str] = None
