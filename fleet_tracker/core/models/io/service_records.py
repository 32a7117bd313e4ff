"""Service record I/O models for API requests and responses."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field


class ServiceRecordRead(BaseModel):
    """Schema for reading a service record from API."""

    id: uuid.UUID
    vehicle_id: uuid.UUID
    service_date: date
    service_type: str
    description: Optional[str] = None
    cost: float
    mileage: Optional[int] = None
    provider: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ServiceRecordCreate(BaseModel):
    """Schema for creating a service record via API."""

    vehicle_id: uuid.UUID
    service_date: date
    service_type: str = Field(min_length=1, max_length=64, description="e.g. MOT, Oil Change, General Service")
    description: Optional[str] = None
    cost: float = Field(default=0, ge=0)
    mileage: Optional[int] = Field(default=None, ge=0)
    provider: Optional[str] = Field(default=None, max_length=128)
    notes: Optional[str] = None


class ServiceRecordUpdate(BaseModel):
    """Schema for updating a service record via API."""

    vehicle_id: Optional[uuid.UUID] = None
    service_date: Optional[date] = None
    service_type: Optional[str] = None
    description: Optional[str] = None
    cost: Optional[float] = Field(default=None, ge=0)
    mileage: Optional[int] = None
    provider: Optional[str] = None
    notes: Optional[str] = None
