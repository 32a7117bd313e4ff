"""Mileage record I/O models for API requests and responses."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field

from fleet_tracker.core.models.domain.enums import MileageSource


class MileageRecordRead(BaseModel):
    id: uuid.UUID
    vehicle_id: uuid.UUID
    record_date: date
    daily_mileage: int
    odometer_reading: Optional[int] = None
    source: str
    created_at: datetime

    class Config:
        from_attributes = True


class MileageRecordCreate(BaseModel):
    """Schema for recording a day's mileage. Replaces any record for the same vehicle and day."""

    vehicle_id: uuid.UUID
    record_date: date
    daily_mileage: int = Field(ge=0)
    odometer_reading: Optional[int] = Field(default=None, ge=0)
    source: MileageSource = MileageSource.manual


class MileageRecordUpdate(BaseModel):
    daily_mileage: Optional[int] = Field(default=None, ge=0)
    odometer_reading: Optional[int] = Field(default=None, ge=0)
