"""Driver I/O models for API requests and responses."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, computed_field

from fleet_tracker.core.models.domain.enums import DueStatus
from fleet_tracker.core.status import check_code_status, days_until


class DriverRead(BaseModel):
    """Schema for reading a driver, with the licence check code status."""

    id: uuid.UUID
    user_id: uuid.UUID
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    license_number: Optional[str] = None
    license_expiry_date: Optional[date] = None
    last_check_code_date: Optional[date] = None
    next_check_code_due: Optional[date] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @computed_field
    @property
    def check_code_status(self) -> DueStatus:
        return check_code_status(self.next_check_code_due)

    @computed_field
    @property
    def days_until_check_code(self) -> Optional[int]:
        return days_until(self.next_check_code_due)

    class Config:
        from_attributes = True


class DriverCreate(BaseModel):
    name: str = Field(min_length=1, max_length=128)
    email: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=32)
    license_number: Optional[str] = Field(default=None, max_length=32)
    license_expiry_date: Optional[date] = None
    last_check_code_date: Optional[date] = None
    next_check_code_due: Optional[date] = None
    notes: Optional[str] = None


class DriverUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=128)
    email: Optional[str] = None
    phone: Optional[str] = None
    license_number: Optional[str] = None
    license_expiry_date: Optional[date] = None
    last_check_code_date: Optional[date] = None
    next_check_code_due: Optional[date] = None
    notes: Optional[str] = None
