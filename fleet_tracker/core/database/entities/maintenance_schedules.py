"""
Maintenance schedule entity models.

A schedule repeats every ``interval_months`` and/or ``interval_miles``. A null
``vehicle_id`` means the schedule applies to the whole fleet.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Optional

from sqlmodel import Field

from ..base import Base, utc_now


class MaintenanceScheduleBase(Base):
    """Base fields for a maintenance schedule."""

    vehicle_id: Optional[uuid.UUID] = Field(default=None, foreign_key="vehicles.id", index=True, ondelete="CASCADE")
    maintenance_type: str = Field(max_length=64)
    interval_miles: Optional[int] = Field(default=None)
    interval_months: Optional[int] = Field(default=None)
    last_completed_date: Optional[date] = Field(default=None)
    last_completed_mileage: Optional[int] = Field(default=None)
    next_due_date: Optional[date] = Field(default=None)
    next_due_mileage: Optional[int] = Field(default=None)
    is_active: bool = Field(default=True)
    notes: Optional[str] = Field(default=None)


class MaintenanceSchedule(MaintenanceScheduleBase, table=True):
    """Recurring maintenance task.

    Table: maintenance_schedules
    """

    __tablename__ = "maintenance_schedules"
    __table_args__ = ({"extend_existing": True},)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(index=True)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"MaintenanceSchedule(id={self.id}, type={self.maintenance_type}, next_due={self.next_due_date})"
