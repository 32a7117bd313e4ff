"""Service record entity models."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Optional

from sqlmodel import Field

from ..base import Base, utc_now


class ServiceRecordBase(Base):
    """Base fields for a service record."""

    service_date: date
    service_type: str = Field(max_length=64, description="e.g. MOT, Oil Change, General Service, Repair")
    description: Optional[str] = Field(default=None)
    cost: float = Field(default=0)
    mileage: Optional[int] = Field(default=None)
    provider: Optional[str] = Field(default=None, max_length=128)
    notes: Optional[str] = Field(default=None)


class ServiceRecord(ServiceRecordBase, table=True):
    """Work carried out on a vehicle.

    Table: service_records
    """

    __tablename__ = "service_records"
    __table_args__ = ({"extend_existing": True},)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    vehicle_id: uuid.UUID = Field(foreign_key="vehicles.id", index=True, ondelete="CASCADE")

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"ServiceRecord(id={self.id}, type={self.service_type}, date={self.service_date})"
