"""Fuel record entity models."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Optional

from sqlmodel import Field

from ..base import Base, utc_now


class FuelRecordBase(Base):
    """Base fields for a fuel fill-up."""

    fill_date: date
    litres: float
    cost_per_litre: float
    total_cost: float
    mileage: Optional[int] = Field(default=None, description="Odometer reading at the pump")
    station: Optional[str] = Field(default=None, max_length=128)
    notes: Optional[str] = Field(default=None)
    invoice_file_path: Optional[str] = Field(default=None, max_length=512)


class FuelRecord(FuelRecordBase, table=True):
    """A single fill-up, entered by hand or imported from a fuel card invoice.

    Table: fuel_records
    """

    __tablename__ = "fuel_records"
    __table_args__ = ({"extend_existing": True},)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    vehicle_id: uuid.UUID = Field(foreign_key="vehicles.id", index=True, ondelete="CASCADE")

    created_at: datetime = Field(default_factory=utc_now)

    def __repr__(self) -> str:
        return f"FuelRecord(id={self.id}, date={self.fill_date}, litres={self.litres})"
