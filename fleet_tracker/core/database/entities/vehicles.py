"""
Vehicle entity models.

A vehicle is the root of most fleet data: service records, documents, fuel
and mileage records all reference it and are owned through it.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Optional

from sqlmodel import Field

from ..base import Base, utc_now


class VehicleBase(Base):
    """Base fields for a vehicle."""

    registration: str = Field(max_length=16, description="Vehicle registration plate as entered")
    make: str = Field(max_length=64, description="Manufacturer")
    model: str = Field(max_length=64, description="Model name")
    year: Optional[int] = Field(default=None, description="Year of manufacture")
    vin: Optional[str] = Field(default=None, max_length=32, description="Vehicle identification number")
    mot_due_date: Optional[date] = Field(default=None, description="Date the current MOT expires")
    annual_tax: Optional[float] = Field(default=0, description="Annual vehicle excise duty")
    tax_paid_monthly: bool = Field(default=False, description="Whether tax is paid by monthly direct debit")
    monthly_finance: Optional[float] = Field(default=None, description="Monthly finance or lease payment")
    fuel_type: str = Field(default="petrol", max_length=32, description="petrol, diesel, hybrid, plug-in hybrid, electric")
    is_active: bool = Field(default=True, description="Inactive vehicles are kept for history only")


class Vehicle(VehicleBase, table=True):
    """Persistent vehicle owned by a single user.

    Table: vehicles
    """

    __tablename__ = "vehicles"
    __table_args__ = ({"extend_existing": True},)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(index=True, description="Owning user account")

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    @property
    def label(self) -> str:
        return f"{self.registration} - {self.make} {self.model}"

    def __repr__(self) -> str:
        return f"Vehicle(id={self.id}, registration={self.registration})"
