"""
Mileage record entity models.

One row per vehicle per day. The (vehicle_id, record_date) pair is unique so
that webhook imports can upsert.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from ..base import Base, utc_now


class MileageRecord(Base, table=True):
    """Daily distance driven by a vehicle.

    Table: mileage_records
    """

    __tablename__ = "mileage_records"
    __table_args__ = (
        UniqueConstraint("vehicle_id", "record_date", name="uq_mileage_records_vehicle_date"),
        {"extend_existing": True},
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    vehicle_id: uuid.UUID = Field(foreign_key="vehicles.id", index=True, ondelete="CASCADE")

    record_date: date = Field(index=True)
    daily_mileage: int = Field(default=0)
    odometer_reading: Optional[int] = Field(default=None)
    source: str = Field(default="manual", max_length=32, description="manual, zapier or n8n_excel")

    created_at: datetime = Field(default_factory=utc_now)

    def __repr__(self) -> str:
        return f"MileageRecord(vehicle_id={self.vehicle_id}, date={self.record_date}, miles={self.daily_mileage})"
