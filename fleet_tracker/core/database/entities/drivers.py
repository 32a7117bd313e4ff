"""
Driver entity models.

Drivers are tracked for licence expiry and the periodic licence check code
that a UK employer has to renew.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Optional

from sqlmodel import Field

from ..base import Base, utc_now


class DriverBase(Base):
    """Base fields for a driver."""

    name: str = Field(max_length=128)
    email: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=32)
    license_number: Optional[str] = Field(default=None, max_length=32)
    license_expiry_date: Optional[date] = Field(default=None)
    last_check_code_date: Optional[date] = Field(default=None, description="When the check code was last generated")
    next_check_code_due: Optional[date] = Field(default=None, description="When a new check code is due")
    notes: Optional[str] = Field(default=None)


class Driver(DriverBase, table=True):
    """Persistent driver record.

    Table: drivers
    """

    __tablename__ = "drivers"
    __table_args__ = ({"extend_existing": True},)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(index=True)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"Driver(id={self.id}, name={self.name})"
