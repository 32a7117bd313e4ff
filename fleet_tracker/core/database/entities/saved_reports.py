"""Saved report configuration entity models."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field

from ..base import Base, utc_now


class SavedReport(Base, table=True):
    """A named report configuration (vehicles, date range, metrics, grouping).

    Table: saved_reports
    """

    __tablename__ = "saved_reports"
    __table_args__ = ({"extend_existing": True},)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(index=True)

    name: str = Field(max_length=128)
    description: Optional[str] = Field(default=None)
    report_type: str = Field(max_length=16)
    config: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"SavedReport(id={self.id}, name={self.name}, type={self.report_type})"
