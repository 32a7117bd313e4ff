"""
Document entity models.

Documents are uploaded invoices and certificates attached to a vehicle. Only
metadata and the storage path are kept here; AI extraction results land in
``ai_extracted_data`` and the headline cost in ``extracted_cost``.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field

from ..base import Base, utc_now


class Document(Base, table=True):
    """Uploaded file attached to a vehicle.

    Table: documents
    """

    __tablename__ = "documents"
    __table_args__ = ({"extend_existing": True},)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    vehicle_id: uuid.UUID = Field(foreign_key="vehicles.id", index=True, ondelete="CASCADE")
    service_record_id: Optional[uuid.UUID] = Field(
        default=None, foreign_key="service_records.id", ondelete="SET NULL"
    )

    file_name: str = Field(max_length=255)
    file_path: str = Field(max_length=512)
    file_type: Optional[str] = Field(default=None, max_length=128)
    file_size: Optional[int] = Field(default=None)

    ai_extracted_data: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON, nullable=True))
    extracted_cost: Optional[float] = Field(default=None)
    processing_status: str = Field(default="pending", max_length=16)

    created_at: datetime = Field(default_factory=utc_now, index=True)

    def __repr__(self) -> str:
        return f"Document(id={self.id}, file_name={self.file_name}, status={self.processing_status})"
