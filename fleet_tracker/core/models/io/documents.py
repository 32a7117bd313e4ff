"""
Document I/O models for API requests and responses.

Includes the request and response shapes for the upload duplicate check.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from fleet_tracker.core.models.domain.enums import ProcessingStatus


class DocumentRead(BaseModel):
    """Schema for reading document metadata from API."""

    id: uuid.UUID
    vehicle_id: uuid.UUID
    service_record_id: Optional[uuid.UUID] = None
    file_name: str
    file_path: str
    file_type: Optional[str] = None
    file_size: Optional[int] = None
    ai_extracted_data: Optional[Dict[str, Any]] = None
    extracted_cost: Optional[float] = None
    processing_status: str
    created_at: datetime

    class Config:
        from_attributes = True


class DocumentCreate(BaseModel):
    """Schema for registering an uploaded document via API."""

    vehicle_id: uuid.UUID
    service_record_id: Optional[uuid.UUID] = None
    file_name: str = Field(min_length=1, max_length=255)
    file_path: str = Field(min_length=1, max_length=512, description="Storage path of the uploaded file")
    file_type: Optional[str] = Field(default=None, max_length=128)
    file_size: Optional[int] = Field(default=None, ge=0)
    ai_extracted_data: Optional[Dict[str, Any]] = None
    extracted_cost: Optional[float] = None
    processing_status: ProcessingStatus = ProcessingStatus.pending


class DocumentUpdate(BaseModel):
    """Schema for updating a document, typically after AI extraction."""

    service_record_id: Optional[uuid.UUID] = None
    ai_extracted_data: Optional[Dict[str, Any]] = None
    extracted_cost: Optional[float] = None
    processing_status: Optional[ProcessingStatus] = None


class FileToCheck(BaseModel):
    file_name: str = Field(min_length=1)
    file_size: Optional[int] = Field(default=None, ge=0)


class DuplicateCheckRequest(BaseModel):
    files: List[FileToCheck] = Field(min_length=1)


class ExistingFileRead(BaseModel):
    file_name: str
    table_name: str
    created_at: datetime


class DuplicateCheckItem(BaseModel):
    file_name: str
    is_duplicate: bool
    existing_file: Optional[ExistingFileRead] = None


class DuplicateCheckResponse(BaseModel):
    """Per-file results and a user-facing message (empty when nothing matched)."""

    results: List[DuplicateCheckItem]
    has_duplicates: bool
    message: str
