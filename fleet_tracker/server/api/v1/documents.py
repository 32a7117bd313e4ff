"""
API endpoints for uploaded documents.

File bytes live in external storage; these endpoints manage the metadata and
provide the pre-upload duplicate check.
"""

from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Response, status

from fleet_tracker.core.database.entities.documents import Document
from fleet_tracker.core.duplicates import check_files, format_duplicate_message
from fleet_tracker.core.logging_config import get_logger
from fleet_tracker.core.models.io.documents import (
    DocumentCreate,
    DocumentRead,
    DocumentUpdate,
    DuplicateCheckItem,
    DuplicateCheckRequest,
    DuplicateCheckResponse,
    ExistingFileRead,
)
from fleet_tracker.server.services.deps import ReposDep

logger = get_logger(__name__)

router = APIRouter(tags=["documents"])


@router.get(
    "",
    response_model=list[DocumentRead],
    summary="List Documents",
    description="Retrieve document metadata, newest first, optionally for one vehicle.",
)
async def list_documents(
    repos: ReposDep,
    vehicle_id: Optional[uuid.UUID] = None,
    service_record_id: Optional[uuid.UUID] = None,
    limit: Optional[int] = Query(default=None, ge=1, le=1000),
    offset: Optional[int] = Query(default=None, ge=0),
) -> list[DocumentRead]:
    documents = await repos.documents.list(
        limit=limit,
        offset=offset,
        filters={"vehicle_id": vehicle_id, "service_record_id": service_record_id},
    )
    return [DocumentRead.model_validate(d) for d in documents]


@router.post(
    "/check-duplicates",
    response_model=DuplicateCheckResponse,
    summary="Check Files For Duplicates",
    description=(
        "Check a batch of files about to be uploaded against existing documents "
        "(same name and size) and stored fuel invoices."
    ),
    response_description="Per-file results and a summary message.",
)
async def check_duplicates(payload: DuplicateCheckRequest, repos: ReposDep) -> DuplicateCheckResponse:
    """
    Check uploads for duplicates.

    - **files**: List of `{file_name, file_size}` to check.

    Existing rows are loaded once and every file is compared against that snapshot.
    """
    documents = await repos.documents.list()
    fuel_records = await repos.fuel_records.list_with_invoices()
    results = check_files([(f.file_name, f.file_size) for f in payload.files], documents, fuel_records)

    items = [
        DuplicateCheckItem(
            file_name=r.file_name,
            is_duplicate=r.is_duplicate,
            existing_file=(
                ExistingFileRead(
                    file_name=r.existing_file.file_name,
                    table_name=r.existing_file.table_name,
                    created_at=r.existing_file.created_at,
                )
                if r.existing_file
                else None
            ),
        )
        for r in results
    ]
    has_duplicates = any(r.is_duplicate for r in results)
    logger.debug(f"Checked {len(items)} files for duplicates (has_duplicates={has_duplicates})")
    return DuplicateCheckResponse(
        results=items,
        has_duplicates=has_duplicates,
        message=format_duplicate_message(results),
    )


@router.post(
    "",
    response_model=DocumentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Register Document",
    responses={
        403: {"description": "Vehicle or service record belongs to another user"},
        404: {"description": "Vehicle not found"},
    },
)
async def create_document(payload: DocumentCreate, repos: ReposDep) -> DocumentRead:
    """
    Register an uploaded document.

    - **vehicle_id**: Vehicle the document belongs to.
    - **service_record_id**: Optional service record on the same vehicle.
    - **file_path**: Where the file was stored.
    """
    document = await repos.documents.create(Document(**payload.model_dump()))
    return DocumentRead.model_validate(document)


@router.get("/{document_id}", response_model=DocumentRead, summary="Get Document")
async def get_document(document_id: uuid.UUID, repos: ReposDep) -> DocumentRead:
    document = await repos.documents.get_by_id(document_id)
    if not document:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Document {document_id} not found")
    return DocumentRead.model_validate(document)


@router.patch("/{document_id}", response_model=DocumentRead, summary="Update Document")
async def update_document(document_id: uuid.UUID, payload: DocumentUpdate, repos: ReposDep) -> DocumentRead:
    document = await repos.documents.get_by_id(document_id)
    if not document:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Document {document_id} not found")

    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(document, key, value)
    document = await repos.documents.update(document)
    return DocumentRead.model_validate(document)


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete Document")
async def delete_document(document_id: uuid.UUID, repos: ReposDep) -> Response:
    if not await repos.documents.delete(document_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Document {document_id} not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
