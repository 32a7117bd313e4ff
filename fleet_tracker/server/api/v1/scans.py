"""
AI document scanning endpoints used by the upload dialogs.

Both take ``{fileContent, fileName}`` where the content is either extracted
text or a ``data:`` URL of an image, and return ``{success, data}``. Failures
are reported as ``{"error": ...}``; provider rate limits and exhausted credits
add ``userMessage: true`` so the UI can show the message as is.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, HTTPException, Request, status
from pydantic import ValidationError

from fleet_tracker.core.logging_config import get_logger
from fleet_tracker.core.models.io.webhooks import ScanRequest
from fleet_tracker.server.exception_handlers import EnvelopeRoute
from fleet_tracker.server.services.deps import CurrentUserId, ExtractorDep
from fleet_tracker.server.services.invoice_validation import validate_invoice

logger = get_logger(__name__)

router = APIRouter(route_class=EnvelopeRoute, tags=["scanning"])

_SCAN_RESPONSES = {
    400: {"description": "Missing content or image too large"},
    401: {"description": "Missing or invalid bearer token"},
    402: {"description": "AI provider credits exhausted"},
    429: {"description": "AI provider rate limit"},
}


async def _scan_request(request: Request) -> ScanRequest:
    try:
        payload = ScanRequest.model_validate(await request.json())
    except (ValueError, ValidationError):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid request body")
    if not payload.file_content:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="File content is required")
    return payload


@router.post(
    "/document",
    summary="Scan Service Document",
    description="Extract cost and service details from a service invoice, receipt or MOT certificate.",
    responses=_SCAN_RESPONSES,
)
async def scan_document(request: Request, user_id: CurrentUserId, extractor: ExtractorDep) -> Dict[str, Any]:
    payload = await _scan_request(request)
    file_name = payload.file_name or "document"
    logger.info(f"Scanning document {file_name} for user {user_id}")

    extraction = await extractor.scan_document(payload.file_content, file_name)
    return {"success": True, "data": extraction.model_dump(mode="json", by_alias=True)}


@router.post(
    "/fuel-invoice",
    summary="Scan Fuel Invoice",
    description=(
        "Extract every fuel purchase from a fuel card invoice and validate each line. "
        "Lines that fail validation are returned in `rejectedLineItems` with reasons."
    ),
    responses=_SCAN_RESPONSES,
)
async def scan_fuel_invoice(request: Request, user_id: CurrentUserId, extractor: ExtractorDep) -> Dict[str, Any]:
    """
    Scan a fuel invoice.

    - **fileContent**: Invoice text, or a `data:` URL for images.
    - **fileName**: Shown to the model for context.
    - **vehicleRegistrations**: The fleet's registrations, to help the model read plates.
    """
    payload = await _scan_request(request)
    file_name = payload.file_name or "invoice"
    logger.info(f"Scanning fuel invoice {file_name} for user {user_id}")

    extraction = await extractor.scan_fuel_invoice(payload.file_content, file_name, payload.vehicle_registrations)
    validated = validate_invoice(extraction)
    if validated.rejected_line_items:
        logger.info(f"Rejected {len(validated.rejected_line_items)} line items from {file_name}")
    return {"success": True, "data": validated.model_dump(mode="json", by_alias=True)}
