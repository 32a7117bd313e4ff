"""
Inbound webhooks for automation tools.

- ``/import-mileage``: one day's mileage for one vehicle (Zapier), bearer token.
- ``/import-mileage-excel``: a tracker's Excel export (n8n), ``x-api-key`` plus
  ``x-user-id`` naming the fleet owner.
- ``/fuel-email``: a forwarded fuel invoice extracted with AI, ``x-api-key``
  with the owner's id in the body.

Bodies are parsed by hand so each accepted format (JSON, multipart, raw) can be
handled, and every failure is reported as ``{"error": ...}`` by the envelope
route class.
"""

from __future__ import annotations

import base64
import binascii
import uuid
from typing import Any, Dict, Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import ValidationError
from starlette.datastructures import UploadFile

from fleet_tracker.core.database.repositories import build_sql_repos
from fleet_tracker.core.logging_config import get_logger
from fleet_tracker.core.models.io.mileage_records import MileageRecordRead
from fleet_tracker.core.models.io.webhooks import MileageImportPayload
from fleet_tracker.server.core.security import (
    get_webhook_user_id,
    require_fuel_email_key,
    require_mileage_import_key,
)
from fleet_tracker.server.exception_handlers import EnvelopeRoute
from fleet_tracker.server.services.deps import ExtractorDep, ReposDep, SessionDep
from fleet_tracker.server.services.excel_mileage import MAX_FILE_SIZE, import_workbook
from fleet_tracker.server.services.fuel_email import DEFAULT_FILE_NAME, process_fuel_email
from fleet_tracker.server.services.mileage_import import import_mileage

logger = get_logger(__name__)

router = APIRouter(route_class=EnvelopeRoute, tags=["webhooks"])

# base64 is roughly 4/3 the size of the bytes it encodes
MAX_BASE64_LENGTH = int(MAX_FILE_SIZE * 1.4)
FILE_TOO_LARGE = f"File too large. Maximum size is {MAX_FILE_SIZE // (1024 * 1024)}MB"


def _bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


async def _json_body(request: Request) -> Dict[str, Any]:
    try:
        body = await request.json()
    except ValueError:
        raise _bad_request("Invalid JSON body")
    if not isinstance(body, dict):
        raise _bad_request("Request body must be a JSON object")
    return body


def _is_multipart(request: Request) -> bool:
    return "multipart/form-data" in request.headers.get("content-type", "")


def _is_json(request: Request) -> bool:
    return "application/json" in request.headers.get("content-type", "")


@router.post(
    "/import-mileage",
    summary="Import Daily Mileage",
    description=(
        "Record one day's mileage for a vehicle identified by registration. "
        "An existing record for the same vehicle and day is replaced."
    ),
    responses={
        400: {"description": "Missing or invalid fields"},
        401: {"description": "Missing or invalid bearer token"},
        403: {"description": "Registration belongs to another user's vehicle"},
        404: {"description": "No vehicle with this registration"},
    },
)
async def import_mileage_webhook(request: Request, repos: ReposDep) -> Dict[str, Any]:
    """
    Import mileage from an automation.

    - **registration**: Vehicle registration; spaces and case are ignored.
    - **daily_mileage**: Miles driven that day.
    - **record_date**: YYYY-MM-DD, defaults to today.
    - **odometer_reading**: Optional odometer at the end of the day.
    """
    body = await _json_body(request)
    try:
        payload = MileageImportPayload.model_validate(body)
    except ValidationError as e:
        raise _bad_request(f"Invalid payload: {e.errors()[0]['msg']}")

    record = await import_mileage(repos, payload)
    return {
        "success": True,
        "message": "Mileage record imported",
        "record": MileageRecordRead.model_validate(record).model_dump(mode="json"),
    }


async def _workbook_bytes(request: Request) -> bytes:
    if _is_multipart(request):
        form = await request.form()
        upload = form.get("file")
        if not isinstance(upload, UploadFile):
            raise _bad_request("No file provided")
        content = await upload.read()
    elif _is_json(request):
        body = await _json_body(request)
        encoded = body.get("file_base64")
        if not encoded:
            raise _bad_request("No file_base64 provided")
        if len(encoded) > MAX_BASE64_LENGTH:
            raise _bad_request(FILE_TOO_LARGE)
        try:
            content = base64.b64decode(encoded)
        except (binascii.Error, ValueError):
            raise _bad_request("Invalid base64 file content")
    else:
        content = await request.body()

    if len(content) > MAX_FILE_SIZE:
        raise _bad_request(FILE_TOO_LARGE)
    if not content:
        raise _bad_request("No file provided")
    return content


@router.post(
    "/import-mileage-excel",
    summary="Import Mileage From Excel",
    description=(
        "Import a tracker's daily Excel export. Accepts a multipart `file`, a JSON "
        "`file_base64` or the raw workbook as the body. Rows are matched to the "
        "owner's vehicles by device name."
    ),
    dependencies=[Depends(require_mileage_import_key)],
    responses={
        400: {"description": "Missing user id, unreadable or oversized workbook"},
        401: {"description": "Invalid or missing API key"},
        500: {"description": "Webhook API key not configured"},
    },
)
async def import_mileage_excel_webhook(
    request: Request,
    session: SessionDep,
    user_id: uuid.UUID = Depends(get_webhook_user_id),
) -> Dict[str, Any]:
    content = await _workbook_bytes(request)
    logger.info(f"Excel mileage import for user {user_id}: {len(content)} bytes")
    repos = build_sql_repos(session=session, user_id=user_id)
    return await import_workbook(repos, content)


async def _fuel_email_input(request: Request) -> Tuple[Optional[str], str, Optional[str]]:
    """File content, file name and user id from a JSON or multipart body."""
    if _is_json(request):
        body = await _json_body(request)
        content = body.get("fileContent") or body.get("attachment") or body.get("file_content")
        file_name = body.get("fileName") or body.get("file_name") or body.get("filename") or DEFAULT_FILE_NAME
        return content, file_name, body.get("userId") or body.get("user_id")

    if _is_multipart(request):
        form = await request.form()
        content, file_name = None, DEFAULT_FILE_NAME
        upload = form.get("file") or form.get("attachment")
        if isinstance(upload, UploadFile):
            data = await upload.read()
            media_type = upload.content_type or "application/octet-stream"
            content = f"data:{media_type};base64,{base64.b64encode(data).decode('ascii')}"
            file_name = upload.filename or DEFAULT_FILE_NAME
        user_id = form.get("userId") or form.get("user_id")
        return content, file_name, user_id if isinstance(user_id, str) else None

    return None, DEFAULT_FILE_NAME, None


@router.post(
    "/fuel-email",
    summary="Process Emailed Fuel Invoice",
    description=(
        "Extract a forwarded fuel invoice with AI and create a fuel record for every "
        "line item whose registration is in the owner's fleet."
    ),
    dependencies=[Depends(require_fuel_email_key)],
    responses={
        400: {"description": "Missing file content or user id"},
        401: {"description": "Invalid or missing API key"},
        429: {"description": "AI provider rate limit"},
        402: {"description": "AI provider credits exhausted"},
    },
)
async def fuel_email_webhook(request: Request, session: SessionDep, extractor: ExtractorDep) -> Dict[str, Any]:
    """
    Process a fuel invoice email.

    - **fileContent** / **attachment**: Invoice text, or a `data:` URL for images.
    - **fileName**: Name used in the record notes.
    - **userId**: The fleet owner's id.
    """
    content, file_name, raw_user_id = await _fuel_email_input(request)
    if not content:
        raise _bad_request("No file content provided. Send 'fileContent' or 'attachment' in the request.")
    if not raw_user_id:
        raise _bad_request("No user ID provided. Include 'userId' in the request to identify the fleet owner.")
    try:
        user_id = uuid.UUID(str(raw_user_id))
    except ValueError:
        raise _bad_request("Invalid user ID format")

    logger.info(f"Processing fuel invoice email {file_name} for user {user_id}")
    repos = build_sql_repos(session=session, user_id=user_id)
    result = await process_fuel_email(repos, extractor, content, file_name)
    return result.model_dump(mode="json", by_alias=True)
