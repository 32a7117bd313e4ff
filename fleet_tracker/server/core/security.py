"""
Request authentication.

User-facing endpoints take a bearer JWT issued by the auth provider; the
``sub`` claim is the user's UUID. Machine-to-machine webhooks authenticate
with a shared key in the ``x-api-key`` header instead.
"""

from __future__ import annotations

import secrets
import uuid
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import APIKeyHeader, HTTPAuthorizationCredentials, HTTPBearer
from jose import jwt
from jose.exceptions import JWTError

from fleet_tracker.core.logging_config import get_logger
from fleet_tracker.server.core.config import settings

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)
api_key_scheme = APIKeyHeader(name="x-api-key", auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def decode_user_id(token: str) -> uuid.UUID:
    """Verify a bearer token and return the user id from its ``sub`` claim.

    Raises:
        HTTPException: 401 when the token is invalid, expired or carries no usable subject
    """
    auth = settings.auth
    options = {"verify_aud": auth.jwt_audience is not None}
    try:
        payload = jwt.decode(
            token,
            auth.jwt_secret,
            algorithms=[auth.jwt_algorithm],
            audience=auth.jwt_audience,
            options=options,
        )
    except JWTError as e:
        logger.debug(f"Rejected bearer token: {e}")
        raise _unauthorized("Unauthorized: Invalid token")

    subject = payload.get("sub")
    if not subject:
        raise _unauthorized("Unauthorized: No user ID in token")
    try:
        return uuid.UUID(str(subject))
    except ValueError:
        raise _unauthorized("Unauthorized: Invalid user ID in token")


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> uuid.UUID:
    """Dependency resolving the authenticated user's id from the bearer token."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise _unauthorized("Unauthorized: Missing or invalid authorization header")
    return decode_user_id(credentials.credentials)


def _check_api_key(provided: Optional[str], expected: Optional[str], setting_name: str) -> None:
    if not expected:
        logger.error(f"{setting_name} not configured")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Server configuration error")
    if not provided or not secrets.compare_digest(provided, expected):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or missing API key")


async def require_mileage_import_key(api_key: Optional[str] = Depends(api_key_scheme)) -> None:
    _check_api_key(api_key, settings.webhooks.mileage_import_api_key, "MILEAGE_IMPORT_API_KEY")


async def require_fuel_email_key(api_key: Optional[str] = Depends(api_key_scheme)) -> None:
    _check_api_key(api_key, settings.webhooks.fuel_email_api_key, "FUEL_EMAIL_API_KEY")


async def get_webhook_user_id(x_user_id: Optional[str] = Header(default=None)) -> uuid.UUID:
    """The fleet owner named by the ``x-user-id`` header of an API-key webhook."""
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="x-user-id header is required for API key authentication",
        )
    try:
        return uuid.UUID(x_user_id)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid user ID format")
