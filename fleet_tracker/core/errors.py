"""
Domain errors raised below the HTTP layer.

Routers and exception handlers translate these into HTTP status codes; the
``status_code`` attribute carries the suggested mapping.
"""

from __future__ import annotations

from typing import Any, Optional


class FleetTrackerError(Exception):
    """Base class for fleet tracker domain errors."""

    status_code: int = 500

    def __init__(self, message: str, *, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class VehicleNotFoundError(FleetTrackerError):
    """No vehicle matched the given id or registration."""

    status_code = 404


class OwnershipError(FleetTrackerError):
    """The referenced row exists but belongs to another user."""

    status_code = 403


class ImportValidationError(FleetTrackerError):
    """An inbound payload failed field validation."""

    status_code = 400


class DuplicateRecordError(FleetTrackerError):
    """A record matching an existing one within tolerance was submitted."""

    status_code = 409


class ExtractionError(FleetTrackerError):
    """AI document extraction failed.

    ``status_code`` is set per instance so provider rate limits (429) and
    exhausted credits (402) reach the client unchanged.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int = 500,
        user_message: bool = False,
        details: Optional[Any] = None,
    ) -> None:
        super().__init__(message, details=details)
        self.status_code = status_code
        self.user_message = user_message
