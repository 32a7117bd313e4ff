"""
JSON envelope for webhook and scan endpoints.

Integrations (Zapier, n8n, the scanning UI) expect ``{"error": ...}`` bodies
rather than FastAPI's ``{"detail": ...}``. Routers created with
``route_class=EnvelopeRoute`` get every failure, including those raised by
auth dependencies, rewritten into that shape:

- ``HTTPException``: ``{"error": detail}`` with the same status
- request validation failures: 400 ``{"error": "Invalid request", "details": [...]}``
- ``ExtractionError`` with a user-facing message: ``{"error", "userMessage": true}``
- other ``FleetTrackerError``: ``{"error": message}`` with its status
- anything else: 500 ``{"error": "Internal server error", "details": str(exc)}``
"""

from typing import Any, Callable, Coroutine, Dict

from fastapi import HTTPException, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute

from fleet_tracker.core.errors import ExtractionError, FleetTrackerError
from fleet_tracker.core.logging_config import get_logger

logger = get_logger(__name__)


def error_body(message: str, **extra: Any) -> Dict[str, Any]:
    body: Dict[str, Any] = {"error": message}
    body.update({k: v for k, v in extra.items() if v is not None})
    return body


def envelope_response(exc: Exception) -> JSONResponse:
    """Map an exception onto the envelope."""
    if isinstance(exc, RequestValidationError):
        details = [f"{'.'.join(str(p) for p in e.get('loc', ()))}: {e.get('msg')}" for e in exc.errors()]
        return JSONResponse(status_code=400, content=error_body("Invalid request", details=details))
    if isinstance(exc, HTTPException):
        return JSONResponse(status_code=exc.status_code, content=error_body(str(exc.detail)), headers=exc.headers)
    if isinstance(exc, ExtractionError):
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.message, userMessage=True if exc.user_message else None),
        )
    if isinstance(exc, FleetTrackerError):
        return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))
    return JSONResponse(status_code=500, content=error_body("Internal server error", details=str(exc)))


class EnvelopeRoute(APIRoute):
    """APIRoute whose errors are reported in the webhook envelope."""

    def get_route_handler(self) -> Callable[[Request], Coroutine[Any, Any, Response]]:
        original_route_handler = super().get_route_handler()

        async def envelope_route_handler(request: Request) -> Response:
            try:
                return await original_route_handler(request)
            except (HTTPException, RequestValidationError, FleetTrackerError) as exc:
                logger.info(f"{request.method} {request.url.path} rejected: {exc}")
                return envelope_response(exc)
            except Exception as exc:
                logger.error(f"Error handling {request.method} {request.url.path}: {exc}", exc_info=True)
                return envelope_response(exc)

        return envelope_route_handler
