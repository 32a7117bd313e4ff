"""
Monitoring and Tracing Configuration Module.

Optional integration with Pydantic Logfire. When ``LOGFIRE_ENABLED`` is set
and a token is available, the FastAPI app, SQLAlchemy, HTTPX and pydantic-ai
extraction calls are instrumented. Otherwise every helper in this module
degrades to plain logging.
"""

import logging
import os
from typing import Optional

from fastapi import FastAPI

logger = logging.getLogger(__name__)

LOGFIRE_ENABLED = os.getenv("LOGFIRE_ENABLED", "false").lower() in ("true", "1", "yes")
LOGFIRE_TOKEN = os.getenv("LOGFIRE_TOKEN", "")
LOGFIRE_ENVIRONMENT = os.getenv("LOGFIRE_ENVIRONMENT", "development")
LOGFIRE_SERVICE_NAME = os.getenv("LOGFIRE_SERVICE_NAME", "fleet-tracker")


def initialize_logfire(app: Optional[FastAPI] = None) -> bool:
    """
    Initialize Logfire instrumentation.

    Args:
        app: FastAPI application to instrument (optional).

    Returns:
        True when Logfire was configured.
    """
    if not LOGFIRE_ENABLED:
        logger.info("Logfire monitoring is disabled. Set LOGFIRE_ENABLED=true to enable.")
        return False

    if not LOGFIRE_TOKEN:
        logger.warning("Logfire is enabled but LOGFIRE_TOKEN is not set. Monitoring will not work.")
        return False

    try:
        import logfire
    except ImportError:
        logger.warning("Logfire is enabled but 'logfire' is not installed. Install the 'monitoring' extra.")
        return False

    logfire.configure(
        token=LOGFIRE_TOKEN,
        service_name=LOGFIRE_SERVICE_NAME,
        environment=LOGFIRE_ENVIRONMENT,
    )
    logfire.instrument_pydantic_ai()
    logfire.instrument_sqlalchemy()
    logfire.instrument_httpx()
    if app is not None:
        logfire.instrument_fastapi(app=app)

    logger.info(f"Logfire monitoring initialized: environment={LOGFIRE_ENVIRONMENT}, service={LOGFIRE_SERVICE_NAME}")
    return True


def log_api_request(method: str, path: str, status_code: int, duration_ms: float) -> None:
    """
    Record a completed API request.

    Args:
        method: HTTP method
        path: Request path
        status_code: HTTP status code
        duration_ms: Request duration in milliseconds
    """
    logger.debug(f"{method} {path} -> {status_code} in {duration_ms:.2f}ms")
    if not LOGFIRE_ENABLED:
        return

    try:
        import logfire
    except ImportError:
        return

    logfire.info(
        "API request completed",
        method=method,
        path=path,
        status_code=status_code,
        duration_ms=duration_ms,
    )
