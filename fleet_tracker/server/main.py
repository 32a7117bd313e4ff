"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware (CORS,
request logging), registers exception handlers and includes all API routers.
It serves as the root of the web server.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fleet_tracker.core.database import init_db
from fleet_tracker.core.logging_config import get_logger, setup_logging
from fleet_tracker.core.monitoring import initialize_logfire

from .api.v1 import (
    analytics,
    documents,
    drivers,
    exports,
    fuel_records,
    health,
    maintenance,
    mileage_records,
    reports,
    scans,
    service_records,
    vehicles,
    webhooks,
)
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .middleware import RequestLoggingMiddleware

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    On startup, creates the tables when running against a local SQLite
    database; deployed databases are migrated with Alembic.
    """
    # Startup
    try:
        logger.info("Starting up Fleet Tracker Server...")
        await init_db(create_tables=settings.database.url.startswith("sqlite"))
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    yield

    # Shutdown
    logger.info("Shutting down Fleet Tracker Server...")


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    Fleet Tracker Server API

    Backend for a UK small-fleet management app: vehicles and their MOT dates,
    drivers and licence check codes, fuel, service, mileage and maintenance
    records, cost analytics and CSV exports, plus webhooks for mileage and fuel
    invoice automations and AI document scanning.
    """,
    version=constant.VERSION,
    openapi_url=f"{constant.API_V1_STR}/openapi.json",
    docs_url=f"{constant.API_V1_STR}/docs",
    redoc_url=f"{constant.API_V1_STR}/redoc",
    lifespan=lifespan,
)

# Set all CORS enabled origins
cors = settings.cors
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors.origins,
    allow_credentials=cors.allow_credentials,
    allow_methods=cors.allow_methods,
    allow_headers=cors.allow_headers,
)
app.add_middleware(RequestLoggingMiddleware)

setup_exception_handlers(app)
initialize_logfire(app)


app.include_router(health.router, tags=["health"])
app.include_router(vehicles.router, prefix=f"{constant.API_V1_STR}/vehicles")
app.include_router(drivers.router, prefix=f"{constant.API_V1_STR}/drivers")
app.include_router(service_records.router, prefix=f"{constant.API_V1_STR}/service-records")
app.include_router(documents.router, prefix=f"{constant.API_V1_STR}/documents")
app.include_router(fuel_records.router, prefix=f"{constant.API_V1_STR}/fuel-records")
app.include_router(mileage_records.router, prefix=f"{constant.API_V1_STR}/mileage-records")
app.include_router(maintenance.router, prefix=f"{constant.API_V1_STR}/maintenance-schedules")
app.include_router(reports.router, prefix=f"{constant.API_V1_STR}/reports")
app.include_router(analytics.router, prefix=f"{constant.API_V1_STR}/analytics")
app.include_router(exports.router, prefix=f"{constant.API_V1_STR}/exports")
app.include_router(webhooks.router, prefix=f"{constant.API_V1_STR}/webhooks")
app.include_router(scans.router, prefix=f"{constant.API_V1_STR}/scan")
