"""Fleet Tracker.

Backend for a small business fleet dashboard: vehicles and their MOT dates,
drivers and their licence check codes, fuel fill-ups, service records,
maintenance schedules, daily mileage and saved report configurations.

Core subpackages
----------------

- ``fleet_tracker.core``: persistence (SQLModel entities and repositories),
  pure domain logic (status classification, cost aggregation, duplicate
  detection, registration matching, CSV exports) and logging.
- ``fleet_tracker.server``: the FastAPI application, per-user CRUD routers,
  analytics endpoints, and the import and scanning webhooks.
"""
