"""Unit tests for the database layer.

Covers the user-scoped repositories in fleet_tracker/core/database:

- Ownership scoping of reads and writes
- Vehicle-owned tables and the ownership checks on write
- Mileage upserts, maintenance completion and registration lookups

All tests run against in-memory SQLite.
"""
