"""Initial fleet tracker schema

Revision ID: 20261018_000000
Revises: None
Create Date: 2026-10-18 00:00:00.000000

Creates every table used by the fleet tracker:
- vehicles and drivers (owned directly by a user)
- service_records, documents, fuel_records and mileage_records (owned through their vehicle)
- maintenance_schedules (owned by a user, optionally tied to a vehicle)
- saved_reports

Revision format: YYYYMMDD_HHMMSS_description

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20261018_000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create all tables."""

    # Create vehicles table
    op.create_table(
        "vehicles",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("registration", sa.String(16), nullable=False),
        sa.Column("make", sa.String(64), nullable=False),
        sa.Column("model", sa.String(64), nullable=False),
        sa.Column("year", sa.Integer(), nullable=True),
        sa.Column("vin", sa.String(32), nullable=True),
        sa.Column("mot_due_date", sa.Date(), nullable=True),
        sa.Column("annual_tax", sa.Float(), nullable=True),
        sa.Column("tax_paid_monthly", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("monthly_finance", sa.Float(), nullable=True),
        sa.Column("fuel_type", sa.String(32), nullable=False, server_default="petrol"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_vehicles_user_id", "user_id"),
    )

    # Create drivers table
    op.create_table(
        "drivers",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(32), nullable=True),
        sa.Column("license_number", sa.String(32), nullable=True),
        sa.Column("license_expiry_date", sa.Date(), nullable=True),
        sa.Column("last_check_code_date", sa.Date(), nullable=True),
        sa.Column("next_check_code_due", sa.Date(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_drivers_user_id", "user_id"),
    )

    # Create service_records table
    op.create_table(
        "service_records",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("vehicle_id", sa.Uuid(), nullable=False),
        sa.Column("service_date", sa.Date(), nullable=False),
        sa.Column("service_type", sa.String(64), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("cost", sa.Float(), nullable=False, server_default="0"),
        sa.Column("mileage", sa.Integer(), nullable=True),
        sa.Column("provider", sa.String(128), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["vehicle_id"], ["vehicles.id"], ondelete="CASCADE"),
        sa.Index("ix_service_records_vehicle_id", "vehicle_id"),
    )

    # Create documents table
    op.create_table(
        "documents",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("vehicle_id", sa.Uuid(), nullable=False),
        sa.Column("service_record_id", sa.Uuid(), nullable=True),
        sa.Column("file_name", sa.String(255), nullable=False),
        sa.Column("file_path", sa.String(512), nullable=False),
        sa.Column("file_type", sa.String(128), nullable=True),
        sa.Column("file_size", sa.Integer(), nullable=True),
        sa.Column("ai_extracted_data", sa.JSON(), nullable=True),
        sa.Column("extracted_cost", sa.Float(), nullable=True),
        sa.Column("processing_status", sa.String(16), nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["vehicle_id"], ["vehicles.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["service_record_id"], ["service_records.id"], ondelete="SET NULL"),
        sa.Index("ix_documents_vehicle_id", "vehicle_id"),
        sa.Index("ix_documents_created_at", "created_at"),
    )

    # Create fuel_records table
    op.create_table(
        "fuel_records",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("vehicle_id", sa.Uuid(), nullable=False),
        sa.Column("fill_date", sa.Date(), nullable=False),
        sa.Column("litres", sa.Float(), nullable=False),
        sa.Column("cost_per_litre", sa.Float(), nullable=False),
        sa.Column("total_cost", sa.Float(), nullable=False),
        sa.Column("mileage", sa.Integer(), nullable=True),
        sa.Column("station", sa.String(128), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("invoice_file_path", sa.String(512), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["vehicle_id"], ["vehicles.id"], ondelete="CASCADE"),
        sa.Index("ix_fuel_records_vehicle_id", "vehicle_id"),
    )

    # Create mileage_records table
    op.create_table(
        "mileage_records",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("vehicle_id", sa.Uuid(), nullable=False),
        sa.Column("record_date", sa.Date(), nullable=False),
        sa.Column("daily_mileage", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("odometer_reading", sa.Integer(), nullable=True),
        sa.Column("source", sa.String(32), nullable=False, server_default="manual"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["vehicle_id"], ["vehicles.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("vehicle_id", "record_date", name="uq_mileage_records_vehicle_date"),
        sa.Index("ix_mileage_records_vehicle_id", "vehicle_id"),
        sa.Index("ix_mileage_records_record_date", "record_date"),
    )

    # Create maintenance_schedules table
    op.create_table(
        "maintenance_schedules",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("vehicle_id", sa.Uuid(), nullable=True),
        sa.Column("maintenance_type", sa.String(64), nullable=False),
        sa.Column("interval_miles", sa.Integer(), nullable=True),
        sa.Column("interval_months", sa.Integer(), nullable=True),
        sa.Column("last_completed_date", sa.Date(), nullable=True),
        sa.Column("last_completed_mileage", sa.Integer(), nullable=True),
        sa.Column("next_due_date", sa.Date(), nullable=True),
        sa.Column("next_due_mileage", sa.Integer(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["vehicle_id"], ["vehicles.id"], ondelete="CASCADE"),
        sa.Index("ix_maintenance_schedules_user_id", "user_id"),
        sa.Index("ix_maintenance_schedules_vehicle_id", "vehicle_id"),
    )

    # Create saved_reports table
    op.create_table(
        "saved_reports",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("report_type", sa.String(16), nullable=False),
        sa.Column("config", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_saved_reports_user_id", "user_id"),
    )


def downgrade() -> None:
    """Drop all tables in reverse dependency order."""
    op.drop_table("saved_reports")
    op.drop_table("maintenance_schedules")
    op.drop_table("mileage_records")
    op.drop_table("fuel_records")
    op.drop_table("documents")
    op.drop_table("service_records")
    op.drop_table("drivers")
    op.drop_table("vehicles")
