"""init

Revision ID: 0001_init
Revises: 
Create Date: 2026-10-17

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "0001_init"
down_revision = None
branch_labels = None
depends_on = None

def upgrade() -> None:
    op.create_table(
        "trucks",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("license_plate", sa.String(length=64), nullable=False),
        sa.Column("make", sa.String(length=100), nullable=True),
        sa.Column("model", sa.String(length=100), nullable=True),
        sa.Column("year", sa.Integer(), nullable=True),
        sa.Column("service_interval_km", sa.Numeric(12, 2), nullable=True),
        sa.Column("next_service_km", sa.Numeric(12, 2), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
    )
    op.create_index("ix_trucks_license_plate", "trucks", ["license_plate"], unique=True)

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("actor", sa.String(length=100), nullable=False, server_default=""),
        sa.Column("action", sa.String(length=100), nullable=False),
        sa.Column("entity_type", sa.String(length=100), nullable=False, server_default=""),
        sa.Column("entity_id", sa.String(length=100), nullable=False, server_default=""),
        sa.Column("payload", postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
    )

    op.create_table(
        "import_jobs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("kind", sa.String(length=50), nullable=False),
        sa.Column("status", sa.String(length=50), nullable=False, server_default="pending"),
        sa.Column("filename", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("s3_key", sa.String(length=512), nullable=False, server_default=""),
        sa.Column("summary", postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column("error", sa.Text(), nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("processed_at", sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        "truck_trips",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("truck_id", sa.Integer(), sa.ForeignKey("trucks.id", ondelete="CASCADE"), nullable=False),
        sa.Column("trip_date", sa.Date(), nullable=False),
        sa.Column("opening_km", sa.Numeric(12, 2), nullable=True),
        sa.Column("total_km", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("liters_filled", sa.Numeric(12, 2), nullable=True),
        sa.Column("worker_name", sa.String(length=255), nullable=False, server_default="N/A"),
        sa.Column("is_hours_based", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("import_job_id", sa.Integer(), sa.ForeignKey("import_jobs.id", ondelete="SET NULL"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
    )
    op.create_index("ix_truck_trips_truck_date", "truck_trips", ["truck_id", "trip_date"])

    op.create_table(
        "services",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("truck_id", sa.Integer(), sa.ForeignKey("trucks.id", ondelete="CASCADE"), nullable=False),
        sa.Column("service_date", sa.Date(), nullable=False),
        sa.Column("odo_reading", sa.Numeric(12, 2), nullable=True),
        sa.Column("supplier", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("comments", sa.Text(), nullable=False, server_default=""),
        sa.Column("expense_amount", sa.Numeric(14, 2), nullable=False, server_default="0"),
        sa.Column("oil_filter", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("diesel_filter", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("air_filter", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("tires", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("brakes", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("import_job_id", sa.Integer(), sa.ForeignKey("import_jobs.id", ondelete="SET NULL"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
    )
    op.create_index("ix_services_truck_date", "services", ["truck_id", "service_date"])

def downgrade() -> None:
    op.drop_index("ix_services_truck_date", table_name="services")
    op.drop_table("services")
    op.drop_index("ix_truck_trips_truck_date", table_name="truck_trips")
    op.drop_table("truck_trips")
    op.drop_table("import_jobs")
    op.drop_table("audit_logs")
    op.drop_index("ix_trucks_license_plate", table_name="trucks")
    op.drop_table("trucks")
