"""Initial schema: users, blood alerts, appointments and inventory.

Revision ID: 001
Create Date: 2026-10-18
"""

from alembic import op
import sqlalchemy as sa


revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # ── users ─────────────────────────────────────────────────────────
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("email", sa.String(255), unique=True, nullable=False),
        sa.Column("phone", sa.String(32), nullable=True),
        sa.Column("blood_group", sa.String(7), nullable=False),
        sa.Column("county", sa.String(80), nullable=True),
        sa.Column("organization", sa.String(160), nullable=True),
        sa.Column("user_type", sa.String(12), nullable=False),
        sa.Column("is_verified", sa.Boolean, nullable=False),
        sa.Column("total_donations", sa.Integer, nullable=False),
        sa.Column("last_donation_date", sa.Date, nullable=True),
        sa.Column("lat", sa.Float, nullable=True),
        sa.Column("lng", sa.Float, nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    )
    op.create_index("idx_users_blood_group", "users", ["blood_group"])
    op.create_index("idx_users_type", "users", ["user_type"])

    # ── blood_alerts ──────────────────────────────────────────────────
    op.create_table(
        "blood_alerts",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("hospital_name", sa.String(160), nullable=False),
        sa.Column("organization", sa.String(160), nullable=False),
        sa.Column("location", sa.String(255), nullable=False),
        sa.Column("hospital_lat", sa.Float, nullable=True),
        sa.Column("hospital_lng", sa.Float, nullable=True),
        sa.Column("blood_groups", sa.JSON, nullable=False),
        sa.Column("urgency", sa.String(8), nullable=False),
        sa.Column("required_units", sa.Integer, nullable=False),
        sa.Column("collected_units", sa.Integer, nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("distance_km", sa.Float, nullable=True),
        sa.Column("is_rsvped", sa.Boolean, nullable=False),
        sa.Column("responders", sa.JSON, nullable=False),
        sa.Column("created_by", sa.Integer, nullable=True),
        sa.Column("contact_info", sa.String(255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("idx_alerts_urgency", "blood_alerts", ["urgency"])
    op.create_index("idx_alerts_created", "blood_alerts", ["created_at"])

    # ── appointments ──────────────────────────────────────────────────
    op.create_table(
        "appointments",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("donor_id", sa.Integer, nullable=False),
        sa.Column("donor_name", sa.String(120), nullable=False),
        sa.Column("hospital_name", sa.String(160), nullable=False),
        sa.Column("date", sa.Date, nullable=False),
        sa.Column("time", sa.String(10), nullable=False),
        sa.Column("blood_group", sa.String(7), nullable=False),
        sa.Column("status", sa.String(9), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    )
    op.create_index("idx_appointments_donor", "appointments", ["donor_id"])
    op.create_index("idx_appointments_status", "appointments", ["status"])

    # ── inventory ─────────────────────────────────────────────────────
    op.create_table(
        "inventory",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("blood_group", sa.String(7), unique=True, nullable=False),
        sa.Column("units", sa.Integer, nullable=False),
        sa.Column("expiring_soon", sa.Integer, nullable=False),
        sa.Column("last_updated", sa.DateTime(timezone=True), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("inventory")
    op.drop_table("appointments")
    op.drop_table("blood_alerts")
    op.drop_table("users")
