"""Initial schema: rides and positions.

Revision ID: 001
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa


revision = "001"
down_revision = None
branch_labels = None
depends_on = None

RIDE_STATUSES = ("requested", "accepted", "in_progress", "completed", "cancelled")
ACTIVE_RIDE_WHERE = "status IN ('requested', 'accepted', 'in_progress')"


def upgrade() -> None:
    # ── rides ─────────────────────────────────────────────────────────
    op.create_table(
        "rides",
        sa.Column("ride_id", sa.String(36), primary_key=True),
        sa.Column("passenger_id", sa.String(36), nullable=False),
        sa.Column("driver_id", sa.String(36), nullable=True),
        sa.Column(
            "status",
            sa.Enum(
                *RIDE_STATUSES,
                name="ride_status",
                native_enum=False,
                length=20,
            ),
            nullable=False,
            server_default="requested",
        ),
        sa.Column("from_lat", sa.Float, nullable=False),
        sa.Column("from_long", sa.Float, nullable=False),
        sa.Column("to_lat", sa.Float, nullable=False),
        sa.Column("to_long", sa.Float, nullable=False),
        sa.Column("distance", sa.Float, nullable=False),
        sa.Column("fare", sa.Float, nullable=False),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("idx_rides_status", "rides", ["status"])
    op.create_index("idx_rides_passenger", "rides", ["passenger_id"])
    op.create_index("idx_rides_driver", "rides", ["driver_id"])
    # one requested / accepted / in_progress ride per passenger
    op.create_index(
        "uq_rides_active_passenger",
        "rides",
        ["passenger_id"],
        unique=True,
        postgresql_where=sa.text(ACTIVE_RIDE_WHERE),
        sqlite_where=sa.text(ACTIVE_RIDE_WHERE),
    )

    # ── positions ─────────────────────────────────────────────────────
    op.create_table(
        "positions",
        sa.Column("position_id", sa.String(36), primary_key=True),
        sa.Column(
            "ride_id",
            sa.String(36),
            sa.ForeignKey("rides.ride_id"),
            nullable=False,
        ),
        sa.Column("lat", sa.Float, nullable=False),
        sa.Column("long", sa.Float, nullable=False),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("idx_positions_ride", "positions", ["ride_id"])


def downgrade() -> None:
    op.drop_index("idx_positions_ride", table_name="positions")
    op.drop_table("positions")
    op.drop_index("uq_rides_active_passenger", table_name="rides")
    op.drop_index("idx_rides_driver", table_name="rides")
    op.drop_index("idx_rides_passenger", table_name="rides")
    op.drop_index("idx_rides_status", table_name="rides")
    op.drop_table("rides")
