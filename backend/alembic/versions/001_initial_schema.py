"""Initial schema — rides, ride_requests, messages.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "rides",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("owner_id", UUID(as_uuid=True), nullable=False),
        sa.Column("origin", sa.String(500), nullable=False),
        sa.Column("destination", sa.String(500), nullable=False),
        sa.Column("trip_kind", sa.String(20), nullable=False, server_default="ONE_WAY"),
        sa.Column("role", sa.String(20), nullable=False, server_default="DRIVER"),
        sa.Column("departure_date", sa.Date, nullable=True),
        sa.Column("departure_time", sa.Time, nullable=False),
        sa.Column("is_recurring", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("recurrence_pattern", sa.JSON, nullable=True),
        sa.Column("return_date", sa.Date, nullable=True),
        sa.Column("return_time", sa.Time, nullable=True),
        sa.Column("capacity", sa.Integer, nullable=False),
        sa.Column("price_per_seat", sa.Float, nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="ACTIVE"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("capacity >= 1", name="ck_rides_capacity_positive"),
        sa.CheckConstraint(
            "price_per_seat IS NULL OR price_per_seat >= 0",
            name="ck_rides_price_non_negative",
        ),
    )
    op.create_index("ix_rides_owner_id", "rides", ["owner_id"])
    op.create_index("ix_rides_status_departure", "rides", ["status", "departure_date"])

    op.create_table(
        "ride_requests",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "ride_id", UUID(as_uuid=True),
            sa.ForeignKey("rides.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("rider_id", UUID(as_uuid=True), nullable=False),
        sa.Column("seats_requested", sa.Integer, nullable=False, server_default="1"),
        sa.Column("message", sa.Text, nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("seats_requested >= 1", name="ck_ride_requests_seats_positive"),
    )
    op.create_index("ix_ride_requests_rider_id", "ride_requests", ["rider_id"])
    op.create_index("ix_ride_requests_ride_rider", "ride_requests", ["ride_id", "rider_id"])

    op.create_table(
        "messages",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("sender_id", UUID(as_uuid=True), nullable=False),
        sa.Column("receiver_id", UUID(as_uuid=True), nullable=False),
        sa.Column("ride_id", UUID(as_uuid=True), sa.ForeignKey("rides.id"), nullable=True),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_messages_sender_id", "messages", ["sender_id"])
    op.create_index("ix_messages_receiver_id", "messages", ["receiver_id"])


def downgrade() -> None:
    op.drop_table("messages")
    op.drop_table("ride_requests")
    op.drop_table("rides")
