"""Ride ORM — persists a posted ride offer or ride need.

Invariants:
    - id is UUID primary key
    - status stores ACTIVE, CANCELLED or COMPLETED; FULL is derived and never written
    - Exactly one of departure_date / recurrence_pattern is non-null
    - owner_id references the identity provider's user id (no local users table)

Design Decisions:
    - JSON column for recurrence_pattern: {"days": [...], "until": "YYYY-MM-DD"},
      decoded into a RecurrenceSpec by the ride store only
    - cascade delete for requests: ride owns all its requests
"""

import uuid
from datetime import date, datetime, time, timezone

from sqlalchemy import (
    String, Text, Integer, Float, Boolean, Date, Time, DateTime, JSON, Index,
    CheckConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from rideboard.db.base import Base


class Ride(Base):
    """Ride aggregate root; owns its seat requests."""
    __tablename__ = "rides"
    __table_args__ = (
        Index("ix_rides_status_departure", "status", "departure_date"),
        CheckConstraint("capacity >= 1", name="ck_rides_capacity_positive"),
        CheckConstraint(
            "price_per_seat IS NULL OR price_per_seat >= 0",
            name="ck_rides_price_non_negative",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    owner_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), nullable=False, index=True,
    )
    origin: Mapped[str] = mapped_column(String(500), nullable=False)
    destination: Mapped[str] = mapped_column(String(500), nullable=False)
    trip_kind: Mapped[str] = mapped_column(
        String(20), nullable=False, default="ONE_WAY",
    )
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default="DRIVER",
    )
    departure_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    departure_time: Mapped[time] = mapped_column(Time, nullable=False)
    is_recurring: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    recurrence_pattern: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    return_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    return_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    price_per_seat: Mapped[float | None] = mapped_column(Float, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="ACTIVE",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    requests: Mapped[list["RideRequest"]] = relationship(
        "RideRequest", back_populates="ride",
        cascade="all, delete-orphan",
    )
