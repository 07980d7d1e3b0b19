"""RideRequest ORM — persists a rider's bid for seats on a ride.

Invariants:
    - Always belongs to a Ride (ride_id FK)
    - status: PENDING -> ACCEPTED | DECLINED, never back
    - seats_requested >= 1
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    String, Text, Integer, DateTime, ForeignKey, Index, CheckConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from rideboard.db.base import Base


class RideRequest(Base):
    """Seat request on a ride."""
    __tablename__ = "ride_requests"
    __table_args__ = (
        Index("ix_ride_requests_ride_rider", "ride_id", "rider_id"),
        CheckConstraint("seats_requested >= 1", name="ck_ride_requests_seats_positive"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    ride_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("rides.id", ondelete="CASCADE"),
        nullable=False,
    )
    rider_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), nullable=False, index=True,
    )
    seats_requested: Mapped[int] = mapped_column(
        Integer, nullable=False, default=1,
    )
    message: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="PENDING",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    ride: Mapped["Ride"] = relationship("Ride", back_populates="requests")
