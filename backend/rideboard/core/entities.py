"""Domain Entities — immutable snapshots of rides and ride requests.

Invariants:
    - Entities are frozen: state changes produce a new instance via dataclasses.replace
    - Exactly one of departure_date / recurrence is set (checked by ride_schedule.validate_ride)
    - Timestamps are timezone-aware UTC

Design Decisions:
    - Plain dataclasses, not ORM rows: core logic runs without a session
      and the store maps rows in and out at the edge
"""

from dataclasses import dataclass
from datetime import date, datetime, time

from rideboard.core.domain_types import (
    RideId, RequestId, UserId,
    RideStatus, RequestStatus, TripKind, RideRole,
    OPEN_REQUEST_STATUSES,
)
from rideboard.core.recurrence import RecurrenceSpec


@dataclass(frozen=True)
class Ride:
    """A posted offer of, or need for, shared travel."""
    id: RideId
    owner_id: UserId
    origin: str
    destination: str
    capacity: int
    departure_time: time
    created_at: datetime
    departure_date: date | None = None
    recurrence: RecurrenceSpec | None = None
    trip_kind: TripKind = TripKind.ONE_WAY
    role: RideRole = RideRole.DRIVER
    return_date: date | None = None
    return_time: time | None = None
    price_per_seat: float | None = None
    notes: str | None = None
    status: RideStatus = RideStatus.ACTIVE

    @property
    def is_recurring(self) -> bool:
        return self.recurrence is not None


@dataclass(frozen=True)
class RideRequest:
    """A rider's bid for seats on a ride."""
    id: RequestId
    ride_id: RideId
    rider_id: UserId
    seats_requested: int
    created_at: datetime
    message: str | None = None
    status: RequestStatus = RequestStatus.PENDING

    @property
    def is_open(self) -> bool:
        """PENDING or ACCEPTED; counts against the one-request-per-ride rule."""
        return self.status in OPEN_REQUEST_STATUSES
