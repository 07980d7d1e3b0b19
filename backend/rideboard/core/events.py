"""Domain Events — facts emitted by the core for notification and messaging.

Invariants:
    - Events are immutable and carry everything a consumer needs (no lazy loads)
    - event_type is a stable string for logs and external routing

Design Decisions:
    - Frozen dataclasses over dicts: consumers dispatch on the class
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import ClassVar, Union

from rideboard.core.domain_types import (
    RideId, RequestId, UserId, RideRole, RideStatus,
)


@dataclass(frozen=True)
class RequestAccepted:
    event_type: ClassVar[str] = "request_accepted"
    ride_id: RideId
    request_id: RequestId
    owner_id: UserId
    rider_id: UserId
    origin: str
    destination: str
    seats: int
    ride_status: RideStatus
    occurred_at: datetime


@dataclass(frozen=True)
class RequestDeclined:
    event_type: ClassVar[str] = "request_declined"
    ride_id: RideId
    request_id: RequestId
    owner_id: UserId
    rider_id: UserId
    origin: str
    destination: str
    occurred_at: datetime


@dataclass(frozen=True)
class RideCancelled:
    """One per rider holding an ACCEPTED request at cancellation time."""
    event_type: ClassVar[str] = "ride_cancelled"
    ride_id: RideId
    request_id: RequestId
    owner_id: UserId
    rider_id: UserId
    origin: str
    destination: str
    occurred_at: datetime


@dataclass(frozen=True)
class RidePosted:
    """New ride on the board, consumed by the external broadcast."""
    event_type: ClassVar[str] = "ride_posted"
    ride_id: RideId
    owner_id: UserId
    role: RideRole
    origin: str
    destination: str
    departure_date: date | None
    occurred_at: datetime


RideEvent = Union[RequestAccepted, RequestDeclined, RideCancelled, RidePosted]
