"""Availability Calculator — remaining seats and effective ride status.

Invariants:
    - Only ACCEPTED requests consume seats; PENDING and DECLINED are ignored
    - remaining_seats never returns a negative number: over-allocation raises
      CapacityExceededError
    - effective_status passes CANCELLED/COMPLETED through; otherwise ACTIVE or FULL

Design Decisions:
    - FULL is derived on every read and never persisted, so accept/decline
      cannot leave a stale stored status behind
    - Callers may pass all of a ride's requests; the filter to ACCEPTED happens here
"""

from dataclasses import dataclass
from typing import Iterable, Sequence

from rideboard.core.domain_types import RequestStatus, RideStatus, TERMINAL_RIDE_STATUSES
from rideboard.core.entities import Ride, RideRequest
from rideboard.core.errors import CapacityExceededError


@dataclass(frozen=True)
class RideAvailability:
    """A ride together with its derived seat count and status."""
    ride: Ride
    remaining_seats: int
    status: RideStatus
    accepted: tuple[RideRequest, ...]


def accepted_seats(requests: Iterable[RideRequest]) -> int:
    return sum(
        r.seats_requested for r in requests if r.status == RequestStatus.ACCEPTED
    )


def remaining_seats(ride: Ride, requests: Iterable[RideRequest]) -> int:
    """capacity minus accepted seats. Raises CapacityExceededError if negative."""
    taken = accepted_seats(requests)
    remaining = ride.capacity - taken
    if remaining < 0:
        raise CapacityExceededError(ride.id, ride.capacity, taken)
    return remaining


def effective_status(ride: Ride, requests: Iterable[RideRequest]) -> RideStatus:
    if ride.status in TERMINAL_RIDE_STATUSES:
        return ride.status
    if remaining_seats(ride, requests) > 0:
        return RideStatus.ACTIVE
    return RideStatus.FULL


def describe(ride: Ride, requests: Sequence[RideRequest]) -> RideAvailability:
    return RideAvailability(
        ride=ride,
        remaining_seats=remaining_seats(ride, requests),
        status=effective_status(ride, requests),
        accepted=tuple(
            r for r in requests if r.status == RequestStatus.ACCEPTED
        ),
    )
