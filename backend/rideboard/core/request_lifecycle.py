"""Request Lifecycle — state machine for ride requests and ride cancellation.

Invariants:
    - All functions are PURE: they return new entities and events, never mutate
    - Every precondition is checked before any new state is built (all-or-nothing)
    - submit preconditions run in fixed order, first failure wins:
      ride active -> not own ride -> no open request -> enough seats
    - PENDING is the only state with outgoing transitions
    - At most one PENDING/ACCEPTED request per (rider, ride)

Design Decisions:
    - Raise typed errors (not error dicts): the HTTP shell maps them through the
      global RideboardError handler
    - IDs and timestamps are passed in by the shell so the core stays deterministic
    - ACCEPT re-checks seats against requests already accepted: two pending
      requests may each fit on their own but not together
"""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Sequence

from rideboard.core.availability import effective_status, remaining_seats
from rideboard.core.domain_types import (
    RequestId, UserId, Decision,
    RequestStatus, RideStatus, TERMINAL_RIDE_STATUSES,
)
from rideboard.core.entities import Ride, RideRequest
from rideboard.core.errors import (
    CannotRequestOwnRideError,
    DuplicateRequestError,
    InsufficientSeatsError,
    InvalidRideRequestError,
    NotAuthorizedError,
    RequestAlreadyResolvedError,
    RideNotActiveError,
)
from rideboard.core.events import RequestAccepted, RequestDeclined, RideCancelled


@dataclass(frozen=True)
class ResponseOutcome:
    request: RideRequest
    ride_status: RideStatus
    event: RequestAccepted | RequestDeclined


@dataclass(frozen=True)
class CancellationOutcome:
    ride: Ride
    events: tuple[RideCancelled, ...]


def find_open_request(
    rider_id: UserId, requests: Sequence[RideRequest],
) -> RideRequest | None:
    """The rider's PENDING or ACCEPTED request among `requests`, if any."""
    return next(
        (r for r in requests if r.rider_id == rider_id and r.is_open), None,
    )


def submit_request(
    *,
    request_id: RequestId,
    rider_id: UserId,
    ride: Ride,
    requests: Sequence[RideRequest],
    seats_requested: int,
    message: str | None,
    now: datetime,
) -> RideRequest:
    """Create a PENDING request. `requests` must be all requests on `ride`."""
    if seats_requested < 1:
        raise InvalidRideRequestError(
            "At least one seat must be requested", "seats_requested",
        )

    status = effective_status(ride, requests)
    if status != RideStatus.ACTIVE:
        raise RideNotActiveError(ride.id, status.value)

    if rider_id == ride.owner_id:
        raise CannotRequestOwnRideError(ride.id)

    existing = find_open_request(rider_id, requests)
    if existing is not None:
        raise DuplicateRequestError(ride.id, existing.id)

    remaining = remaining_seats(ride, requests)
    if seats_requested > remaining:
        raise InsufficientSeatsError(ride.id, seats_requested, remaining)

    return RideRequest(
        id=request_id,
        ride_id=ride.id,
        rider_id=rider_id,
        seats_requested=seats_requested,
        message=message or None,
        status=RequestStatus.PENDING,
        created_at=now,
    )


def respond_to_request(
    *,
    actor_id: UserId,
    ride: Ride,
    request: RideRequest,
    requests: Sequence[RideRequest],
    decision: Decision,
    now: datetime,
) -> ResponseOutcome:
    """Accept or decline a PENDING request on behalf of the ride owner."""
    if actor_id != ride.owner_id:
        raise NotAuthorizedError("respond to requests", ride.id, actor_id)
    if request.status != RequestStatus.PENDING:
        raise RequestAlreadyResolvedError(request.id, request.status.value)

    if decision == Decision.DECLINE:
        declined = replace(request, status=RequestStatus.DECLINED)
        return ResponseOutcome(
            request=declined,
            ride_status=effective_status(ride, requests),
            event=RequestDeclined(
                ride_id=ride.id,
                request_id=request.id,
                owner_id=ride.owner_id,
                rider_id=request.rider_id,
                origin=ride.origin,
                destination=ride.destination,
                occurred_at=now,
            ),
        )

    if ride.status in TERMINAL_RIDE_STATUSES:
        raise RideNotActiveError(ride.id, ride.status.value)
    remaining = remaining_seats(ride, requests)
    if request.seats_requested > remaining:
        raise InsufficientSeatsError(ride.id, request.seats_requested, remaining)

    accepted = replace(request, status=RequestStatus.ACCEPTED)
    after = [accepted if r.id == request.id else r for r in requests]
    if all(r.id != request.id for r in requests):
        after.append(accepted)
    ride_status = effective_status(ride, after)
    return ResponseOutcome(
        request=accepted,
        ride_status=ride_status,
        event=RequestAccepted(
            ride_id=ride.id,
            request_id=request.id,
            owner_id=ride.owner_id,
            rider_id=request.rider_id,
            origin=ride.origin,
            destination=ride.destination,
            seats=request.seats_requested,
            ride_status=ride_status,
            occurred_at=now,
        ),
    )


def cancel_ride(
    *,
    actor_id: UserId,
    ride: Ride,
    requests: Sequence[RideRequest],
    now: datetime,
) -> CancellationOutcome:
    """Cancel a ride; one RideCancelled per ACCEPTED request."""
    if actor_id != ride.owner_id:
        raise NotAuthorizedError("cancel this ride", ride.id, actor_id)
    if ride.status in TERMINAL_RIDE_STATUSES:
        raise RideNotActiveError(ride.id, ride.status.value)

    events = tuple(
        RideCancelled(
            ride_id=ride.id,
            request_id=r.id,
            owner_id=ride.owner_id,
            rider_id=r.rider_id,
            origin=ride.origin,
            destination=ride.destination,
            occurred_at=now,
        )
        for r in requests
        if r.status == RequestStatus.ACCEPTED
    )
    return CancellationOutcome(
        ride=replace(ride, status=RideStatus.CANCELLED), events=events,
    )
