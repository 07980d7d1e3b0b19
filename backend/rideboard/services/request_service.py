"""Ride Request Service — submit seat requests and let owners answer them.

Invariants:
    - submit and respond lock the ride row before reading request totals and hold
      the lock until commit: concurrent requests for the last seat serialize
    - The request being answered is re-read after the lock, so a concurrent
      answer is seen and reported as RequestAlreadyResolved
    - Events are published into the same session as the status change

Design Decisions:
    - No retries: a caller retrying submit after an ambiguous failure must list
      its requests first, since submit is not idempotent
"""

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from rideboard.core.domain_types import Decision, RequestId, RideId, UserId
from rideboard.core.entities import Ride, RideRequest
from rideboard.core.errors import InvalidRideRequestError, ResourceNotFoundError
from rideboard.core.repository_protocols import (
    Clock, EventSink, RideRepository, RideRequestRepository,
)
from rideboard.core.request_lifecycle import (
    ResponseOutcome, respond_to_request, submit_request,
)
from rideboard.infrastructure.ride_store import SqlRideRepository, SqlRideRequestRepository

logger = logging.getLogger(__name__)


class RideRequestService:
    """Request-level operations over the SQL ride store."""

    def __init__(
        self,
        db: AsyncSession,
        events: EventSink,
        clock: Clock,
        max_seats_per_request: int = 8,
    ):
        self.db = db
        self.events = events
        self.clock = clock
        self.max_seats_per_request = max_seats_per_request
        self.rides: RideRepository = SqlRideRepository(db)
        self.requests: RideRequestRepository = SqlRideRequestRepository(db)

    async def _lock_ride(self, ride_id: RideId) -> Ride:
        ride = await self.rides.get(ride_id, for_update=True)
        if ride is None:
            raise ResourceNotFoundError("Ride", str(ride_id))
        return ride

    async def submit(
        self,
        rider_id: UserId,
        ride_id: RideId,
        seats_requested: int = 1,
        message: str | None = None,
    ) -> RideRequest:
        if seats_requested > self.max_seats_per_request:
            raise InvalidRideRequestError(
                f"At most {self.max_seats_per_request} seats per request",
                "seats_requested",
            )
        ride = await self._lock_ride(ride_id)
        requests = await self.requests.for_ride(ride.id)
        request = submit_request(
            request_id=RequestId(uuid.uuid4()),
            rider_id=rider_id,
            ride=ride,
            requests=requests,
            seats_requested=seats_requested,
            message=message,
            now=self.clock(),
        )
        await self.requests.add(request)
        await self.db.commit()
        logger.info(
            "Ride request submitted",
            extra={
                "ride_id": str(ride.id),
                "request_id": str(request.id),
                "actor_id": str(rider_id),
                "seats": seats_requested,
            },
        )
        return request

    async def respond(
        self, actor_id: UserId, request_id: RequestId, decision: Decision,
    ) -> ResponseOutcome:
        found = await self.requests.get(request_id)
        if found is None:
            raise ResourceNotFoundError("RideRequest", str(request_id))
        ride = await self._lock_ride(found.ride_id)
        requests = await self.requests.for_ride(ride.id)
        current = next((r for r in requests if r.id == found.id), found)
        outcome = respond_to_request(
            actor_id=actor_id,
            ride=ride,
            request=current,
            requests=requests,
            decision=decision,
            now=self.clock(),
        )
        await self.requests.update(outcome.request)
        await self.events.publish(outcome.event)
        await self.db.commit()
        logger.info(
            f"Ride request {outcome.request.status.value.lower()}",
            extra={
                "ride_id": str(ride.id),
                "request_id": str(request_id),
                "actor_id": str(actor_id),
            },
        )
        return outcome

    async def incoming(self, owner_id: UserId) -> list[tuple[RideRequest, Ride]]:
        return await self.requests.pending_for_owner(owner_id)

    async def made_by(self, rider_id: UserId) -> list[tuple[RideRequest, Ride]]:
        return await self.requests.by_rider(rider_id)
