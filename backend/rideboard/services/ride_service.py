"""Ride Service — post, edit, cancel, read and search rides.

Invariants:
    - One public method == one transaction: load, run core rules, write, publish, commit
    - Core rules run before any write; a raised error leaves the session untouched
    - Edits and cancellations lock the ride row first
    - Returned views carry derived availability (remaining seats, effective status)

Design Decisions:
    - The service builds domain entities from the validated RideInput; routes
      never touch repositories directly
    - New ride ids are generated here so core stays deterministic
"""

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from rideboard.core.availability import RideAvailability, accepted_seats, describe
from rideboard.core.domain_types import RideId, UserId, TripKind, RideStatus
from rideboard.core.entities import Ride
from rideboard.core.errors import ResourceNotFoundError
from rideboard.core.events import RidePosted
from rideboard.core.recurrence import build_recurrence
from rideboard.core.repository_protocols import (
    Clock, EventSink, RideRepository, RideRequestRepository,
)
from rideboard.core.request_lifecycle import cancel_ride
from rideboard.core.ride_matching import SearchFilters, search_rides
from rideboard.core.ride_schedule import check_editable, validate_ride
from rideboard.infrastructure.ride_store import SqlRideRepository, SqlRideRequestRepository
from rideboard.schemas.ride import RideInput

logger = logging.getLogger(__name__)


def ride_from_input(
    ride_id: RideId,
    owner_id: UserId,
    body: RideInput,
    *,
    created_at,
    status: RideStatus = RideStatus.ACTIVE,
) -> Ride:
    """Map the API body onto a Ride. Recurring days are parsed here."""
    recurrence = None
    if body.is_recurring:
        recurrence = build_recurrence(body.recurring_days, body.recurring_until)
    round_trip = body.trip_kind == TripKind.ROUND_TRIP
    return Ride(
        id=ride_id,
        owner_id=owner_id,
        origin=body.origin,
        destination=body.destination,
        capacity=body.capacity,
        departure_time=body.departure_time,
        created_at=created_at,
        departure_date=None if recurrence else body.departure_date,
        recurrence=recurrence,
        trip_kind=body.trip_kind,
        role=body.role,
        return_date=body.return_date if round_trip else None,
        return_time=body.return_time if round_trip else None,
        price_per_seat=body.price_per_seat,
        notes=body.notes or None,
        status=status,
    )


class RideService:
    """Ride-level operations over the SQL ride store."""

    def __init__(self, db: AsyncSession, events: EventSink, clock: Clock):
        self.db = db
        self.events = events
        self.clock = clock
        self.rides: RideRepository = SqlRideRepository(db)
        self.requests: RideRequestRepository = SqlRideRequestRepository(db)

    async def _get_or_404(self, ride_id: RideId, *, for_update: bool = False) -> Ride:
        ride = await self.rides.get(ride_id, for_update=for_update)
        if ride is None:
            raise ResourceNotFoundError("Ride", str(ride_id))
        return ride

    async def create_ride(self, owner_id: UserId, body: RideInput) -> RideAvailability:
        now = self.clock()
        ride = ride_from_input(
            RideId(uuid.uuid4()), owner_id, body, created_at=now,
        )
        validate_ride(
            ride, now=now, utc_offset_minutes=body.timezone_offset_minutes,
        )
        await self.rides.add(ride)
        await self.events.publish(RidePosted(
            ride_id=ride.id,
            owner_id=ride.owner_id,
            role=ride.role,
            origin=ride.origin,
            destination=ride.destination,
            departure_date=ride.departure_date,
            occurred_at=now,
        ))
        await self.db.commit()
        logger.info(
            "Ride posted",
            extra={"ride_id": str(ride.id), "actor_id": str(owner_id)},
        )
        return describe(ride, [])

    async def update_ride(
        self, actor_id: UserId, ride_id: RideId, body: RideInput,
    ) -> RideAvailability:
        ride = await self._get_or_404(ride_id, for_update=True)
        check_editable(actor_id, ride)
        requests = await self.requests.for_ride(ride.id)
        updated = ride_from_input(
            ride.id, ride.owner_id, body,
            created_at=ride.created_at, status=ride.status,
        )
        validate_ride(
            updated,
            now=self.clock(),
            utc_offset_minutes=body.timezone_offset_minutes,
            accepted_seats=accepted_seats(requests),
        )
        await self.rides.update(updated)
        await self.db.commit()
        logger.info(
            "Ride updated",
            extra={"ride_id": str(ride.id), "actor_id": str(actor_id)},
        )
        return describe(updated, requests)

    async def cancel_ride(self, actor_id: UserId, ride_id: RideId) -> RideAvailability:
        ride = await self._get_or_404(ride_id, for_update=True)
        requests = await self.requests.for_ride(ride.id)
        outcome = cancel_ride(
            actor_id=actor_id, ride=ride, requests=requests, now=self.clock(),
        )
        await self.rides.update(outcome.ride)
        for event in outcome.events:
            await self.events.publish(event)
        await self.db.commit()
        logger.info(
            f"Ride cancelled, {len(outcome.events)} rider(s) notified",
            extra={"ride_id": str(ride.id), "actor_id": str(actor_id)},
        )
        return describe(outcome.ride, requests)

    async def get_ride(self, ride_id: RideId) -> RideAvailability:
        ride = await self._get_or_404(ride_id)
        return describe(ride, await self.requests.for_ride(ride.id))

    async def search(
        self, filters: SearchFilters, exclude_owner: UserId | None = None,
    ) -> list[RideAvailability]:
        listing = await self.rides.list_open()
        requests_by_ride = {ride.id: requests for ride, requests in listing}
        return [
            describe(ride, requests_by_ride[ride.id])
            for ride in search_rides(listing, filters, exclude_owner)
        ]

    async def rides_owned_by(self, owner_id: UserId) -> list[RideAvailability]:
        return [
            describe(ride, requests)
            for ride, requests in await self.rides.list_by_owner(owner_id)
        ]
