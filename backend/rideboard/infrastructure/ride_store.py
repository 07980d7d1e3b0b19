"""Ride Store — SQLAlchemy implementation of the ride and request repositories.

Invariants:
    - ORM rows never cross into core: every read is mapped to a frozen entity
    - The stored recurrence pattern is decoded here and nowhere else
    - Nothing here commits; the calling service owns the transaction
    - get(..., for_update=True) takes a row lock on the ride (SELECT ... FOR UPDATE)
      so seat checks and the write that follows are serialized per ride
    - Request reads after a lock use populate_existing so identity-map copies
      cannot hide a concurrent commit

Design Decisions:
    - Row lock on the ride, not on requests: one lock covers inserts of new
      requests too, which a lock on existing request rows would not
    - Rides with an unreadable recurrence pattern are logged and skipped in
      every listing but surface InvalidRecurrenceSpecError on direct loads
"""

import logging
from collections import defaultdict
from datetime import datetime, timezone

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from rideboard.core.domain_types import (
    RideId, RequestId, UserId,
    RideStatus, RequestStatus, TripKind, RideRole,
)
from rideboard.core.entities import Ride, RideRequest
from rideboard.core.errors import InvalidRecurrenceSpecError
from rideboard.core.recurrence import parse_recurrence
from rideboard.models.ride import Ride as RideModel
from rideboard.models.ride_request import RideRequest as RideRequestModel

logger = logging.getLogger(__name__)

# Stored statuses a ride can be requested in. FULL is accepted for rows
# written by older clients that cached it.
OPEN_STORED_STATUSES = (RideStatus.ACTIVE.value, RideStatus.FULL.value)


def _utc(value: datetime) -> datetime:
    """SQLite drops tzinfo; stored timestamps are always UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def ride_to_domain(row: RideModel) -> Ride:
    recurrence = None
    if row.is_recurring:
        recurrence = parse_recurrence(row.recurrence_pattern or {})
    status = RideStatus(row.status)
    if status == RideStatus.FULL:
        status = RideStatus.ACTIVE
    return Ride(
        id=RideId(row.id),
        owner_id=UserId(row.owner_id),
        origin=row.origin,
        destination=row.destination,
        capacity=row.capacity,
        departure_time=row.departure_time,
        created_at=_utc(row.created_at),
        departure_date=None if recurrence else row.departure_date,
        recurrence=recurrence,
        trip_kind=TripKind(row.trip_kind),
        role=RideRole(row.role),
        return_date=row.return_date,
        return_time=row.return_time,
        price_per_seat=row.price_per_seat,
        notes=row.notes,
        status=status,
    )


def _listable(row: RideModel) -> Ride | None:
    """ride_to_domain for listings: unreadable rows are logged and dropped."""
    try:
        return ride_to_domain(row)
    except InvalidRecurrenceSpecError as e:
        logger.warning(
            f"Skipping ride with unreadable recurrence: {e.reason}",
            extra={"ride_id": str(row.id)},
        )
        return None


def ride_query(ride_id: RideId, *, for_update: bool = False) -> Select:
    """SELECT for one ride; for_update adds the row lock."""
    query = select(RideModel).where(RideModel.id == ride_id)
    if for_update:
        query = query.with_for_update().execution_options(
            populate_existing=True,
        )
    return query


def request_to_domain(row: RideRequestModel) -> RideRequest:
    return RideRequest(
        id=RequestId(row.id),
        ride_id=RideId(row.ride_id),
        rider_id=UserId(row.rider_id),
        seats_requested=row.seats_requested,
        created_at=_utc(row.created_at),
        message=row.message,
        status=RequestStatus(row.status),
    )


def _with_rides(rows) -> list[tuple[RideRequest, Ride]]:
    paired = []
    for req, ride_row in rows:
        ride = _listable(ride_row)
        if ride is not None:
            paired.append((request_to_domain(req), ride))
    return paired


def _copy_ride_fields(row: RideModel, ride: Ride) -> None:
    row.owner_id = ride.owner_id
    row.origin = ride.origin
    row.destination = ride.destination
    row.trip_kind = ride.trip_kind.value
    row.role = ride.role.value
    row.departure_date = ride.departure_date
    row.departure_time = ride.departure_time
    row.is_recurring = ride.is_recurring
    row.recurrence_pattern = (
        ride.recurrence.to_pattern() if ride.recurrence else None
    )
    row.return_date = ride.return_date
    row.return_time = ride.return_time
    row.capacity = ride.capacity
    row.price_per_seat = ride.price_per_seat
    row.notes = ride.notes
    row.status = ride.status.value


class SqlRideRepository:
    """RideRepository over an AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, ride_id: RideId, *, for_update: bool = False) -> Ride | None:
        query = ride_query(ride_id, for_update=for_update)
        row = (await self.db.execute(query)).scalar_one_or_none()
        return ride_to_domain(row) if row else None

    async def add(self, ride: Ride) -> None:
        row = RideModel(id=ride.id, created_at=ride.created_at)
        _copy_ride_fields(row, ride)
        self.db.add(row)
        await self.db.flush()

    async def update(self, ride: Ride) -> None:
        row = await self.db.get(RideModel, ride.id)
        if row is None:
            raise LookupError(f"ride {ride.id} vanished inside its transaction")
        _copy_ride_fields(row, ride)
        await self.db.flush()

    async def list_open(self) -> list[tuple[Ride, list[RideRequest]]]:
        """Rides that can still be requested, each with its ACCEPTED requests."""
        rows = (await self.db.execute(
            select(RideModel).where(RideModel.status.in_(OPEN_STORED_STATUSES)),
        )).scalars().all()
        accepted = await self._requests_by_ride(
            [r.id for r in rows], RequestStatus.ACCEPTED,
        )
        listing = []
        for row in rows:
            ride = _listable(row)
            if ride is not None:
                listing.append((ride, accepted.get(row.id, [])))
        return listing

    async def list_by_owner(
        self, owner_id: UserId,
    ) -> list[tuple[Ride, list[RideRequest]]]:
        rows = (await self.db.execute(
            select(RideModel)
            .where(RideModel.owner_id == owner_id)
            .order_by(RideModel.created_at.desc()),
        )).scalars().all()
        requests = await self._requests_by_ride([r.id for r in rows])
        listing = []
        for row in rows:
            ride = _listable(row)
            if ride is not None:
                listing.append((ride, requests.get(row.id, [])))
        return listing

    async def _requests_by_ride(
        self, ride_ids: list, status: RequestStatus | None = None,
    ) -> dict:
        if not ride_ids:
            return {}
        query = select(RideRequestModel).where(
            RideRequestModel.ride_id.in_(ride_ids),
        )
        if status is not None:
            query = query.where(RideRequestModel.status == status.value)
        grouped: dict = defaultdict(list)
        for row in (await self.db.execute(query)).scalars():
            grouped[row.ride_id].append(request_to_domain(row))
        return grouped


class SqlRideRequestRepository:
    """RideRequestRepository over an AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, request_id: RequestId) -> RideRequest | None:
        row = (await self.db.execute(
            select(RideRequestModel).where(RideRequestModel.id == request_id),
        )).scalar_one_or_none()
        return request_to_domain(row) if row else None

    async def for_ride(self, ride_id: RideId) -> list[RideRequest]:
        rows = (await self.db.execute(
            select(RideRequestModel)
            .where(RideRequestModel.ride_id == ride_id)
            .order_by(RideRequestModel.created_at)
            .execution_options(populate_existing=True),
        )).scalars().all()
        return [request_to_domain(r) for r in rows]

    async def add(self, request: RideRequest) -> None:
        self.db.add(RideRequestModel(
            id=request.id,
            ride_id=request.ride_id,
            rider_id=request.rider_id,
            seats_requested=request.seats_requested,
            message=request.message,
            status=request.status.value,
            created_at=request.created_at,
        ))
        await self.db.flush()

    async def update(self, request: RideRequest) -> None:
        row = await self.db.get(RideRequestModel, request.id)
        if row is None:
            raise LookupError(f"request {request.id} vanished inside its transaction")
        row.seats_requested = request.seats_requested
        row.message = request.message
        row.status = request.status.value
        await self.db.flush()

    async def pending_for_owner(
        self, owner_id: UserId,
    ) -> list[tuple[RideRequest, Ride]]:
        """PENDING requests on rides the owner posted, newest first."""
        result = await self.db.execute(
            select(RideRequestModel, RideModel)
            .join(RideModel, RideRequestModel.ride_id == RideModel.id)
            .where(
                RideModel.owner_id == owner_id,
                RideRequestModel.status == RequestStatus.PENDING.value,
            )
            .order_by(RideRequestModel.created_at.desc()),
        )
        return _with_rides(result.all())

    async def by_rider(
        self, rider_id: UserId,
    ) -> list[tuple[RideRequest, Ride]]:
        """Every request the rider made, newest first."""
        result = await self.db.execute(
            select(RideRequestModel, RideModel)
            .join(RideModel, RideRequestModel.ride_id == RideModel.id)
            .where(RideRequestModel.rider_id == rider_id)
            .order_by(RideRequestModel.created_at.desc()),
        )
        return _with_rides(result.all())
