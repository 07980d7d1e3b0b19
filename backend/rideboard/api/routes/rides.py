"""Ride Routes — post, search, read, edit and cancel rides.

Invariants:
    - Every endpoint requires an actor id (see api/dependencies.get_actor_id)
    - Search hides the actor's own rides unless include_own=true
    - Responses report effective status and remaining seats

Design Decisions:
    - DELETE cancels (status flip); rides are never removed from the DB
    - /mine declared before /{ride_id} so it is not parsed as a UUID
"""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from rideboard.api.dependencies import get_actor_id, get_ride_service
from rideboard.core.domain_types import RideId, UserId
from rideboard.core.ride_matching import SearchFilters
from rideboard.schemas.ride import RideInput, RideResponse
from rideboard.services.ride_service import RideService

router = APIRouter(prefix="/api/v1/rides", tags=["rides"])


@router.post(
    "", response_model=RideResponse, status_code=status.HTTP_201_CREATED,
)
async def create_ride(
    body: RideInput,
    actor_id: UserId = Depends(get_actor_id),
    service: RideService = Depends(get_ride_service),
):
    """Post a ride offer (DRIVER) or a ride need (RIDER)."""
    view = await service.create_ride(actor_id, body)
    return RideResponse.from_availability(view)


@router.get("", response_model=list[RideResponse])
async def search_rides(
    origin: str | None = Query(None, max_length=500),
    destination: str | None = Query(None, max_length=500),
    on_date: date | None = Query(None, alias="date"),
    include_own: bool = Query(False),
    actor_id: UserId = Depends(get_actor_id),
    service: RideService = Depends(get_ride_service),
):
    """Find active rides by origin/destination text and travel date."""
    filters = SearchFilters(
        origin_contains=origin,
        destination_contains=destination,
        on_date=on_date,
    )
    views = await service.search(
        filters, exclude_owner=None if include_own else actor_id,
    )
    return [RideResponse.from_availability(v) for v in views]


@router.get("/mine", response_model=list[RideResponse])
async def list_my_rides(
    actor_id: UserId = Depends(get_actor_id),
    service: RideService = Depends(get_ride_service),
):
    """Rides the actor posted, any status, newest first."""
    views = await service.rides_owned_by(actor_id)
    return [RideResponse.from_availability(v) for v in views]


@router.get("/{ride_id}", response_model=RideResponse)
async def get_ride(
    ride_id: UUID,
    actor_id: UserId = Depends(get_actor_id),
    service: RideService = Depends(get_ride_service),
):
    view = await service.get_ride(RideId(ride_id))
    return RideResponse.from_availability(view)


@router.patch("/{ride_id}", response_model=RideResponse)
async def update_ride(
    ride_id: UUID,
    body: RideInput,
    actor_id: UserId = Depends(get_actor_id),
    service: RideService = Depends(get_ride_service),
):
    """Replace a ride's details. Owner only."""
    view = await service.update_ride(actor_id, RideId(ride_id), body)
    return RideResponse.from_availability(view)


@router.delete("/{ride_id}", response_model=RideResponse)
async def cancel_ride(
    ride_id: UUID,
    actor_id: UserId = Depends(get_actor_id),
    service: RideService = Depends(get_ride_service),
):
    """Cancel a ride and notify riders with accepted requests. Owner only."""
    view = await service.cancel_ride(actor_id, RideId(ride_id))
    return RideResponse.from_availability(view)
