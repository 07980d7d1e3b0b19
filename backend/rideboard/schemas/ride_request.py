"""Ride Request Schemas — submit, respond and list seat requests.

Invariants:
    - seats_requested >= 1 (upper bound from settings.max_seats_per_request, checked in service)
    - RespondBody.action is exactly "accept" or "decline"
"""

from datetime import date, datetime, time
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field

from rideboard.core.domain_types import RequestStatus, RideStatus
from rideboard.core.entities import Ride, RideRequest


class RideRequestCreate(BaseModel):
    ride_id: UUID
    seats_requested: int = Field(1, ge=1)
    message: str | None = Field(None, max_length=1000)


class RespondBody(BaseModel):
    action: Literal["accept", "decline"]


class RideSummary(BaseModel):
    """Just enough of a ride to render a request row."""
    id: UUID
    owner_id: UUID
    origin: str
    destination: str
    departure_date: date | None
    departure_time: time
    is_recurring: bool

    @classmethod
    def from_ride(cls, ride: Ride) -> "RideSummary":
        return cls(
            id=ride.id,
            owner_id=ride.owner_id,
            origin=ride.origin,
            destination=ride.destination,
            departure_date=ride.departure_date,
            departure_time=ride.departure_time,
            is_recurring=ride.is_recurring,
        )


class RideRequestResponse(BaseModel):
    id: UUID
    ride_id: UUID
    rider_id: UUID
    seats_requested: int
    message: str | None
    status: RequestStatus
    created_at: datetime
    ride: RideSummary | None = None

    @classmethod
    def from_request(
        cls, request: RideRequest, ride: Ride | None = None,
    ) -> "RideRequestResponse":
        return cls(
            id=request.id,
            ride_id=request.ride_id,
            rider_id=request.rider_id,
            seats_requested=request.seats_requested,
            message=request.message,
            status=request.status,
            created_at=request.created_at,
            ride=RideSummary.from_ride(ride) if ride else None,
        )


class RespondResponse(BaseModel):
    request: RideRequestResponse
    ride_status: RideStatus
