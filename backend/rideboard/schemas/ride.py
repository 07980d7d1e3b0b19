"""Ride Schemas — Pydantic models for posting, editing and listing rides.

Invariants:
    - RideInput.origin / destination: 1-500 chars, stripped, non-empty
    - RideInput.timezone_offset_minutes is required (past-date checks run in the client's offset)
    - departure_time / return_time are wall-clock times: a UTC suffix is rejected
    - One-time rides must carry departure_date; recurring rides carry days + end date
    - RideResponse.status is the effective status (FULL included), never the stored one

Design Decisions:
    - Same input model for create and edit: an edit replaces the whole schedule
    - Recurring days stay plain strings here; core/recurrence parses them so the
      error code matches patterns read back from the DB
"""

from datetime import date, datetime, time
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

from rideboard.core.availability import RideAvailability
from rideboard.core.domain_types import RideRole, RideStatus, TripKind
from rideboard.core.ride_schedule import MAX_UTC_OFFSET_MINUTES, MIN_UTC_OFFSET_MINUTES


class RideInput(BaseModel):
    """Ride creation / edit body."""
    origin: str = Field(min_length=1, max_length=500)
    destination: str = Field(min_length=1, max_length=500)
    departure_date: date | None = None
    departure_time: time
    is_recurring: bool = False
    recurring_days: list[str] = Field(default_factory=list, max_length=7)
    recurring_until: date | None = None
    trip_kind: TripKind = TripKind.ONE_WAY
    role: RideRole = RideRole.DRIVER
    return_date: date | None = None
    return_time: time | None = None
    capacity: int = Field(ge=1, le=50)
    price_per_seat: float | None = Field(None, ge=0)
    notes: str | None = Field(None, max_length=2000)
    timezone_offset_minutes: int = Field(
        ge=MIN_UTC_OFFSET_MINUTES, le=MAX_UTC_OFFSET_MINUTES,
    )

    @field_validator("origin", "destination")
    @classmethod
    def strip_location(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("location cannot be empty or whitespace")
        return v

    @field_validator("departure_time", "return_time")
    @classmethod
    def reject_zoned_time(cls, v: time | None) -> time | None:
        if v is not None and v.tzinfo is not None:
            raise ValueError(
                "time of day must not carry a UTC offset; "
                "use timezone_offset_minutes"
            )
        return v

    @model_validator(mode="after")
    def validate_schedule_fields(self):
        if not self.is_recurring and self.departure_date is None:
            raise ValueError("one-time rides require a departure_date")
        return self


class RecurrenceOut(BaseModel):
    days: list[str]
    until: date


class AcceptedSeat(BaseModel):
    request_id: UUID
    rider_id: UUID
    seats: int


class RideResponse(BaseModel):
    """Public ride data with derived availability."""
    id: UUID
    owner_id: UUID
    origin: str
    destination: str
    trip_kind: TripKind
    role: RideRole
    departure_date: date | None
    departure_time: time
    is_recurring: bool
    recurrence: RecurrenceOut | None
    return_date: date | None
    return_time: time | None
    capacity: int
    seats_remaining: int
    price_per_seat: float | None
    notes: str | None
    status: RideStatus
    created_at: datetime
    accepted: list[AcceptedSeat] = []

    @classmethod
    def from_availability(cls, view: RideAvailability) -> "RideResponse":
        ride = view.ride
        return cls(
            id=ride.id,
            owner_id=ride.owner_id,
            origin=ride.origin,
            destination=ride.destination,
            trip_kind=ride.trip_kind,
            role=ride.role,
            departure_date=ride.departure_date,
            departure_time=ride.departure_time,
            is_recurring=ride.is_recurring,
            recurrence=(
                RecurrenceOut(**ride.recurrence.to_pattern())
                if ride.recurrence else None
            ),
            return_date=ride.return_date,
            return_time=ride.return_time,
            capacity=ride.capacity,
            seats_remaining=view.remaining_seats,
            price_per_seat=ride.price_per_seat,
            notes=ride.notes,
            status=view.status,
            created_at=ride.created_at,
            accepted=[
                AcceptedSeat(
                    request_id=r.id, rider_id=r.rider_id, seats=r.seats_requested,
                )
                for r in view.accepted
            ],
        )
