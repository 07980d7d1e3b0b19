"""Ride Schedule Validation — invariants checked when a ride is posted or edited.

Invariants:
    - Exactly one of departure_date / recurrence is set
    - capacity >= 1, price_per_seat >= 0 when present, capacity >= seats already accepted
    - A one-off departure may not be in the past in the poster's local time:
      earlier date fails; same date fails when the HH:MM time has passed
    - Round trips may not return before they depart
    - Edits are owner-only and refused once a ride is cancelled or completed
    - Pure: `now` and the client's UTC offset are parameters, never read from the system

Design Decisions:
    - Timezone policy: clients always send their offset in minutes using the
      JavaScript getTimezoneOffset() sign (positive west of UTC); "today" is
      computed in that offset
    - Minute precision for the same-day check: posted times carry no seconds
"""

from datetime import date, datetime, time, timedelta

from rideboard.core.domain_types import UserId, TripKind, TERMINAL_RIDE_STATUSES
from rideboard.core.entities import Ride
from rideboard.core.errors import (
    InvalidRecurrenceSpecError, InvalidRideError, NotAuthorizedError, RideNotActiveError,
)


MIN_UTC_OFFSET_MINUTES: int = -840
MAX_UTC_OFFSET_MINUTES: int = 720


def local_now(now: datetime, utc_offset_minutes: int) -> datetime:
    """Wall-clock time at the client, as a naive datetime."""
    if not MIN_UTC_OFFSET_MINUTES <= utc_offset_minutes <= MAX_UTC_OFFSET_MINUTES:
        raise InvalidRideError(
            f"Timezone offset {utc_offset_minutes} is out of range",
            "timezone_offset_minutes",
        )
    shifted = now - timedelta(minutes=utc_offset_minutes)
    return shifted.replace(tzinfo=None)


def check_departure_not_past(
    departure_date: date, departure_time: time, client_now: datetime,
) -> None:
    today = client_now.date()
    if departure_date < today:
        raise InvalidRideError(
            "Cannot schedule a ride in the past", "departure_date",
        )
    current = client_now.time().replace(second=0, microsecond=0)
    if departure_date == today and departure_time.replace(second=0, microsecond=0) < current:
        raise InvalidRideError(
            "Cannot schedule a ride for a time that has already passed",
            "departure_time",
        )


def check_editable(actor_id: UserId, ride: Ride) -> None:
    """Only the owner edits, and only while the ride is not cancelled or completed."""
    if actor_id != ride.owner_id:
        raise NotAuthorizedError("edit this ride", ride.id, actor_id)
    if ride.status in TERMINAL_RIDE_STATUSES:
        raise RideNotActiveError(ride.id, ride.status.value)


def validate_ride(
    ride: Ride,
    *,
    now: datetime,
    utc_offset_minutes: int,
    accepted_seats: int = 0,
) -> None:
    """Raise InvalidRideError / InvalidRecurrenceSpecError on the first broken rule."""
    if not ride.origin.strip():
        raise InvalidRideError("Origin is required", "origin")
    if not ride.destination.strip():
        raise InvalidRideError("Destination is required", "destination")
    if ride.capacity < 1:
        raise InvalidRideError("A ride needs at least one seat", "capacity")
    if ride.capacity < accepted_seats:
        raise InvalidRideError(
            f"Capacity cannot drop below the {accepted_seats} seat(s) already accepted",
            "capacity",
        )
    if ride.price_per_seat is not None and ride.price_per_seat < 0:
        raise InvalidRideError("Price per seat cannot be negative", "price_per_seat")

    if ride.recurrence is not None and ride.departure_date is not None:
        raise InvalidRideError(
            "A ride is either recurring or has a departure date, not both",
            "departure_date",
        )
    if ride.recurrence is not None:
        if not ride.recurrence.weekdays:
            raise InvalidRecurrenceSpecError("at least one weekday is required")
        return

    if ride.departure_date is None:
        raise InvalidRideError(
            "One-time rides require a departure date", "departure_date",
        )
    check_departure_not_past(
        ride.departure_date, ride.departure_time,
        local_now(now, utc_offset_minutes),
    )
    if (
        ride.trip_kind == TripKind.ROUND_TRIP
        and ride.return_date is not None
        and ride.return_date < ride.departure_date
    ):
        raise InvalidRideError(
            "Return date must be on or after departure date", "return_date",
        )
