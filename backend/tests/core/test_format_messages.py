"""Format Messages — tests for rider-facing message text."""

from uuid import uuid4

from rideboard.core.domain_types import RideStatus
from rideboard.core.events import RequestAccepted, RideCancelled
from rideboard.core.format_messages import (
    format_acceptance_message, format_cancellation_message,
)
from tests.core.ride_builders import NOW


def _ids():
    return dict(
        ride_id=uuid4(), request_id=uuid4(), owner_id=uuid4(), rider_id=uuid4(),
    )


def test_acceptance_message_names_the_route():
    event = RequestAccepted(
        **_ids(), origin="North Campus", destination="Airport",
        seats=1, ride_status=RideStatus.ACTIVE, occurred_at=NOW,
    )
    assert format_acceptance_message(event) == (
        "Your ride request from North Campus to Airport has been accepted! "
        "Feel free to message me to coordinate."
    )


def test_cancellation_message_names_the_route():
    event = RideCancelled(
        **_ids(), origin="North Campus", destination="Airport", occurred_at=NOW,
    )
    assert format_cancellation_message(event) == (
        "Unfortunately, the ride from North Campus to Airport has been cancelled."
    )
