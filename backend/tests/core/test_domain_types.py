"""Domain Types — verifies rich type definitions and enum values.

Tests:
    - NewType wrappers exist and are callable
    - Status enums carry the stored upper-case values
    - Weekday.of follows date.weekday() order
"""

from datetime import date
from uuid import uuid4

from rideboard.core.domain_types import (
    RideId, RequestId, UserId, MessageId,
    RideStatus, RequestStatus, Decision, Weekday,
    TERMINAL_RIDE_STATUSES, OPEN_REQUEST_STATUSES,
)


def test_identity_types_wrap_uuid():
    uid = uuid4()
    assert RideId(uid) == uid
    assert RequestId(uid) == uid
    assert UserId(uid) == uid
    assert MessageId(uid) == uid


def test_ride_status_has_four_states():
    assert [s.value for s in RideStatus] == [
        "ACTIVE", "FULL", "CANCELLED", "COMPLETED",
    ]


def test_request_status_values_are_stored_strings():
    assert RequestStatus("PENDING") == RequestStatus.PENDING
    assert RequestStatus.ACCEPTED == "ACCEPTED"


def test_decision_parses_api_action():
    assert Decision("accept") == Decision.ACCEPT
    assert Decision("decline") == Decision.DECLINE


def test_terminal_and_open_sets():
    assert TERMINAL_RIDE_STATUSES == {RideStatus.CANCELLED, RideStatus.COMPLETED}
    assert OPEN_REQUEST_STATUSES == {RequestStatus.PENDING, RequestStatus.ACCEPTED}


def test_weekday_of_date():
    assert Weekday.of(date(2024, 5, 6)) == Weekday.MONDAY
    assert Weekday.of(date(2024, 5, 1)) == Weekday.WEDNESDAY
    assert Weekday.of(date(2024, 5, 5)) == Weekday.SUNDAY
