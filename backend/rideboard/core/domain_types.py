"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - RideId, RequestId, UserId, MessageId wrap UUIDs; never use bare UUID in domain logic
    - All valid states encoded as Enums, no raw string matching
    - Weekday member order matches date.weekday() (Monday == 0)

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON and to String columns without custom encoders
    - Status values are upper-case: they are the stored column values
"""

from datetime import date
from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

RideId = NewType("RideId", UUID)
RequestId = NewType("RequestId", UUID)
UserId = NewType("UserId", UUID)
MessageId = NewType("MessageId", UUID)


# ─── Enums ───────────────────────────────────────────────────────

class RideStatus(str, Enum):
    """Ride lifecycle states. FULL is derived, never written to the DB."""
    ACTIVE = "ACTIVE"
    FULL = "FULL"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


class RequestStatus(str, Enum):
    """Ride request states. PENDING is initial, the other two are terminal."""
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    DECLINED = "DECLINED"


class TripKind(str, Enum):
    ONE_WAY = "ONE_WAY"
    ROUND_TRIP = "ROUND_TRIP"


class RideRole(str, Enum):
    """Whether the poster offers a seat (DRIVER) or looks for one (RIDER)."""
    DRIVER = "DRIVER"
    RIDER = "RIDER"


class Decision(str, Enum):
    """Owner's answer to a pending request."""
    ACCEPT = "accept"
    DECLINE = "decline"


class Weekday(str, Enum):
    """Days of the week as stored in recurrence patterns."""
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @classmethod
    def of(cls, day: date) -> "Weekday":
        """Weekday of a calendar date."""
        return list(cls)[day.weekday()]


TERMINAL_RIDE_STATUSES = frozenset({RideStatus.CANCELLED, RideStatus.COMPLETED})
OPEN_REQUEST_STATUSES = frozenset({RequestStatus.PENDING, RequestStatus.ACCEPTED})
