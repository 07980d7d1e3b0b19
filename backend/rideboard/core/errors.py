"""Error Hierarchy — typed, categorized exceptions for all Rideboard failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (4xx) are expected user-facing outcomes and are never retried
    - CapacityExceededError is the one domain error reported as 500: it means the
      per-ride locking failed and seats were over-allocated
    - to_response() produces the REST envelope
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with RideboardError base: FastAPI global handler catches all
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    AUTHORIZATION = "authorization"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    INTERNAL = "internal"
    CONFLICT = "conflict"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    ride_id: str | None = None
    request_id: str | None = None
    actor_id: str | None = None
    debug_info: dict[str, Any] | None = None


class RideboardError(Exception):
    """Base exception for all Rideboard errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "ride_id": self.context.ride_id,
                    "request_id": self.context.request_id,
                },
            }
        }


def _ctx(ride_id=None, request_id=None, actor_id=None) -> ErrorContext:
    return ErrorContext(
        ride_id=str(ride_id) if ride_id else None,
        request_id=str(request_id) if request_id else None,
        actor_id=str(actor_id) if actor_id else None,
    )


# ─── Validation Errors (400) ────────────────────────────────────

class InvalidRecurrenceSpecError(RideboardError):
    """Recurrence pattern could not be parsed or is empty."""
    def __init__(self, reason: str, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid recurrence pattern: {reason}",
            "INVALID_RECURRENCE_SPEC", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.reason = reason


class InvalidRideError(RideboardError):
    """Ride fields violate a schedule or capacity rule."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_RIDE", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


class InvalidRideRequestError(RideboardError):
    """Ride request fields are out of range."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_RIDE_REQUEST", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


# ─── Business Rule Errors (400 / 403 / 409) ─────────────────────

class RideNotActiveError(RideboardError):
    """Ride is full, cancelled or completed."""
    def __init__(self, ride_id, status: str):
        super().__init__(
            f"Ride is no longer active (status: {status})",
            "RIDE_NOT_ACTIVE", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, _ctx(ride_id=ride_id), 400,
        )
        self.status = status


class CannotRequestOwnRideError(RideboardError):
    """Owner tried to request a seat on their own ride."""
    def __init__(self, ride_id):
        super().__init__(
            "You cannot request your own ride",
            "CANNOT_REQUEST_OWN_RIDE", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, _ctx(ride_id=ride_id), 400,
        )


class DuplicateRequestError(RideboardError):
    """Rider already holds a pending or accepted request on this ride."""
    def __init__(self, ride_id, existing_request_id):
        super().__init__(
            "You have already requested this ride",
            "DUPLICATE_REQUEST", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR,
            _ctx(ride_id=ride_id, request_id=existing_request_id), 409,
        )
        self.existing_request_id = existing_request_id


class InsufficientSeatsError(RideboardError):
    """Requested seats exceed the seats still available."""
    def __init__(self, ride_id, requested: int, remaining: int):
        super().__init__(
            f"Not enough seats available: requested {requested}, remaining {remaining}",
            "INSUFFICIENT_SEATS", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, _ctx(ride_id=ride_id), 400,
        )
        self.requested = requested
        self.remaining = remaining


class NotAuthorizedError(RideboardError):
    """Actor is not the owner of the ride they tried to act on."""
    def __init__(self, action: str, ride_id=None, actor_id=None):
        super().__init__(
            f"Only the ride owner can {action}",
            "NOT_AUTHORIZED", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.ERROR, _ctx(ride_id=ride_id, actor_id=actor_id), 403,
        )
        self.action = action


class RequestAlreadyResolvedError(RideboardError):
    """Request was already accepted or declined."""
    def __init__(self, request_id, status: str):
        super().__init__(
            f"Request has already been resolved (status: {status})",
            "REQUEST_ALREADY_RESOLVED", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, _ctx(request_id=request_id), 409,
        )
        self.status = status


class UnauthenticatedError(RideboardError):
    """No actor identity was supplied with the request."""
    def __init__(self, header: str):
        super().__init__(
            f"Missing or invalid {header} header",
            "UNAUTHENTICATED", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.ERROR, None, 401,
        )


class ResourceNotFoundError(RideboardError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


# ─── Invariant & Infrastructure Errors (500-level) ──────────────

class CapacityExceededError(RideboardError):
    """Accepted seats exceed capacity; seat allocation was not serialized."""
    def __init__(self, ride_id, capacity: int, accepted: int):
        super().__init__(
            f"Ride has {accepted} accepted seats but capacity {capacity}",
            "CAPACITY_EXCEEDED", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, _ctx(ride_id=ride_id), 500,
        )
        self.capacity = capacity
        self.accepted = accepted


class DatabaseError(RideboardError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
