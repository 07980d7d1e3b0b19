"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell; dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Repository calls run inside a transaction owned by the caller; nothing here commits

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: implementations do IO, but the core functions that
      consume their results are plain synchronous functions
    - Clock is a zero-argument callable so tests can pin "now"
"""

from datetime import datetime
from typing import Callable, Protocol

from rideboard.core.domain_types import RideId, RequestId, UserId
from rideboard.core.entities import Ride, RideRequest
from rideboard.core.events import RideEvent


Clock = Callable[[], datetime]


class RideRepository(Protocol):
    """Ride persistence, implemented by shell."""
    async def get(self, ride_id: RideId, *, for_update: bool = False) -> Ride | None: ...
    async def add(self, ride: Ride) -> None: ...
    async def update(self, ride: Ride) -> None: ...
    async def list_open(self) -> list[tuple[Ride, list[RideRequest]]]: ...
    async def list_by_owner(self, owner_id: UserId) -> list[tuple[Ride, list[RideRequest]]]: ...


class RideRequestRepository(Protocol):
    """Ride request persistence, implemented by shell."""
    async def get(self, request_id: RequestId) -> RideRequest | None: ...
    async def for_ride(self, ride_id: RideId) -> list[RideRequest]: ...
    async def add(self, request: RideRequest) -> None: ...
    async def update(self, request: RideRequest) -> None: ...
    async def pending_for_owner(self, owner_id: UserId) -> list[tuple[RideRequest, Ride]]: ...
    async def by_rider(self, rider_id: UserId) -> list[tuple[RideRequest, Ride]]: ...


class EventSink(Protocol):
    """Receives domain events inside the same transaction as the state change."""
    async def publish(self, event: RideEvent) -> None: ...
