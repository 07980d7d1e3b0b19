"""Ride Matching Query — which active rides match a bulletin-board search.

Invariants:
    - All filters are optional and AND-combined
    - Text filters are case-insensitive substring matches; blank text matches everything
    - Only rides whose effective status is ACTIVE are returned
    - Order: dated rides by departure date, recurring rides after them; then
      departure time ascending; ties by creation time, newest first
    - search_rides is a generator: evaluated on first iteration, single pass

Design Decisions:
    - Two stable sorts (created_at desc, then schedule asc) instead of a
      composite key with negated datetimes
"""

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Iterator, Sequence

from rideboard.core.availability import effective_status
from rideboard.core.domain_types import RideStatus, UserId
from rideboard.core.entities import Ride, RideRequest
from rideboard.core.recurrence import occurs_on


@dataclass(frozen=True)
class SearchFilters:
    origin_contains: str | None = None
    destination_contains: str | None = None
    on_date: date | None = None


def contains_text(haystack: str, needle: str | None) -> bool:
    if needle is None or not needle.strip():
        return True
    return needle.strip().casefold() in haystack.casefold()


def runs_on(ride: Ride, day: date) -> bool:
    """True if a one-off ride departs on `day` or a recurring ride occurs on it."""
    if ride.recurrence is not None:
        return occurs_on(ride.recurrence, day)
    return ride.departure_date == day


def matches(
    ride: Ride,
    requests: Sequence[RideRequest],
    filters: SearchFilters,
    exclude_owner: UserId | None = None,
) -> bool:
    if exclude_owner is not None and ride.owner_id == exclude_owner:
        return False
    if not contains_text(ride.origin, filters.origin_contains):
        return False
    if not contains_text(ride.destination, filters.destination_contains):
        return False
    if filters.on_date is not None and not runs_on(ride, filters.on_date):
        return False
    return effective_status(ride, requests) == RideStatus.ACTIVE


def schedule_key(ride: Ride) -> tuple:
    undated = ride.departure_date is None
    return (undated, ride.departure_date or date.max, ride.departure_time)


def search_rides(
    candidates: Iterable[tuple[Ride, Sequence[RideRequest]]],
    filters: SearchFilters,
    exclude_owner: UserId | None = None,
) -> Iterator[Ride]:
    """Yield matching rides in board order. Pairs are (ride, all its requests)."""
    found = [
        ride for ride, requests in candidates
        if matches(ride, requests, filters, exclude_owner)
    ]
    found.sort(key=lambda r: r.created_at, reverse=True)
    found.sort(key=schedule_key)
    yield from found
