"""Request Dependencies — actor identity, clock and service wiring.

Invariants:
    - The actor id comes from a header set by the upstream auth gateway;
      this app never authenticates, it only compares ids
    - A missing or malformed actor header is a 401, before any DB work
    - get_clock is the only place "now" is read; tests override it

Design Decisions:
    - Services are built per request around the request's DB session, so one
      request == one transaction
"""

from datetime import datetime, timezone
from uuid import UUID

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from rideboard.config import get_settings
from rideboard.core.domain_types import UserId
from rideboard.core.errors import UnauthenticatedError
from rideboard.core.repository_protocols import Clock
from rideboard.infrastructure.database import get_db
from rideboard.services.message_sink import InAppMessageSink
from rideboard.services.request_service import RideRequestService
from rideboard.services.ride_service import RideService


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def get_clock() -> Clock:
    return utc_now


async def get_actor_id(request: Request) -> UserId:
    header = get_settings().actor_header
    raw = request.headers.get(header)
    if not raw:
        raise UnauthenticatedError(header)
    try:
        return UserId(UUID(raw))
    except ValueError:
        raise UnauthenticatedError(header)


def get_ride_service(
    db: AsyncSession = Depends(get_db), clock: Clock = Depends(get_clock),
) -> RideService:
    return RideService(db, InAppMessageSink(db), clock)


def get_request_service(
    db: AsyncSession = Depends(get_db), clock: Clock = Depends(get_clock),
) -> RideRequestService:
    return RideRequestService(
        db, InAppMessageSink(db), clock,
        max_seats_per_request=get_settings().max_seats_per_request,
    )
