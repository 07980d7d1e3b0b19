"""In-App Message Sink — turns ride events into messages from owner to rider.

Invariants:
    - Messages are added to the caller's session: they commit or roll back
      together with the state change that produced the event
    - Every event is logged with its event_type, whether or not it writes a message
    - RequestDeclined and RidePosted write nothing here; push delivery for them
      lives outside this service

Design Decisions:
    - Explicit dict from event class to formatter: every mapping visible in one place
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from rideboard.core.events import RequestAccepted, RideCancelled, RideEvent
from rideboard.core.format_messages import (
    format_acceptance_message,
    format_cancellation_message,
)
from rideboard.models.message import Message

logger = logging.getLogger(__name__)


_FORMATTERS = {
    RequestAccepted: format_acceptance_message,
    RideCancelled: format_cancellation_message,
}


class InAppMessageSink:
    """EventSink that persists rider-facing messages."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def publish(self, event: RideEvent) -> None:
        request_id = getattr(event, "request_id", None)
        logger.info(
            f"Ride event: {event.event_type}",
            extra={
                "event_type": event.event_type,
                "ride_id": str(event.ride_id),
                "request_id": str(request_id) if request_id else None,
            },
        )
        formatter = _FORMATTERS.get(type(event))
        if formatter is None:
            return
        self.db.add(Message(
            sender_id=event.owner_id,
            receiver_id=event.rider_id,
            ride_id=event.ride_id,
            content=formatter(event),
            created_at=event.occurred_at,
        ))
