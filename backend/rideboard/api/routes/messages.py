"""Message Routes — direct messages between riders and ride owners.

Invariants:
    - A user only ever reads messages they sent or received
    - Conversation view is oldest first; inbox is newest first
    - Messaging yourself is rejected
    - A referenced ride must exist (404 otherwise)

Design Decisions:
    - Plain CRUD with no domain rules: the route talks to the session directly
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from rideboard.api.dependencies import get_actor_id
from rideboard.core.domain_types import UserId
from rideboard.core.errors import ResourceNotFoundError
from rideboard.infrastructure.database import get_db
from rideboard.models.message import Message
from rideboard.models.ride import Ride
from rideboard.schemas.message import MessageCreate, MessageResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/messages", tags=["messages"])


@router.post(
    "", response_model=MessageResponse, status_code=status.HTTP_201_CREATED,
)
async def send_message(
    body: MessageCreate,
    actor_id: UserId = Depends(get_actor_id),
    db: AsyncSession = Depends(get_db),
):
    if body.recipient_id == actor_id:
        raise HTTPException(
            status.HTTP_400_BAD_REQUEST,
            detail="Cannot send a message to yourself",
        )
    if body.ride_id is not None and await db.get(Ride, body.ride_id) is None:
        raise ResourceNotFoundError("Ride", str(body.ride_id))
    message = Message(
        sender_id=actor_id,
        receiver_id=body.recipient_id,
        ride_id=body.ride_id,
        content=body.content,
    )
    db.add(message)
    await db.commit()
    await db.refresh(message)
    logger.info(
        "Message sent",
        extra={"actor_id": str(actor_id), "ride_id": str(body.ride_id) if body.ride_id else None},
    )
    return message


@router.get("", response_model=list[MessageResponse])
async def list_messages(
    with_user: UUID | None = Query(None, alias="with"),
    limit: int = Query(100, ge=1, le=500),
    actor_id: UserId = Depends(get_actor_id),
    db: AsyncSession = Depends(get_db),
):
    """Conversation with one user (?with=<id>), or the whole inbox."""
    if with_user is not None:
        query = select(Message).where(or_(
            and_(Message.sender_id == actor_id, Message.receiver_id == with_user),
            and_(Message.sender_id == with_user, Message.receiver_id == actor_id),
        )).order_by(Message.created_at.asc())
    else:
        query = select(Message).where(or_(
            Message.sender_id == actor_id, Message.receiver_id == actor_id,
        )).order_by(Message.created_at.desc())
    result = await db.execute(query.limit(limit))
    return result.scalars().all()
