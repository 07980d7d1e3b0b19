"""Ride Request Routes — submit, answer and list seat requests.

Invariants:
    - Only the ride owner may answer a request; answering twice is a 409
    - Listing endpoints are scoped to the actor (as owner or as rider)
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from rideboard.api.dependencies import get_actor_id, get_request_service
from rideboard.core.domain_types import Decision, RequestId, RideId, UserId
from rideboard.schemas.ride_request import (
    RideRequestCreate, RideRequestResponse, RespondBody, RespondResponse,
)
from rideboard.services.request_service import RideRequestService

router = APIRouter(prefix="/api/v1/ride-requests", tags=["ride-requests"])


@router.post(
    "", response_model=RideRequestResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_request(
    body: RideRequestCreate,
    actor_id: UserId = Depends(get_actor_id),
    service: RideRequestService = Depends(get_request_service),
):
    """Request seats on someone else's ride."""
    request = await service.submit(
        actor_id, RideId(body.ride_id), body.seats_requested, body.message,
    )
    return RideRequestResponse.from_request(request)


@router.post("/{request_id}/respond", response_model=RespondResponse)
async def respond_to_request(
    request_id: UUID,
    body: RespondBody,
    actor_id: UserId = Depends(get_actor_id),
    service: RideRequestService = Depends(get_request_service),
):
    """Accept or decline a pending request on one of the actor's rides."""
    outcome = await service.respond(
        actor_id, RequestId(request_id), Decision(body.action),
    )
    return RespondResponse(
        request=RideRequestResponse.from_request(outcome.request),
        ride_status=outcome.ride_status,
    )


@router.get("/incoming", response_model=list[RideRequestResponse])
async def list_incoming_requests(
    actor_id: UserId = Depends(get_actor_id),
    service: RideRequestService = Depends(get_request_service),
):
    """Pending requests on the actor's rides, newest first."""
    rows = await service.incoming(actor_id)
    return [RideRequestResponse.from_request(req, ride) for req, ride in rows]


@router.get("/mine", response_model=list[RideRequestResponse])
async def list_my_requests(
    actor_id: UserId = Depends(get_actor_id),
    service: RideRequestService = Depends(get_request_service),
):
    """Every request the actor made, newest first."""
    rows = await service.made_by(actor_id)
    return [RideRequestResponse.from_request(req, ride) for req, ride in rows]
