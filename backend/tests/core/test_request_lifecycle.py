"""Request Lifecycle — tests for the pure request state machine.

Tests cover:
    - submit preconditions in order: active ride, not own ride, no open request, seats
    - respond: owner only, PENDING only, accept re-checks seats, FULL derived after accept
    - cancel_ride: owner only, one RideCancelled per ACCEPTED request
    - Failures never return new state (inputs are left untouched)
"""

from uuid import uuid4

import pytest

from rideboard.core.availability import remaining_seats
from rideboard.core.domain_types import (
    Decision, RequestId, RequestStatus, RideStatus, UserId,
)
from rideboard.core.errors import (
    CannotRequestOwnRideError,
    DuplicateRequestError,
    InsufficientSeatsError,
    InvalidRideRequestError,
    NotAuthorizedError,
    RequestAlreadyResolvedError,
    RideNotActiveError,
)
from rideboard.core.events import RequestAccepted, RequestDeclined
from rideboard.core.request_lifecycle import (
    cancel_ride, find_open_request, respond_to_request, submit_request,
)
from tests.core.ride_builders import NOW, OWNER, make_request, make_ride


RIDER_A = UserId(uuid4())
RIDER_B = UserId(uuid4())


def _submit(ride, requests, rider_id, seats=1, message=None):
    return submit_request(
        request_id=RequestId(uuid4()),
        rider_id=rider_id,
        ride=ride,
        requests=requests,
        seats_requested=seats,
        message=message,
        now=NOW,
    )


def _respond(ride, request, requests, decision, actor_id=OWNER):
    return respond_to_request(
        actor_id=actor_id,
        ride=ride,
        request=request,
        requests=requests,
        decision=decision,
        now=NOW,
    )


def _replace_in(requests, updated):
    return [updated if r.id == updated.id else r for r in requests]


# ─── submit_request ──────────────────────────────────────────────

def test_submit_creates_pending_request():
    ride = make_ride(capacity=2)
    request = _submit(ride, [], RIDER_A, seats=2, message="Can bring snacks")
    assert request.status == RequestStatus.PENDING
    assert request.ride_id == ride.id
    assert request.rider_id == RIDER_A
    assert request.seats_requested == 2
    assert request.message == "Can bring snacks"
    assert request.created_at == NOW


def test_submit_stores_blank_message_as_none():
    request = _submit(make_ride(), [], RIDER_A, message="")
    assert request.message is None


def test_submit_rejects_zero_seats():
    with pytest.raises(InvalidRideRequestError):
        _submit(make_ride(), [], RIDER_A, seats=0)


@pytest.mark.parametrize("status", [RideStatus.CANCELLED, RideStatus.COMPLETED])
def test_submit_rejects_terminal_ride(status):
    with pytest.raises(RideNotActiveError) as exc:
        _submit(make_ride(status=status), [], RIDER_A)
    assert exc.value.status == status.value


def test_submit_rejects_full_ride():
    ride = make_ride(capacity=1)
    requests = [make_request(ride, status=RequestStatus.ACCEPTED)]
    with pytest.raises(RideNotActiveError) as exc:
        _submit(ride, requests, RIDER_A)
    assert exc.value.status == RideStatus.FULL.value


def test_submit_rejects_own_ride():
    with pytest.raises(CannotRequestOwnRideError):
        _submit(make_ride(), [], OWNER)


def test_submit_checks_active_before_ownership():
    ride = make_ride(status=RideStatus.CANCELLED)
    with pytest.raises(RideNotActiveError):
        _submit(ride, [], OWNER)


def test_submit_rejects_duplicate_pending_request():
    ride = make_ride()
    existing = make_request(ride, rider_id=RIDER_A)
    with pytest.raises(DuplicateRequestError) as exc:
        _submit(ride, [existing], RIDER_A)
    assert exc.value.existing_request_id == existing.id
    assert exc.value.http_status == 409


def test_submit_rejects_duplicate_when_already_accepted():
    ride = make_ride(capacity=3)
    existing = make_request(ride, rider_id=RIDER_A, status=RequestStatus.ACCEPTED)
    with pytest.raises(DuplicateRequestError):
        _submit(ride, [existing], RIDER_A)


def test_submit_allowed_after_previous_request_declined():
    ride = make_ride()
    declined = make_request(ride, rider_id=RIDER_A, status=RequestStatus.DECLINED)
    request = _submit(ride, [declined], RIDER_A)
    assert request.status == RequestStatus.PENDING


def test_submit_checks_duplicate_before_seats():
    ride = make_ride(capacity=1)
    existing = make_request(ride, rider_id=RIDER_A)
    with pytest.raises(DuplicateRequestError):
        _submit(ride, [existing], RIDER_A, seats=5)


def test_submit_rejects_more_seats_than_remaining():
    ride = make_ride(capacity=3)
    requests = [make_request(ride, seats=2, status=RequestStatus.ACCEPTED)]
    with pytest.raises(InsufficientSeatsError) as exc:
        _submit(ride, requests, RIDER_A, seats=2)
    assert exc.value.requested == 2
    assert exc.value.remaining == 1


def test_pending_requests_do_not_block_submission():
    ride = make_ride(capacity=2)
    requests = [make_request(ride, seats=2)]
    request = _submit(ride, requests, RIDER_A, seats=2)
    assert request.status == RequestStatus.PENDING


def test_find_open_request_ignores_declined():
    ride = make_ride()
    declined = make_request(ride, rider_id=RIDER_A, status=RequestStatus.DECLINED)
    assert find_open_request(RIDER_A, [declined]) is None


# ─── respond_to_request ──────────────────────────────────────────

def test_accept_marks_request_accepted_and_emits_event():
    ride = make_ride(capacity=3)
    request = make_request(ride, seats=2, rider_id=RIDER_A)
    outcome = _respond(ride, request, [request], Decision.ACCEPT)
    assert outcome.request.status == RequestStatus.ACCEPTED
    assert outcome.ride_status == RideStatus.ACTIVE
    assert isinstance(outcome.event, RequestAccepted)
    assert outcome.event.rider_id == RIDER_A
    assert outcome.event.owner_id == OWNER
    assert outcome.event.seats == 2


def test_accept_last_seats_derives_full():
    ride = make_ride(capacity=2)
    request = make_request(ride, seats=2)
    outcome = _respond(ride, request, [request], Decision.ACCEPT)
    assert outcome.ride_status == RideStatus.FULL
    assert outcome.event.ride_status == RideStatus.FULL


def test_decline_marks_request_declined_and_emits_event():
    ride = make_ride()
    request = make_request(ride, rider_id=RIDER_A)
    outcome = _respond(ride, request, [request], Decision.DECLINE)
    assert outcome.request.status == RequestStatus.DECLINED
    assert outcome.ride_status == RideStatus.ACTIVE
    assert isinstance(outcome.event, RequestDeclined)


def test_non_owner_cannot_respond():
    ride = make_ride()
    request = make_request(ride, rider_id=RIDER_A)
    with pytest.raises(NotAuthorizedError) as exc:
        _respond(ride, request, [request], Decision.ACCEPT, actor_id=RIDER_B)
    assert exc.value.http_status == 403
    assert request.status == RequestStatus.PENDING


@pytest.mark.parametrize("status", [RequestStatus.ACCEPTED, RequestStatus.DECLINED])
@pytest.mark.parametrize("decision", list(Decision))
def test_respond_on_resolved_request_fails(status, decision):
    ride = make_ride(capacity=3)
    request = make_request(ride, status=status)
    with pytest.raises(RequestAlreadyResolvedError) as exc:
        _respond(ride, request, [request], decision)
    assert exc.value.status == status.value
    assert request.status == status


def test_accept_rejects_when_overlapping_request_took_the_seats():
    ride = make_ride(capacity=3)
    first = make_request(ride, seats=2, status=RequestStatus.ACCEPTED)
    second = make_request(ride, seats=2)
    with pytest.raises(InsufficientSeatsError):
        _respond(ride, second, [first, second], Decision.ACCEPT)


def test_accept_on_cancelled_ride_fails():
    ride = make_ride(status=RideStatus.CANCELLED)
    request = make_request(ride)
    with pytest.raises(RideNotActiveError):
        _respond(ride, request, [request], Decision.ACCEPT)


def test_decline_on_cancelled_ride_still_allowed():
    ride = make_ride(status=RideStatus.CANCELLED)
    request = make_request(ride)
    outcome = _respond(ride, request, [request], Decision.DECLINE)
    assert outcome.request.status == RequestStatus.DECLINED
    assert outcome.ride_status == RideStatus.CANCELLED


# ─── cancel_ride ─────────────────────────────────────────────────

def test_cancel_emits_one_event_per_accepted_request():
    ride = make_ride(capacity=4)
    accepted_a = make_request(ride, rider_id=RIDER_A, status=RequestStatus.ACCEPTED)
    accepted_b = make_request(ride, rider_id=RIDER_B, status=RequestStatus.ACCEPTED)
    pending = make_request(ride)
    outcome = cancel_ride(
        actor_id=OWNER, ride=ride,
        requests=[accepted_a, accepted_b, pending], now=NOW,
    )
    assert outcome.ride.status == RideStatus.CANCELLED
    assert len(outcome.events) == 2
    assert {e.request_id for e in outcome.events} == {accepted_a.id, accepted_b.id}
    assert {e.rider_id for e in outcome.events} == {RIDER_A, RIDER_B}


def test_cancel_without_accepted_requests_emits_nothing():
    ride = make_ride()
    outcome = cancel_ride(actor_id=OWNER, ride=ride, requests=[], now=NOW)
    assert outcome.ride.status == RideStatus.CANCELLED
    assert outcome.events == ()


def test_non_owner_cannot_cancel():
    ride = make_ride()
    with pytest.raises(NotAuthorizedError):
        cancel_ride(actor_id=RIDER_A, ride=ride, requests=[], now=NOW)
    assert ride.status == RideStatus.ACTIVE


def test_cancel_already_cancelled_ride_fails():
    ride = make_ride(status=RideStatus.CANCELLED)
    with pytest.raises(RideNotActiveError):
        cancel_ride(actor_id=OWNER, ride=ride, requests=[], now=NOW)


# ─── Walkthroughs ────────────────────────────────────────────────

def test_two_riders_fill_a_two_seat_ride():
    ride = make_ride(capacity=2)

    request_a = _submit(ride, [], RIDER_A, seats=1)
    requests = [request_a]
    outcome = _respond(ride, request_a, requests, Decision.ACCEPT)
    requests = _replace_in(requests, outcome.request)
    assert outcome.request.status == RequestStatus.ACCEPTED
    assert remaining_seats(ride, requests) == 1
    assert outcome.ride_status == RideStatus.ACTIVE

    with pytest.raises(InsufficientSeatsError):
        _submit(ride, requests, RIDER_B, seats=2)

    request_b = _submit(ride, requests, RIDER_B, seats=1)
    requests.append(request_b)
    assert request_b.status == RequestStatus.PENDING

    outcome = _respond(ride, request_b, requests, Decision.ACCEPT)
    requests = _replace_in(requests, outcome.request)
    assert remaining_seats(ride, requests) == 0
    assert outcome.ride_status == RideStatus.FULL


def test_resubmit_after_decline():
    ride = make_ride()
    first = _submit(ride, [], RIDER_A)
    requests = [first]

    with pytest.raises(DuplicateRequestError):
        _submit(ride, requests, RIDER_A)

    outcome = _respond(ride, first, requests, Decision.DECLINE)
    requests = _replace_in(requests, outcome.request)

    second = _submit(ride, requests, RIDER_A)
    assert second.status == RequestStatus.PENDING
    assert second.id != first.id
