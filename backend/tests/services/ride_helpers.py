"""Request builders shared by the API tests."""

from uuid import UUID


def actor(user_id: UUID) -> dict:
    """Headers identifying the caller."""
    return {"X-Actor-Id": str(user_id)}


def ride_body(**overrides) -> dict:
    body = {
        "origin": "North Campus",
        "destination": "Union Station",
        "departure_date": "2024-05-02",
        "departure_time": "09:30",
        "capacity": 3,
        "timezone_offset_minutes": 0,
    }
    body.update(overrides)
    return body


async def post_ride(client, owner: UUID, **overrides) -> dict:
    res = await client.post(
        "/api/v1/rides", json=ride_body(**overrides), headers=actor(owner),
    )
    assert res.status_code == 201, res.text
    return res.json()


async def request_seats(client, rider: UUID, ride_id: str, seats: int = 1):
    return await client.post(
        "/api/v1/ride-requests",
        json={"ride_id": ride_id, "seats_requested": seats},
        headers=actor(rider),
    )


async def respond(client, owner: UUID, request_id: str, action: str):
    return await client.post(
        f"/api/v1/ride-requests/{request_id}/respond",
        json={"action": action},
        headers=actor(owner),
    )
