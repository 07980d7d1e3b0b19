"""Ride Input Schema — boundary validation before any domain rule runs.

Tests cover:
    - Locations are stripped and may not be blank
    - One-time rides need a departure_date; recurring rides do not
    - timezone_offset_minutes is required and range-checked
    - capacity bounds
    - times of day carry no UTC offset
"""

import pytest
from pydantic import ValidationError

from rideboard.schemas.ride import RideInput


def _body(**overrides) -> dict:
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


def test_locations_are_stripped():
    ride = RideInput(**_body(origin="  North Campus "))
    assert ride.origin == "North Campus"


def test_blank_location_rejected():
    with pytest.raises(ValidationError):
        RideInput(**_body(destination="   "))


def test_one_time_ride_needs_departure_date():
    with pytest.raises(ValidationError):
        RideInput(**_body(departure_date=None))


def test_recurring_ride_without_departure_date_is_valid():
    ride = RideInput(**_body(
        departure_date=None,
        is_recurring=True,
        recurring_days=["monday"],
        recurring_until="2024-06-30",
    ))
    assert ride.is_recurring
    assert ride.recurring_days == ["monday"]


def test_timezone_offset_is_required():
    body = _body()
    del body["timezone_offset_minutes"]
    with pytest.raises(ValidationError):
        RideInput(**body)


@pytest.mark.parametrize("offset", [-841, 721])
def test_timezone_offset_out_of_range_rejected(offset):
    with pytest.raises(ValidationError):
        RideInput(**_body(timezone_offset_minutes=offset))


@pytest.mark.parametrize("capacity", [0, 51])
def test_capacity_bounds(capacity):
    with pytest.raises(ValidationError):
        RideInput(**_body(capacity=capacity))


def test_negative_price_rejected():
    with pytest.raises(ValidationError):
        RideInput(**_body(price_per_seat=-0.5))


@pytest.mark.parametrize("field", ["departure_time", "return_time"])
def test_time_with_utc_offset_rejected(field):
    with pytest.raises(ValidationError):
        RideInput(**_body(**{field: "09:00:00+02:00"}))
