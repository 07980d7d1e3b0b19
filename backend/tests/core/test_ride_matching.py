"""Ride Matching Query — tests for board search filters and ordering.

Tests cover:
    - Case-insensitive substring filters on origin / destination
    - Date filter matches one-off departure dates and recurring occurrences
    - Only effectively ACTIVE rides are returned (FULL / CANCELLED hidden)
    - Owner exclusion
    - Ordering: dated rides by date then time, recurring after, newest first on ties
"""

from datetime import date, time, timedelta

from rideboard.core.domain_types import RequestStatus, RideStatus, Weekday
from rideboard.core.recurrence import RecurrenceSpec
from rideboard.core.ride_matching import (
    SearchFilters, contains_text, matches, runs_on, search_rides,
)
from tests.core.ride_builders import NOW, OWNER, make_request, make_ride


MON_WED = RecurrenceSpec(
    weekdays=frozenset({Weekday.MONDAY, Weekday.WEDNESDAY}),
    until=date(2024, 6, 30),
)


def _search(rides, filters=SearchFilters(), exclude_owner=None):
    return list(search_rides([(r, []) for r in rides], filters, exclude_owner))


# ─── contains_text ───────────────────────────────────────────────

def test_contains_text_is_case_insensitive():
    assert contains_text("Union Station", "union")
    assert contains_text("union station", "STATION")


def test_contains_text_blank_needle_matches_everything():
    assert contains_text("Union Station", None)
    assert contains_text("Union Station", "   ")


def test_contains_text_rejects_missing_substring():
    assert not contains_text("Union Station", "airport")


# ─── runs_on ─────────────────────────────────────────────────────

def test_one_off_ride_runs_on_its_departure_date_only():
    ride = make_ride(departure_date=date(2024, 5, 2))
    assert runs_on(ride, date(2024, 5, 2))
    assert not runs_on(ride, date(2024, 5, 3))


def test_recurring_ride_runs_on_listed_weekdays():
    ride = make_ride(departure_date=None, recurrence=MON_WED)
    assert runs_on(ride, date(2024, 5, 6))  # Monday
    assert not runs_on(ride, date(2024, 5, 7))  # Tuesday
    assert not runs_on(ride, date(2024, 7, 1))  # Monday after end date


# ─── matches ─────────────────────────────────────────────────────

def test_filters_are_and_combined():
    ride = make_ride(origin="North Campus", destination="Airport")
    assert matches(ride, [], SearchFilters(origin_contains="north", destination_contains="air"))
    assert not matches(ride, [], SearchFilters(origin_contains="north", destination_contains="mall"))


def test_full_ride_does_not_match():
    ride = make_ride(capacity=1)
    requests = [make_request(ride, status=RequestStatus.ACCEPTED)]
    assert not matches(ride, requests, SearchFilters())


def test_cancelled_ride_does_not_match():
    ride = make_ride(status=RideStatus.CANCELLED)
    assert not matches(ride, [], SearchFilters())


def test_owner_exclusion():
    ride = make_ride()
    assert not matches(ride, [], SearchFilters(), exclude_owner=OWNER)
    assert matches(ride, [], SearchFilters(), exclude_owner=None)


# ─── search_rides ────────────────────────────────────────────────

def test_search_filters_by_date_across_one_off_and_recurring():
    on_the_day = make_ride(departure_date=date(2024, 5, 6))
    other_day = make_ride(departure_date=date(2024, 5, 7))
    recurring = make_ride(departure_date=None, recurrence=MON_WED)
    found = _search(
        [on_the_day, other_day, recurring], SearchFilters(on_date=date(2024, 5, 6)),
    )
    assert found == [on_the_day, recurring]


def test_search_orders_by_date_then_time():
    later_day = make_ride(departure_date=date(2024, 5, 3), departure_time=time(7, 0))
    same_day_late = make_ride(departure_date=date(2024, 5, 2), departure_time=time(18, 0))
    same_day_early = make_ride(departure_date=date(2024, 5, 2), departure_time=time(6, 0))
    found = _search([later_day, same_day_late, same_day_early])
    assert found == [same_day_early, same_day_late, later_day]


def test_search_puts_recurring_rides_after_dated_rides():
    recurring = make_ride(
        departure_date=None, recurrence=MON_WED, departure_time=time(5, 0),
    )
    dated = make_ride(departure_date=date(2024, 12, 31), departure_time=time(23, 0))
    assert _search([recurring, dated]) == [dated, recurring]


def test_search_breaks_ties_newest_first():
    older = make_ride(created_at=NOW)
    newer = make_ride(created_at=NOW + timedelta(minutes=5))
    assert _search([older, newer]) == [newer, older]


def test_search_is_lazy_and_single_pass():
    results = search_rides([(make_ride(), [])], SearchFilters())
    assert len(list(results)) == 1
    assert list(results) == []
