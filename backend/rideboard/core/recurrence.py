"""Recurrence Evaluator — decides whether a recurring ride runs on a given date.

Invariants:
    - occurs_on is pure calendar arithmetic: no implicit "today", past dates still occur
    - An empty weekday set never occurs
    - parse_recurrence is the only place the stored pattern shape is understood;
      everything past the persistence edge sees a RecurrenceSpec

Design Decisions:
    - Stored pattern keeps the {"days": [...], "until": "YYYY-MM-DD"} shape so rows
      written by earlier clients stay readable
    - Weekday names accepted in full or three-letter form, any case
"""

import json
from dataclasses import dataclass
from datetime import date
from typing import Iterable

from rideboard.core.domain_types import Weekday
from rideboard.core.errors import InvalidRecurrenceSpecError


_ABBREVIATIONS = {w.value[:3]: w for w in Weekday}


@dataclass(frozen=True)
class RecurrenceSpec:
    """Weekly recurrence: the ride runs on each listed weekday up to and including `until`."""
    weekdays: frozenset[Weekday]
    until: date

    def to_pattern(self) -> dict:
        """Serialize for the recurrence_pattern column, days in calendar order."""
        return {
            "days": [w.value for w in Weekday if w in self.weekdays],
            "until": self.until.isoformat(),
        }


def occurs_on(spec: RecurrenceSpec, candidate: date) -> bool:
    """True iff candidate falls on one of the weekdays and not after `until`."""
    if not spec.weekdays:
        return False
    return Weekday.of(candidate) in spec.weekdays and candidate <= spec.until


def parse_weekday(raw: object) -> Weekday:
    if isinstance(raw, Weekday):
        return raw
    if not isinstance(raw, str):
        raise InvalidRecurrenceSpecError(f"weekday must be a string, got {raw!r}")
    key = raw.strip().lower()
    try:
        return Weekday(key)
    except ValueError:
        pass
    if key in _ABBREVIATIONS:
        return _ABBREVIATIONS[key]
    raise InvalidRecurrenceSpecError(f"unknown weekday {raw!r}")


def build_recurrence(days: Iterable[object], until: date | str | None) -> RecurrenceSpec:
    """Validate days + end date into a RecurrenceSpec."""
    weekdays = frozenset(parse_weekday(d) for d in days)
    if not weekdays:
        raise InvalidRecurrenceSpecError("at least one weekday is required")
    if until is None:
        raise InvalidRecurrenceSpecError("an end date is required")
    if isinstance(until, str):
        try:
            until = date.fromisoformat(until)
        except ValueError:
            raise InvalidRecurrenceSpecError(f"invalid end date {until!r}")
    if not isinstance(until, date):
        raise InvalidRecurrenceSpecError(f"invalid end date {until!r}")
    return RecurrenceSpec(weekdays=weekdays, until=until)


def parse_recurrence(raw: str | dict) -> RecurrenceSpec:
    """Parse a stored pattern (JSON text or decoded dict)."""
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise InvalidRecurrenceSpecError(f"not valid JSON ({e.msg})")
    if not isinstance(raw, dict):
        raise InvalidRecurrenceSpecError("pattern must be an object")
    days = raw.get("days")
    if not isinstance(days, list):
        raise InvalidRecurrenceSpecError("'days' must be a list")
    return build_recurrence(days, raw.get("until"))
