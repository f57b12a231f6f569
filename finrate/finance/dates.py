# finrate/finance/dates.py
"""
Date helpers for XIRR.

Elapsed time is measured on a fixed 365-day year; leap days are not
special-cased, so 2016-01-01 -> 2017-01-01 is 366/365 years.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Sequence, Tuple, Union

from finrate.errors import InvalidInputError

DateValue = Union[date, datetime, str]

DAYS_PER_YEAR = 365.0
SECONDS_PER_YEAR = DAYS_PER_YEAR * 24 * 3600


def to_datetime(value: DateValue) -> datetime:
    """Normalize a date, datetime or ISO-8601 string to a naive (UTC for aware input) datetime."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            # aware values compare on the UTC clock
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        try:
            return to_datetime(datetime.fromisoformat(value.strip()))
        except ValueError as exc:
            raise InvalidInputError(f"unparseable date: {value!r}") from exc
    raise InvalidInputError(f"unsupported date value: {value!r} ({type(value).__name__})")


def year_fraction(first: DateValue, last: DateValue) -> float:
    """Absolute elapsed time between two dates in 365-day years."""
    delta = to_datetime(last) - to_datetime(first)
    return abs(delta.total_seconds()) / SECONDS_PER_YEAR


def durations(dates: Sequence[DateValue]) -> Tuple[float, ...]:
    """Year offsets of every date from dates[0]; the first entry is always 0.0."""
    if not dates:
        return ()
    first = to_datetime(dates[0])
    return (0.0,) + tuple(year_fraction(first, d) for d in dates[1:])


__all__ = ["DateValue", "DAYS_PER_YEAR", "to_datetime", "year_fraction", "durations"]
