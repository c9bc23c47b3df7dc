from __future__ import annotations
from typing import TYPE_CHECKING, Iterable

import numpy as np

from . import canon, exceptions

if TYPE_CHECKING:
    from .types import DaySeries


def assert_day(day: "DaySeries") -> None:
    count = len(day.values)
    if count != canon.SLOTS_PER_DAY:
        raise exceptions.IncompleteDayError(day.day_key, count, canon.SLOTS_PER_DAY)
    arr = np.asarray(day.values, dtype=float)
    bad = np.flatnonzero(~np.isfinite(arr))
    if bad.size:
        raise exceptions.NonFiniteValueError(day.day_key, [int(i) for i in bad])


def assert_days(days: Iterable["DaySeries"]) -> None:
    """
    Hard check before encoding: each day must carry exactly 96 finite values.
    The first offending day aborts the whole batch.
    """
    seen: set[str] = set()
    for day in days:
        if day.day_key in seen:
            raise exceptions.DayValidationError(
                day.day_key, f"Day {day.day_key} appears more than once."
            )
        seen.add(day.day_key)
        assert_day(day)


def validate_location_id(location_id: str) -> str:
    """Strip and require a non-empty metering point id."""
    loc = (location_id or "").strip()
    exceptions.require(
        bool(loc),
        "A metering point id (LOC+172) is required.",
        exceptions.MessageParameterError,
    )
    return loc
