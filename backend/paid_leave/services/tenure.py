"""Adjusted tenure: elapsed employment time minus leaves of absence."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import date

# Fixed average month length used to turn adjusted days into whole months.
AVERAGE_DAYS_PER_MONTH = 30.44


class AbsenceInterval(Protocol):
    """Anything with a half-open [start_date, end_date) range."""

    start_date: date
    end_date: date


def excluded_days(absences: Iterable[AbsenceInterval], reference_date: date) -> int:
    """Count absence days that have elapsed by reference_date.

    An absence that runs past the reference date is cut off at it; one that
    starts after it contributes nothing. Intervals are assumed disjoint.
    """
    total = 0
    for absence in absences:
        if absence.start_date > reference_date:
            continue
        effective_end = min(absence.end_date, reference_date)
        total += max(0, (effective_end - absence.start_date).days)
    return total


def adjusted_tenure_days(
    hire_date: date,
    reference_date: date,
    absences: Iterable[AbsenceInterval],
) -> int:
    """Return elapsed days since hire with absence days removed."""
    raw_days = (reference_date - hire_date).days
    return raw_days - excluded_days(absences, reference_date)


def adjusted_tenure_months(
    hire_date: date,
    reference_date: date,
    absences: Iterable[AbsenceInterval],
) -> int:
    """Return whole months of adjusted tenure, never negative."""
    days = adjusted_tenure_days(hire_date, reference_date, absences)
    if days <= 0:
        return 0
    return math.floor(days / AVERAGE_DAYS_PER_MONTH)
