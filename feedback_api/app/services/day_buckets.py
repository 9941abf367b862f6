"""Calendar-day bucketing for time-ordered response streams.

Day keys are UTC ``YYYY-MM-DD`` strings (see :func:`..utils.dates.day_key`).
The series is sparse: days without rows are not synthesized.
"""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable

from ..utils.dates import day_key


@dataclass(frozen=True)
class DayBucket:
    day: str
    count: int
    avg: float | None
    breakdown: list[tuple[str, int]]


@dataclass
class _DayAccumulator:
    count: int = 0
    numbers: list[float] = field(default_factory=list)
    categories: Counter = field(default_factory=Counter)


def finite_number(value: object) -> float | None:
    """Return ``value`` as a finite float, or ``None``."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def rank_counts(counts: Counter) -> list[tuple[str, int]]:
    """Order ``counts`` by count descending, then key ascending."""
    return sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))


def bucket_by_day(
    rows: Iterable[tuple[datetime, object, str | None]],
) -> list[DayBucket]:
    """Group ``(timestamp, numeric, category)`` rows by calendar day.

    Non-finite numerics are left out of the average but the row still counts
    toward the day total and its category. A ``None`` category is not tallied.
    The result is independent of input order.
    """

    days: dict[str, _DayAccumulator] = {}
    for ts, numeric, category in rows:
        acc = days.setdefault(day_key(ts), _DayAccumulator())
        acc.count += 1
        number = finite_number(numeric)
        if number is not None:
            acc.numbers.append(number)
        if category is not None:
            acc.categories[category] += 1

    buckets = []
    for day in sorted(days):
        acc = days[day]
        avg = math.fsum(acc.numbers) / len(acc.numbers) if acc.numbers else None
        buckets.append(DayBucket(day, acc.count, avg, rank_counts(acc.categories)))
    return buckets


__all__ = ["DayBucket", "bucket_by_day", "finite_number", "rank_counts"]
