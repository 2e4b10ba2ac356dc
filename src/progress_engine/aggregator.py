"""
Aggregator.

Per-indicator arithmetic means over buckets. Weekly and monthly values are
rolled up from day-level means so a day with many check-ins counts the
same as a day with one.
"""
import math
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

from .grouper import Bucket, PeriodKind, TimezoneLike, build_buckets, group_by_period
from .normalizer import NormalizedEntry


def _mean_by_indicator(rows: Iterable[Mapping[str, float]]) -> Dict[str, float]:
    # Each indicator is averaged over the rows that carry it
    collected: Dict[str, List[float]] = {}
    for row in rows:
        for name, value in row.items():
            collected.setdefault(name, []).append(value)
    # fsum is exactly rounded, so the mean does not depend on summation order
    return {name: math.fsum(values) / len(values) for name, values in collected.items()}


def aggregate(entries: Sequence[NormalizedEntry]) -> Dict[str, float]:
    """Flat mean of each indicator across the given entries."""
    if not entries:
        raise ValueError("Cannot aggregate an empty bucket")
    return _mean_by_indicator(entry.scores for entry in entries)


def daily_means(
    entries: Iterable[NormalizedEntry],
    tz: TimezoneLike = None,
) -> List[Tuple[str, Dict[str, float]]]:
    """(day key, per-indicator mean) for each day with entries, oldest first."""
    return [(day, aggregate(members)) for day, members in group_by_period(entries, PeriodKind.DAY, tz).items()]


def rollup(
    entries: Sequence[NormalizedEntry],
    kind: PeriodKind,
    tz: TimezoneLike = None,
) -> Dict[str, float]:
    """
    Aggregate one bucket at the given granularity.

    Day buckets use a flat mean. Week and month buckets first collapse each
    day to its mean, then average those day means:

        week_avg(ind) = mean(day_avg(ind, d) for d in days_of_week)
    """
    if kind == PeriodKind.DAY:
        return aggregate(entries)
    if not entries:
        raise ValueError("Cannot aggregate an empty bucket")
    return _mean_by_indicator(means for _, means in daily_means(entries, tz))


def aggregate_buckets(
    entries: Iterable[NormalizedEntry],
    kind: PeriodKind,
    tz: TimezoneLike = None,
) -> List[Bucket]:
    """Build the chronological buckets for ``kind`` and fill in their averages."""
    buckets = build_buckets(entries, kind, tz)
    for bucket in buckets:
        bucket.averages = rollup(bucket.entries, kind, tz)
    return buckets
