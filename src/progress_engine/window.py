"""Window Selector: keep the most recent periods that have data."""
from typing import Dict, List, Sequence, TypeVar

from .grouper import PeriodKind

T = TypeVar("T")

# Periods shown per chart in a progress report
DEFAULT_WINDOWS: Dict[PeriodKind, int] = {
    PeriodKind.DAY: 7,
    PeriodKind.WEEK: 4,
    PeriodKind.MONTH: 3,
}


def select_recent_window(buckets: Sequence[T], n: int) -> List[T]:
    """
    Return the last ``n`` buckets of a chronologically ordered sequence.

    Only periods that have entries are ever bucketed, so empty calendar
    days never take a slot. Fewer than ``n`` buckets are returned as-is.
    """
    if n <= 0:
        raise ValueError(f"Window size must be positive, got {n}")
    return list(buckets[-n:])
