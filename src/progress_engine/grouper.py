"""
Temporal Grouper.

Buckets normalized check-ins by calendar day, ISO week and calendar month.
Keys are rendered the way the progress charts label them:
"2025-06-01", "2025-W23" and "June 2025".
"""
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone, tzinfo
from enum import Enum
from typing import Dict, Iterable, List, Union
from zoneinfo import ZoneInfo

from .normalizer import NormalizedEntry

# Fixed English names so keys never depend on the process locale
MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)

TimezoneLike = Union[tzinfo, str, None]


class PeriodKind(str, Enum):
    """Granularity of a bucket."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"


@dataclass
class Bucket:
    """All check-ins falling into one period, plus their per-indicator means."""

    kind: PeriodKind
    key: str
    start: date  # first calendar day of the period, used for ordering
    entries: List[NormalizedEntry] = field(default_factory=list)
    averages: Dict[str, float] = field(default_factory=dict)


def resolve_timezone(tz: TimezoneLike) -> tzinfo:
    """Turn an IANA name, tzinfo or None (UTC) into a tzinfo."""
    if tz is None:
        return timezone.utc
    if isinstance(tz, str):
        return timezone.utc if tz.upper() == "UTC" else ZoneInfo(tz)
    return tz


def _local_date(ts: datetime, tz: TimezoneLike) -> date:
    return ts.astimezone(resolve_timezone(tz)).date()


def period_start(ts: datetime, kind: PeriodKind, tz: TimezoneLike = None) -> date:
    """First calendar day of the period containing ``ts``."""
    day = _local_date(ts, tz)
    if kind == PeriodKind.DAY:
        return day
    if kind == PeriodKind.WEEK:
        return day - timedelta(days=day.weekday())
    return day.replace(day=1)


def period_key(ts: datetime, kind: PeriodKind, tz: TimezoneLike = None) -> str:
    """
    Label of the period containing ``ts``.

    Weeks follow ISO-8601: week 1 is the week holding the year's first
    Thursday, so late-December days can belong to next year's W01.
    """
    day = _local_date(ts, tz)
    if kind == PeriodKind.DAY:
        return day.isoformat()
    if kind == PeriodKind.WEEK:
        iso_year, iso_week, _ = day.isocalendar()
        return f"{iso_year}-W{iso_week:02d}"
    return f"{MONTH_NAMES[day.month - 1]} {day.year}"


def sort_entries(entries: Iterable[NormalizedEntry]) -> List[NormalizedEntry]:
    """Chronological order; identical timestamps keep submission order."""
    return sorted(entries, key=lambda e: (e.timestamp, e.index))


def group_by_period(
    entries: Iterable[NormalizedEntry],
    kind: PeriodKind,
    tz: TimezoneLike = None,
) -> Dict[str, List[NormalizedEntry]]:
    """
    Group entries by period key.

    The returned dict is ordered oldest period first, and each list is in
    ascending timestamp order. Only periods with entries appear.
    """
    groups: Dict[str, List[NormalizedEntry]] = {}
    # Local dates are monotonic in the timestamp, so first-seen order is chronological
    for entry in sort_entries(entries):
        groups.setdefault(period_key(entry.timestamp, kind, tz), []).append(entry)
    return groups


def build_buckets(
    entries: Iterable[NormalizedEntry],
    kind: PeriodKind,
    tz: TimezoneLike = None,
) -> List[Bucket]:
    """Chronological list of non-empty buckets, without averages."""
    buckets = []
    for key, members in group_by_period(entries, kind, tz).items():
        buckets.append(
            Bucket(
                kind=kind,
                key=key,
                start=period_start(members[0].timestamp, kind, tz),
                entries=members,
            )
        )
    return buckets
