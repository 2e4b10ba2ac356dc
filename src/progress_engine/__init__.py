"""
Progress Engine.

Deterministic aggregation of wellness check-ins into daily, weekly and
monthly progress-report data.
"""

from .errors import (
    ProgressReportError,
    EmptyHistory,
    InvalidTimestamp,
    OutOfRangeValue,
    UnknownEnumValue,
    MissingIndicator,
    MalformedEntry,
)
from .normalizer import SurveyEntry, NormalizedEntry, normalize, parse_timestamp
from .grouper import PeriodKind, Bucket, period_key, group_by_period, build_buckets
from .aggregator import aggregate, rollup
from .window import select_recent_window
from .trend import TrendStatus, TrendPolicy, classify, classify_month
from .report import (
    Narrative,
    Recommendation,
    ReportOptions,
    ReportAggregates,
    ProgressReport,
    compute_aggregates,
    build_report,
    generate_progress_report,
)

__all__ = [
    "ProgressReportError",
    "EmptyHistory",
    "InvalidTimestamp",
    "OutOfRangeValue",
    "UnknownEnumValue",
    "MissingIndicator",
    "MalformedEntry",
    "SurveyEntry",
    "NormalizedEntry",
    "normalize",
    "parse_timestamp",
    "PeriodKind",
    "Bucket",
    "period_key",
    "group_by_period",
    "build_buckets",
    "aggregate",
    "rollup",
    "select_recent_window",
    "TrendStatus",
    "TrendPolicy",
    "classify",
    "classify_month",
    "Narrative",
    "Recommendation",
    "ReportOptions",
    "ReportAggregates",
    "ProgressReport",
    "compute_aggregates",
    "build_report",
    "generate_progress_report",
]
