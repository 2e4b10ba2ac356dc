"""
Progress report pipeline.

history -> normalize -> group -> aggregate -> window -> classify

Produces the chart-ready daily, weekly and monthly series of a progress
report. Prose (summary, recommendations, monthly trend text) is not
generated here; it is passed in as a ``Narrative`` from whatever
collaborator produced it and threaded through to the output unchanged.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Literal, Mapping, Optional, Sequence, Tuple, Union

from .aggregator import aggregate_buckets, daily_means
from .errors import EmptyHistory, ProgressReportError
from .grouper import Bucket, PeriodKind, TimezoneLike
from .indicators import INDICATOR_NAMES
from .normalizer import NormalizedEntry, SurveyEntry, normalize
from .trend import TrendPolicy, TrendStatus, classify_month
from .window import DEFAULT_WINDOWS, select_recent_window

logger = logging.getLogger(__name__)

InvalidEntryPolicy = Literal["fail", "skip"]
HistoryItem = Union[SurveyEntry, Mapping[str, Any]]

MAX_RECOMMENDATIONS = 5


@dataclass
class Recommendation:
    """One insight or suggested action."""

    type: Literal["Insight", "Action"]
    text: str

    def to_dict(self) -> dict:
        return {"type": self.type, "text": self.text}


@dataclass
class Narrative:
    """Prose supplied by an external narrative generator."""

    summary: str = ""
    recommendations: List[Recommendation] = field(default_factory=list)
    trends: Dict[str, str] = field(default_factory=dict)  # month key -> trend text


@dataclass(frozen=True)
class ReportOptions:
    """Knobs for one report run."""

    tz: TimezoneLike = None
    daily_window: int = DEFAULT_WINDOWS[PeriodKind.DAY]
    weekly_window: int = DEFAULT_WINDOWS[PeriodKind.WEEK]
    monthly_window: int = DEFAULT_WINDOWS[PeriodKind.MONTH]
    trend_policy: TrendPolicy = field(default_factory=TrendPolicy)
    invalid_entry_policy: InvalidEntryPolicy = "fail"


def _rounded(averages: Mapping[str, float], suffix: str = "") -> Dict[str, float]:
    # Chart rows list indicators in a fixed order; missing ones are omitted
    return {
        f"{name}{suffix}": round(averages[name], 2)
        for name in INDICATOR_NAMES
        if name in averages
    }


@dataclass
class ReportAggregates:
    """Windowed buckets plus month labels: everything numeric in a report."""

    daily: List[Bucket]
    weekly: List[Bucket]
    monthly: List[Bucket]
    statuses: Dict[str, TrendStatus] = field(default_factory=dict)
    entry_count: int = 0
    skipped: List[ProgressReportError] = field(default_factory=list)

    def daily_chart_data(self) -> List[dict]:
        return [{"date": b.key, **_rounded(b.averages)} for b in self.daily]

    def weekly_averages(self) -> List[dict]:
        return [{"week": b.key, **_rounded(b.averages, "Avg")} for b in self.weekly]

    def monthly_insights(self, trends: Optional[Mapping[str, str]] = None) -> List[dict]:
        rows = []
        for bucket in self.monthly:
            row = {"month": bucket.key}
            if trends and trends.get(bucket.key):
                row["trend"] = trends[bucket.key]
            row["status"] = self.statuses[bucket.key].value
            row.update(_rounded(bucket.averages, "Avg"))
            rows.append(row)
        return rows

    def to_dict(self) -> dict:
        """Numeric context handed to narrative generators."""
        return {
            "entryCount": self.entry_count,
            "dailyChartData": self.daily_chart_data(),
            "weeklyAverages": self.weekly_averages(),
            "monthlyInsights": self.monthly_insights(),
        }


@dataclass
class ProgressReport:
    """A complete progress report ready for serialization."""

    user_id: str
    report_id: str
    timestamp: datetime
    aggregates: ReportAggregates
    narrative: Narrative = field(default_factory=Narrative)

    def to_dict(self) -> dict:
        """Convert to the camelCase JSON shape consumed by the progress page."""
        return {
            "userId": self.user_id,
            "reportId": self.report_id,
            "timestamp": self.timestamp.isoformat(),
            "summary": self.narrative.summary,
            "dailyChartData": self.aggregates.daily_chart_data(),
            "weeklyAverages": self.aggregates.weekly_averages(),
            "monthlyInsights": self.aggregates.monthly_insights(self.narrative.trends),
            "recommendations": [
                r.to_dict() for r in self.narrative.recommendations[:MAX_RECOMMENDATIONS]
            ],
        }


def normalize_history(
    history: Sequence[HistoryItem],
    policy: InvalidEntryPolicy = "fail",
) -> Tuple[List[NormalizedEntry], List[ProgressReportError]]:
    """
    Parse and normalize every history item.

    Returns:
        (normalized entries, list of errors for skipped items)

    Raises:
        EmptyHistory: when there is nothing usable to report on
        ProgressReportError: the first invalid item, under the "fail" policy
    """
    if not history:
        raise EmptyHistory()

    normalized: List[NormalizedEntry] = []
    skipped: List[ProgressReportError] = []
    for index, item in enumerate(history):
        try:
            entry = item if isinstance(item, SurveyEntry) else SurveyEntry.from_dict(item, index)
            normalized.append(normalize(entry))
        except ProgressReportError as e:
            if policy == "fail":
                raise
            logger.warning(f"[REPORT] Skipping entry {index}: {e.kind}: {e.message}")
            skipped.append(e)

    if not normalized:
        raise EmptyHistory("Not enough data: no valid entries remain in history.")
    return normalized, skipped


def _month_statuses(
    months: Iterable[Bucket],
    tz: TimezoneLike,
    policy: TrendPolicy,
) -> Dict[str, TrendStatus]:
    statuses = {}
    for bucket in months:
        series: Dict[str, List[float]] = {}
        for _, means in daily_means(bucket.entries, tz):
            for name, value in means.items():
                series.setdefault(name, []).append(value)
        statuses[bucket.key] = classify_month(series, policy)
    return statuses


def compute_aggregates(
    history: Sequence[HistoryItem],
    options: Optional[ReportOptions] = None,
) -> ReportAggregates:
    """Run the numeric pipeline over a history."""
    options = options or ReportOptions()
    entries, skipped = normalize_history(history, options.invalid_entry_policy)

    daily = select_recent_window(
        aggregate_buckets(entries, PeriodKind.DAY, options.tz), options.daily_window
    )
    weekly = select_recent_window(
        aggregate_buckets(entries, PeriodKind.WEEK, options.tz), options.weekly_window
    )
    monthly = select_recent_window(
        aggregate_buckets(entries, PeriodKind.MONTH, options.tz), options.monthly_window
    )

    aggregates = ReportAggregates(
        daily=daily,
        weekly=weekly,
        monthly=monthly,
        statuses=_month_statuses(monthly, options.tz, options.trend_policy),
        entry_count=len(entries),
        skipped=skipped,
    )

    logger.info(
        f"[REPORT] Aggregated {len(entries)} entries "
        f"({len(skipped)} skipped): days={len(daily)}, weeks={len(weekly)}, months={len(monthly)}"
    )
    return aggregates


def build_report(
    user_id: str,
    aggregates: ReportAggregates,
    report_id: str = "",
    generated_at: Optional[datetime] = None,
    narrative: Optional[Narrative] = None,
) -> ProgressReport:
    """Attach identity, timestamp and prose to computed aggregates."""
    return ProgressReport(
        user_id=user_id,
        report_id=report_id,
        timestamp=generated_at or datetime.now(timezone.utc),
        aggregates=aggregates,
        narrative=narrative or Narrative(),
    )


def generate_progress_report(
    user_id: str,
    history: Sequence[HistoryItem],
    *,
    report_id: str = "",
    generated_at: Optional[datetime] = None,
    narrative: Optional[Narrative] = None,
    options: Optional[ReportOptions] = None,
) -> ProgressReport:
    """
    Build a progress report for one user's check-in history.

    Args:
        user_id: owner of the history, echoed into the report
        history: check-ins as ``SurveyEntry`` objects or request dicts
        report_id: identifier chosen by the caller
        generated_at: report time; defaults to now (UTC)
        narrative: prose to include; empty when omitted
        options: windows, timezone, trend policy and invalid-entry policy

    Raises:
        ProgressReportError: see ``normalize_history``
    """
    aggregates = compute_aggregates(history, options)
    return build_report(user_id, aggregates, report_id, generated_at, narrative)
