"""
Unit tests for the temporal grouper.

Usage:
    pytest tests/test_grouper.py -v
"""
from datetime import date, datetime, timedelta, timezone

import pytest

from progress_engine import NormalizedEntry, PeriodKind, build_buckets, group_by_period, period_key

UTC = timezone.utc
TOKYO = timezone(timedelta(hours=9))
NEW_YORK_SUMMER = timezone(timedelta(hours=-4))


def _normalized(ts: datetime, index: int = 0, sadness: float = 5.0) -> NormalizedEntry:
    return NormalizedEntry(timestamp=ts, scores={"sadness": sadness}, index=index)


class TestPeriodKey:
    """Key formatting per granularity."""

    def test_day_key(self):
        assert period_key(datetime(2025, 6, 1, 10, tzinfo=UTC), PeriodKind.DAY) == "2025-06-01"

    def test_week_key_is_zero_padded(self):
        assert period_key(datetime(2025, 1, 8, tzinfo=UTC), PeriodKind.WEEK) == "2025-W02"

    def test_week_key_for_sunday_belongs_to_previous_monday(self):
        assert period_key(datetime(2025, 6, 1, tzinfo=UTC), PeriodKind.WEEK) == "2025-W22"
        assert period_key(datetime(2025, 6, 2, tzinfo=UTC), PeriodKind.WEEK) == "2025-W23"

    def test_late_december_can_be_next_years_first_week(self):
        assert period_key(datetime(2024, 12, 30, tzinfo=UTC), PeriodKind.WEEK) == "2025-W01"

    def test_early_january_can_be_previous_years_last_week(self):
        assert period_key(datetime(2021, 1, 3, tzinfo=UTC), PeriodKind.WEEK) == "2020-W53"

    def test_month_key_uses_full_english_name(self):
        assert period_key(datetime(2025, 6, 15, tzinfo=UTC), PeriodKind.MONTH) == "June 2025"
        assert period_key(datetime(2025, 12, 31, tzinfo=UTC), PeriodKind.MONTH) == "December 2025"

    def test_timezone_moves_day_boundary(self):
        ts = datetime(2025, 6, 1, 23, 30, tzinfo=UTC)

        assert period_key(ts, PeriodKind.DAY) == "2025-06-01"
        assert period_key(ts, PeriodKind.DAY, TOKYO) == "2025-06-02"
        assert period_key(ts, PeriodKind.DAY, NEW_YORK_SUMMER) == "2025-06-01"

    def test_timezone_moves_month_boundary(self):
        ts = datetime(2025, 6, 30, 20, 0, tzinfo=UTC)

        assert period_key(ts, PeriodKind.MONTH, TOKYO) == "July 2025"

    def test_utc_name_is_accepted(self):
        ts = datetime(2025, 6, 1, 23, 30, tzinfo=TOKYO)

        assert period_key(ts, PeriodKind.DAY, "UTC") == "2025-06-01"


class TestGroupByPeriod:
    """Bucketing behaviour."""

    def test_groups_are_chronological_regardless_of_input_order(self):
        entries = [
            _normalized(datetime(2025, 6, 3, 9, tzinfo=UTC), 0),
            _normalized(datetime(2025, 6, 1, 9, tzinfo=UTC), 1),
            _normalized(datetime(2025, 6, 2, 9, tzinfo=UTC), 2),
        ]

        groups = group_by_period(entries, PeriodKind.DAY)

        assert list(groups) == ["2025-06-01", "2025-06-02", "2025-06-03"]

    def test_entries_within_bucket_are_sorted_by_timestamp(self):
        late = _normalized(datetime(2025, 6, 1, 20, tzinfo=UTC), 0)
        early = _normalized(datetime(2025, 6, 1, 8, tzinfo=UTC), 1)

        groups = group_by_period([late, early], PeriodKind.DAY)

        assert groups["2025-06-01"] == [early, late]

    def test_duplicate_timestamps_are_distinct_entries(self):
        ts = datetime(2025, 6, 1, 10, tzinfo=UTC)
        entries = [_normalized(ts, 0, 4.0), _normalized(ts, 1, 6.0)]

        groups = group_by_period(entries, PeriodKind.DAY)

        assert [e.scores["sadness"] for e in groups["2025-06-01"]] == [4.0, 6.0]

    def test_duplicate_timestamps_keep_submission_order(self):
        ts = datetime(2025, 6, 1, 10, tzinfo=UTC)
        second = _normalized(ts, 1, 6.0)
        first = _normalized(ts, 0, 4.0)

        groups = group_by_period([second, first], PeriodKind.DAY)

        assert groups["2025-06-01"] == [first, second]

    def test_only_periods_with_entries_appear(self):
        entries = [
            _normalized(datetime(2025, 6, 1, tzinfo=UTC)),
            _normalized(datetime(2025, 6, 5, tzinfo=UTC)),
        ]

        assert list(group_by_period(entries, PeriodKind.DAY)) == ["2025-06-01", "2025-06-05"]

    def test_weeks_across_year_boundary_are_ordered(self):
        entries = [
            _normalized(datetime(2025, 1, 6, tzinfo=UTC)),
            _normalized(datetime(2024, 12, 23, tzinfo=UTC)),
            _normalized(datetime(2024, 12, 31, tzinfo=UTC)),
        ]

        assert list(group_by_period(entries, PeriodKind.WEEK)) == ["2024-W52", "2025-W01", "2025-W02"]

    def test_months_are_ordered_chronologically_not_alphabetically(self):
        entries = [
            _normalized(datetime(2025, 4, 10, tzinfo=UTC)),
            _normalized(datetime(2025, 2, 10, tzinfo=UTC)),
            _normalized(datetime(2025, 3, 10, tzinfo=UTC)),
        ]

        assert list(group_by_period(entries, PeriodKind.MONTH)) == [
            "February 2025",
            "March 2025",
            "April 2025",
        ]

    def test_empty_input_gives_no_groups(self):
        assert group_by_period([], PeriodKind.DAY) == {}


class TestBuildBuckets:
    """Bucket objects carry ordering anchors."""

    @pytest.mark.parametrize(
        "kind,key,start",
        [
            (PeriodKind.DAY, "2025-06-04", date(2025, 6, 4)),
            (PeriodKind.WEEK, "2025-W23", date(2025, 6, 2)),
            (PeriodKind.MONTH, "June 2025", date(2025, 6, 1)),
        ],
    )
    def test_bucket_start(self, kind, key, start):
        buckets = build_buckets([_normalized(datetime(2025, 6, 4, 12, tzinfo=UTC))], kind)

        assert len(buckets) == 1
        assert buckets[0].key == key
        assert buckets[0].start == start
        assert buckets[0].kind == kind
        assert buckets[0].averages == {}
