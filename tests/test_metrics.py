"""
Unit tests for the growth metrics engine (analytics/metrics.py).

Tests cover:
- Zero results for empty and single-snapshot histories
- Period projections and half-up rounding
- Diff series length and clamping
- Window validation, baseline selection and the collapse fallback
- Date parsing and sorting
"""

from datetime import date, datetime, timezone

import pytest

from analytics.metrics import (
    ALL_TIME,
    MetricDelta,
    compute_daily_rates,
    compute_deltas,
    compute_diff_series,
    compute_growth_stats,
    compute_total_days,
    compute_windowed_growth,
    normalize_window,
    parse_snapshot_date,
    read_count,
    select_window_baseline,
    sort_snapshots,
)


# =============================================================================
# Short Histories
# =============================================================================

class TestShortHistories:
    """Zero or one snapshot never raises and yields zeros."""

    @pytest.mark.parametrize("count", [0, 1])
    def test_growth_stats_are_zero(self, make_snapshot, count):
        snapshots = [make_snapshot(0, subscribers=500, views=1000, videos=3)][:count]
        stats = compute_growth_stats(snapshots)

        for period in (stats.daily, stats.weekly, stats.monthly, stats.yearly):
            assert period.subs == 0
            assert period.views == 0
            assert period.videos == 0

    @pytest.mark.parametrize("count", [0, 1])
    def test_diff_series_is_empty(self, make_snapshot, count):
        snapshots = [make_snapshot(0, subscribers=500)][:count]
        assert list(compute_diff_series(snapshots)) == []

    @pytest.mark.parametrize("window", [7, 14, 28, ALL_TIME])
    def test_windowed_growth_is_zero(self, make_snapshot, now, window):
        snapshots = [make_snapshot(3, subscribers=500, views=1000, videos=3)]
        assert compute_windowed_growth(snapshots, window, now=now) == MetricDelta()

    def test_total_days_floors_at_one(self, make_snapshot):
        assert compute_total_days([]) == 1.0
        assert compute_total_days([make_snapshot(0)]) == 1.0
        assert compute_total_days([make_snapshot(0), make_snapshot(0)]) == 1.0


# =============================================================================
# Growth Stats
# =============================================================================

class TestGrowthStats:

    def test_ten_day_projection(self, make_snapshot):
        """1000 -> 2000 subscribers over 10 days is 100 per day."""
        snapshots = [
            make_snapshot(10, subscribers=1000),
            make_snapshot(0, subscribers=2000),
        ]
        stats = compute_growth_stats(snapshots)

        assert stats.daily.subs == 100
        assert stats.weekly.subs == 700
        assert stats.monthly.subs == 3000
        assert stats.yearly.subs == 36500

    def test_videos_keep_fractional_rate(self, make_snapshot):
        snapshots = [
            make_snapshot(10, videos=10),
            make_snapshot(0, videos=13),
        ]
        stats = compute_growth_stats(snapshots)

        assert stats.daily.videos == pytest.approx(0.3)
        assert stats.weekly.videos == pytest.approx(2.1)

    def test_rounds_half_up(self, make_snapshot):
        """5 subscribers over 2 days is 2.5/day, shown as 3 (not banker's 2)."""
        snapshots = [
            make_snapshot(2, subscribers=100),
            make_snapshot(0, subscribers=105),
        ]
        assert compute_growth_stats(snapshots).daily.subs == 3

    def test_negative_growth_passes_through(self, make_snapshot):
        snapshots = [
            make_snapshot(10, subscribers=2000, views=5000),
            make_snapshot(0, subscribers=1900, views=5000),
        ]
        stats = compute_growth_stats(snapshots)

        assert stats.daily.subs == -10
        assert compute_deltas(snapshots).subscribers == -100

    def test_same_day_snapshots_use_one_day(self, make_snapshot):
        snapshots = [
            make_snapshot(0, subscribers=100),
            make_snapshot(0, subscribers=130),
        ]
        assert compute_daily_rates(snapshots)[0] == 30

    def test_fractional_days_from_timestamps(self):
        snapshots = [
            {"date": "2025-03-01T00:00:00Z", "subscribers": 0},
            {"date": "2025-03-03T12:00:00Z", "subscribers": 250},
        ]
        assert compute_total_days(snapshots) == pytest.approx(2.5)
        assert compute_daily_rates(snapshots)[0] == pytest.approx(100)

    def test_missing_counters_read_as_zero(self, make_snapshot):
        snapshots = [
            {"date": "2025-02-19", "subscribers": None, "views": 10},
            make_snapshot(0, subscribers=100, views=10),
        ]
        assert compute_deltas(snapshots).subscribers == 100

    def test_as_dict(self, growing_history):
        data = compute_growth_stats(growing_history).as_dict()
        assert set(data) == {"daily", "weekly", "monthly", "yearly"}
        assert set(data["daily"]) == {"subs", "views", "videos"}


# =============================================================================
# Diff Series
# =============================================================================

class TestDiffSeries:

    def test_length_is_one_less_than_snapshots(self, growing_history):
        assert len(list(compute_diff_series(growing_history))) == len(growing_history) - 1

    def test_gains_between_consecutive_snapshots(self, growing_history):
        points = list(compute_diff_series(growing_history))

        assert [p.subs_gain for p in points] == [200, 300, 400]
        assert [p.views_gain for p in points] == [6000, 7000, 8000]
        assert [p.videos_gain for p in points] == [2, 3, 2]
        assert points[0].date == growing_history[1]["date"]

    def test_regression_clamped_to_zero(self, make_snapshot):
        snapshots = [
            make_snapshot(1, subscribers=2000, views=100, videos=5),
            make_snapshot(0, subscribers=1900, views=90, videos=4),
        ]
        point = next(compute_diff_series(snapshots))

        assert point.subs_gain == 0
        assert point.views_gain == 0
        assert point.videos_gain == 0

    def test_is_restartable(self, growing_history):
        first = list(compute_diff_series(growing_history))
        second = list(compute_diff_series(growing_history))
        assert first == second


# =============================================================================
# Window Selection
# =============================================================================

class TestNormalizeWindow:

    @pytest.mark.parametrize("value, expected", [
        (7, 7),
        (14, 14),
        (28, 28),
        ("7", 7),
        ("28d", 28),
        ("all", ALL_TIME),
        (" ALL ", ALL_TIME),
    ])
    def test_accepts_supported_windows(self, value, expected):
        assert normalize_window(value) == expected

    @pytest.mark.parametrize("value", [0, 30, "month", "-7", ""])
    def test_rejects_other_values(self, value):
        with pytest.raises(ValueError):
            normalize_window(value)


class TestWindowedGrowth:

    def test_all_time_equals_last_minus_first(self, growing_history, now):
        for window in (ALL_TIME, "all"):
            delta = compute_windowed_growth(growing_history, window, now=now)
            assert delta == compute_deltas(growing_history)

    def test_nearest_snapshot_to_target_is_baseline(self, growing_history, now):
        """Target is 7 days ago; the 10-days-ago snapshot is nearest."""
        baseline = select_window_baseline(growing_history, 7, now=now)
        assert baseline is growing_history[2]

        delta = compute_windowed_growth(growing_history, 7, now=now)
        assert delta == MetricDelta(subscribers=400, views=8000, videos=2)

    def test_equal_distance_keeps_first(self, make_snapshot, now):
        """Snapshots 4 and 10 days ago are both 3 days from the 7-day target."""
        snapshots = [
            make_snapshot(10, subscribers=100),
            make_snapshot(4, subscribers=200),
            make_snapshot(0, subscribers=300),
        ]
        assert select_window_baseline(snapshots, 7, now=now) is snapshots[0]

    def test_today_and_yesterday_never_self_compare(self, make_snapshot, now):
        snapshots = [
            make_snapshot(1, subscribers=1000, views=5000, videos=10),
            make_snapshot(0, subscribers=1010, views=5100, videos=11),
        ]
        delta = compute_windowed_growth(snapshots, 7, now=now)

        assert delta == MetricDelta(subscribers=10, views=100, videos=1)

    def test_collapse_onto_latest_falls_back_to_previous(self, make_snapshot, now):
        """Latest (7 days from target) beats 30 days ago (23 days away)."""
        snapshots = [
            make_snapshot(30, subscribers=1000),
            make_snapshot(0, subscribers=1500),
        ]
        baseline = select_window_baseline(snapshots, 7, now=now)

        assert baseline is snapshots[0]
        assert compute_windowed_growth(snapshots, 7, now=now).subscribers == 500

    def test_collapse_with_duplicate_latest_date(self, make_snapshot, now):
        snapshots = [
            make_snapshot(60, subscribers=100),
            make_snapshot(0, subscribers=150),
            make_snapshot(0, subscribers=160),
        ]
        assert select_window_baseline(snapshots, 7, now=now) is snapshots[1]

    def test_windowed_growth_can_be_negative(self, make_snapshot, now):
        snapshots = [
            make_snapshot(7, subscribers=1000),
            make_snapshot(0, subscribers=990),
        ]
        assert compute_windowed_growth(snapshots, 7, now=now).subscribers == -10

    def test_empty_baseline_is_none(self, now):
        assert select_window_baseline([], 7, now=now) is None


# =============================================================================
# Dates
# =============================================================================

class TestDates:

    def test_date_only_is_midnight_utc(self):
        parsed = parse_snapshot_date("2025-03-01")
        assert parsed == datetime(2025, 3, 1, tzinfo=timezone.utc)

    def test_accepts_date_objects_and_z_suffix(self):
        assert parse_snapshot_date(date(2025, 3, 1)) == parse_snapshot_date("2025-03-01T00:00:00Z")

    def test_naive_datetime_treated_as_utc(self):
        parsed = parse_snapshot_date(datetime(2025, 3, 1, 12))
        assert parsed.tzinfo == timezone.utc
        assert parsed.hour == 12

    def test_sort_snapshots_is_ascending_and_stable(self, make_snapshot):
        a = make_snapshot(5, subscribers=1)
        b = make_snapshot(5, subscribers=2)
        c = make_snapshot(9, subscribers=3)

        assert sort_snapshots([a, b, c]) == [c, a, b]


class TestReadCount:

    def test_dict_and_attribute_snapshots(self):
        class Row:
            subscribers = 42
            views = None

        assert read_count({"subscribers": 42}, "subscribers") == 42
        assert read_count(Row(), "subscribers") == 42
        assert read_count(Row(), "views") == 0
        assert read_count({}, "videos") == 0
