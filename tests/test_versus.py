"""
Unit tests for head-to-head battles (analytics/versus.py).

Tests cover:
- Catch-up projection (ahead, reachable, never)
- Winner determination by equal-weight vote
- Battle stats for short histories
- Full report assembly
"""

from types import SimpleNamespace

import pytest

from analytics.versus import (
    TIE,
    WINNER_A,
    WINNER_B,
    BattleMetrics,
    build_versus_report,
    compute_battle_stats,
    determine_winner,
    project_catch_up,
    score_head_to_head,
)


# =============================================================================
# Catch-up Projection
# =============================================================================

class TestProjectCatchUp:

    def test_reachable_gap(self):
        projection = project_catch_up(1000, 10, 2000, 5)
        assert projection.is_ahead is False
        assert projection.days_to_overtake == 200

    def test_already_ahead(self):
        projection = project_catch_up(2000, 5, 1000, 10)
        assert projection.is_ahead is True
        assert projection.days_to_overtake == 0

    def test_tied_counts_as_ahead(self):
        projection = project_catch_up(1500, 0, 1500, 50)
        assert projection.is_ahead is True
        assert projection.days_to_overtake == 0

    def test_never_catches_up(self):
        projection = project_catch_up(1000, 5, 2000, 10)
        assert projection.is_ahead is False
        assert projection.days_to_overtake is None

    def test_equal_rates_never_catch_up(self):
        assert project_catch_up(1000, 7, 2000, 7).days_to_overtake is None

    def test_rounds_days_up(self):
        """gap 100 at net 3/day -> 33.3 days, reported as 34."""
        assert project_catch_up(900, 4, 1000, 1).days_to_overtake == 34


# =============================================================================
# Winner
# =============================================================================

def _metrics(**values):
    base = dict.fromkeys(
        ("subscribers", "views", "videos",
         "subscribers_growth", "views_growth", "videos_growth"),
        0,
    )
    base.update(values)
    return BattleMetrics(**base)


class TestDetermineWinner:

    def test_four_to_two_wins(self):
        a = _metrics(subscribers=10, views=10, videos=10, subscribers_growth=10)
        b = _metrics(views_growth=10, videos_growth=10)

        assert score_head_to_head(a, b) == (4, 2)
        assert determine_winner(a, b) == WINNER_A
        assert determine_winner(b, a) == WINNER_B

    def test_three_three_split_is_tie(self):
        a = _metrics(subscribers=10, views=10, videos=10)
        b = _metrics(subscribers_growth=10, views_growth=10, videos_growth=10)

        assert determine_winner(a, b) == TIE

    def test_equal_metrics_award_no_points(self):
        a = _metrics(subscribers=5, views=5)
        assert score_head_to_head(a, a) == (0, 0)
        assert determine_winner(a, a) == TIE

    def test_accepts_mappings(self):
        a = {"subscribers": 3, "views": 3}
        b = {"subscribers": 1, "views": 5, "videos": 1}

        # a wins subscribers, b wins views and videos
        assert determine_winner(a, b) == WINNER_B


# =============================================================================
# Battle Stats & Report
# =============================================================================

class TestBattleStats:

    def test_no_snapshots(self):
        assert compute_battle_stats([]) is None

    def test_single_snapshot_has_no_rates(self, make_snapshot):
        stats = compute_battle_stats([make_snapshot(0, subscribers=500, views=900, videos=4)])

        assert stats.subscribers == 500
        assert stats.daily_subs == 0
        assert stats.has_history is False

    def test_rates_from_history(self, growing_history):
        stats = compute_battle_stats(growing_history)

        assert stats.subscribers == 1900
        assert stats.daily_subs == pytest.approx(30)
        assert stats.daily_views == pytest.approx(700)
        assert stats.has_history is True

    def test_missing_counters_read_as_zero(self):
        snapshots = [
            SimpleNamespace(date="2025-03-01", subscribers=None, views=100, videos=None),
            SimpleNamespace(date="2025-03-11", subscribers=None, views=600, videos=2),
        ]

        stats = compute_battle_stats(snapshots)

        assert stats.subscribers == 0
        assert stats.videos == 2
        assert stats.daily_subs == 0
        assert stats.daily_views == pytest.approx(50)


class TestVersusReport:

    def test_missing_side_returns_none(self, growing_history):
        assert build_versus_report(growing_history, []) is None
        assert build_versus_report([], growing_history) is None

    def test_bigger_faster_channel_wins(self, growing_history, make_snapshot, now):
        opponent = [
            make_snapshot(30, subscribers=500, views=20000, videos=10),
            make_snapshot(0, subscribers=600, views=21000, videos=11),
        ]
        report = build_versus_report(growing_history, opponent, window=28, now=now)

        assert report.winner == WINNER_A
        assert report.projection.is_ahead is True
        assert report.my_metrics.subscribers == 1900
        assert report.opponent_metrics.subscribers_growth == 100

    def test_projection_uses_all_time_rates(self, growing_history, make_snapshot, now):
        leader = [
            make_snapshot(30, subscribers=2500),
            make_snapshot(0, subscribers=2800),
        ]
        report = build_versus_report(growing_history, leader, window=7, now=now)

        # gap 900, net rate 30 - 10 = 20/day
        assert report.projection.is_ahead is False
        assert report.projection.days_to_overtake == 45

    def test_as_dict_is_serializable(self, growing_history, now):
        data = build_versus_report(growing_history, growing_history, now=now).as_dict()

        assert data["winner"] == TIE
        assert data["projection"] == {"is_ahead": True, "days_to_overtake": 0}
        assert set(data["my_metrics"]) == {
            "subscribers", "views", "videos",
            "subscribers_growth", "views_growth", "videos_growth",
        }
