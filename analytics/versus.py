"""
Versus (head-to-head) battle logic.

Compares two channels on current totals and windowed growth, picks a
winner by equal-weight majority, and projects when the trailing channel
would catch up on subscribers at current all-time daily rates.
"""

import logging
import math
from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Any, Mapping, Optional, Sequence, Union

from analytics.metrics import (
    Window,
    compute_daily_rates,
    compute_windowed_growth,
    read_count,
)

logger = logging.getLogger(__name__)

WINNER_A = "A"
WINNER_B = "B"
TIE = "tie"

SCORED_METRICS = (
    "subscribers",
    "views",
    "videos",
    "subscribers_growth",
    "views_growth",
    "videos_growth",
)


@dataclass(frozen=True)
class BattleStats:
    """Current totals and all-time daily rates for one side of a battle."""

    subscribers: int
    views: int
    videos: int
    daily_subs: float
    daily_views: float
    has_history: bool


@dataclass(frozen=True)
class BattleMetrics:
    """The six equal-weight metrics compared in a head-to-head."""

    subscribers: float
    views: float
    videos: float
    subscribers_growth: float
    views_growth: float
    videos_growth: float


@dataclass(frozen=True)
class CatchUpProjection:
    """
    Result of a linear catch-up projection.

    ``days_to_overtake`` is None when the gap never closes at current rates.
    That is a final answer, to be shown as "insufficient growth".
    """

    is_ahead: bool
    days_to_overtake: Optional[int]


@dataclass(frozen=True)
class VersusReport:
    my_stats: BattleStats
    opponent_stats: BattleStats
    my_metrics: BattleMetrics
    opponent_metrics: BattleMetrics
    winner: str
    projection: CatchUpProjection

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


def compute_battle_stats(snapshots: Sequence[Any]) -> Optional[BattleStats]:
    """
    Summarize a channel for the Versus panel.

    Returns:
        BattleStats, or None when the channel has no snapshots.
        Channels with a single snapshot report zero daily rates and
        ``has_history=False``.
    """
    if not snapshots:
        return None

    latest = snapshots[-1]
    has_history = len(snapshots) > 1
    daily_subs, daily_views, _ = compute_daily_rates(snapshots)

    return BattleStats(
        subscribers=read_count(latest, "subscribers"),
        views=read_count(latest, "views"),
        videos=read_count(latest, "videos"),
        daily_subs=daily_subs if has_history else 0.0,
        daily_views=daily_views if has_history else 0.0,
        has_history=has_history,
    )


def project_catch_up(
    my_subs: float,
    my_rate: float,
    opponent_subs: float,
    opponent_rate: float,
) -> CatchUpProjection:
    """
    Whole days until my subscriber count reaches the opponent's.

    Simple linear extrapolation at constant daily rates:
        gap <= 0        -> already ahead or tied, 0 days
        net_rate > 0    -> ceil(gap / net_rate) days
        net_rate <= 0   -> never (None)

    Examples:
        project_catch_up(1000, 10, 2000, 5)  -> days_to_overtake=200
        project_catch_up(2000, 5, 1000, 10)  -> is_ahead=True, 0 days
        project_catch_up(1000, 5, 2000, 10)  -> days_to_overtake=None
    """
    gap = opponent_subs - my_subs
    net_rate = my_rate - opponent_rate

    if gap <= 0:
        return CatchUpProjection(is_ahead=True, days_to_overtake=0)

    if net_rate > 0:
        return CatchUpProjection(
            is_ahead=False,
            days_to_overtake=math.ceil(gap / net_rate),
        )

    return CatchUpProjection(is_ahead=False, days_to_overtake=None)


def _metric(metrics: Union[BattleMetrics, Mapping[str, float]], name: str) -> float:
    if isinstance(metrics, Mapping):
        return metrics.get(name) or 0
    return getattr(metrics, name)


def score_head_to_head(
    metrics_a: Union[BattleMetrics, Mapping[str, float]],
    metrics_b: Union[BattleMetrics, Mapping[str, float]],
) -> tuple[int, int]:
    """Points per side: one for each metric strictly greater than the other's."""
    points_a = 0
    points_b = 0
    for name in SCORED_METRICS:
        value_a = _metric(metrics_a, name)
        value_b = _metric(metrics_b, name)
        if value_a > value_b:
            points_a += 1
        elif value_b > value_a:
            points_b += 1
    return points_a, points_b


def determine_winner(
    metrics_a: Union[BattleMetrics, Mapping[str, float]],
    metrics_b: Union[BattleMetrics, Mapping[str, float]],
) -> str:
    """
    Plurality vote over the six metrics. Returns "A", "B" or "tie".
    """
    points_a, points_b = score_head_to_head(metrics_a, metrics_b)
    if points_a > points_b:
        return WINNER_A
    if points_b > points_a:
        return WINNER_B
    return TIE


def _battle_metrics(stats: BattleStats, snapshots: Sequence[Any], window: Window, now: Optional[datetime]) -> BattleMetrics:
    growth = compute_windowed_growth(snapshots, window, now=now)
    return BattleMetrics(
        subscribers=stats.subscribers,
        views=stats.views,
        videos=stats.videos,
        subscribers_growth=growth.subscribers,
        views_growth=growth.views,
        videos_growth=growth.videos,
    )


def build_versus_report(
    my_snapshots: Sequence[Any],
    opponent_snapshots: Sequence[Any],
    window: Window = 28,
    now: Optional[datetime] = None,
) -> Optional[VersusReport]:
    """
    Full head-to-head between "my" channel (side A) and an opponent (side B).

    Both sequences must be sorted by date ascending.

    Returns:
        VersusReport, or None if either channel has no snapshots.
    """
    my_stats = compute_battle_stats(my_snapshots)
    opponent_stats = compute_battle_stats(opponent_snapshots)
    if my_stats is None or opponent_stats is None:
        logger.info("[Versus] Missing snapshots on one side, no report built")
        return None

    my_metrics = _battle_metrics(my_stats, my_snapshots, window, now)
    opponent_metrics = _battle_metrics(opponent_stats, opponent_snapshots, window, now)

    winner = determine_winner(my_metrics, opponent_metrics)
    projection = project_catch_up(
        my_stats.subscribers,
        my_stats.daily_subs,
        opponent_stats.subscribers,
        opponent_stats.daily_subs,
    )

    logger.debug(
        f"[Versus] winner={winner} is_ahead={projection.is_ahead} "
        f"days_to_overtake={projection.days_to_overtake}"
    )

    return VersusReport(
        my_stats=my_stats,
        opponent_stats=opponent_stats,
        my_metrics=my_metrics,
        opponent_metrics=opponent_metrics,
        winner=winner,
        projection=projection,
    )
