"""
Analytics module for the competitor tracker.

Provides growth projections, windowed growth, head-to-head scoring and
channel list ordering. Everything here is pure computation over snapshot
sequences; persistence lives in services/.
"""

from .metrics import (
    compute_daily_rates,
    compute_deltas,
    compute_diff_series,
    compute_growth_stats,
    compute_total_days,
    compute_windowed_growth,
    select_window_baseline,
    sort_snapshots,
)
from .ranking import move_channel, sort_channels
from .versus import build_versus_report, determine_winner, project_catch_up

__all__ = [
    "compute_daily_rates",
    "compute_deltas",
    "compute_diff_series",
    "compute_growth_stats",
    "compute_total_days",
    "compute_windowed_growth",
    "select_window_baseline",
    "sort_snapshots",
    "move_channel",
    "sort_channels",
    "build_versus_report",
    "determine_winner",
    "project_catch_up",
]
