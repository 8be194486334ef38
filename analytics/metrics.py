"""
Channel Growth Metrics Engine.

Deterministic, pure-Python computations over a channel's snapshot history.
All functions are stateless, perform no I/O and never raise for sequences
with zero or one snapshot (they return zero results instead).

Snapshots may be ORM objects (attribute access) or plain dicts with the keys
``date``, ``subscribers``, ``views`` and ``videos``. Every function expects the
sequence sorted by date ascending; use ``sort_snapshots`` first when the
source order is unknown.
"""

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Any, Iterator, Optional, Sequence, Union

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400

PERIOD_FACTORS = {
    "daily": 1,
    "weekly": 7,
    "monthly": 30,
    "yearly": 365,
}

ALL_TIME = "all"
SUPPORTED_WINDOWS = (7, 14, 28)

Window = Union[int, str]


@dataclass(frozen=True)
class PeriodStats:
    """Projected gains over one period (day/week/month/year)."""

    subs: int
    views: int
    videos: float


@dataclass(frozen=True)
class GrowthStats:
    """Period projections derived from the all-time daily rate."""

    daily: PeriodStats
    weekly: PeriodStats
    monthly: PeriodStats
    yearly: PeriodStats

    def as_dict(self) -> dict[str, dict[str, float]]:
        return {
            period: {
                "subs": stats.subs,
                "views": stats.views,
                "videos": stats.videos,
            }
            for period, stats in (
                ("daily", self.daily),
                ("weekly", self.weekly),
                ("monthly", self.monthly),
                ("yearly", self.yearly),
            )
        }


@dataclass(frozen=True)
class MetricDelta:
    """Difference between two snapshots for each counter."""

    subscribers: int = 0
    views: int = 0
    videos: int = 0


@dataclass(frozen=True)
class DiffPoint:
    """Gain between a snapshot and its predecessor, clamped for bar charts."""

    date: Any
    subs_gain: int
    views_gain: int
    videos_gain: int


# ---------------------------------------------------------------------------
# Field access
# ---------------------------------------------------------------------------

def _field(snapshot: Any, name: str) -> Any:
    """Read a field from an ORM object or a dict."""
    if isinstance(snapshot, dict):
        return snapshot.get(name)
    return getattr(snapshot, name, None)


def read_count(snapshot: Any, name: str) -> int:
    """Counter value of a snapshot (ORM object or dict); missing reads as 0."""
    return _field(snapshot, name) or 0


def parse_snapshot_date(value: Union[str, date, datetime]) -> datetime:
    """
    Convert a snapshot date to a timezone-aware UTC datetime.

    Accepts ``date``, ``datetime`` or ISO-8601 strings (``YYYY-MM-DD`` or full
    timestamps, including a trailing ``Z``). Date-only values map to midnight
    UTC; naive datetimes are treated as UTC.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        parsed = datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def sort_snapshots(snapshots: Sequence[Any]) -> list[Any]:
    """Return a new list of snapshots ordered by date ascending (stable)."""
    return sorted(snapshots, key=lambda s: parse_snapshot_date(_field(s, "date")))


def _round_half_up(value: float) -> int:
    # Python's round() is banker's rounding; the dashboard rounds .5 upward
    return int(math.floor(value + 0.5))


# ---------------------------------------------------------------------------
# Delta & Period-Rate Calculator
# ---------------------------------------------------------------------------

def compute_total_days(snapshots: Sequence[Any]) -> float:
    """
    Days between the first and last snapshot, floored at 1.

    The floor prevents division by zero for same-day or single-snapshot
    channels. The value is fractional when timestamps are not midnight-aligned.
    """
    if len(snapshots) < 2:
        return 1.0

    first = parse_snapshot_date(_field(snapshots[0], "date"))
    last = parse_snapshot_date(_field(snapshots[-1], "date"))
    elapsed_days = (last - first).total_seconds() / SECONDS_PER_DAY
    return max(1.0, elapsed_days)


def compute_deltas(snapshots: Sequence[Any]) -> MetricDelta:
    """
    All-time deltas (last minus first). Negative values pass through.

    Returns:
        MetricDelta, all zero for sequences with one or no snapshot.
    """
    if len(snapshots) < 2:
        return MetricDelta()

    first, last = snapshots[0], snapshots[-1]
    return MetricDelta(
        subscribers=read_count(last, "subscribers") - read_count(first, "subscribers"),
        views=read_count(last, "views") - read_count(first, "views"),
        videos=read_count(last, "videos") - read_count(first, "videos"),
    )


def compute_daily_rates(snapshots: Sequence[Any]) -> tuple[float, float, float]:
    """Average daily (subscribers, views, videos) change over the whole history."""
    deltas = compute_deltas(snapshots)
    total_days = compute_total_days(snapshots)
    return (
        deltas.subscribers / total_days,
        deltas.views / total_days,
        deltas.videos / total_days,
    )


def compute_growth_stats(snapshots: Sequence[Any]) -> GrowthStats:
    """
    Project the all-time daily rate onto daily/weekly/monthly/yearly periods.

    Subscribers and views are rounded half-up to whole numbers. Videos keep
    the fractional rate because uploads accrue in whole units infrequently;
    format it with one decimal place for display.

    Example:
        Two snapshots 10 days apart, subscribers 1000 -> 2000:
        daily.subs == 100, weekly.subs == 700, monthly.subs == 3000,
        yearly.subs == 36500
    """
    daily_subs, daily_views, daily_videos = compute_daily_rates(snapshots)

    def period(factor: int) -> PeriodStats:
        return PeriodStats(
            subs=_round_half_up(daily_subs * factor),
            views=_round_half_up(daily_views * factor),
            videos=daily_videos * factor,
        )

    return GrowthStats(
        daily=period(PERIOD_FACTORS["daily"]),
        weekly=period(PERIOD_FACTORS["weekly"]),
        monthly=period(PERIOD_FACTORS["monthly"]),
        yearly=period(PERIOD_FACTORS["yearly"]),
    )


# ---------------------------------------------------------------------------
# Chronological Diff Series
# ---------------------------------------------------------------------------

def compute_diff_series(snapshots: Sequence[Any]) -> Iterator[DiffPoint]:
    """
    Yield per-interval gains for each consecutive pair of snapshots.

    The first snapshot has no predecessor and yields nothing, so the series
    has ``len(snapshots) - 1`` points. Gains are clamped to >= 0 for the gain
    bar charts: a regression shows as 0, not as a negative bar. This clamping
    is a display policy only; ``compute_deltas`` keeps negative values.

    Each call starts a fresh generator over the full sequence.
    """
    for prev, curr in zip(snapshots, snapshots[1:]):
        yield DiffPoint(
            date=_field(curr, "date"),
            subs_gain=max(0, read_count(curr, "subscribers") - read_count(prev, "subscribers")),
            views_gain=max(0, read_count(curr, "views") - read_count(prev, "views")),
            videos_gain=max(0, read_count(curr, "videos") - read_count(prev, "videos")),
        )


# ---------------------------------------------------------------------------
# Time-Windowed Snapshot Selector
# ---------------------------------------------------------------------------

def normalize_window(window: Window) -> Window:
    """
    Validate a lookback window.

    Accepts 7, 14, 28 (ints or strings such as "7" / "7d") and "all".

    Raises:
        ValueError: For any other value.
    """
    if isinstance(window, str):
        cleaned = window.strip().lower()
        if cleaned == ALL_TIME:
            return ALL_TIME
        cleaned = cleaned.rstrip("d")
        if not cleaned.isdigit():
            raise ValueError(f"Unsupported window: {window!r}")
        window = int(cleaned)

    if window not in SUPPORTED_WINDOWS:
        raise ValueError(f"Unsupported window: {window!r}")
    return window


def select_window_baseline(
    snapshots: Sequence[Any],
    window: Window,
    now: Optional[datetime] = None,
) -> Optional[Any]:
    """
    Pick the snapshot that best represents "N days ago".

    Rules:
        1. window == "all" or one snapshot -> the first snapshot.
        2. Otherwise the snapshot whose date is closest to ``now - N days``;
           on equal distance the earliest in sequence order wins.
        3. If that snapshot falls on the latest snapshot's date, use the
           second-to-last snapshot so the baseline never equals "current".

    Returns:
        The baseline snapshot, or None for an empty sequence.
    """
    if not snapshots:
        return None

    window = normalize_window(window)
    if window == ALL_TIME or len(snapshots) <= 1:
        return snapshots[0]

    now = parse_snapshot_date(now) if now is not None else datetime.now(timezone.utc)
    target = now - timedelta(days=window)

    baseline = snapshots[0]
    best_distance = abs(parse_snapshot_date(_field(baseline, "date")) - target)
    for snapshot in snapshots[1:]:
        distance = abs(parse_snapshot_date(_field(snapshot, "date")) - target)
        if distance < best_distance:
            baseline = snapshot
            best_distance = distance

    latest = snapshots[-1]
    if parse_snapshot_date(_field(baseline, "date")) == parse_snapshot_date(_field(latest, "date")):
        logger.debug(
            f"[Metrics] Baseline collapsed onto latest snapshot for window={window}, "
            f"falling back to previous snapshot"
        )
        baseline = snapshots[-2]

    return baseline


def compute_windowed_growth(
    snapshots: Sequence[Any],
    window: Window,
    now: Optional[datetime] = None,
) -> MetricDelta:
    """
    Growth between the window baseline and the latest snapshot.

    Args:
        snapshots: Date-ascending snapshot sequence.
        window: 7, 14, 28 or "all".
        now: Reference time for the window target (defaults to UTC now).

    Returns:
        MetricDelta (latest - baseline). All zero with one or no snapshot.
        With window "all" this always equals ``compute_deltas``.
    """
    if len(snapshots) <= 1:
        return MetricDelta()

    baseline = select_window_baseline(snapshots, window, now=now)
    latest = snapshots[-1]
    return MetricDelta(
        subscribers=read_count(latest, "subscribers") - read_count(baseline, "subscribers"),
        views=read_count(latest, "views") - read_count(baseline, "views"),
        videos=read_count(latest, "videos") - read_count(baseline, "videos"),
    )
