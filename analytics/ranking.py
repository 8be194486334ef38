"""
Channel list ordering for the competitor overview.

Works on any record exposing ``id``, ``is_pinned`` and a date-ascending
``snapshots`` list (see services.channel_store.ChannelRecord). The custom
order is passed in by the caller instead of being read from shared state.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence

from analytics.metrics import read_count

logger = logging.getLogger(__name__)

SORT_CUSTOM = "custom"
SORT_OPTIONS = (
    SORT_CUSTOM,
    "subscribers",
    "videos",
    "views",
    "growth",
    "new_videos",
    "new_views",
)


@dataclass(frozen=True)
class CardSummary:
    """Numbers shown on a channel card."""

    subscribers: int
    views: int
    videos: int
    growth: int
    new_videos: int
    new_views: int


def summarize_card(snapshots: Sequence[Any]) -> CardSummary:
    """
    Latest totals, all-time subscriber growth and the change since the
    previous snapshot. Zeros when there is no history to compare.
    """
    if not snapshots:
        return CardSummary(0, 0, 0, 0, 0, 0)

    latest = snapshots[-1]
    first = snapshots[0]
    previous = snapshots[-2] if len(snapshots) > 1 else None

    return CardSummary(
        subscribers=read_count(latest, "subscribers"),
        views=read_count(latest, "views"),
        videos=read_count(latest, "videos"),
        growth=read_count(latest, "subscribers") - read_count(first, "subscribers"),
        new_videos=read_count(latest, "videos") - read_count(previous, "videos") if previous is not None else 0,
        new_views=read_count(latest, "views") - read_count(previous, "views") if previous is not None else 0,
    )


_SORT_KEYS: dict[str, Callable[[CardSummary], int]] = {
    "subscribers": lambda card: card.subscribers,
    "videos": lambda card: card.videos,
    "views": lambda card: card.views,
    "growth": lambda card: card.growth,
    "new_videos": lambda card: card.new_videos,
    "new_views": lambda card: card.new_views,
}


def apply_custom_order(channels: Sequence[Any], order: Sequence[str]) -> list[Any]:
    """Order channels by a saved id list; unknown ids keep their relative order at the end."""
    positions = {channel_id: index for index, channel_id in enumerate(order)}
    unknown = len(positions)
    return sorted(channels, key=lambda c: positions.get(c.id, unknown))


def sort_channels(
    channels: Sequence[Any],
    sort_by: str = "subscribers",
    custom_order: Optional[Sequence[str]] = None,
) -> list[Any]:
    """
    Sort channels for display.

    Metric sorts are descending. Pinned channels always come first, and
    channels with equal keys keep their incoming order.

    Raises:
        ValueError: If ``sort_by`` is not one of SORT_OPTIONS.
    """
    if sort_by not in SORT_OPTIONS:
        raise ValueError(f"Unsupported sort option: {sort_by!r}")

    ordered = list(channels)
    if custom_order:
        ordered = apply_custom_order(ordered, custom_order)

    if sort_by != SORT_CUSTOM:
        key = _SORT_KEYS[sort_by]
        ordered.sort(key=lambda c: key(summarize_card(c.snapshots)), reverse=True)

    # sorted() is stable, so this keeps the metric order within each group
    return sorted(ordered, key=lambda c: 0 if c.is_pinned else 1)


def move_channel(order: Sequence[str], dragged_id: str, target_id: str) -> list[str]:
    """
    Move ``dragged_id`` to the position currently held by ``target_id``.

    Returns a new list; the input is left untouched. Unknown ids or a drop
    onto itself return the order unchanged.
    """
    new_order = list(order)
    if dragged_id == target_id:
        return new_order
    if dragged_id not in new_order or target_id not in new_order:
        logger.debug(f"[Ranking] Ignoring move of unknown id {dragged_id} -> {target_id}")
        return new_order

    target_index = new_order.index(target_id)
    new_order.remove(dragged_id)
    new_order.insert(target_index, dragged_id)
    return new_order
