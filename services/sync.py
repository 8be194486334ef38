"""
Channel sync: pull current public counters from YouTube into snapshots.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from clients.youtube_data import ChannelLookup, YouTubeDataClient, build_channel_url
from db.models.channel import Channel
from services.channel_store import ChannelStore

logger = logging.getLogger(__name__)


@dataclass
class SyncReport:
    processed: int = 0
    updated: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)


def choose_lookup_input(channel: Channel) -> str:
    """
    Pick the best string to resolve a tracked channel on YouTube.

    Channels registered with a ``UC`` id use their link. Hand-registered
    channels (UUID ids) use the influencer handle when it looks like one
    (no spaces, longer than 2 characters), otherwise the channel name, so
    the search fallback has something meaningful to match.
    """
    if channel.id.startswith("UC"):
        return build_channel_url(
            channel.id, channel.custom_url, channel.influencer_name, channel.channel_name)

    handle = channel.influencer_name or ""
    if len(handle) > 2 and " " not in handle:
        return handle
    return channel.channel_name


def sync_channel(
    store: ChannelStore,
    client: YouTubeDataClient,
    channel: Channel,
) -> ChannelLookup:
    """
    Record today's counters for one channel and refresh its avatar.

    Raises:
        ChannelLookupError: If YouTube has no matching channel.
    """
    lookup_input = choose_lookup_input(channel)
    result = client.fetch_channel_data(lookup_input)

    store.upsert_snapshot(channel.id, result.stats)
    if result.avatar_url and result.avatar_url != channel.avatar_url:
        store.update_avatar(channel.id, result.avatar_url)
    store.mark_synced(channel.id)

    logger.info(f"[Sync] {channel.channel_name}: subscribers={result.stats['subscribers']}")
    return result


def sync_all(
    store: ChannelStore,
    client: YouTubeDataClient,
    channels: Sequence[Channel],
    on_progress: Optional[Callable[[int], None]] = None,
) -> SyncReport:
    """
    Sync every channel in turn.

    A failure on one channel is logged and recorded in the report; the
    remaining channels are still processed. ``on_progress`` receives the
    completed percentage (0-100) after each channel.
    """
    report = SyncReport()
    total = len(channels)

    for channel in channels:
        try:
            sync_channel(store, client, channel)
            report.updated.append(channel.id)
        except Exception as e:
            logger.error(f"[Sync] Error updating {channel.channel_name}: {e}")
            report.failed[channel.id] = str(e)

        report.processed += 1
        if on_progress is not None:
            on_progress(round(report.processed / total * 100))

    logger.info(
        f"[Sync] Finished: {len(report.updated)} updated, {len(report.failed)} failed"
    )
    return report
