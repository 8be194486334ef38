"""
AI growth analysis for a tracked channel.

Builds a prompt from the channel's snapshot history and its computed
growth stats, then asks the configured LLM for a short strategic read.
"""

import logging
from typing import Any, Optional, Sequence

from analytics.metrics import compute_growth_stats, parse_snapshot_date
from config import config
from db.models.channel import Channel
from llm.base import TextGenerator, get_llm_client

logger = logging.getLogger(__name__)

UNAVAILABLE_MESSAGE = "Growth analysis is unavailable: no LLM provider is configured."
EMPTY_RESPONSE_MESSAGE = "Could not generate an analysis right now."


def _format_snapshot_line(snapshot: Any) -> str:
    day = parse_snapshot_date(snapshot.date).date().isoformat()
    return (
        f"Date: {day}, Subscribers: {snapshot.subscribers}, "
        f"Views: {snapshot.views}, Videos: {snapshot.videos}"
    )


def build_growth_prompt(channel: Channel, snapshots: Sequence[Any]) -> str:
    """Compose the analysis prompt for one channel."""
    stats = compute_growth_stats(snapshots)
    history = "\n".join(_format_snapshot_line(s) for s in snapshots) or "No snapshots recorded."
    join_date = channel.youtube_join_date.isoformat() if channel.youtube_join_date else "unknown"

    return f"""Act as a senior YouTube content strategist. Analyze the growth data of the channel below.

Channel: {channel.channel_name}
Influencer: {channel.influencer_name or "unknown"}
Country: {channel.country or "unknown"}
Joined YouTube: {join_date}

Snapshot history:
{history}

Average growth (all-time rate):
- Daily: {stats.daily.subs} subscribers, {stats.daily.views} views, {stats.daily.videos:.1f} videos
- Weekly: {stats.weekly.subs} subscribers, {stats.weekly.views} views
- Monthly: {stats.monthly.subs} subscribers, {stats.monthly.views} views

Give a concise analysis (at most 2 paragraphs) covering:
1. The current growth rate.
2. One strategic recommendation.
Answer in {config.llm.response_language}."""


def analyze_channel_growth(
    channel: Channel,
    snapshots: Sequence[Any],
    client: Optional[TextGenerator] = None,
) -> str:
    """
    Run the growth analysis.

    Returns:
        The LLM's text, or a user-facing message when no provider is
        configured or the model returns nothing.
    """
    if client is None:
        try:
            client = get_llm_client()
        except ValueError as e:
            logger.warning(f"[Analyst] LLM client unavailable: {e}")
            return UNAVAILABLE_MESSAGE

    prompt = build_growth_prompt(channel, snapshots)
    logger.info(f"[Analyst] Requesting analysis for {channel.id} ({len(snapshots)} snapshots)")

    result = client.generate(prompt)
    return result or EMPTY_RESPONSE_MESSAGE
