"""
YouTube API Clients.

Provides API-key access to public YouTube channel and video data.
"""

from .youtube_data import (
    ChannelLookup,
    ChannelLookupError,
    YouTubeDataClient,
    build_channel_url,
    extract_channel_identifier,
)

__all__ = [
    "ChannelLookup",
    "ChannelLookupError",
    "YouTubeDataClient",
    "build_channel_url",
    "extract_channel_identifier",
]
