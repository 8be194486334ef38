"""
YouTube Data API v3 Client.

Reads public channel statistics and video listings with an API key
(no OAuth). Used by the sync action to record snapshots and by the
Versus panel to look up channels that are not tracked yet.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional
from urllib.parse import quote

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from config import config

logger = logging.getLogger(__name__)

CHANNEL_PARTS = "snippet,statistics,contentDetails"


class ChannelLookupError(LookupError):
    """Raised when no YouTube channel matches the given input."""


@dataclass
class ChannelLookup:
    """Result of resolving a channel on YouTube."""

    channel: dict[str, Any]
    stats: dict[str, Any]
    uploads_playlist_id: Optional[str] = None
    avatar_url: Optional[str] = None


@dataclass
class VideoData:
    id: str
    title: str
    thumbnail: Optional[str]
    published_at: Optional[str]
    view_count: int = 0
    like_count: int = 0
    comment_count: int = 0


@dataclass
class ChannelContent:
    top_videos: list[VideoData] = field(default_factory=list)
    recent_videos: list[VideoData] = field(default_factory=list)


def extract_channel_identifier(value: str) -> tuple[str, str]:
    """
    Classify user input as a channel id or a handle.

    Handles full URLs (``/channel/UC...`` and ``/@handle``), raw ``UC`` ids
    and ``@handles``. Anything else is treated as a handle; the lookup falls
    back to a search when the handle does not resolve.

    Returns:
        Tuple of ("id" | "handle", value).
    """
    cleaned = value.strip()

    if "youtube.com/" in cleaned:
        parts = cleaned.rstrip("/").split("/")
        if len(parts) >= 2 and parts[-2] == "channel":
            return "id", parts[-1]
        if "@" in cleaned:
            handle = next((p for p in parts if p.startswith("@")), None)
            if handle:
                return "handle", handle

    if cleaned.startswith("UC"):
        return "id", cleaned
    return "handle", cleaned


def build_channel_url(
    channel_id: str,
    custom_url: Optional[str] = None,
    influencer_name: Optional[str] = None,
    channel_name: Optional[str] = None,
) -> str:
    """
    Resolve the public link for a tracked channel.

    Priority:
        1. An explicit custom URL (full URL, @handle, UC id or bare handle).
        2. The YouTube channel page when the id is a ``UC`` id.
        3. For hand-registered channels: the influencer @handle, otherwise
           a channel search by name so the link is never dead.
    """
    url = (custom_url or "").strip()
    if url and url != "undefined":
        if url.startswith("http://") or url.startswith("https://"):
            return url
        if url.startswith("@"):
            return f"https://www.youtube.com/{url}"
        if url.startswith("UC") and len(url) == 24:
            return f"https://www.youtube.com/channel/{url}"
        return f"https://www.youtube.com/@{url}"

    if channel_id.startswith("UC"):
        return f"https://youtube.com/channel/{channel_id}"

    handle = (influencer_name or "").strip()
    if handle.startswith("@"):
        return f"https://www.youtube.com/{handle}"

    query = quote(channel_name or "", safe="")
    return f"https://www.youtube.com/results?search_query={query}&sp=EgIQAg%253D%253D"


def _looks_like_uuid(value: str) -> bool:
    # Ids generated for hand-registered channels, never valid on YouTube
    return len(value) > 20 and "-" in value and not value.startswith("UC")


def _best_thumbnail(thumbnails: dict[str, Any], order: tuple[str, ...]) -> Optional[str]:
    for size in order:
        url = (thumbnails.get(size) or {}).get("url")
        if url:
            return url
    return None


class YouTubeDataClient:
    """
    YouTube Data API client authenticated with an API key.
    """

    API_SERVICE_NAME = "youtube"
    API_VERSION = "v3"

    def __init__(self, api_key: Optional[str] = None, service: Any = None) -> None:
        """
        Args:
            api_key: YouTube Data API key (defaults to config).
            service: Pre-built discovery service (tests inject a mock here).
        """
        self.api_key = api_key or config.youtube.api_key
        self._service = service
        if not self.api_key and service is None:
            logger.error("YOUTUBE_API_KEY not found in configuration")
            raise ValueError("YOUTUBE_API_KEY is required")

    def _get_service(self) -> Any:
        if self._service is None:
            self._service = build(
                self.API_SERVICE_NAME,
                self.API_VERSION,
                developerKey=self.api_key,
                cache_discovery=False,
            )
            logger.debug("YouTube Data API service built successfully")
        return self._service

    # -------------------------------------------------------------------------
    # Channels
    # -------------------------------------------------------------------------

    def _list_channels(self, **params: Any) -> list[dict[str, Any]]:
        try:
            response = self._get_service().channels().list(part=CHANNEL_PARTS, **params).execute()
        except HttpError as e:
            logger.warning(f"YouTube channel lookup failed ({params}): {e}")
            return []
        return response.get("items") or []

    def _search_channel_id(self, query: str) -> Optional[str]:
        try:
            response = self._get_service().search().list(
                part="id", q=query, type="channel", maxResults=1
            ).execute()
        except HttpError as e:
            logger.error(f"YouTube channel search failed for {query!r}: {e}")
            return None

        items = response.get("items") or []
        if not items:
            return None
        return items[0]["id"].get("channelId")

    def fetch_channel_data(self, value: str) -> ChannelLookup:
        """
        Resolve a channel and read its current public counters.

        Tries a direct lookup by id or handle, then falls back to a
        channel search on the raw value.

        Raises:
            ChannelLookupError: If no channel matches.
        """
        kind, identifier = extract_channel_identifier(value)

        items: list[dict[str, Any]] = []
        if kind == "id":
            items = self._list_channels(id=identifier)
        else:
            items = self._list_channels(forHandle=identifier)

        if not items:
            found_id = self._search_channel_id(identifier)
            if found_id:
                items = self._list_channels(id=found_id)

        if not items:
            raise ChannelLookupError(f"Channel not found: {value}")

        item = items[0]
        snippet = item.get("snippet", {})
        statistics = item.get("statistics", {})
        published_at = snippet.get("publishedAt") or ""

        lookup = ChannelLookup(
            channel={
                "id": item["id"],
                "channel_name": snippet.get("title"),
                "influencer_name": snippet.get("customUrl") or snippet.get("title"),
                "custom_url": f"https://youtube.com/channel/{item['id']}",
                "country": snippet.get("country") or config.youtube.default_country,
                "youtube_join_date": published_at.split("T")[0] or None,
            },
            stats={
                "date": datetime.now(timezone.utc).date().isoformat(),
                "subscribers": int(statistics.get("subscriberCount") or 0),
                "videos": int(statistics.get("videoCount") or 0),
                "views": int(statistics.get("viewCount") or 0),
            },
            uploads_playlist_id=(
                item.get("contentDetails", {})
                .get("relatedPlaylists", {})
                .get("uploads")
            ),
            avatar_url=_best_thumbnail(snippet.get("thumbnails", {}), ("high", "medium", "default")),
        )
        logger.info(
            f"[YouTube] Resolved {value!r} -> {lookup.channel['id']} "
            f"subs={lookup.stats['subscribers']}"
        )
        return lookup

    # -------------------------------------------------------------------------
    # Videos
    # -------------------------------------------------------------------------

    def _video_details(self, video_ids: list[str]) -> list[VideoData]:
        if not video_ids:
            return []

        response = self._get_service().videos().list(
            part="snippet,statistics", id=",".join(video_ids)
        ).execute()

        videos = []
        for item in response.get("items") or []:
            snippet = item.get("snippet", {})
            statistics = item.get("statistics", {})
            videos.append(
                VideoData(
                    id=item["id"],
                    title=snippet.get("title", ""),
                    thumbnail=_best_thumbnail(snippet.get("thumbnails", {}), ("medium", "default")),
                    published_at=snippet.get("publishedAt"),
                    view_count=int(statistics.get("viewCount") or 0),
                    like_count=int(statistics.get("likeCount") or 0),
                    comment_count=int(statistics.get("commentCount") or 0),
                )
            )
        return videos

    def _search_video_ids(self, channel_id: str, order: str) -> list[str]:
        response = self._get_service().search().list(
            part="id",
            channelId=channel_id,
            order=order,
            maxResults=config.youtube.max_results,
            type="video",
        ).execute()
        return [i["id"]["videoId"] for i in response.get("items") or [] if i.get("id", {}).get("videoId")]

    def resolve_channel_id(
        self,
        channel_id: Optional[str],
        channel_url: Optional[str] = None,
        channel_name: Optional[str] = None,
    ) -> Optional[str]:
        """
        Find the ``UC`` id of a tracked channel.

        Order:
            1. ``channel_id`` when it already is a ``UC`` id.
            2. A lookup of the stored link or handle (UUIDs are skipped).
            3. A channel search by name.
        """
        if channel_id and channel_id.startswith("UC"):
            return channel_id

        if channel_url:
            kind, identifier = extract_channel_identifier(channel_url)
            if identifier and not _looks_like_uuid(identifier):
                if kind == "id":
                    items = self._list_channels(id=identifier)
                else:
                    items = self._list_channels(forHandle=identifier)
                if items:
                    return items[0]["id"]

        if channel_name:
            return self._search_channel_id(channel_name)
        return None

    def fetch_channel_content(
        self,
        channel_id: Optional[str],
        channel_url: Optional[str] = None,
        channel_name: Optional[str] = None,
    ) -> ChannelContent:
        """
        Recent uploads and most-viewed videos for a tracked channel.

        Hand-registered channels (UUID ids) are first resolved through their
        stored link or handle, then by name. Recent uploads come from the
        uploads playlist, falling back to a date-ordered search. API errors
        yield empty lists.
        """
        resolved_id = self.resolve_channel_id(channel_id, channel_url, channel_name)
        if not resolved_id or not resolved_id.startswith("UC"):
            logger.error(f"Could not resolve a valid YouTube channel id for {channel_name or channel_id!r}")
            return ChannelContent()
        channel_id = resolved_id

        content = ChannelContent()
        try:
            items = self._list_channels(id=channel_id)
            uploads_id = (
                items[0].get("contentDetails", {}).get("relatedPlaylists", {}).get("uploads")
                if items else None
            )

            if uploads_id:
                playlist = self._get_service().playlistItems().list(
                    part="snippet", playlistId=uploads_id, maxResults=config.youtube.max_results
                ).execute()
                recent_ids = [
                    i["snippet"]["resourceId"]["videoId"]
                    for i in playlist.get("items") or []
                ]
                content.recent_videos = self._video_details(recent_ids)

            if not content.recent_videos:
                content.recent_videos = self._video_details(
                    self._search_video_ids(channel_id, order="date"))

            content.top_videos = self._video_details(
                self._search_video_ids(channel_id, order="viewCount"))
        except HttpError as e:
            logger.error(f"Error fetching channel content for {channel_id}: {e}")
            return ChannelContent()

        return content
