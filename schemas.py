"""
Pydantic schemas for the competitor tracker API.

Defines request/response models for channels, snapshots, growth metrics
and the Versus comparison.
"""

import datetime as dt
from typing import Any, Optional

from pydantic import BaseModel, Field


# =============================================================================
# System
# =============================================================================

class HealthResponse(BaseModel):
    """Response schema for health check endpoint."""

    status: str = Field(
        ...,
        description="Server health status"
    )

    version: str = Field(
        ...,
        description="API version"
    )

    llm_provider: str = Field(
        ...,
        description="Configured LLM provider"
    )


# =============================================================================
# Snapshot Schemas
# =============================================================================

class SnapshotIn(BaseModel):
    """Counters to record for a channel on one day."""

    date: Optional[dt.date] = Field(
        default=None,
        description="Day the observation represents (defaults to today)"
    )

    subscribers: int = Field(..., ge=0, examples=[12500])
    views: int = Field(..., ge=0, examples=[854200])
    videos: int = Field(..., ge=0, examples=[87])

    class Config:
        json_schema_extra = {
            "example": {
                "date": "2025-03-01",
                "subscribers": 12500,
                "views": 854200,
                "videos": 87
            }
        }


class SnapshotOut(BaseModel):
    id: int
    date: dt.date
    subscribers: int
    views: int
    videos: int
    time_registered: Optional[str] = None
    created_at: Optional[dt.datetime] = None

    class Config:
        from_attributes = True


# =============================================================================
# Channel Schemas
# =============================================================================

class ChannelCreateRequest(BaseModel):
    """Register a channel together with its first snapshot."""

    id: Optional[str] = Field(
        default=None,
        description="YouTube channel id (UC...); a UUID is generated when omitted",
        max_length=64,
    )

    channel_name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        examples=["Canal Exemplo"]
    )

    influencer_name: Optional[str] = Field(default=None, max_length=255)
    country: Optional[str] = Field(default=None, max_length=8)
    custom_url: Optional[str] = Field(
        default=None,
        description="Channel link, @handle or UC id"
    )
    avatar_url: Optional[str] = None
    youtube_join_date: Optional[dt.date] = None
    is_my_channel: bool = False

    initial_stats: SnapshotIn


class ChannelOut(BaseModel):
    id: str
    channel_name: str
    influencer_name: Optional[str] = None
    channel_url: str
    country: Optional[str] = None
    avatar_url: Optional[str] = None
    custom_category: Optional[str] = None
    youtube_join_date: Optional[dt.date] = None
    last_sync: Optional[dt.datetime] = None
    is_my_channel: bool
    is_hidden: bool
    is_pinned: bool
    snapshots: list[SnapshotOut] = Field(default_factory=list)


class VisibilityRequest(BaseModel):
    hidden: bool = Field(..., description="True hides (soft-deletes) the channel")


class CategoryRequest(BaseModel):
    category: str = Field(..., max_length=255)


# =============================================================================
# Metrics Schemas
# =============================================================================

class PeriodStatsOut(BaseModel):
    subs: int
    views: int
    videos: float


class GrowthStatsOut(BaseModel):
    daily: PeriodStatsOut
    weekly: PeriodStatsOut
    monthly: PeriodStatsOut
    yearly: PeriodStatsOut


class DiffPointOut(BaseModel):
    date: dt.date
    subs_gain: int
    views_gain: int
    videos_gain: int


class MetricDeltaOut(BaseModel):
    subscribers: int
    views: int
    videos: int


class WindowedGrowthOut(MetricDeltaOut):
    window: str


class VersusResponse(BaseModel):
    """Head-to-head between my channel (side A) and an opponent (side B)."""

    my_channel_id: str
    opponent_id: str
    window: str
    report: Optional[dict[str, Any]] = Field(
        default=None,
        description="Stats, metrics, winner and catch-up projection; null when a side has no snapshots"
    )


# =============================================================================
# Sync / YouTube Schemas
# =============================================================================

class SyncAllResponse(BaseModel):
    processed: int
    updated: list[str]
    failed: dict[str, str]


class ChannelLookupResponse(BaseModel):
    channel: dict[str, Any]
    stats: dict[str, Any]
    uploads_playlist_id: Optional[str] = None
    avatar_url: Optional[str] = None


class AnalysisResponse(BaseModel):
    channel_id: str
    analysis: str
    generated_at: dt.datetime


class VideoOut(BaseModel):
    id: str
    title: str
    thumbnail: Optional[str] = None
    published_at: Optional[str] = None
    view_count: int = 0
    like_count: int = 0
    comment_count: int = 0

    class Config:
        from_attributes = True


class ChannelContentOut(BaseModel):
    """Most-viewed and most recent uploads of a channel."""

    top_videos: list[VideoOut] = Field(default_factory=list)
    recent_videos: list[VideoOut] = Field(default_factory=list)
