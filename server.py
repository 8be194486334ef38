"""
Competitor Tracker - FastAPI Application

HTTP surface over the channel store and the growth metrics engine.

Business logic lives in analytics/ (pure computations) and services/
(persistence, YouTube sync, AI analysis) - this file only handles:
- API routing
- Request/response mapping
- Middleware configuration
- Health checks
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from analytics.metrics import (
    compute_diff_series,
    compute_growth_stats,
    compute_windowed_growth,
    normalize_window,
)
from analytics.ranking import sort_channels
from analytics.versus import build_versus_report
from clients.youtube_data import ChannelLookupError, YouTubeDataClient, build_channel_url
from config import config
from db.base import utcnow
from db.session import get_db
from schemas import (
    AnalysisResponse,
    CategoryRequest,
    ChannelContentOut,
    ChannelCreateRequest,
    ChannelLookupResponse,
    ChannelOut,
    DiffPointOut,
    GrowthStatsOut,
    HealthResponse,
    SnapshotIn,
    SnapshotOut,
    SyncAllResponse,
    VersusResponse,
    VideoOut,
    VisibilityRequest,
    WindowedGrowthOut,
)
from services.channel_store import (
    ChannelNotFoundError,
    ChannelRecord,
    ChannelStore,
    SnapshotNotFoundError,
)
from services.growth_analyst import analyze_channel_growth
from services.sync import sync_all, sync_channel

API_VERSION = "1.0.0"

# Configure logging
logging.basicConfig(
    level=getattr(logging, config.server.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan handler for startup/shutdown events.

    Validates configuration on startup.
    """
    logger.info("Starting Competitor Tracker...")

    for warning in config.validate():
        logger.warning(f"Config warning: {warning}")

    logger.info(f"Debug mode: {config.server.debug}")

    yield

    logger.info("Shutting down Competitor Tracker...")


app = FastAPI(
    title="Competitor Tracker",
    description="Growth tracking and head-to-head comparison for YouTube channels",
    version=API_VERSION,
    lifespan=lifespan,
    docs_url="/docs" if config.server.debug else None,
    redoc_url="/redoc" if config.server.debug else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.server.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
)


@app.exception_handler(ChannelNotFoundError)
@app.exception_handler(SnapshotNotFoundError)
@app.exception_handler(ChannelLookupError)
async def not_found_handler(request: Request, exc: LookupError) -> JSONResponse:
    logger.info(f"Not found: {exc}")
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# =============================================================================
# Dependencies
# =============================================================================

def get_store(db: Session = Depends(get_db)) -> ChannelStore:
    return ChannelStore(db)


def get_youtube_client() -> YouTubeDataClient:
    try:
        return YouTubeDataClient()
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e),
        )


def _channel_out(record: ChannelRecord) -> ChannelOut:
    channel = record.channel
    return ChannelOut(
        id=channel.id,
        channel_name=channel.channel_name,
        influencer_name=channel.influencer_name,
        channel_url=build_channel_url(
            channel.id, channel.custom_url, channel.influencer_name, channel.channel_name),
        country=channel.country,
        avatar_url=channel.avatar_url,
        custom_category=channel.custom_category,
        youtube_join_date=channel.youtube_join_date,
        last_sync=channel.last_sync,
        is_my_channel=channel.is_my_channel,
        is_hidden=channel.is_hidden,
        is_pinned=channel.is_pinned,
        snapshots=[SnapshotOut.model_validate(s) for s in record.snapshots],
    )


def _parse_window(window: str):
    try:
        return normalize_window(window)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


# =============================================================================
# System
# =============================================================================

@app.get("/health", response_model=HealthResponse, tags=["System"])
async def health_check() -> HealthResponse:
    """Health check endpoint for container orchestration."""
    return HealthResponse(
        status="healthy",
        version=API_VERSION,
        llm_provider=config.llm.provider
    )


@app.get("/", tags=["System"])
async def root() -> dict[str, str]:
    """Root endpoint with API information."""
    return {
        "service": "Competitor Tracker",
        "version": API_VERSION,
        "docs": "/docs" if config.server.debug else "Disabled in production"
    }


# =============================================================================
# Channels
# =============================================================================

@app.get("/channels", response_model=list[ChannelOut], tags=["Channels"])
def list_channels(
    sort_by: str = "subscribers",
    order: Optional[str] = None,
    include_hidden: bool = False,
    store: ChannelStore = Depends(get_store),
) -> list[ChannelOut]:
    """
    List tracked channels.

    Args:
        sort_by: custom, subscribers, videos, views, growth, new_videos, new_views
        order: Comma-separated channel ids for the custom order
        include_hidden: Include soft-deleted channels
    """
    custom_order = [i for i in order.split(",") if i] if order else None
    records = store.list_channels(include_hidden=include_hidden)

    try:
        records = sort_channels(records, sort_by=sort_by, custom_order=custom_order)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return [_channel_out(r) for r in records]


@app.get("/channels/me", response_model=Optional[ChannelOut], tags=["Channels"])
def get_my_channel(store: ChannelStore = Depends(get_store)) -> Optional[ChannelOut]:
    record = store.get_my_channel()
    return _channel_out(record) if record else None


@app.get("/channels/{channel_id}", response_model=ChannelOut, tags=["Channels"])
def get_channel(channel_id: str, store: ChannelStore = Depends(get_store)) -> ChannelOut:
    return _channel_out(store.get_channel(channel_id))


@app.post(
    "/channels",
    response_model=ChannelOut,
    status_code=status.HTTP_201_CREATED,
    tags=["Channels"],
)
def create_channel(
    request: ChannelCreateRequest,
    store: ChannelStore = Depends(get_store),
) -> ChannelOut:
    """Register a channel with its first snapshot (or revive a hidden one)."""
    logger.info(f"Channel create request: id={request.id} name={request.channel_name}")

    data = request.model_dump(exclude={"initial_stats"})
    try:
        channel = store.add_channel(data, request.initial_stats.model_dump())
    except Exception as e:
        logger.exception(f"Channel create failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create channel"
        )

    return _channel_out(store.get_channel(channel.id))


@app.delete("/channels/{channel_id}", status_code=status.HTTP_204_NO_CONTENT, tags=["Channels"])
def delete_channel(channel_id: str, store: ChannelStore = Depends(get_store)) -> None:
    store.delete_channel(channel_id)


@app.post("/channels/{channel_id}/pin", response_model=ChannelOut, tags=["Channels"])
def toggle_pin(channel_id: str, store: ChannelStore = Depends(get_store)) -> ChannelOut:
    store.toggle_pin(channel_id)
    return _channel_out(store.get_channel(channel_id))


@app.post("/channels/{channel_id}/visibility", response_model=ChannelOut, tags=["Channels"])
def set_visibility(
    channel_id: str,
    request: VisibilityRequest,
    store: ChannelStore = Depends(get_store),
) -> ChannelOut:
    store.set_hidden(channel_id, request.hidden)
    return _channel_out(store.get_channel(channel_id))


@app.put("/channels/{channel_id}/category", response_model=ChannelOut, tags=["Channels"])
def update_category(
    channel_id: str,
    request: CategoryRequest,
    store: ChannelStore = Depends(get_store),
) -> ChannelOut:
    store.update_category(channel_id, request.category)
    return _channel_out(store.get_channel(channel_id))


# =============================================================================
# Snapshots
# =============================================================================

@app.post(
    "/channels/{channel_id}/snapshots",
    response_model=SnapshotOut,
    status_code=status.HTTP_201_CREATED,
    tags=["Snapshots"],
)
def save_snapshot(
    channel_id: str,
    request: SnapshotIn,
    store: ChannelStore = Depends(get_store),
) -> SnapshotOut:
    """Record counters for a day; an existing snapshot on that day is overwritten."""
    snapshot = store.upsert_snapshot(channel_id, request.model_dump())
    return SnapshotOut.model_validate(snapshot)


@app.delete("/snapshots/{snapshot_id}", status_code=status.HTTP_204_NO_CONTENT, tags=["Snapshots"])
def delete_snapshot(snapshot_id: int, store: ChannelStore = Depends(get_store)) -> None:
    store.delete_snapshot(snapshot_id)


# =============================================================================
# Growth Metrics
# =============================================================================

@app.get("/channels/{channel_id}/growth", response_model=GrowthStatsOut, tags=["Metrics"])
def get_growth_stats(channel_id: str, store: ChannelStore = Depends(get_store)) -> GrowthStatsOut:
    """Daily/weekly/monthly/yearly projections of the all-time growth rate."""
    record = store.get_channel(channel_id)
    return GrowthStatsOut(**compute_growth_stats(record.snapshots).as_dict())


@app.get("/channels/{channel_id}/diff-series", response_model=list[DiffPointOut], tags=["Metrics"])
def get_diff_series(channel_id: str, store: ChannelStore = Depends(get_store)) -> list[DiffPointOut]:
    """Per-interval gains for the gain bar charts (negative gains shown as 0)."""
    record = store.get_channel(channel_id)
    return [
        DiffPointOut(
            date=point.date,
            subs_gain=point.subs_gain,
            views_gain=point.views_gain,
            videos_gain=point.videos_gain,
        )
        for point in compute_diff_series(record.snapshots)
    ]


@app.get("/channels/{channel_id}/windowed-growth", response_model=WindowedGrowthOut, tags=["Metrics"])
def get_windowed_growth(
    channel_id: str,
    window: str = "28",
    store: ChannelStore = Depends(get_store),
) -> WindowedGrowthOut:
    """Growth since the snapshot closest to N days ago (7, 14, 28 or all)."""
    parsed = _parse_window(window)
    record = store.get_channel(channel_id)
    delta = compute_windowed_growth(record.snapshots, parsed)
    return WindowedGrowthOut(
        window=str(parsed),
        subscribers=delta.subscribers,
        views=delta.views,
        videos=delta.videos,
    )


@app.get("/versus", response_model=VersusResponse, tags=["Metrics"])
def get_versus(
    opponent_id: str,
    my_channel_id: Optional[str] = None,
    window: str = "28",
    store: ChannelStore = Depends(get_store),
) -> VersusResponse:
    """
    Head-to-head between my channel and an opponent.

    When my_channel_id is omitted the channel flagged as mine is used.
    """
    parsed = _parse_window(window)

    if my_channel_id:
        mine = store.get_channel(my_channel_id)
    else:
        mine = store.get_my_channel()
        if mine is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="No channel is flagged as my channel",
            )
    opponent = store.get_channel(opponent_id)

    report = build_versus_report(mine.snapshots, opponent.snapshots, window=parsed)
    return VersusResponse(
        my_channel_id=mine.id,
        opponent_id=opponent.id,
        window=str(parsed),
        report=report.as_dict() if report else None,
    )


# =============================================================================
# YouTube Sync & Lookup
# =============================================================================

@app.post("/channels/sync", response_model=SyncAllResponse, tags=["Sync"])
def sync_all_channels(
    store: ChannelStore = Depends(get_store),
    client: YouTubeDataClient = Depends(get_youtube_client),
) -> SyncAllResponse:
    """Pull current counters for every visible channel."""
    channels = [r.channel for r in store.list_channels()]
    report = sync_all(store, client, channels)
    return SyncAllResponse(
        processed=report.processed,
        updated=report.updated,
        failed=report.failed,
    )


@app.post("/channels/{channel_id}/sync", response_model=ChannelOut, tags=["Sync"])
def sync_one_channel(
    channel_id: str,
    store: ChannelStore = Depends(get_store),
    client: YouTubeDataClient = Depends(get_youtube_client),
) -> ChannelOut:
    record = store.get_channel(channel_id)
    sync_channel(store, client, record.channel)
    return _channel_out(store.get_channel(channel_id))


@app.get("/youtube/lookup", response_model=ChannelLookupResponse, tags=["Sync"])
def lookup_channel(
    query: str = Query(..., alias="input"),
    client: YouTubeDataClient = Depends(get_youtube_client),
) -> ChannelLookupResponse:
    """Resolve a URL, @handle, UC id or name to current public stats."""
    result = client.fetch_channel_data(query)
    return ChannelLookupResponse(
        channel=result.channel,
        stats=result.stats,
        uploads_playlist_id=result.uploads_playlist_id,
        avatar_url=result.avatar_url,
    )


@app.get("/channels/{channel_id}/content", response_model=ChannelContentOut, tags=["Sync"])
def get_channel_content(
    channel_id: str,
    store: ChannelStore = Depends(get_store),
    client: YouTubeDataClient = Depends(get_youtube_client),
) -> ChannelContentOut:
    """Recent uploads and top videos; hand-registered channels are resolved first."""
    channel = store.get_channel(channel_id).channel
    content = client.fetch_channel_content(
        channel.id,
        channel_url=channel.custom_url or channel.influencer_name,
        channel_name=channel.channel_name,
    )
    return ChannelContentOut(
        top_videos=[VideoOut.model_validate(v) for v in content.top_videos],
        recent_videos=[VideoOut.model_validate(v) for v in content.recent_videos],
    )


# =============================================================================
# AI Analysis
# =============================================================================

@app.post("/channels/{channel_id}/analysis", response_model=AnalysisResponse, tags=["Analysis"])
def analyze_channel(channel_id: str, store: ChannelStore = Depends(get_store)) -> AnalysisResponse:
    record = store.get_channel(channel_id)
    analysis = analyze_channel_growth(record.channel, record.snapshots)
    return AnalysisResponse(
        channel_id=channel_id,
        analysis=analysis,
        generated_at=utcnow(),
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "server:app",
        host=config.server.host,
        port=config.server.port,
        reload=config.server.debug,
        log_level=config.server.log_level.lower()
    )
