"""
Shared pytest fixtures for the competitor tracker test suite.

Provides reusable fixtures for:
- An in-memory SQLite session with all tables created
- A ChannelStore bound to that session
- Snapshot builders for the metrics engine
- A mocked YouTube Data API discovery service
"""

import os

# The engine in db.session is created at import time; keep it off Postgres.
os.environ["DATABASE_URL"] = "sqlite://"

from datetime import date, datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from db.base import Base
from db.models import Channel, Snapshot  # noqa: F401
from services.channel_store import ChannelStore


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture
def db_engine():
    """Fresh in-memory database shared across connections."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    """Session bound to the in-memory database."""
    session = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store(db_session):
    """ChannelStore over the test session."""
    return ChannelStore(db_session)


# =============================================================================
# Snapshot Fixtures
# =============================================================================

NOW = datetime(2025, 3, 1, tzinfo=timezone.utc)


@pytest.fixture
def now():
    """Fixed reference time (midnight UTC) for window computations."""
    return NOW


@pytest.fixture
def make_snapshot():
    """
    Build a snapshot dict ``days_ago`` days before the reference time.

    Usage:
        make_snapshot(10, subscribers=1000)
    """
    def _make(days_ago, subscribers=0, views=0, videos=0):
        return {
            "date": (NOW - timedelta(days=days_ago)).date().isoformat(),
            "subscribers": subscribers,
            "views": views,
            "videos": videos,
        }
    return _make


@pytest.fixture
def growing_history(make_snapshot):
    """Thirty days of steady growth, one snapshot every ten days."""
    return [
        make_snapshot(30, subscribers=1000, views=50000, videos=40),
        make_snapshot(20, subscribers=1200, views=56000, videos=42),
        make_snapshot(10, subscribers=1500, views=63000, videos=45),
        make_snapshot(0, subscribers=1900, views=71000, videos=47),
    ]


@pytest.fixture
def initial_stats():
    """Counters for a newly registered channel."""
    return {"subscribers": 12500, "views": 854200, "videos": 87}


@pytest.fixture
def registered_channel(store, initial_stats):
    """A tracked competitor with one snapshot recorded today."""
    return store.add_channel(
        {
            "id": "UCabcdefghijklmnopqrstuv",
            "channel_name": "Canal Exemplo",
            "influencer_name": "@canalexemplo",
            "country": "BR",
            "custom_url": "https://youtube.com/channel/UCabcdefghijklmnopqrstuv",
            "avatar_url": "https://yt3.ggpht.com/avatar.jpg",
            "youtube_join_date": date(2015, 6, 1),
        },
        initial_stats,
    )


# =============================================================================
# YouTube Fixtures
# =============================================================================

def channel_item(channel_id="UCabcdefghijklmnopqrstuv", subscribers=15000, views=900000, videos=90):
    """A channels.list item as returned by the YouTube Data API."""
    return {
        "id": channel_id,
        "snippet": {
            "title": "Canal Exemplo",
            "customUrl": "@canalexemplo",
            "country": "BR",
            "publishedAt": "2015-06-01T12:00:00Z",
            "thumbnails": {
                "default": {"url": "https://yt3.ggpht.com/default.jpg"},
                "high": {"url": "https://yt3.ggpht.com/high.jpg"},
            },
        },
        "statistics": {
            "subscriberCount": str(subscribers),
            "viewCount": str(views),
            "videoCount": str(videos),
        },
        "contentDetails": {
            "relatedPlaylists": {"uploads": "UUabcdefghijklmnopqrstuv"},
        },
    }


@pytest.fixture
def youtube_service():
    """MagicMock standing in for googleapiclient's discovery resource."""
    service = MagicMock()
    service.channels.return_value.list.return_value.execute.return_value = {
        "items": [channel_item()]
    }
    service.search.return_value.list.return_value.execute.return_value = {"items": []}
    return service


@pytest.fixture
def make_channel_item():
    """Builder for channels.list items with custom counters."""
    return channel_item
