#!/usr/bin/env python3
"""
Database initialization script.

Creates all tables and, optionally, registers the user's own channel.
Run this script to initialize a fresh database:

    python scripts/init_db.py
    python scripts/init_db.py --my-channel UCxxxxxxxxxxxxxxxxxxxxxx
"""

import argparse
import os
import sys

# Add the parent directory to the path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from clients.youtube_data import YouTubeDataClient
from db.base import Base
from db.session import engine, session_scope
from services.channel_store import ChannelStore

# Import all models to register them with Base.metadata
from db.models.channel import Channel  # noqa: F401
from db.models.snapshot import Snapshot  # noqa: F401


def create_tables():
    """Create all database tables."""
    print("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    print("✓ Tables created successfully")


def seed_my_channel(lookup_input: str):
    """Look up a channel on YouTube and register it as the user's own."""
    with session_scope() as db:
        store = ChannelStore(db)
        existing = store.get_my_channel()
        if existing:
            print(f"✓ My channel already registered: {existing.channel.channel_name}")
            return

        result = YouTubeDataClient().fetch_channel_data(lookup_input)
        data = dict(result.channel, is_my_channel=True, avatar_url=result.avatar_url)
        channel = store.add_channel(data, result.stats)
        print(f"✓ My channel registered: {channel.channel_name}")


def main():
    """Initialize the database with all tables and optional seed data."""
    parser = argparse.ArgumentParser(description="Initialize the competitor tracker database")
    parser.add_argument("--my-channel", help="URL, @handle or UC id of your own channel")
    args = parser.parse_args()

    print("=" * 50)
    print("Database Initialization")
    print("=" * 50)

    try:
        create_tables()
        if args.my_channel:
            seed_my_channel(args.my_channel)
        print("=" * 50)
        print("✓ Database initialized successfully!")
        print("=" * 50)
    except Exception as e:
        print(f"✗ Database initialization failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
