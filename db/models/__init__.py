"""
SQLAlchemy models for the competitor tracker.

Models:
- Channel: Monitored YouTube channels with presentation flags
- Snapshot: Daily subscriber/view/video counts per channel
"""

from db.models.channel import Channel
from db.models.snapshot import Snapshot

__all__ = [
    "Channel",
    "Snapshot",
]
