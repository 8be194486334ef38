"""
Channel and snapshot persistence.

Provides read and write access to the tracked channels:
- Channel registration, visibility and pin flags
- Daily snapshot upserts and deletion
- Loading channels together with their date-sorted snapshot history
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional

from sqlalchemy import desc
from sqlalchemy.orm import Session

from analytics.metrics import parse_snapshot_date
from db.base import utcnow
from db.models.channel import Channel, generate_channel_id
from db.models.snapshot import Snapshot

logger = logging.getLogger(__name__)


class ChannelNotFoundError(LookupError):
    """Raised when a channel id does not exist."""


class SnapshotNotFoundError(LookupError):
    """Raised when a snapshot id does not exist."""


@dataclass
class ChannelRecord:
    """A channel together with its snapshots, sorted by date ascending."""

    channel: Channel
    snapshots: list[Snapshot] = field(default_factory=list)

    @property
    def id(self) -> str:
        return self.channel.id

    @property
    def is_pinned(self) -> bool:
        return bool(self.channel.is_pinned)


def today() -> date:
    return utcnow().date()


def current_time_label() -> str:
    """Local wall-clock time stored alongside a snapshot for display."""
    return datetime.now().strftime("%H:%M:%S")


def _as_date(value: Any) -> date:
    if value is None or value == "":
        return today()
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_snapshot_date(value).date()


class ChannelStore:
    """
    Repository over a SQLAlchemy session.

    The caller owns the session (FastAPI's ``get_db`` dependency or a test
    fixture); every write commits, and rolls back before re-raising on error.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    # -------------------------------------------------------------------------
    # READ METHODS
    # -------------------------------------------------------------------------

    def _snapshots_by_channel(self, channel_ids: list[str]) -> dict[str, list[Snapshot]]:
        grouped: dict[str, list[Snapshot]] = defaultdict(list)
        if not channel_ids:
            return grouped

        rows = (
            self.session.query(Snapshot)
            .filter(Snapshot.channel_id.in_(channel_ids))
            .order_by(Snapshot.date, Snapshot.id)
            .all()
        )
        for row in rows:
            grouped[row.channel_id].append(row)
        return grouped

    def list_channels(self, include_hidden: bool = False) -> list[ChannelRecord]:
        """
        Load channels with their snapshot history, most recently synced first.

        Args:
            include_hidden: Also return soft-deleted (hidden) channels.
        """
        query = self.session.query(Channel)
        if not include_hidden:
            query = query.filter(Channel.is_hidden.is_(False))
        channels = query.order_by(desc(Channel.last_sync)).all()

        snapshots = self._snapshots_by_channel([c.id for c in channels])
        return [ChannelRecord(channel=c, snapshots=snapshots.get(c.id, [])) for c in channels]

    def get_channel(self, channel_id: str) -> ChannelRecord:
        """
        Load one channel with its snapshots.

        Raises:
            ChannelNotFoundError: If the channel does not exist.
        """
        channel = self.session.get(Channel, channel_id)
        if channel is None:
            raise ChannelNotFoundError(f"Channel {channel_id} not found")

        snapshots = self._snapshots_by_channel([channel.id])
        return ChannelRecord(channel=channel, snapshots=snapshots.get(channel.id, []))

    def get_my_channel(self) -> Optional[ChannelRecord]:
        """Return the channel flagged as the user's own, or None."""
        channel = (
            self.session.query(Channel)
            .filter(Channel.is_my_channel.is_(True))
            .first()
        )
        if channel is None:
            return None

        snapshots = self._snapshots_by_channel([channel.id])
        return ChannelRecord(channel=channel, snapshots=snapshots.get(channel.id, []))

    def _require_channel(self, channel_id: str) -> Channel:
        channel = self.session.get(Channel, channel_id)
        if channel is None:
            raise ChannelNotFoundError(f"Channel {channel_id} not found")
        return channel

    # -------------------------------------------------------------------------
    # WRITE METHODS
    # -------------------------------------------------------------------------

    def add_channel(self, data: dict[str, Any], initial_stats: dict[str, Any]) -> Channel:
        """
        Register a channel, or revive an existing registration.

        An existing channel is matched by id, or by ``custom_url`` when no id
        is given. For an existing channel the avatar is refreshed and a hidden
        channel is made visible again; no snapshot is added. New channels get
        the initial snapshot dated today.

        Args:
            data: Channel fields (id, channel_name, influencer_name, country,
                custom_url, avatar_url, youtube_join_date, is_my_channel).
            initial_stats: Counters for the first snapshot
                (subscribers, views, videos).

        Returns:
            The existing or newly created Channel.
        """
        try:
            channel_id = data.get("id")
            if channel_id:
                existing = self.session.get(Channel, channel_id)
            elif data.get("custom_url"):
                existing = (
                    self.session.query(Channel)
                    .filter(Channel.custom_url == data["custom_url"])
                    .first()
                )
            else:
                existing = None

            if existing is not None:
                avatar_url = data.get("avatar_url")
                if avatar_url and avatar_url != existing.avatar_url:
                    existing.avatar_url = avatar_url

                if existing.is_hidden:
                    existing.is_hidden = False
                    existing.custom_url = data.get("custom_url") or existing.custom_url
                    logger.info(f"[Store] Restored hidden channel {existing.id}")

                self.session.commit()
                return existing

            channel = Channel(
                id=channel_id or generate_channel_id(),
                channel_name=data.get("channel_name") or "Untitled",
                influencer_name=data.get("influencer_name"),
                country=data.get("country"),
                custom_url=data.get("custom_url") or "",
                avatar_url=data.get("avatar_url"),
                youtube_join_date=_as_date(data["youtube_join_date"]) if data.get("youtube_join_date") else None,
                last_sync=utcnow(),
                is_my_channel=bool(data.get("is_my_channel", False)),
                is_hidden=False,
                is_pinned=False,
            )
            self.session.add(channel)
            self.session.flush()

            self.session.add(
                Snapshot(
                    channel_id=channel.id,
                    date=today(),
                    subscribers=initial_stats.get("subscribers") or 0,
                    views=initial_stats.get("views") or 0,
                    videos=initial_stats.get("videos") or 0,
                    time_registered=current_time_label(),
                )
            )
            self.session.commit()
            logger.info(f"[Store] Added channel {channel.id} ({channel.channel_name})")
            return channel
        except Exception as e:
            self.session.rollback()
            logger.error(f"Error adding channel: {e}")
            raise

    def upsert_snapshot(self, channel_id: str, stats: dict[str, Any]) -> Snapshot:
        """
        Save the counters for one day, overwriting any snapshot on that date.

        Args:
            channel_id: Channel id.
            stats: subscribers, views, videos and an optional ``date``
                (defaults to today).

        Raises:
            ChannelNotFoundError: If the channel does not exist.
        """
        self._require_channel(channel_id)
        snapshot_date = _as_date(stats.get("date"))

        try:
            snapshot = (
                self.session.query(Snapshot)
                .filter(
                    Snapshot.channel_id == channel_id,
                    Snapshot.date == snapshot_date,
                )
                .first()
            )

            if snapshot is None:
                snapshot = Snapshot(channel_id=channel_id, date=snapshot_date)
                self.session.add(snapshot)

            snapshot.subscribers = stats.get("subscribers") or 0
            snapshot.views = stats.get("views") or 0
            snapshot.videos = stats.get("videos") or 0
            snapshot.time_registered = current_time_label()
            snapshot.created_at = utcnow()

            self.session.commit()
            logger.debug(f"[Store] Saved snapshot {snapshot_date} for channel {channel_id}")
            return snapshot
        except Exception as e:
            self.session.rollback()
            logger.error(f"Error saving snapshot: {e}")
            raise

    def delete_snapshot(self, snapshot_id: int) -> None:
        """
        Raises:
            SnapshotNotFoundError: If the snapshot does not exist.
        """
        snapshot = self.session.get(Snapshot, snapshot_id)
        if snapshot is None:
            raise SnapshotNotFoundError(f"Snapshot {snapshot_id} not found")

        try:
            self.session.delete(snapshot)
            self.session.commit()
        except Exception as e:
            self.session.rollback()
            logger.error(f"Error deleting snapshot: {e}")
            raise

    def _update_channel(self, channel_id: str, **changes: Any) -> Channel:
        channel = self._require_channel(channel_id)
        try:
            for name, value in changes.items():
                setattr(channel, name, value)
            self.session.commit()
            return channel
        except Exception as e:
            self.session.rollback()
            logger.error(f"Error updating channel {channel_id}: {e}")
            raise

    def set_hidden(self, channel_id: str, hidden: bool) -> Channel:
        """Soft-delete (hide) or restore a channel."""
        return self._update_channel(channel_id, is_hidden=hidden)

    def toggle_pin(self, channel_id: str) -> Channel:
        channel = self._require_channel(channel_id)
        return self._update_channel(channel_id, is_pinned=not channel.is_pinned)

    def update_avatar(self, channel_id: str, avatar_url: str) -> Channel:
        return self._update_channel(channel_id, avatar_url=avatar_url)

    def update_category(self, channel_id: str, category: str) -> Channel:
        return self._update_channel(channel_id, custom_category=category)

    def mark_synced(self, channel_id: str) -> Channel:
        return self._update_channel(channel_id, last_sync=utcnow())

    def delete_channel(self, channel_id: str) -> None:
        """Hard-delete a channel and all of its snapshots."""
        channel = self._require_channel(channel_id)
        try:
            self.session.query(Snapshot).filter(
                Snapshot.channel_id == channel_id
            ).delete(synchronize_session=False)
            self.session.delete(channel)
            self.session.commit()
            logger.info(f"[Store] Deleted channel {channel_id}")
        except Exception as e:
            self.session.rollback()
            logger.error(f"Error deleting channel: {e}")
            raise
