"""
Unit tests for YouTube channel sync (services/sync.py).
"""

from unittest.mock import MagicMock

import pytest

from clients.youtube_data import ChannelLookup, ChannelLookupError
from services.channel_store import today
from services.sync import choose_lookup_input, sync_all, sync_channel

CHANNEL_ID = "UCabcdefghijklmnopqrstuv"


def _lookup(subscribers=20000, avatar_url="https://yt3.ggpht.com/new.jpg"):
    return ChannelLookup(
        channel={"id": CHANNEL_ID},
        stats={"date": today().isoformat(), "subscribers": subscribers, "views": 1000000, "videos": 95},
        avatar_url=avatar_url,
    )


class TestChooseLookupInput:

    def test_uc_channel_uses_link(self):
        channel = MagicMock(id=CHANNEL_ID, custom_url="", influencer_name=None, channel_name="X")
        assert choose_lookup_input(channel) == f"https://youtube.com/channel/{CHANNEL_ID}"

    def test_handle_for_manual_channel(self):
        channel = MagicMock(id="uuid-1", influencer_name="@fulano", channel_name="Canal do Fulano")
        assert choose_lookup_input(channel) == "@fulano"

    @pytest.mark.parametrize("influencer_name", [None, "", "ab", "Fulano de Tal"])
    def test_name_for_manual_channel_without_handle(self, influencer_name):
        channel = MagicMock(id="uuid-1", influencer_name=influencer_name, channel_name="Canal do Fulano")
        assert choose_lookup_input(channel) == "Canal do Fulano"


class TestSyncChannel:

    def test_records_snapshot_and_avatar(self, store, registered_channel):
        client = MagicMock()
        client.fetch_channel_data.return_value = _lookup()

        sync_channel(store, client, registered_channel)
        record = store.get_channel(CHANNEL_ID)

        assert len(record.snapshots) == 1
        assert record.snapshots[0].subscribers == 20000
        assert record.channel.avatar_url == "https://yt3.ggpht.com/new.jpg"

    def test_lookup_error_propagates(self, store, registered_channel):
        client = MagicMock()
        client.fetch_channel_data.side_effect = ChannelLookupError("gone")

        with pytest.raises(ChannelLookupError):
            sync_channel(store, client, registered_channel)


class TestSyncAll:

    def test_failures_do_not_stop_the_batch(self, store, registered_channel, initial_stats):
        other = store.add_channel({"channel_name": "Manual", "influencer_name": "@manual"}, initial_stats)
        client = MagicMock()
        client.fetch_channel_data.side_effect = [ChannelLookupError("gone"), _lookup()]
        progress = []

        report = sync_all(store, client, [other, registered_channel], on_progress=progress.append)

        assert report.processed == 2
        assert report.updated == [CHANNEL_ID]
        assert list(report.failed) == [other.id]
        assert progress == [50, 100]
