"""Shared fakes for engine, dispatcher and webhook tests."""

import pytest

from media_herald.errors import DispatchError
from media_herald.models import GuildConfig


class RecordingSink:
    """Sink that records deliveries, or fails for chosen channels."""

    def __init__(self, failing_channels: set[str] | None = None):
        self.sent: list[tuple[str, object]] = []
        self.failing_channels = failing_channels or set()

    async def send(self, channel_id, payload):
        if channel_id in self.failing_channels:
            raise DispatchError(f"channel {channel_id} not found")
        self.sent.append((channel_id, payload))


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def guild_config():
    return GuildConfig(
        guild_id="g1",
        notification_channel_id="100",
        jellyfin_server_url="https://jf.example.com",
    )
