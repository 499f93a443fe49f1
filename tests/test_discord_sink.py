"""Tests for the Discord sink (embed building and channel resolution)."""

import pytest

import discord

from media_herald.errors import DispatchError
from media_herald.models import ItemType, Level, LinkButton, NotificationPayload
from media_herald.sinks.discord import DiscordSink, build_embed, parse_color


def _payload(**overrides):
    values = dict(
        author="📺 New season added!",
        title="Lost (2004) - Season 2",
        url="https://jf/web/index.html#!/details?id=x&serverId=s",
        color="#cba6f7",
        header="Created by J. J. Abrams",
        overview="Survivors of a plane crash.",
        genres="Drama",
        runtime="45 min",
        rating="8.3/10",
        item_type=ItemType.SEASON,
        level=Level.SEASON,
        image_url="https://image.tmdb.org/t/p/w780/x.jpg",
        buttons=[LinkButton("IMDb", "https://www.imdb.com/title/tt0411008/")],
    )
    values.update(overrides)
    return NotificationPayload(**values)


class FakeChannel:
    def __init__(self):
        self.sent = []

    async def send(self, **kwargs):
        self.sent.append(kwargs)


class FakeClient:
    def __init__(self, cached=None, fetched=None):
        self.cached = cached or {}
        self.fetched = fetched or {}

    def get_channel(self, cid):
        return self.cached.get(cid)

    async def fetch_channel(self, cid):
        if cid not in self.fetched:
            raise discord.DiscordException("Unknown Channel")
        return self.fetched[cid]


def test_parse_color():
    assert parse_color("#cba6f7") == 0xCBA6F7
    assert parse_color("a6d189") == 0xA6D189
    assert parse_color("nope") == 0xCBA6F7
    assert parse_color(None) == 0xCBA6F7


def test_build_embed():
    embed = build_embed(_payload())
    assert embed.title == "Lost (2004) - Season 2"
    assert embed.author.name == "📺 New season added!"
    assert embed.color.value == 0xCBA6F7
    assert [f.name for f in embed.fields] == ["Created by J. J. Abrams", "Genre", "Runtime", "Rating"]
    assert embed.fields[3].value == "8.3/10"
    assert embed.image.url == "https://image.tmdb.org/t/p/w780/x.jpg"


def test_build_embed_without_image():
    embed = build_embed(_payload(image_url=None))
    assert embed.image.url is None


@pytest.mark.asyncio
async def test_send_to_cached_channel():
    channel = FakeChannel()
    sink = DiscordSink(FakeClient(cached={100: channel}))
    await sink.send("100", _payload())

    assert len(channel.sent) == 1
    assert channel.sent[0]["embed"].title == "Lost (2004) - Season 2"
    assert [item.label for item in channel.sent[0]["view"].children] == ["IMDb"]


@pytest.mark.asyncio
async def test_send_fetches_uncached_channel():
    channel = FakeChannel()
    sink = DiscordSink(FakeClient(fetched={100: channel}))
    await sink.send("100", _payload())
    assert len(channel.sent) == 1


@pytest.mark.asyncio
async def test_unknown_channel():
    sink = DiscordSink(FakeClient())
    with pytest.raises(DispatchError, match="not found"):
        await sink.send("100", _payload())


@pytest.mark.asyncio
async def test_invalid_channel_id():
    sink = DiscordSink(FakeClient())
    with pytest.raises(DispatchError, match="Invalid"):
        await sink.send("general", _payload())
