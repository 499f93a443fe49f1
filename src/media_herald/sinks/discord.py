"""Discord sink.

Uses discord.py to post an embed with link buttons to a text channel.
The client is owned by the caller; this sink only resolves channels and
sends messages.
"""

from __future__ import annotations

import logging
from typing import Any

from media_herald.errors import DispatchError
from media_herald.models import NotificationPayload

logger = logging.getLogger("media_herald.discord")

_FALLBACK_COLOR = 0xCBA6F7


def parse_color(value: str | None) -> int:
    """Parse ``"#rrggbb"`` into an int, falling back to the default color."""
    text = (value or "").strip().lstrip("#")
    try:
        return int(text, 16) if len(text) == 6 else _FALLBACK_COLOR
    except ValueError:
        return _FALLBACK_COLOR


def build_embed(payload: NotificationPayload) -> Any:
    """Build a ``discord.Embed`` for a payload."""
    import discord

    embed = discord.Embed(
        title=payload.title,
        url=payload.url,
        color=discord.Color(parse_color(payload.color)),
    )
    embed.set_author(name=payload.author)
    embed.add_field(name=payload.header, value=payload.overview, inline=False)
    embed.add_field(name="Genre", value=payload.genres, inline=True)
    embed.add_field(name="Runtime", value=payload.runtime, inline=True)
    embed.add_field(name="Rating", value=payload.rating, inline=True)
    if payload.image_url:
        embed.set_image(url=payload.image_url)
    return embed


def build_view(payload: NotificationPayload) -> Any:
    """Build a ``discord.ui.View`` of link buttons."""
    import discord

    view = discord.ui.View(timeout=None)
    for button in payload.buttons:
        view.add_item(
            discord.ui.Button(style=discord.ButtonStyle.link, label=button.label, url=button.url)
        )
    return view


class DiscordSink:
    """Posts notifications to Discord text channels.

    Args:
        client: A started ``discord.Client``.
    """

    def __init__(self, client: Any) -> None:
        self._client = client

    async def _resolve_channel(self, channel_id: str) -> Any:
        import discord

        try:
            cid = int(channel_id)
        except (TypeError, ValueError) as e:
            raise DispatchError(f"Invalid Discord channel id: {channel_id!r}") from e

        channel = self._client.get_channel(cid)
        if channel is not None:
            return channel
        try:
            return await self._client.fetch_channel(cid)
        except discord.DiscordException as e:
            raise DispatchError(f"Discord channel {channel_id} not found: {e}") from e

    async def send(self, channel_id: str, payload: NotificationPayload) -> None:
        import discord

        channel = await self._resolve_channel(channel_id)
        if not hasattr(channel, "send"):
            raise DispatchError(f"Discord channel {channel_id} is not messageable")
        try:
            await channel.send(embed=build_embed(payload), view=build_view(payload))
        except discord.DiscordException as e:
            raise DispatchError(f"Failed to send Discord message: {e}") from e
        logger.info("Sent notification for: %s", payload.title)
