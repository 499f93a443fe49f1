"""Service entry point.

Runs the Discord client and the webhook HTTP server on one event loop.
All debounce and suppression state is process-local and lost on
shutdown.
"""

from __future__ import annotations

import asyncio
import logging

from aiohttp import web

from media_herald.composer import NotificationComposer
from media_herald.config import JsonConfigStore, Settings
from media_herald.dispatcher import Dispatcher
from media_herald.engine import NotificationEngine
from media_herald.providers import OmdbClient, TmdbClient
from media_herald.webhook import create_app

logger = logging.getLogger("media_herald.app")


async def serve(settings: Settings) -> None:
    """Start the Discord client and webhook server, run until cancelled."""
    import discord

    from media_herald.sinks.discord import DiscordSink

    if not settings.discord_token:
        raise RuntimeError("DISCORD_TOKEN is not set")

    store = JsonConfigStore(settings.config_path)
    store.load()

    client = discord.Client(intents=discord.Intents.default())

    @client.event
    async def on_ready():
        logger.info("Discord client ready: %s", client.user)

    tmdb = TmdbClient(settings.tmdb_api_key)
    omdb = OmdbClient(settings.omdb_api_key)
    if not tmdb.enabled:
        logger.warning("TMDB_API_KEY not set; notifications will lack details and images")
    if not omdb.enabled:
        logger.warning("OMDB_API_KEY not set; runtime and rating fall back to N/A")

    engine = NotificationEngine(
        NotificationComposer(tmdb, omdb),
        Dispatcher(DiscordSink(client)),
        debounce_s=settings.debounce_seconds,
        suppression_s=settings.suppression_seconds,
    )

    runner = web.AppRunner(create_app(engine, store))
    await runner.setup()
    site = web.TCPSite(runner, settings.host, settings.port)
    await site.start()
    logger.info("Webhook server listening on %s:%s", settings.host, settings.port)

    try:
        await client.start(settings.discord_token)
    finally:
        engine.shutdown()
        await runner.cleanup()
        await tmdb.close()
        await omdb.close()
        if not client.is_closed():
            await client.close()
        logger.info("Stopped")


def main() -> None:
    settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        asyncio.run(serve(settings))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
