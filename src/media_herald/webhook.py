"""Inbound webhook endpoint (aiohttp.web).

``POST /webhook/{guild_id}`` accepts one item-added payload from the
media server. The response only acknowledges receipt: debounced and
suppressed events answer 200 just like sent ones, so the sender never
depends on the engine's timing decisions.
"""

from __future__ import annotations

import logging

from aiohttp import web

from media_herald.config import ConfigStore
from media_herald.engine import NotificationEngine
from media_herald.errors import ConfigurationIncompleteError, MalformedEventError
from media_herald.models import HandleOutcome, ItemAddedEvent, parse_event

logger = logging.getLogger("media_herald.webhook")

ENGINE_KEY = web.AppKey("engine", NotificationEngine)
CONFIG_STORE_KEY = web.AppKey("config_store", object)

_ITEM_ADDED = "ItemAdded"


def _outcome_text(outcome: HandleOutcome, event: ItemAddedEvent) -> str:
    name = event.name or event.item_id
    if outcome is HandleOutcome.SENT:
        return f"OK: Notification sent for {name}."
    if outcome is HandleOutcome.FAILED:
        return f"OK: Notification for {name} could not be delivered."
    if outcome is HandleOutcome.SUPPRESSED:
        return f"OK: Notification for {name} skipped, a higher-level notification was already sent."
    return f"OK: TV notification for {getattr(event, 'series_id', None)} is debounced."


async def handle_webhook(request: web.Request) -> web.Response:
    guild_id = request.match_info["guild_id"]
    try:
        try:
            data = await request.json()
        except ValueError as e:
            raise MalformedEventError("Body is not JSON") from e
        if not isinstance(data, dict) or not data.get("ItemId"):
            raise MalformedEventError("Missing ItemId")

        if data.get("NotificationType") != _ITEM_ADDED:
            return web.Response(text="OK: Notification type ignored.")

        store: ConfigStore = request.app[CONFIG_STORE_KEY]
        config = store.get(guild_id)
        if config is None or not config.is_notification_ready:
            raise ConfigurationIncompleteError(guild_id)

        event = parse_event(data)
        outcome = await request.app[ENGINE_KEY].handle(config, event)
    except MalformedEventError as e:
        logger.warning("Rejected webhook for guild %s: %s", guild_id, e)
        return web.Response(status=400, text="No valid data")
    except ConfigurationIncompleteError:
        logger.warning(
            "Webhook received for guild %s, but it's not fully configured for notifications.",
            guild_id,
        )
        return web.Response(
            status=404, text="Error: Guild configuration incomplete for notifications."
        )
    except Exception:
        logger.exception("Error handling webhook (guild=%s)", guild_id)
        return web.Response(status=500, text="Error")

    return web.Response(text=_outcome_text(outcome, event))


async def handle_health(request: web.Request) -> web.Response:
    engine = request.app[ENGINE_KEY]
    return web.json_response(
        {
            "status": "ok",
            "pending": len(engine.coordinator),
            "suppressed": len(engine.tracker),
        }
    )


def create_app(engine: NotificationEngine, config_store: ConfigStore) -> web.Application:
    """Build the aiohttp application serving the webhook routes."""
    app = web.Application()
    app[ENGINE_KEY] = engine
    app[CONFIG_STORE_KEY] = config_store
    app.router.add_post("/webhook/{guild_id}", handle_webhook)
    app.router.add_get("/health", handle_health)
    return app
