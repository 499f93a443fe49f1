"""Notification engine.

Wires the classifier, debounce coordinator, suppression tracker,
composer and dispatcher together. Callers hand it one validated event
and the guild's config; the engine decides whether to notify now, later,
or not at all.

Aggregation keys are scoped per guild: two guilds watching the same
media server keep separate timers and suppression records.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable
from typing import Any

from media_herald.classifier import classify
from media_herald.composer import NotificationComposer
from media_herald.debounce import DebounceCoordinator
from media_herald.dispatcher import Dispatcher
from media_herald.models import (
    GuildConfig,
    HandleOutcome,
    ItemAddedEvent,
    Level,
    SubmitOutcome,
)
from media_herald.suppression import SuppressionTracker

logger = logging.getLogger("media_herald.engine")


class NotificationEngine:
    """Decides whether, when and what to notify for item-added events.

    Args:
        composer: Builds payloads from events.
        dispatcher: Delivers payloads.
        debounce_s: Debounce window from the first event of a series.
        suppression_s: How long a sent level suppresses lower ones.
    """

    def __init__(
        self,
        composer: NotificationComposer,
        dispatcher: Dispatcher,
        *,
        debounce_s: float = 30.0,
        suppression_s: float = 24 * 60 * 60,
    ) -> None:
        self._composer = composer
        self._dispatcher = dispatcher
        self.tracker = SuppressionTracker(retention_s=suppression_s)
        self.coordinator = DebounceCoordinator(
            self._flush,
            tracker=self.tracker,
            window_s=debounce_s,
        )

    async def handle(self, config: GuildConfig, event: ItemAddedEvent) -> HandleOutcome:
        """Route one event.

        Events without an aggregation key are composed and dispatched
        before this returns. Series events are handed to the coordinator
        and return immediately.
        """
        classification = classify(event)
        if classification.aggregation_key is None:
            delivered = await self._notify(config, event)
            return HandleOutcome.SENT if delivered else HandleOutcome.FAILED

        key = (config.guild_id, classification.aggregation_key)
        outcome = self.coordinator.submit(key, event, classification.level, config)
        if outcome is SubmitOutcome.SUPPRESSED:
            return HandleOutcome.SUPPRESSED
        return HandleOutcome.DEBOUNCED

    async def _flush(
        self, key: Hashable, event: ItemAddedEvent, level: Level, context: Any
    ) -> bool:
        logger.info("Flushing key %s with %s %s", key, level.name, event.item_id)
        return await self._notify(context, event)

    async def _notify(self, config: GuildConfig, event: ItemAddedEvent) -> bool:
        payload = await self._composer.compose(event, config)
        outcome = await self._dispatcher.dispatch(config.notification_channel_id or "", payload)
        if outcome.ok:
            logger.info("Notification sent for %s (%s)", payload.title, event.item_type.value)
        return outcome.ok

    def shutdown(self) -> None:
        """Cancel every pending flush and retention timer."""
        pending = len(self.coordinator)
        self.coordinator.cancel_all()
        self.tracker.clear()
        if pending:
            logger.warning("Shutdown dropped %d pending aggregation(s)", pending)
