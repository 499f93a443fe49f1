"""Debounce coordinator for series notifications.

When a media server adds a season it fires one event for the season and
one for every episode within a few seconds. The coordinator holds the
most specific event seen per aggregation key and flushes it once, a
fixed window after the first event arrived. Later events never push the
flush back.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Hashable
from dataclasses import dataclass, field
from typing import Any

from media_herald.models import FlushCallback, ItemAddedEvent, Level, SubmitOutcome
from media_herald.suppression import SuppressionTracker

logger = logging.getLogger("media_herald.debounce")

_DEFAULT_WINDOW_S = 30.0


@dataclass
class PendingAggregation:
    """The held event for one key, plus its scheduled flush."""

    event: ItemAddedEvent
    level: Level
    context: Any = None
    created_at: float = field(default_factory=time.time)
    task: asyncio.Task | None = None


class DebounceCoordinator:
    """Coalesces events per key and flushes the most specific one.

    Args:
        flush_callback: Async function called with
            ``(key, event, level, context)`` when a window closes. Returns
            True if the notification was delivered, which records the
            level with the suppression tracker.
        tracker: Suppression tracker consulted on submit and flush.
        window_s: Seconds from the first event to the flush (default 30).
    """

    def __init__(
        self,
        flush_callback: FlushCallback,
        *,
        tracker: SuppressionTracker,
        window_s: float = _DEFAULT_WINDOW_S,
    ) -> None:
        self._flush_callback = flush_callback
        self._tracker = tracker
        self._window_s = window_s
        self._pending: dict[Hashable, PendingAggregation] = {}

    # ------------------------------------------------------------------
    # Submit
    # ------------------------------------------------------------------

    def submit(
        self,
        key: Hashable,
        event: ItemAddedEvent,
        level: Level,
        context: Any = None,
    ) -> SubmitOutcome:
        """Offer an event for ``key``.

        The held event is replaced when ``level`` is greater than or equal
        to the held level, so the latest event wins among equals. The
        flush time is fixed by the first event.
        """
        if self._tracker.is_suppressed(key, level):
            record = self._tracker.get(key)
            logger.info(
                "Skipped %s for key %s: %s already sent %.0fs ago",
                level.name,
                key,
                record.level.name if record else "?",
                time.time() - record.updated_at if record else 0.0,
            )
            return SubmitOutcome.SUPPRESSED

        pending = self._pending.get(key)
        if pending is None:
            pending = PendingAggregation(event=event, level=level, context=context)
            self._pending[key] = pending
            pending.task = asyncio.create_task(self._flush_after_delay(key))
            logger.info(
                "Debouncing key %s for %.1fs (first: %s)", key, self._window_s, level.name
            )
            return SubmitOutcome.SCHEDULED

        if level >= pending.level:
            pending.event = event
            pending.level = level
            pending.context = context
            return SubmitOutcome.MERGED
        return SubmitOutcome.KEPT

    # ------------------------------------------------------------------
    # Flush
    # ------------------------------------------------------------------

    async def _flush_after_delay(self, key: Hashable) -> None:
        """Wait out the window then flush."""
        try:
            await asyncio.sleep(self._window_s)
        except asyncio.CancelledError:
            return
        await self.on_flush_due(key)

    async def on_flush_due(self, key: Hashable) -> bool:
        """Flush the pending aggregation for ``key``.

        Returns True if a notification was delivered.
        """
        pending = self._pending.pop(key, None)
        if pending is None:
            return False
        logger.info(
            "Flushing %s for key %s, %.1fs after first event",
            pending.level.name,
            key,
            time.time() - pending.created_at,
        )

        # A flush for the same key may have completed while this one waited.
        if self._tracker.is_suppressed(key, pending.level):
            logger.info("Flush for key %s suppressed at %s", key, pending.level.name)
            return False

        try:
            delivered = await self._flush_callback(
                key, pending.event, pending.level, pending.context
            )
        except Exception:
            logger.exception("Flush failed for key %s", key)
            return False

        if delivered:
            self._tracker.set(key, pending.level)
        return bool(delivered)

    # ------------------------------------------------------------------
    # Accessors / cleanup
    # ------------------------------------------------------------------

    def get_pending(self, key: Hashable) -> PendingAggregation | None:
        """Return the pending aggregation for ``key``, or None."""
        return self._pending.get(key)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._pending

    def __len__(self) -> int:
        return len(self._pending)

    def cancel_all(self) -> None:
        """Cancel every scheduled flush. Held events are discarded."""
        for pending in self._pending.values():
            if pending.task:
                pending.task.cancel()
        self._pending.clear()
