"""Suppression tracker with timed retention.

Remembers, per aggregation key, the highest granularity level already
notified. A record lives for a fixed retention period after its last
update; while it lives, flushes at or below its level are dropped.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Hashable

from media_herald.models import Level, SuppressionRecord

logger = logging.getLogger("media_herald.suppression")

_DEFAULT_RETENTION_S = 24 * 60 * 60  # 24 hours


class SuppressionTracker:
    """Per-key record of the highest level sent.

    Args:
        retention_s: Seconds a record lives after its last update
            (default 24 hours).
    """

    def __init__(self, *, retention_s: float = _DEFAULT_RETENTION_S) -> None:
        self._retention_s = retention_s
        self._records: dict[Hashable, SuppressionRecord] = {}
        self._expiry: dict[Hashable, asyncio.TimerHandle] = {}

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get(self, key: Hashable) -> SuppressionRecord | None:
        """Return the live record for ``key``, or None."""
        return self._records.get(key)

    def is_suppressed(self, key: Hashable, level: Level) -> bool:
        """True if ``level`` is at or below the level already sent for ``key``."""
        record = self._records.get(key)
        return record is not None and level <= record.level

    def __len__(self) -> int:
        return len(self._records)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def set(self, key: Hashable, level: Level) -> SuppressionRecord:
        """Create or refresh the record for ``key``.

        The stored level never decreases while the record lives. The
        retention timer restarts from now.
        """
        existing = self._records.get(key)
        if existing is not None and existing.level > level:
            level = existing.level
        record = SuppressionRecord(level=Level(level), updated_at=time.time())
        self._records[key] = record

        handle = self._expiry.pop(key, None)
        if handle:
            handle.cancel()
        loop = asyncio.get_running_loop()
        self._expiry[key] = loop.call_later(self._retention_s, self.on_suppression_expired, key)

        logger.debug("Suppression set: key=%s level=%s", key, record.level.name)
        return record

    def on_suppression_expired(self, key: Hashable) -> None:
        """Timer callback: drop the record for ``key``."""
        self._expiry.pop(key, None)
        if self._records.pop(key, None) is not None:
            logger.info("Cleaned up sent notification state for key %s", key)

    expire = on_suppression_expired

    def clear(self) -> None:
        """Cancel all retention timers and forget every record."""
        for handle in self._expiry.values():
            handle.cancel()
        self._expiry.clear()
        self._records.clear()
