"""Dispatcher: delivers composed payloads to a sink and reports the outcome."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from media_herald.errors import DispatchError
from media_herald.models import NotificationPayload
from media_herald.sinks.base import NotificationSink

logger = logging.getLogger("media_herald.dispatcher")


@dataclass(frozen=True)
class DispatchOutcome:
    channel_id: str
    ok: bool
    error: str | None = None


class Dispatcher:
    """Sends payloads through a sink. Failures are logged, never retried."""

    def __init__(self, sink: NotificationSink) -> None:
        self._sink = sink

    async def dispatch(self, channel_id: str, payload: NotificationPayload) -> DispatchOutcome:
        try:
            await self._sink.send(channel_id, payload)
        except DispatchError as e:
            logger.error("Dispatch to channel %s failed: %s", channel_id, e)
            return DispatchOutcome(channel_id=channel_id, ok=False, error=str(e))
        except Exception as e:
            logger.exception("Unexpected dispatch failure (channel=%s)", channel_id)
            return DispatchOutcome(channel_id=channel_id, ok=False, error=str(e))
        return DispatchOutcome(channel_id=channel_id, ok=True)
