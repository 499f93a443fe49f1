"""Protocol for notification sinks.

A sink delivers a composed :class:`NotificationPayload` to a channel on
some chat platform. Sinks raise on failure; the dispatcher turns those
failures into logged, non-fatal outcomes.
"""

from __future__ import annotations

from typing import Protocol

from media_herald.models import NotificationPayload


class NotificationSink(Protocol):
    """Delivers notifications to a chat channel."""

    async def send(self, channel_id: str, payload: NotificationPayload) -> None:
        """Deliver ``payload`` to ``channel_id``.

        Raises:
            DispatchError: If the channel cannot be resolved or the
                platform rejects the message.
        """
        ...
