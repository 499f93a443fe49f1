"""media-herald: debounced media-server "item added" notifications for chat."""

from media_herald.classifier import classify
from media_herald.composer import NotificationComposer
from media_herald.debounce import DebounceCoordinator
from media_herald.dispatcher import DispatchOutcome, Dispatcher
from media_herald.engine import NotificationEngine
from media_herald.models import (
    GuildConfig,
    HandleOutcome,
    ItemType,
    Level,
    NotificationPayload,
    SubmitOutcome,
    parse_event,
)
from media_herald.suppression import SuppressionTracker

__all__ = [
    # Engine components
    "classify",
    "DebounceCoordinator",
    "SuppressionTracker",
    "NotificationComposer",
    "Dispatcher",
    "DispatchOutcome",
    "NotificationEngine",
    # Models
    "GuildConfig",
    "HandleOutcome",
    "ItemType",
    "Level",
    "NotificationPayload",
    "SubmitOutcome",
    "parse_event",
    # Sinks (lazy loaded)
    "DiscordSink",
]


def __getattr__(name: str):
    """Lazy import for the Discord sink so discord.py stays optional."""
    if name == "DiscordSink":
        from media_herald.sinks import DiscordSink

        return DiscordSink
    raise AttributeError(f"module 'media_herald' has no attribute {name!r}")
