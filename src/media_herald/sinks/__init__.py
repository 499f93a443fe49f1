"""Notification sinks (chat platforms)."""

from .base import NotificationSink

__all__ = [
    "NotificationSink",
    # Lazy loaded (requires discord.py)
    "DiscordSink",
]


def __getattr__(name: str):
    """Lazy import for the Discord sink so discord.py stays optional."""
    if name == "DiscordSink":
        try:
            from media_herald.sinks.discord import DiscordSink

            return DiscordSink
        except ImportError:
            raise ImportError(
                "DiscordSink requires discord.py. "
                "Install with: pip install media-herald[discord]"
            ) from None
    raise AttributeError(f"module 'media_herald.sinks' has no attribute {name!r}")
