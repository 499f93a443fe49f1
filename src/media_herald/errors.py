"""Exception types raised across media-herald."""

from __future__ import annotations


class HeraldError(Exception):
    """Base class for expected, classified failures."""


class MalformedEventError(HeraldError):
    """Raised when an incoming payload lacks required identifying fields.

    The webhook layer answers these with 400 and never retries them.
    """


class ConfigurationIncompleteError(HeraldError):
    """Raised when a guild is not set up for notifications."""


class ProviderError(HeraldError):
    """Raised when a metadata provider lookup fails.

    The composer catches these and degrades the payload instead.
    """


class DispatchError(HeraldError):
    """Raised by sinks when a channel cannot be resolved or a send fails."""
