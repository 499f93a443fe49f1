"""Formatting helpers for notification text.

Turns event fields and provider values into the short strings shown in
a notification: headings, runtimes, links, and length-limited field
values.
"""

from __future__ import annotations

import re

from media_herald.models import ItemAddedEvent, ItemType

NOT_AVAILABLE = "N/A"
NO_DESCRIPTION = "No description available."

TMDB_IMAGE_BASE = "https://image.tmdb.org/t/p/w780"

# Discord embed limits
TITLE_LIMIT = 256
FIELD_VALUE_LIMIT = 1024

_AUTHORS: dict[ItemType, str] = {
    ItemType.MOVIE: "🎬 New movie added!",
    ItemType.SERIES: "📺 New TV show added!",
    ItemType.SEASON: "📺 New season added!",
    ItemType.EPISODE: "📺 New episode added!",
}
_DEFAULT_AUTHOR = "✨ New item added"


# ---------------------------------------------------------------------------
# Durations
# ---------------------------------------------------------------------------


def minutes_to_hhmm(minutes: object) -> str:
    """Render a minute count as ``"1h 5m"``.

    Examples:
        >>> minutes_to_hhmm(125)
        '2h 5m'
        >>> minutes_to_hhmm(42)
        '42m'
    """
    if isinstance(minutes, bool) or not isinstance(minutes, (int, float)):
        return NOT_AVAILABLE
    if minutes != minutes or minutes <= 0:  # NaN
        return NOT_AVAILABLE
    hours = int(minutes // 60)
    mins = int(minutes % 60)
    return f"{hours}h {mins}m" if hours > 0 else f"{mins}m"


def parse_runtime_minutes(value: object) -> int | None:
    """Pull the leading integer out of strings like ``"142 min"``."""
    if value is None:
        return None
    text = str(value).strip()
    if not text or text == NOT_AVAILABLE:
        return None
    match = re.search(r"(\d+)", text)
    if not match:
        return None
    return int(match.group(1))


# ---------------------------------------------------------------------------
# Headings and links
# ---------------------------------------------------------------------------


def _pad(value: int | None) -> str:
    if value is None:
        return "??"
    return f"{value:02d}"


def build_heading(event: ItemAddedEvent) -> tuple[str, str]:
    """Return ``(author, title)`` for an event."""
    author = _AUTHORS.get(event.item_type, _DEFAULT_AUTHOR)
    year = event.year or "?"

    if event.item_type is ItemType.MOVIE:
        title = f"{event.name or 'Unknown Title'} ({year})"
    elif event.item_type is ItemType.SERIES:
        title = f"{event.name or 'Unknown Series'} ({year})"
    elif event.item_type is ItemType.SEASON:
        series = event.series_name or "Unknown Series"
        title = f"{series} ({year}) - Season {event.index_number or '?'}"
    elif event.item_type is ItemType.EPISODE:
        series = event.series_name or "Unknown Series"
        code = f"S{_pad(event.parent_index_number)}E{_pad(event.index_number)}"
        title = f"{series} - {code} - {event.name or 'Unknown Episode'}"
    else:
        title = event.name or "Unknown Title"

    return author, truncate(title, TITLE_LIMIT)


def item_url(event: ItemAddedEvent, fallback_base: str | None = None) -> str:
    """Deep link to the item on the media server's web client.

    ``fallback_base`` is used when the event carries no server URL.
    """
    base = event.server_url or (fallback_base or "").rstrip("/")
    return (
        f"{base}/web/index.html#!/details"
        f"?id={event.item_id}&serverId={event.server_id or ''}"
    )


def tmdb_image_url(path: str | None) -> str | None:
    if not path:
        return None
    return f"{TMDB_IMAGE_BASE}{path}"


def letterboxd_url(imdb_id: str) -> str:
    return f"https://letterboxd.com/imdb/{imdb_id}"


def imdb_url(imdb_id: str) -> str:
    return f"https://www.imdb.com/title/{imdb_id}/"


# ---------------------------------------------------------------------------
# Truncation
# ---------------------------------------------------------------------------


def truncate(text: str, limit: int = FIELD_VALUE_LIMIT) -> str:
    """Truncate ``text`` to ``limit`` characters, ending with an ellipsis."""
    if len(text) <= limit:
        return text
    return text[: max(0, limit - 1)].rstrip() + "…"
