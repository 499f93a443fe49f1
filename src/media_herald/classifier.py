"""Event classification: granularity level and aggregation key."""

from __future__ import annotations

from media_herald.models import Classification, ItemAddedEvent, ItemType, Level

_LEVELS: dict[ItemType, Level] = {
    ItemType.SERIES: Level.SERIES,
    ItemType.SEASON: Level.SEASON,
    ItemType.EPISODE: Level.EPISODE,
}


def item_level(item_type: ItemType) -> Level:
    """Return the granularity level for an item type (OTHER when unknown)."""
    return _LEVELS.get(item_type, Level.OTHER)


def classify(event: ItemAddedEvent) -> Classification:
    """Classify an event.

    Only series-scoped events (series, season, episode) that carry a
    series id get an aggregation key. Movies, unknown types and
    series-less TV items bypass aggregation.
    """
    level = item_level(event.item_type)
    if level is Level.OTHER:
        return Classification(level=level)
    series_id = getattr(event, "series_id", None)
    return Classification(level=level, aggregation_key=series_id or None)
