"""Notification composer.

Builds a :class:`NotificationPayload` for a flushed event by querying a
primary provider (details, images, credits, external ids) and a
secondary provider (runtime, rating, director), then reconciling their
answers with the event's own fields.

Composition never fails because of a provider: any lookup error is
logged and the affected fields fall back to "N/A" or the event's data.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from media_herald.classifier import item_level
from media_herald.errors import ProviderError
from media_herald.formatting import (
    NO_DESCRIPTION,
    NOT_AVAILABLE,
    build_heading,
    imdb_url,
    item_url,
    letterboxd_url,
    minutes_to_hhmm,
    parse_runtime_minutes,
    tmdb_image_url,
    truncate,
)
from media_herald.models import (
    GuildConfig,
    ItemAddedEvent,
    ItemType,
    LinkButton,
    NotificationPayload,
)

logger = logging.getLogger("media_herald.composer")

DEFAULT_COLOR = "#cba6f7"

_SERIES_TYPES = frozenset({ItemType.SERIES, ItemType.SEASON, ItemType.EPISODE})
_CREATOR_JOBS = ("Creator", "Executive Producer")


class PrimaryProvider(Protocol):
    async def details(self, tmdb_id: str | None, item_type: ItemType) -> dict[str, Any] | None:
        ...


class SecondaryProvider(Protocol):
    async def lookup(self, imdb_id: str | None) -> dict[str, Any] | None:
        ...


# ---------------------------------------------------------------------------
# Reconciliation rules
# ---------------------------------------------------------------------------


def _present(value: Any) -> bool:
    return value is not None and str(value).strip() not in ("", NOT_AVAILABLE)


def resolve_runtime(details: dict | None, omdb: dict | None) -> str:
    """Secondary runtime string first, then the primary's minute count."""
    minutes = parse_runtime_minutes((omdb or {}).get("Runtime"))
    if minutes:
        return f"{minutes} min"

    if details:
        runtime = details.get("runtime")
        if not runtime:
            episode_runtimes = details.get("episode_run_time") or []
            runtime = episode_runtimes[0] if episode_runtimes else None
        if runtime:
            return minutes_to_hhmm(runtime)
    return NOT_AVAILABLE


def resolve_rating(omdb: dict | None) -> str:
    rating = (omdb or {}).get("imdbRating")
    if _present(rating):
        return f"{rating}/10"
    return NOT_AVAILABLE


def _find_crew(details: dict | None, jobs: tuple[str, ...]) -> str | None:
    crew = ((details or {}).get("credits") or {}).get("crew") or []
    for member in crew:
        if isinstance(member, dict) and member.get("job") in jobs and member.get("name"):
            return member["name"]
    return None


def resolve_header(item_type: ItemType, details: dict | None, omdb: dict | None) -> str:
    """Header line: director for movies, creator for TV, else Summary."""
    if item_type is ItemType.MOVIE:
        director = (omdb or {}).get("Director")
        if not _present(director):
            director = _find_crew(details, ("Director",))
        if director:
            return f"Directed by {director}"
    elif item_type in _SERIES_TYPES:
        creators = (details or {}).get("created_by") or []
        creator = _find_crew(details, _CREATOR_JOBS)
        if not creator and creators and isinstance(creators[0], dict):
            creator = creators[0].get("name")
        if creator:
            return f"Created by {creator}"
    return "Summary"


def find_best_backdrop(details: dict | None) -> str | None:
    """English-tagged backdrop first, then the default backdrop."""
    if not details:
        return None
    backdrops = (details.get("images") or {}).get("backdrops") or []
    for backdrop in backdrops:
        if isinstance(backdrop, dict) and backdrop.get("iso_639_1") == "en":
            if backdrop.get("file_path"):
                return backdrop["file_path"]
    return details.get("backdrop_path") or None


def resolve_genres(details: dict | None, event: ItemAddedEvent) -> str:
    names = [
        g["name"]
        for g in (details or {}).get("genres") or []
        if isinstance(g, dict) and g.get("name")
    ]
    if names:
        return ", ".join(names)
    if event.genres:
        return ", ".join(event.genres)
    return NOT_AVAILABLE


def resolve_overview(details: dict | None, event: ItemAddedEvent) -> str:
    overview = (details or {}).get("overview") or event.overview
    return truncate(overview) if overview else NO_DESCRIPTION


# ---------------------------------------------------------------------------
# Composer
# ---------------------------------------------------------------------------


class NotificationComposer:
    """Composes notification payloads from events and provider lookups.

    Args:
        primary: Details provider queried by TMDB id. Optional.
        secondary: Ratings provider queried by IMDb id. Optional.
    """

    def __init__(
        self,
        primary: PrimaryProvider | None = None,
        secondary: SecondaryProvider | None = None,
    ) -> None:
        self._primary = primary
        self._secondary = secondary

    async def compose(
        self, event: ItemAddedEvent, config: GuildConfig | None = None
    ) -> NotificationPayload:
        details = await self._fetch_details(event)

        imdb_id = event.imdb_id
        cross_ref = ((details or {}).get("external_ids") or {}).get("imdb_id")
        if cross_ref:
            imdb_id = cross_ref

        omdb = await self._fetch_secondary(imdb_id)

        logger.debug(
            "Composing %s %s (tmdb=%s imdb=%s details=%s omdb=%s)",
            event.item_type.value,
            event.item_id,
            event.tmdb_id,
            imdb_id,
            details is not None,
            omdb is not None,
        )

        author, title = build_heading(event)
        url = item_url(event, config.jellyfin_server_url if config else None)

        buttons: list[LinkButton] = []
        if imdb_id:
            buttons.append(LinkButton("Letterboxd", letterboxd_url(imdb_id)))
            buttons.append(LinkButton("IMDb", imdb_url(imdb_id)))
        buttons.append(LinkButton("▶ Watch Now", url))

        return NotificationPayload(
            author=author,
            title=title,
            url=url,
            color=(config.color_notification if config else None) or DEFAULT_COLOR,
            header=resolve_header(event.item_type, details, omdb),
            overview=resolve_overview(details, event),
            genres=resolve_genres(details, event),
            runtime=resolve_runtime(details, omdb),
            rating=resolve_rating(omdb),
            item_type=event.item_type,
            level=item_level(event.item_type),
            image_url=tmdb_image_url(find_best_backdrop(details)),
            buttons=buttons,
        )

    async def _fetch_details(self, event: ItemAddedEvent) -> dict[str, Any] | None:
        if self._primary is None or not event.tmdb_id:
            return None
        try:
            return await self._primary.details(event.tmdb_id, event.item_type)
        except ProviderError as e:
            logger.warning("Could not fetch TMDB details for %s: %s", event.tmdb_id, e)
        except Exception:
            logger.exception("Unexpected TMDB failure for %s", event.tmdb_id)
        return None

    async def _fetch_secondary(self, imdb_id: str | None) -> dict[str, Any] | None:
        if self._secondary is None or not imdb_id:
            return None
        try:
            return await self._secondary.lookup(imdb_id)
        except ProviderError as e:
            logger.warning("OMDb fetch failed for %s: %s", imdb_id, e)
        except Exception:
            logger.exception("Unexpected OMDb failure for %s", imdb_id)
        return None
