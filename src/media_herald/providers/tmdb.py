"""TMDB client (primary metadata provider)."""

from __future__ import annotations

from typing import Any

from media_herald.models import ItemType
from media_herald.providers.base import MetadataClient


class TmdbClient(MetadataClient):
    """Fetches extended details (images, credits, external ids) from TMDB."""

    name = "TMDB"
    default_base_url = "https://api.themoviedb.org/3"
    default_timeout_s = 10.0

    async def details(self, tmdb_id: str | None, item_type: ItemType) -> dict[str, Any] | None:
        """Return the movie or TV details for ``tmdb_id``.

        Movies are looked up under ``/movie``; everything else under
        ``/tv``. Returns None without a request when no key or id is set.
        """
        if not tmdb_id or not self.enabled:
            return None
        kind = "movie" if item_type is ItemType.MOVIE else "tv"
        return await self._get_json(
            f"/{kind}/{tmdb_id}",
            {
                "api_key": self._api_key,
                "append_to_response": "images,external_ids,credits",
            },
        )
