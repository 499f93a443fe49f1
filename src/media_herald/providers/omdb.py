"""OMDb client (secondary metadata provider: runtime, rating, director)."""

from __future__ import annotations

from typing import Any

from media_herald.providers.base import MetadataClient


class OmdbClient(MetadataClient):
    name = "OMDb"
    default_base_url = "http://www.omdbapi.com"
    default_timeout_s = 7.0

    async def lookup(self, imdb_id: str | None) -> dict[str, Any] | None:
        """Return the OMDb record for ``imdb_id``, or None.

        OMDb answers unknown ids with ``{"Response": "False"}``; that is
        treated as no data rather than an error.
        """
        if not imdb_id or not self.enabled:
            return None
        data = await self._get_json("/", {"i": imdb_id, "apikey": self._api_key})
        if str(data.get("Response", "True")).lower() == "false":
            return None
        return data
