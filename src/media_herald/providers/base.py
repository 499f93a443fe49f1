"""Base class for HTTP metadata providers.

Each provider owns an ``aiohttp.ClientSession`` (or borrows a shared
one) and turns every transport, HTTP and decoding failure into a
:class:`ProviderError`, so callers only ever handle one exception type.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import aiohttp

from media_herald.errors import ProviderError

logger = logging.getLogger("media_herald.providers")


class MetadataClient:
    """Async JSON-over-HTTP client with a bounded per-request timeout.

    Args:
        api_key: Provider API key. Without one, lookups return None.
        base_url: Provider API root.
        timeout_s: Total timeout per request in seconds.
        session: Optional shared session. If None, one is created lazily
            and closed by :meth:`close`.
    """

    name: str = "provider"
    default_base_url: str = ""
    default_timeout_s: float = 10.0

    def __init__(
        self,
        api_key: str | None,
        *,
        base_url: str | None = None,
        timeout_s: float | None = None,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._api_key = api_key or None
        self._base_url = (base_url or self.default_base_url).rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=timeout_s or self.default_timeout_s)
        self._session = session
        self._owns_session = session is None

    @property
    def enabled(self) -> bool:
        return self._api_key is not None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
            self._owns_session = True
        return self._session

    async def _get_json(self, path: str, params: dict[str, Any]) -> dict[str, Any]:
        """GET ``{base_url}{path}`` and decode a JSON object.

        Raises:
            ProviderError: On timeouts, connection errors, non-2xx status,
                or a body that is not a JSON object.
        """
        url = f"{self._base_url}{path}"
        session = self._get_session()
        try:
            async with session.get(url, params=params, timeout=self._timeout) as resp:
                resp.raise_for_status()
                data = await resp.json(content_type=None)
        except asyncio.TimeoutError as e:
            raise ProviderError(f"{self.name} request timed out") from e
        except aiohttp.ClientResponseError as e:
            raise ProviderError(f"{self.name} HTTP error: {e.status}") from e
        except aiohttp.ClientError as e:
            raise ProviderError(f"{self.name} request failed: {e}") from e
        except ValueError as e:
            raise ProviderError(f"{self.name} returned invalid JSON") from e

        if not isinstance(data, dict):
            raise ProviderError(f"{self.name} returned unexpected payload")
        return data

    async def close(self) -> None:
        """Close the session if this client created it."""
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
        self._session = None
