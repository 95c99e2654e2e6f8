from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx

from country_api.core.exception import SourceUnavailableError
from country_api.core.logging import get_logger

logger = get_logger(__name__)


class JsonSourceClient:
    """
    Thin wrapper over one pooled ``httpx.AsyncClient`` for read-only JSON sources.

    - Every failure (transport error, non-2xx, non-JSON body) becomes
      ``SourceUnavailableError`` tagged with the source's display name.
    - No retries.
    """

    def __init__(
        self,
        *,
        timeout_seconds: float = 20.0,
        default_headers: Mapping[str, str] | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_seconds),
            headers=dict(default_headers or {"Accept": "application/json"}),
            follow_redirects=True,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def get_json(self, url: str, *, source: str) -> Any:
        try:
            resp = await self._client.get(url)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise SourceUnavailableError(source, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            # DNS errors, connection refused, TLS, timeouts
            raise SourceUnavailableError(source, f"{type(e).__name__}: {e!s}") from e

        try:
            payload = resp.json()
        except ValueError as e:
            raise SourceUnavailableError(source, "response body is not valid JSON") from e

        logger.debug(f"Fetched {source}: HTTP {resp.status_code}, {len(resp.content)} bytes")
        return payload
