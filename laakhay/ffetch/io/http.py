"""Default aiohttp transport."""

from __future__ import annotations

import asyncio
from typing import Optional

import aiohttp

from ..core.enums import CachePolicy
from ..core.exceptions import NetworkError
from ..core.protocols import FetchResponse


class AIOHTTPClient:
    """Async HTTP transport backed by a pooled aiohttp session."""

    def __init__(
        self,
        timeout: float = 30.0,
        headers: Optional[dict[str, str]] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.headers = dict(headers or {})
        self._session = session

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    async def fetch(self, url: str, cache: CachePolicy = CachePolicy.DEFAULT) -> FetchResponse:
        """GET ``url`` and return its text and status.

        Non-200 statuses are returned, not raised; callers decide what a
        status means.

        Raises:
            NetworkError: If the request fails before a response arrives
        """
        headers = {**self.headers, **cache.headers()}
        try:
            async with self.session.get(url, headers=headers or None) as response:
                body = await response.text()
                return FetchResponse(
                    body=body,
                    status=response.status,
                    reason=response.reason or "",
                )
        except (aiohttp.ClientError, asyncio.TimeoutError, UnicodeDecodeError) as e:
            raise NetworkError(f"{type(e).__name__}: {e}") from e

    async def close(self) -> None:
        """Close session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> "AIOHTTPClient":
        """Context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        await self.close()
