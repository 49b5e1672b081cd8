# page_scout/transport/fetcher.py
"""
Asset fetcher: raw GET requests for images, scripts and other non-document
resources. Independent of any navigation state.
"""
from __future__ import annotations

import asyncio
from typing import Optional

from aiohttp import ClientError, ClientSession, ClientTimeout

from page_scout.config import ClientConfig
from page_scout.errors import AssetFetchError, TransportFailure
from page_scout.logger import get_logger


class AssetFetcher:
    """Fetches raw response bodies through its own aiohttp session."""

    def __init__(self, config: Optional[ClientConfig] = None, session: Optional[ClientSession] = None) -> None:
        self.config = config or ClientConfig()
        self.session = session
        self._owns_session = session is None
        self.logger = get_logger("fetcher")

    async def __aenter__(self) -> AssetFetcher:
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def open(self) -> None:
        if self.session is not None:
            return
        self.session = ClientSession(
            timeout=ClientTimeout(total=self.config.timeout),
            headers=self.config.request_headers(),
            raise_for_status=False,
        )
        self._owns_session = True

    async def close(self) -> None:
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()
        if self._owns_session:
            self.session = None

    async def fetch(self, method: str, url: str) -> bytes:
        """
        Perform the request and return the body.

        Raises AssetFetchError for non-2xx answers and TransportFailure when
        the exchange itself fails.
        """
        if not self.session:
            raise RuntimeError("Session not initialized")
        try:
            async with self.session.request(
                method.upper(),
                url,
                allow_redirects=True,
                max_redirects=self.config.max_redirects,
                ssl=self.config.verify_ssl,
            ) as resp:
                if not 200 <= resp.status < 300:
                    raise AssetFetchError(url, resp.status)
                data = await resp.read()
        except (ClientError, asyncio.TimeoutError) as exc:
            self.logger.warning("Asset %s failed: %r", url, exc)
            raise TransportFailure(url, f"{type(exc).__name__}: {exc}") from exc
        self.logger.debug("Asset %s: %d bytes", url, len(data))
        return data
