# File: tests/conftest.py
from __future__ import annotations

from collections.abc import AsyncIterator
from datetime import datetime, timezone
from typing import List, Optional, Tuple, Union

import pytest
from aiohttp import web

from page_scout.config import ClientConfig
from page_scout.transport.models import Exchange, Link

#: fixed "now" used by the session clock in tests
FROZEN_NOW = datetime(2026, 10, 18, 9, 30, tzinfo=timezone.utc)


def make_exchange(url: str, status: Optional[int] = 200, content: str = "", **kwargs) -> Exchange:
    """Build an Exchange the way BrowserClient would return it."""
    return Exchange(
        url=url,
        final_url=kwargs.pop("final_url", url),
        status_code=status,
        content=content or "<html><body></body></html>",
        **kwargs,
    )


class FakeTransport:
    """In-memory Transport: replays queued exchanges (or raises queued errors)."""

    def __init__(self, *responses: Union[Exchange, Exception]) -> None:
        self.responses: List[Union[Exchange, Exception]] = list(responses)
        self.calls: List[Tuple[str, str]] = []
        self.exchanges_started = 0
        self._last: Optional[Exchange] = None

    def queue(self, response: Union[Exchange, Exception]) -> None:
        self.responses.append(response)

    def start_exchange(self) -> None:
        self.exchanges_started += 1

    async def request(self, method: str, url: str) -> Exchange:
        self.calls.append((method, url))
        return self._next()

    async def click(self, link: Link) -> Exchange:
        self.calls.append(("CLICK", link.url))
        return self._next()

    @property
    def last_status_code(self) -> Optional[int]:
        return None if self._last is None else self._last.status_code

    def _next(self) -> Exchange:
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        self._last = item
        return item


class FakeAssets:
    """In-memory AssetSource recording requested URLs."""

    def __init__(self, body: bytes = b"asset") -> None:
        self.body = body
        self.calls: List[Tuple[str, str]] = []

    async def fetch(self, method: str, url: str) -> bytes:
        self.calls.append((method, url))
        return self.body


async def serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "localhost", port)
    await site.start()
    try:
        yield f"http://localhost:{port}"
    finally:
        await runner.cleanup()


@pytest.fixture()
def basic_config() -> ClientConfig:
    """Client configuration with short timeouts for local test servers."""
    return ClientConfig(user_agent="TestAgent/1.0", timeout=2.0, max_redirects=5)


@pytest.fixture()
def frozen_clock():
    return lambda: FROZEN_NOW


@pytest.fixture()
def fake_assets() -> FakeAssets:
    return FakeAssets()
