# === FILE: page_scout/transport/client.py ===
from __future__ import annotations

import asyncio
from typing import Dict, Optional

from aiohttp import ClientError, ClientSession, ClientTimeout

from page_scout.config import ClientConfig
from page_scout.errors import TransportFailure
from page_scout.logger import get_logger
from page_scout.transport.models import Exchange, Link
from page_scout.utils import parse_retry_after, resolve_url

__all__ = ("BrowserClient", "PERMANENT_REDIRECTS", "TEMPORARY_REDIRECTS")

PERMANENT_REDIRECTS = frozenset({301, 308})
TEMPORARY_REDIRECTS = frozenset({302, 303, 307})
_REDIRECTS = PERMANENT_REDIRECTS | TEMPORARY_REDIRECTS


class BrowserClient:
    """
    Document transport on top of aiohttp.

    Redirects are followed by hand so every hop can be inspected: a 301/308
    hop seen before any temporary hop records the URL callers should use from
    now on, a 302/303/307 hop marks the exchange as temporary.
    """

    def __init__(self, config: Optional[ClientConfig] = None, session: Optional[ClientSession] = None) -> None:
        self.config = config or ClientConfig()
        self.session = session
        self._owns_session = session is None
        self.uses_temporary_redirect: bool = False
        self.permanent_redirect_url: Optional[str] = None
        self.last_exchange: Optional[Exchange] = None
        self.logger = get_logger("client")

    async def __aenter__(self) -> BrowserClient:
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

    @property
    def last_status_code(self) -> Optional[int]:
        return None if self.last_exchange is None else self.last_exchange.status_code

    def start_exchange(self) -> None:
        self.uses_temporary_redirect = False
        self.permanent_redirect_url = None

    async def click(self, link: Link) -> Exchange:
        return await self.request(link.method, link.url)

    async def request(self, method: str, url: str) -> Exchange:
        if not self.session:
            raise RuntimeError("Session not initialized")
        current_method, current_url = method.upper(), url
        hops = 0
        try:
            while True:
                async with self.session.request(
                    current_method,
                    current_url,
                    allow_redirects=False,
                    ssl=self.config.verify_ssl,
                ) as resp:
                    status = resp.status
                    location = resp.headers.get("Location")
                    if status in _REDIRECTS and location:
                        hops += 1
                        if hops > self.config.max_redirects:
                            raise TransportFailure(
                                url, f"More than {self.config.max_redirects} redirects for {url}"
                            )
                        try:
                            target = resolve_url(str(resp.url), location)
                        except ValueError as exc:
                            raise TransportFailure(url, f"Invalid redirect location {location!r} for {url}") from exc
                        self._record_redirect(status, target)
                        self.logger.debug("HTTP %s %s -> %s", status, current_url, target)
                        if status == 303 or (status in (301, 302) and current_method == "POST"):
                            current_method = "GET"
                        current_url = target
                        continue
                    content = await resp.text(errors="replace")
                    headers: Dict[str, str] = dict(resp.headers)
                    retry_at = parse_retry_after(resp.headers.get("Retry-After"))
                    final_url = str(resp.url)
                    break
        except (ClientError, asyncio.TimeoutError) as exc:
            self.logger.warning("Failed %s %s: %r", method, url, exc)
            raise TransportFailure(url, f"{type(exc).__name__}: {exc}") from exc

        exchange = Exchange(
            url=url,
            final_url=final_url,
            status_code=status,
            content=content,
            headers=headers,
            uses_temporary_redirect=self.uses_temporary_redirect,
            permanent_redirect_url=self.permanent_redirect_url or "",
            retry_at=retry_at,
        )
        self.last_exchange = exchange
        self.logger.debug("%s %s -> HTTP %s (%s)", method, url, status, final_url)
        return exchange

    def _record_redirect(self, status: int, target: str) -> None:
        if status in TEMPORARY_REDIRECTS:
            self.uses_temporary_redirect = True
        elif not self.uses_temporary_redirect:
            self.permanent_redirect_url = target
