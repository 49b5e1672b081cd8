# === FILE: page_scout/navigation/session.py ===
"""
Navigation session: one logical browsing context of a scraping task.

The session performs navigations through a :class:`~page_scout.transport.protocols.Transport`,
keeps the last retrieved :class:`~page_scout.parser.document.Document` and
answers classification queries about the last response. Redirect and retry
metadata of a navigation is stored as a single immutable
:class:`NavigationResult` and replaced together with the document, so a
failed navigation never leaves half-updated state behind.

A session is single-owner: await one navigation at a time and do not share an
instance between concurrently running tasks.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, List, Optional

from page_scout.config import ClientConfig
from page_scout.errors import LinkNotFound, MalformedResponse, PrematureAccess
from page_scout.logger import get_logger
from page_scout.navigation import classifier
from page_scout.navigation.classifier import BANDWIDTH_LIMIT_EXCEEDED, Verdict
from page_scout.parser.document import Document
from page_scout.transport.client import BrowserClient
from page_scout.transport.fetcher import AssetFetcher
from page_scout.transport.models import Exchange
from page_scout.transport.protocols import AssetSource, Transport
from page_scout.utils import looks_like_url, next_month_noon_utc

__all__ = ("NavigationResult", "NavigationSession")

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True, frozen=True)
class NavigationResult:
    """Status and redirect/retry metadata captured from one navigation."""

    url: str
    final_url: str
    status_code: int
    uses_temporary_redirect: bool = False
    permanent_redirect_url: str = ""
    retry_at: int = 0


class NavigationSession:
    """Navigate, inspect the outcome, click through links."""

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        transport: Optional[Transport] = None,
        asset_fetcher: Optional[AssetSource] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self.config = config or ClientConfig()
        self._transport = transport
        self._asset_fetcher = asset_fetcher
        self._clock: Clock = clock or _utc_now
        self._owned: List[BrowserClient | AssetFetcher] = []
        self._document: Optional[Document] = None
        self._result: Optional[NavigationResult] = None
        self.logger = get_logger("session")

    async def __aenter__(self) -> NavigationSession:
        if self._transport is None:
            client = BrowserClient(self.config)
            await client.open()
            self._owned.append(client)
            self._transport = client
        if self._asset_fetcher is None:
            fetcher = AssetFetcher(self.config)
            await fetcher.open()
            self._owned.append(fetcher)
            self._asset_fetcher = fetcher
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        while self._owned:
            owned = self._owned.pop()
            await owned.close()
            if owned is self._transport:
                self._transport = None
            if owned is self._asset_fetcher:
                self._asset_fetcher = None

    # ------------------------------------------------------------------ #
    # Collaborators                                                       #
    # ------------------------------------------------------------------ #

    def set_transport(self, transport: Transport) -> NavigationSession:
        self._transport = transport
        return self

    def set_asset_fetcher(self, fetcher: AssetSource) -> NavigationSession:
        self._asset_fetcher = fetcher
        return self

    @property
    def transport(self) -> Optional[Transport]:
        return self._transport

    @property
    def document(self) -> Optional[Document]:
        """The current document, ``None`` before the first navigation."""
        return self._document

    @property
    def result(self) -> Optional[NavigationResult]:
        """Metadata of the last navigation, ``None`` before the first one."""
        return self._result

    # ------------------------------------------------------------------ #
    # Navigation                                                          #
    # ------------------------------------------------------------------ #

    async def navigate(self, url: str) -> NavigationSession:
        """GET *url* and make the response the current document."""
        transport = self._require_transport()
        transport.start_exchange()
        exchange = await transport.request("GET", url)
        self._commit(exchange)
        return self

    go = navigate

    def set_content(self, url: str, content: str) -> NavigationSession:
        """
        Use *content* as the current document, with *url* as its base.

        Redirect/retry metadata and the recorded status code are left as they
        were after the last real navigation.
        """
        self._document = Document(content, url)
        return self

    async def fetch_asset(self, url: str) -> bytes:
        """GET a resource relative to the current document without replacing it."""
        if self._asset_fetcher is None:
            raise RuntimeError("Asset fetcher not configured")
        target = url if self._document is None else self._document.make_url_absolute(url)
        return await self._asset_fetcher.fetch("GET", target)

    async def click_link(self, title_or_url: str) -> NavigationSession:
        """Follow a link given by URL or by its title in the current document."""
        if looks_like_url(title_or_url):
            return await self.navigate(title_or_url)
        if self._document is None:
            raise LinkNotFound(title_or_url, "No document loaded, navigate before clicking links")
        link = self._document.select_link(title_or_url)
        if link is None:
            raise LinkNotFound(title_or_url)
        transport = self._require_transport()
        transport.start_exchange()
        exchange = await transport.click(link)
        self._commit(exchange)
        return self

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise RuntimeError("Transport not configured; use `async with` or set_transport()")
        return self._transport

    def _commit(self, exchange: Exchange) -> None:
        status = exchange.status_code
        if not isinstance(status, int) or isinstance(status, bool) or not 100 <= status <= 999:
            raise MalformedResponse(exchange.url, status)

        retry_at = exchange.retry_at
        if not retry_at and status == BANDWIDTH_LIMIT_EXCEEDED:
            # quotas reset monthly; noon UTC leaves every timezone past its midnight
            retry_at = next_month_noon_utc(self._clock())

        result = NavigationResult(
            url=exchange.url,
            final_url=exchange.final_url or exchange.url,
            status_code=status,
            uses_temporary_redirect=exchange.uses_temporary_redirect,
            permanent_redirect_url=exchange.permanent_redirect_url or "",
            retry_at=retry_at,
        )
        document = Document(exchange.content, result.final_url, status)
        self._document, self._result = document, result

        if classifier.is_temporary_result(status, result.uses_temporary_redirect):
            self.logger.info("Temporary result for %s: HTTP %s, retry_at=%s", result.url, status, retry_at)
        else:
            self.logger.debug("Navigated %s -> HTTP %s", result.url, status)

    # ------------------------------------------------------------------ #
    # Response classification                                             #
    # ------------------------------------------------------------------ #

    def _require_result(self) -> NavigationResult:
        if self._document is None or self._result is None:
            raise PrematureAccess()
        return self._result

    def status_code(self) -> int:
        return self._require_result().status_code

    def _status_and_flag(self) -> tuple[int, bool]:
        result = self._require_result()
        return result.status_code, result.uses_temporary_redirect

    def verdict(self) -> Verdict:
        return classifier.classify(*self._status_and_flag())

    def is_temporary_result(self) -> bool:
        return classifier.is_temporary_result(*self._status_and_flag())

    def is_gone(self) -> bool:
        return classifier.is_gone(*self._status_and_flag())

    def is_permanent_error(self) -> bool:
        return classifier.is_permanent_error(*self._status_and_flag())

    def is_success(self) -> bool:
        return classifier.is_success(self.status_code())

    def is_client_error(self) -> bool:
        return classifier.is_client_error(self.status_code())

    def is_server_error(self) -> bool:
        return classifier.is_server_error(self.status_code())

    def is_forbidden(self) -> bool:
        return classifier.is_forbidden(self.status_code())

    def is_not_found(self) -> bool:
        return classifier.is_not_found(self.status_code())

    def uses_temporary_redirect(self) -> bool:
        return self._result.uses_temporary_redirect if self._result else False

    def permanent_redirect_url(self) -> str:
        return self._result.permanent_redirect_url if self._result else ""

    def retry_at(self) -> int:
        return self._result.retry_at if self._result else 0
