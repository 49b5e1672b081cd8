"""Protocol definitions for the transport collaborators of a navigation session."""
from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from page_scout.transport.models import Exchange, Link


@runtime_checkable
class Transport(Protocol):
    """Performs document requests and follows redirects on behalf of a session."""

    def start_exchange(self) -> None:
        """Forget redirect state accumulated by the previous exchange."""
        ...

    async def request(self, method: str, url: str) -> Exchange:
        ...

    async def click(self, link: Link) -> Exchange:
        ...

    @property
    def last_status_code(self) -> Optional[int]:
        ...


@runtime_checkable
class AssetSource(Protocol):
    """Fetches raw bytes without touching any navigation state."""

    async def fetch(self, method: str, url: str) -> bytes:
        ...
