# File: page_scout/errors.py
"""
Exception hierarchy for PageScout.

Every error raised by the navigation layer derives from :class:`PageScoutError`
so callers can catch the whole family with a single ``except`` clause.
"""
from __future__ import annotations

from typing import Optional

__all__ = (
    "PageScoutError",
    "PrematureAccess",
    "LinkNotFound",
    "TransportFailure",
    "MalformedResponse",
    "AssetFetchError",
)


class PageScoutError(Exception):
    """Base class for all PageScout errors."""


class PrematureAccess(PageScoutError):
    """Status or classification requested before the first navigation."""

    def __init__(self, message: str = "") -> None:
        super().__init__(
            message
            or "You can not access the status code before your first navigation using `navigate`."
        )


class LinkNotFound(PageScoutError):
    """No link in the current document matches the requested title."""

    def __init__(self, title: str, reason: str = "") -> None:
        self.title = title
        super().__init__(reason or f"No link matching {title!r} in the current document")


class TransportFailure(PageScoutError):
    """The HTTP exchange could not be completed (DNS, TLS, network, timeout)."""

    def __init__(self, url: str, message: str = "") -> None:
        self.url = url
        super().__init__(message or f"Transport failure for {url}")


class MalformedResponse(PageScoutError):
    """The transport returned a response without a usable status code."""

    def __init__(self, url: str, status: Optional[object] = None) -> None:
        self.url = url
        self.status = status
        super().__init__(f"Malformed response for {url}: status={status!r}")


class AssetFetchError(PageScoutError):
    """An asset request completed with a non-2xx status."""

    def __init__(self, url: str, status: int) -> None:
        self.url = url
        self.status = status
        super().__init__(f"Asset {url} answered HTTP {status}")
