# File: page_scout/utils.py
"""page_scout.utils: helpers for URLs, Retry-After headers and retry deadlines."""

from __future__ import annotations

from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Optional, Sequence
from urllib.parse import urljoin, urlparse

from page_scout.logger import logger

__all__: Sequence[str] = (
    "looks_like_url",
    "is_absolute_url",
    "resolve_url",
    "parse_retry_after",
    "next_month_noon_utc",
)


def looks_like_url(value: str) -> bool:
    """True if *value* starts with ``http`` (case-insensitive); used to tell URLs from link titles."""
    return value[:4].lower() == "http"


def is_absolute_url(url: str) -> bool:
    """Check that *url* carries both a scheme and a host."""
    parsed = urlparse(url)
    return bool(parsed.scheme and parsed.netloc)


def resolve_url(base: str, url: str) -> str:
    """Resolve *url* against *base* unless it is already absolute."""
    if is_absolute_url(url):
        return url
    resolved = urljoin(base, url)
    logger.debug("Resolved URL: %s + %s -> %s", base, url, resolved)
    return resolved


def parse_retry_after(value: Optional[str], now: Optional[datetime] = None) -> int:
    """
    Convert a ``Retry-After`` header into a unix timestamp.

    Both forms of the header are supported: delta-seconds (``120``) and an
    HTTP-date (``Wed, 21 Oct 2015 07:28:00 GMT``). Returns ``0`` when the
    header is absent or cannot be parsed.
    """
    if not value:
        return 0
    value = value.strip()
    current = now or datetime.now(timezone.utc)
    if value.isascii() and value.isdigit():
        return int(current.timestamp()) + int(value)
    try:
        moment = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        logger.debug("Unparseable Retry-After header: %r", value)
        return 0
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return int(moment.timestamp())


def next_month_noon_utc(now: Optional[datetime] = None) -> int:
    """Unix timestamp of the first day of the next calendar month, 12:00 UTC."""
    current = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    year, month = (current.year + 1, 1) if current.month == 12 else (current.year, current.month + 1)
    return int(datetime(year, month, 1, 12, 0, tzinfo=timezone.utc).timestamp())
