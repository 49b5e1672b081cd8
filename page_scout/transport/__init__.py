# File: page_scout/transport/__init__.py
"""page_scout.transport: aiohttp-based document transport and asset fetcher."""

from .client import BrowserClient
from .fetcher import AssetFetcher
from .models import Exchange, Link
from .protocols import AssetSource, Transport

__all__ = ["BrowserClient", "AssetFetcher", "Exchange", "Link", "Transport", "AssetSource"]
