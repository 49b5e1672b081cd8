# page_scout/transport/models.py
"""
Data models shared by the transport adapters and the navigation session.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass(slots=True, frozen=True)
class Link:
    """A clickable link found in a document, already resolved to an absolute URL."""

    url: str
    text: str = ""
    method: str = "GET"


@dataclass(slots=True, frozen=True)
class Exchange:
    """Outcome of one request/response exchange, redirects included."""

    url: str
    final_url: str
    status_code: Optional[int]
    content: str = ""
    headers: Dict[str, str] = field(default_factory=dict)
    uses_temporary_redirect: bool = False
    permanent_redirect_url: str = ""
    retry_at: int = 0
