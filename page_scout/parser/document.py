# === FILE: page_scout/parser/document.py ===
"""Parsed HTML document held by a navigation session.

A :class:`Document` is the stable reference that later operations work
against: link lookup for :meth:`NavigationSession.click_link` and relative URL
resolution for :meth:`NavigationSession.fetch_asset`.

The HTML itself is handled by BeautifulSoup; this module only adds the few
queries the navigation layer needs:

* ``base_url``: honours ``<base href>`` and falls back to the document URL.
* ``links()``: every ``<a href>`` resolved to an absolute URL.
* ``select_link(title)``: first link whose visible text, ``title`` attribute
  or image ``alt`` text matches *title* exactly.
"""
from __future__ import annotations

from collections.abc import Sequence
from typing import Optional

from bs4 import BeautifulSoup
from bs4.element import Tag

from page_scout.transport.models import Link
from page_scout.utils import resolve_url

__all__: Sequence[str] = ("Document",)

_SKIPPED_SCHEMES = ("mailto:", "javascript:", "tel:")


def _normalize_space(text: str) -> str:
    return " ".join(text.split())


class Document:
    """HTML markup tagged with the URL it was retrieved from."""

    def __init__(self, content: str, url: str, status_code: Optional[int] = None) -> None:
        self.url = url
        self.content = content
        self.status_code = status_code
        self.soup = BeautifulSoup(content or "", "html.parser")

    def __repr__(self) -> str:
        return f"<Document url={self.url} status={self.status_code}>"

    @property
    def base_url(self) -> str:
        """URL that relative links in this document are resolved against."""
        base = self.soup.find("base", href=True)
        if isinstance(base, Tag):
            href = base.get("href")
            if isinstance(href, str) and href.strip():
                return resolve_url(self.url, href.strip())
        return self.url

    @property
    def title(self) -> str:
        tag = self.soup.find("title")
        return tag.get_text(strip=True) if tag else ""

    def make_url_absolute(self, url: str) -> str:
        return resolve_url(self.base_url, url.strip())

    def links(self) -> list[Link]:
        """All followable links in document order."""
        result: list[Link] = []
        for tag in self.soup.find_all("a", href=True):
            link = self._to_link(tag)
            if link is not None:
                result.append(link)
        return result

    def select_link(self, title: str) -> Optional[Link]:
        """Return the first link matching *title*, or ``None``."""
        wanted = _normalize_space(title)
        if not wanted:
            return None
        for tag in self.soup.find_all("a", href=True):
            if not isinstance(tag, Tag) or not self._matches(tag, wanted):
                continue
            link = self._to_link(tag)
            if link is not None:
                return link
        return None

    @staticmethod
    def _matches(tag: Tag, wanted: str) -> bool:
        if _normalize_space(tag.get_text(" ")) == wanted:
            return True
        attr = tag.get("title")
        if isinstance(attr, str) and _normalize_space(attr) == wanted:
            return True
        for img in tag.find_all("img", alt=True):
            alt = img.get("alt")
            if isinstance(alt, str) and _normalize_space(alt) == wanted:
                return True
        return False

    def _to_link(self, tag: Tag) -> Optional[Link]:
        href = tag.get("href")
        if not isinstance(href, str):
            return None
        raw = href.strip()
        if raw.lower().startswith(_SKIPPED_SCHEMES):
            return None
        return Link(url=self.make_url_absolute(raw), text=_normalize_space(tag.get_text(" ")))
