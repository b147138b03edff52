"""Parsed HTML documents backed by BeautifulSoup."""

from __future__ import annotations

import re

from bs4 import BeautifulSoup, Tag
from bs4.builder import ParserRejectedMarkup

from .errors import ParseError

WHITESPACE_RE = re.compile(r"\s+")


def collapse_whitespace(text: str) -> str:
    """Collapse whitespace runs to single spaces and trim."""
    return WHITESPACE_RE.sub(" ", text or "").strip()


class HtmlDocument:
    """Queryable view over raw markup fetched from ``url``."""

    def __init__(self, html: str, url: str = "") -> None:
        self.url = url
        try:
            self._soup = BeautifulSoup(html or "", "html.parser")
        except ParserRejectedMarkup as exc:
            raise ParseError(f"Could not parse markup from {url or '<string>'}: {exc}") from exc
        self._markup: str | None = None

    def select(self, selector: str) -> list[Tag]:
        """Return elements matching a CSS selector in document order."""
        return list(self._soup.select(selector))

    def select_first(self, selector: str) -> Tag | None:
        return self._soup.select_one(selector)

    def find_all(self, name: str, **attrs: object) -> list[Tag]:
        return [node for node in self._soup.find_all(name, **attrs) if isinstance(node, Tag)]

    @staticmethod
    def attribute(element: Tag | None, name: str) -> str:
        """Return an attribute as a string; multi-valued attributes are space-joined."""
        if element is None:
            return ""
        value = element.get(name)
        if value is None:
            return ""
        if isinstance(value, list):
            return " ".join(value)
        return str(value)

    def text(self, element: Tag | None = None) -> str:
        """Flattened, whitespace-normalized text of an element or the whole document."""
        node = self._soup if element is None else element
        return collapse_whitespace(node.get_text(" "))

    @property
    def markup(self) -> str:
        """Serialized, normalized markup used for offset-based scanning."""
        if self._markup is None:
            self._markup = str(self._soup)
        return self._markup
