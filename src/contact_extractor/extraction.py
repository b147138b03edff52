"""Email location and page-level name candidates."""

from __future__ import annotations

import re
from urllib.parse import unquote

from bs4 import Tag

from .document import HtmlDocument, collapse_whitespace
from .models import EmailMatch, SourceKind

EMAIL_REGEX = re.compile(r"[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}", re.IGNORECASE)
MAILTO_SCHEME = "mailto:"
BLOCK_TAGS = ["p", "li", "div", "section"]

PAGE_TEXT_SELECTOR = "p, h2, h3"
MAX_PAGE_TEXTS = 10
MAX_PAGE_TEXT_LENGTH = 160


def normalize_email(value: str) -> str:
    return value.strip().lower()


def mailto_address(href: str) -> str | None:
    """Return the validated address of a mailto href, or None."""
    if not href.lower().startswith(MAILTO_SCHEME):
        return None
    address = unquote(href[len(MAILTO_SCHEME) :].split("?", maxsplit=1)[0]).strip()
    if not EMAIL_REGEX.fullmatch(address):
        return None
    return normalize_email(address)


def _remove_address(text: str, address: str) -> str:
    return collapse_whitespace(re.sub(re.escape(address), " ", text, flags=re.IGNORECASE))


def _block_text(document: HtmlDocument, anchor: Tag, address: str) -> str:
    block = anchor.find_parent(BLOCK_TAGS) or anchor.parent
    if not isinstance(block, Tag):
        return ""
    return _remove_address(document.text(block), address)


def _mail_link_matches(document: HtmlDocument) -> list[EmailMatch]:
    matches: list[EmailMatch] = []
    for anchor in document.find_all("a", href=True):
        address = mailto_address(document.attribute(anchor, "href").strip())
        if address is None:
            continue
        matches.append(
            EmailMatch(
                email=address,
                source_kind=SourceKind.MAIL_LINK,
                link_text=document.text(anchor),
                block_text=_block_text(document, anchor, address),
            )
        )
    return matches


def _free_text_matches(document: HtmlDocument) -> list[EmailMatch]:
    matches: list[EmailMatch] = []
    for match in EMAIL_REGEX.finditer(document.markup):
        # Percent-encoded hrefs can yield hits such as "%20jane@acme.com".
        if not EMAIL_REGEX.fullmatch(unquote(match.group(0))):
            continue
        matches.append(
            EmailMatch(
                email=normalize_email(match.group(0)),
                source_kind=SourceKind.FREE_TEXT,
                position=match.start(),
            )
        )
    return matches


def locate_emails(document: HtmlDocument) -> list[EmailMatch]:
    """Locate email addresses, mail-links first, each address exactly once.

    Free-text matches are taken from the serialized markup so their positions
    can be used for proximity lookups.
    """
    located: list[EmailMatch] = []
    seen: set[str] = set()
    for match in _mail_link_matches(document) + _free_text_matches(document):
        if match.email in seen:
            continue
        seen.add(match.email)
        located.append(match)
    return located


def _page_title(document: HtmlDocument) -> Tag | None:
    title = document.select_first("head > title")
    if title is not None:
        return title
    for element in document.find_all("title"):
        if element.find_parent("svg") is None:
            return element
    return None


def extract_page_candidates(document: HtmlDocument) -> list[str]:
    """Collect page-level name candidates in priority order.

    Order: author meta, site-name meta, title, first h1, then up to ten
    short paragraph or subheading texts. Empty values are skipped and
    repeated values keep their first position.
    """
    values = [
        document.attribute(document.select_first('meta[name="author"]'), "content"),
        document.attribute(document.select_first('meta[property="og:site_name"]'), "content"),
    ]
    for element in (_page_title(document), document.select_first("h1")):
        if element is not None:
            values.append(document.text(element))
    for element in document.select(PAGE_TEXT_SELECTOR)[:MAX_PAGE_TEXTS]:
        text = document.text(element)
        if len(text) <= MAX_PAGE_TEXT_LENGTH:
            values.append(text)

    candidates: list[str] = []
    for value in values:
        cleaned = collapse_whitespace(value)
        if cleaned and cleaned not in candidates:
            candidates.append(cleaned)
    return candidates
