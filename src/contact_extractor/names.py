"""Name sanitizing and email-to-name association heuristics."""

from __future__ import annotations

import html
import re
from collections.abc import Sequence

from .document import HtmlDocument, collapse_whitespace
from .models import EmailMatch, NameCandidate, NameSource, SourceKind

MAX_NAME_LENGTH = 80
PROXIMITY_WINDOW = 120

PAREN_ASIDE_RE = re.compile(r"\s*\([^)]*\)\s*")
CAPITALIZED_RUN_RE = re.compile(r"\b[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*\b")
TAG_RE = re.compile(r"<[^>]+>")
# Tag fragments cut in half by the proximity window edges.
LEADING_TAG_TAIL_RE = re.compile(r"^[^<]*>")
TRAILING_TAG_HEAD_RE = re.compile(r"<[^>]*$")

# Capitalized words that open or close a run without being part of a name.
NON_NAME_TOKENS = frozenset(
    {
        "About",
        "Ask",
        "Call",
        "Contact",
        "Contacts",
        "Dear",
        "Department",
        "Dr",
        "Email",
        "Hello",
        "Hi",
        "Home",
        "Info",
        "Mail",
        "Message",
        "Miss",
        "Mr",
        "Mrs",
        "Ms",
        "Office",
        "Our",
        "Phone",
        "Please",
        "Prof",
        "Reach",
        "Send",
        "Sir",
        "Support",
        "Team",
        "Tel",
        "The",
        "Us",
        "Write",
    }
)


def find_name_run(text: str, *, min_tokens: int = 1, max_tokens: int = 4) -> str | None:
    """Return the first run of capitalized words that looks like a name.

    Non-name words are trimmed from both ends of each run; runs left with
    fewer than ``min_tokens`` words are skipped.
    """
    for match in CAPITALIZED_RUN_RE.finditer(text or ""):
        tokens = match.group(0).split()
        while tokens and tokens[0] in NON_NAME_TOKENS:
            tokens.pop(0)
        tokens = tokens[:max_tokens]
        while tokens and tokens[-1] in NON_NAME_TOKENS:
            tokens.pop()
        if len(tokens) >= min_tokens:
            return " ".join(tokens)
    return None


def sanitize_name(raw: str) -> str:
    """Normalize a raw candidate into a name, or return "" when it is unusable."""
    raw = raw or ""
    if "@" in raw or len(raw) > MAX_NAME_LENGTH:
        return ""
    cleaned = collapse_whitespace(PAREN_ASIDE_RE.sub(" ", raw))
    if "@" in cleaned or len(cleaned) > MAX_NAME_LENGTH:
        return ""
    return find_name_run(cleaned) or cleaned


def proximity_text(markup: str, position: int, email: str) -> str:
    """Plain text surrounding an email occurrence, with the email removed."""
    start = max(0, position - PROXIMITY_WINDOW)
    end = min(len(markup), position + len(email) + PROXIMITY_WINDOW)
    snippet = markup[start:end]
    snippet = TRAILING_TAG_HEAD_RE.sub(" ", LEADING_TAG_TAIL_RE.sub(" ", snippet))
    snippet = html.unescape(TAG_RE.sub(" ", snippet))
    snippet = re.sub(re.escape(email), " ", snippet, flags=re.IGNORECASE)
    return collapse_whitespace(snippet)


def _from_proximity(match: EmailMatch, document: HtmlDocument) -> str:
    if match.position is None:
        return ""
    window = proximity_text(document.markup, match.position, match.email)
    run = find_name_run(window, min_tokens=2)
    return sanitize_name(run) if run else ""


def _from_page(page_candidates: Sequence[str]) -> str:
    for candidate in page_candidates:
        run = find_name_run(candidate, min_tokens=2)
        if run:
            return run
    return ""


def associate_name(
    match: EmailMatch, document: HtmlDocument, page_candidates: Sequence[str]
) -> NameCandidate | None:
    """Pick the most plausible name for one located email.

    Strategies are tried in rank order and the first non-empty result wins:
    mail-link visible text, the mail-link's enclosing block, a text window
    around a free-text match, then the page-level candidates.
    """
    if match.source_kind is SourceKind.MAIL_LINK:
        name = sanitize_name(match.link_text)
        if name:
            return NameCandidate(name, NameSource.MAIL_LINK_TEXT)
        name = sanitize_name(match.block_text)
        if name:
            return NameCandidate(name, NameSource.CONTAINING_BLOCK)
    else:
        name = _from_proximity(match, document)
        if name:
            return NameCandidate(name, NameSource.PROXIMITY)

    name = _from_page(page_candidates)
    if name:
        return NameCandidate(name, NameSource.PAGE_FALLBACK)
    return None
