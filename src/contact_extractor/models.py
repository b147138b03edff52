"""Protocols and lightweight model types."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Protocol

ProgressCallback = Callable[[int, int], None]


class Fetcher(Protocol):
    """Contract for HTML fetchers."""

    def fetch(self, url: str, timeout: float) -> str:
        """Return raw markup for a URL or raise FetchError on transport failure."""


class SourceKind(Enum):
    """Where an email address was found in a document."""

    MAIL_LINK = "mail_link"
    FREE_TEXT = "free_text"


class NameSource(IntEnum):
    """Provenance of a name candidate; lower values are stronger signals."""

    MAIL_LINK_TEXT = 1
    CONTAINING_BLOCK = 2
    PROXIMITY = 3
    PAGE_FALLBACK = 4


@dataclass(frozen=True)
class EmailMatch:
    """A located email address with the context needed to name it.

    ``position`` is the offset into the serialized markup and is only set for
    free-text matches. ``link_text`` and ``block_text`` are only set for
    mail-link matches.
    """

    email: str
    source_kind: SourceKind
    position: int | None = None
    link_text: str = ""
    block_text: str = ""


@dataclass(frozen=True)
class NameCandidate:
    """A candidate personal name and the strategy that produced it."""

    text: str
    source: NameSource


@dataclass(frozen=True)
class ContactRecord:
    """One email address and its best-guess name within a document."""

    email: str
    name: str = ""


@dataclass(frozen=True)
class BatchTask:
    """One URL submitted under a grouping key."""

    group_key: str
    url: str


@dataclass(frozen=True)
class TaskResult:
    """Per-task output of a batch run."""

    index: int
    task: BatchTask
    contacts: tuple[ContactRecord, ...] = ()
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class BatchResultRow:
    """A deduplicated output row."""

    group_key: str
    email: str
    name: str

    def as_dict(self) -> dict[str, str]:
        return {"keyword": self.group_key, "name": self.name, "email": self.email}


@dataclass(frozen=True)
class BatchProgress:
    """Completed and total task counts for one batch run."""

    done: int
    total: int
