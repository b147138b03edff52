"""Static keyword to URL index."""

from __future__ import annotations

import csv
import json
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .errors import ConfigError


@dataclass(frozen=True)
class IndexEntry:
    """One indexed page (or page group) with the words it is known by."""

    urls: tuple[str, ...]
    title: str = ""
    keywords: tuple[str, ...] = ()

    @property
    def haystack(self) -> str:
        return " ".join([*self.urls, self.title, *self.keywords]).lower()


def _as_keywords(value: Any) -> tuple[str, ...]:
    if isinstance(value, list):
        return tuple(str(item).strip() for item in value if str(item).strip())
    if isinstance(value, str) and value.strip():
        return (value.strip(),)
    return ()


def entry_from_mapping(item: dict[str, Any]) -> IndexEntry | None:
    """Build an entry from ``{url, title, keywords}`` or ``{keyword, urls}``."""
    if isinstance(item.get("urls"), list):
        urls = tuple(str(url).strip() for url in item["urls"] if str(url).strip())
        keywords = _as_keywords(item.get("keyword")) + _as_keywords(item.get("keywords"))
    else:
        url = str(item.get("url") or "").strip()
        urls = (url,) if url else ()
        keywords = _as_keywords(item.get("keywords"))
    if not urls:
        return None
    return IndexEntry(urls=urls, title=str(item.get("title") or "").strip(), keywords=keywords)


class KeywordIndex:
    """Read-only lookup of URLs by keyword."""

    def __init__(self, entries: Iterable[IndexEntry]) -> None:
        self._entries = tuple(entries)

    def __len__(self) -> int:
        return len(self._entries)

    @classmethod
    def from_records(cls, records: Iterable[dict[str, Any]]) -> KeywordIndex:
        entries = []
        for record in records:
            if not isinstance(record, dict):
                continue
            entry = entry_from_mapping(record)
            if entry is not None:
                entries.append(entry)
        return cls(entries)

    @classmethod
    def load(cls, path: str) -> KeywordIndex:
        """Load a JSON (list or ``{"entries": [...]}``) or CSV index file."""
        index_path = Path(path)
        if not index_path.is_file():
            raise ConfigError(f"Index file not found: {path}")
        try:
            if index_path.suffix.lower() == ".csv":
                return cls.from_records(_read_csv_records(index_path))
            payload = json.loads(index_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Index file is not valid JSON: {exc}") from exc
        except (OSError, UnicodeDecodeError, csv.Error) as exc:
            raise ConfigError(f"Unable to read index file {path}: {exc}") from exc
        if isinstance(payload, dict):
            payload = payload.get("entries")
        if not isinstance(payload, list):
            raise ConfigError("Index JSON must be a list or an object with an 'entries' list.")
        return cls.from_records(payload)

    def lookup(self, keyword: str, limit: int) -> list[str]:
        """Return up to ``limit`` URLs for a keyword.

        Entries whose keyword equals the query win; otherwise any entry whose
        URL, title or keywords contain the query matches.
        """
        query = keyword.strip().lower()
        if not query or limit < 1:
            return []
        exact = [
            entry
            for entry in self._entries
            if any(value.lower() == query for value in entry.keywords)
        ]
        matched = exact or [entry for entry in self._entries if query in entry.haystack]

        urls: list[str] = []
        for entry in matched:
            for url in entry.urls:
                if url not in urls:
                    urls.append(url)
                if len(urls) >= limit:
                    return urls
        return urls


def _read_csv_records(path: Path) -> list[dict[str, Any]]:
    with path.open(newline="", encoding="utf-8") as file_obj:
        reader = csv.DictReader(file_obj)
        fields = [name.strip().lower() for name in reader.fieldnames or []]
        if "url" not in fields:
            raise ConfigError("CSV index must include a url column.")
        records: list[dict[str, Any]] = []
        for row in reader:
            normalized = {
                key.strip().lower(): (value or "").strip()
                for key, value in row.items()
                if key is not None
            }
            records.append(
                {
                    "url": normalized.get("url", ""),
                    "title": normalized.get("title", ""),
                    "keywords": [
                        word.strip()
                        for word in normalized.get("keywords", "").split(";")
                        if word.strip()
                    ],
                }
            )
        return records
