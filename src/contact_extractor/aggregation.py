"""Per-document contact records and batch-level deduplication."""

from __future__ import annotations

from collections.abc import Iterable

from .document import HtmlDocument
from .extraction import extract_page_candidates, locate_emails
from .models import BatchResultRow, ContactRecord, TaskResult
from .names import associate_name


def extract_contacts(document: HtmlDocument) -> list[ContactRecord]:
    """Return one record per unique email in the document, in discovery order."""
    matches = locate_emails(document)
    if not matches:
        return []

    page_candidates = extract_page_candidates(document)
    records: list[ContactRecord] = []
    seen: set[str] = set()
    for match in matches:
        if match.email in seen:
            continue
        seen.add(match.email)
        candidate = associate_name(match, document, page_candidates)
        records.append(ContactRecord(email=match.email, name=candidate.text if candidate else ""))
    return records


def aggregate_batch(results: Iterable[TaskResult]) -> list[BatchResultRow]:
    """Flatten task results into rows, keeping the first row per (group key, email).

    Results are ordered by task index first, so the outcome does not depend on
    the order in which tasks finished.
    """
    rows: list[BatchResultRow] = []
    seen: set[tuple[str, str]] = set()
    for result in sorted(results, key=lambda item: item.index):
        for contact in result.contacts:
            key = (result.task.group_key, contact.email)
            if key in seen:
                continue
            seen.add(key)
            rows.append(BatchResultRow(group_key=key[0], email=contact.email, name=contact.name))
    return rows
