import json
import logging
from pathlib import Path

import pytest

from contact_extractor.config import ExtractorConfig
from contact_extractor.errors import FetchError, ValidationError
from contact_extractor.index import KeywordIndex
from contact_extractor.models import BatchResultRow, BatchTask, Fetcher
from contact_extractor.pipeline import collect_tasks, harvest_contacts, run_pipeline


class DummyFetcher(Fetcher):
    def __init__(self) -> None:
        self.pages = {
            "https://a.example.com": '<a href="mailto:jane@acme.com">Jane Doe</a> a@b.com',
            "https://b.example.com": "<p>Also a@b.com and Contact John Smith at john@example.org</p>",
            "https://c.example.com": "<p>a@b.com</p>",
        }

    def fetch(self, url: str, timeout: float) -> str:
        _ = timeout
        if url not in self.pages:
            raise FetchError(f"Timed out reading {url}")
        return self.pages[url]


def _index() -> KeywordIndex:
    return KeywordIndex.from_records(
        [
            {"keyword": "seo", "urls": ["https://a.example.com", "https://b.example.com"]},
            {"keyword": "design", "urls": ["https://c.example.com", "ftp://skip.example.com"]},
        ]
    )


def test_collect_tasks_from_keywords() -> None:
    config = ExtractorConfig(keywords=("seo", "design", "none"), seeds=tuple(), limit=5)
    tasks = collect_tasks(config, index=_index(), logger=logging.getLogger("test"))
    assert tasks == [
        BatchTask("seo", "https://a.example.com"),
        BatchTask("seo", "https://b.example.com"),
        BatchTask("design", "https://c.example.com"),
    ]


def test_collect_tasks_from_seeds_groups_by_host() -> None:
    config = ExtractorConfig(
        keywords=tuple(),
        seeds=("https://Team.Example.com/about", "https://Team.Example.com/about/", "mailto:x"),
    )
    tasks = collect_tasks(config, index=None, logger=logging.getLogger("test"))
    assert tasks == [BatchTask("team.example.com", "https://Team.Example.com/about")]


def test_harvest_contacts_dedupes_by_group_key_and_email() -> None:
    tasks = [
        BatchTask("seo", "https://a.example.com"),
        BatchTask("seo", "https://b.example.com"),
        BatchTask("seo", "https://down.example.com"),
        BatchTask("design", "https://c.example.com"),
    ]
    rows = harvest_contacts(tasks, fetcher=DummyFetcher(), logger=logging.getLogger("test"))
    assert rows == [
        BatchResultRow("seo", "jane@acme.com", "Jane Doe"),
        BatchResultRow("seo", "a@b.com", "Jane Doe"),
        BatchResultRow("seo", "john@example.org", "John Smith"),
        BatchResultRow("design", "a@b.com", ""),
    ]
    keys = [(row.group_key, row.email) for row in rows]
    assert len(keys) == len(set(keys))


def test_harvest_contacts_rejects_empty_batch() -> None:
    with pytest.raises(ValidationError):
        harvest_contacts([], fetcher=DummyFetcher(), logger=logging.getLogger("test"))


def test_run_pipeline_writes_rows(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    index_path = tmp_path / "index.json"
    index_path.write_text(
        json.dumps([{"keyword": "seo", "urls": ["https://a.example.com"]}]), encoding="utf-8"
    )
    output = tmp_path / "out.csv"
    config = ExtractorConfig(
        keywords=("seo",),
        seeds=tuple(),
        output=str(output),
        index_path=str(index_path),
        show_progress=False,
    )
    monkeypatch.setattr("contact_extractor.pipeline.RequestsFetcher", lambda **_kwargs: DummyFetcher())

    assert run_pipeline(config, logger=logging.getLogger("test")) == str(output)
    assert output.read_text(encoding="utf-8").splitlines() == [
        "keyword,name,email",
        "seo,Jane Doe,jane@acme.com",
        "seo,Jane Doe,a@b.com",
    ]


def test_run_pipeline_without_matches_writes_empty_file(tmp_path: Path) -> None:
    index_path = tmp_path / "index.json"
    index_path.write_text("[]", encoding="utf-8")
    output = tmp_path / "out.csv"
    config = ExtractorConfig(
        keywords=("seo",),
        seeds=tuple(),
        output=str(output),
        index_path=str(index_path),
        show_progress=False,
    )
    run_pipeline(config, logger=logging.getLogger("test"))
    assert output.read_text(encoding="utf-8").splitlines() == ["keyword,name,email"]
