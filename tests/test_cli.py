from pathlib import Path

import pytest

from contact_extractor import cli


def test_parse_args_with_keywords() -> None:
    args = cli.parse_args(["--keywords", "SEO", "Blogger"])
    assert args.keywords == ["SEO", "Blogger"]
    assert args.limit == 5
    assert args.workers == 4


def test_parse_args_with_urls_only() -> None:
    args = cli.parse_args(["--urls-file", "urls.txt"])
    assert args.urls_file == "urls.txt"


def test_parse_args_requires_source() -> None:
    with pytest.raises(SystemExit):
        cli.parse_args([])


def test_namespace_to_config_reads_files(tmp_path: Path) -> None:
    keywords = tmp_path / "keywords.txt"
    keywords.write_text("seo\n\nseo\ndesign\n", encoding="utf-8")
    config = cli.namespace_to_config(
        cli.parse_args(["--keywords-file", str(keywords), "--limit", "10", "--no-progress"])
    )
    assert config.keywords == ("seo", "design")
    assert config.limit == 10
    assert config.show_progress is False


def test_main_returns_zero_on_success(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "run_pipeline", lambda config, logger: config.output)
    assert cli.main(["--keywords", "SEO"]) == 0


def test_main_returns_two_on_invalid_config() -> None:
    assert cli.main(["--keywords", "SEO", "--workers", "0"]) == 2
    assert cli.main(["--keywords", "SEO", "--limit", "51"]) == 2


def test_main_returns_two_on_missing_files(tmp_path: Path) -> None:
    assert cli.main(["--urls-file", str(tmp_path / "missing.txt")]) == 2
    assert cli.main(["--keywords", "SEO", "--index", str(tmp_path / "missing.json")]) == 2


def test_main_returns_two_on_undecodable_index(tmp_path: Path) -> None:
    index = tmp_path / "index.json"
    index.write_bytes(b"\xff\xfe[]")
    assert cli.main(["--keywords", "SEO", "--index", str(index), "--no-progress"]) == 2
