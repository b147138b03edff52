import os

import pytest

from contact_extractor.cli import main

requires_live = pytest.mark.skipif(
    os.getenv("RUN_LIVE_INTEGRATION") != "1",
    reason="Set RUN_LIVE_INTEGRATION=1 to execute live integration tests.",
)


@requires_live
def test_live_help_command_smoke() -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["--help"])
    assert excinfo.value.code == 0


@requires_live
def test_live_fetch_of_example_domain(tmp_path) -> None:
    urls = tmp_path / "urls.txt"
    urls.write_text("https://example.com\n", encoding="utf-8")
    output = tmp_path / "out.csv"
    assert main(["--urls-file", str(urls), "--output", str(output), "--no-progress"]) == 0
    assert output.read_text(encoding="utf-8").startswith("keyword,name,email")
