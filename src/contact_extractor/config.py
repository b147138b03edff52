"""Runtime configuration model."""

from __future__ import annotations

from dataclasses import dataclass

from .validation import validate_runtime_constraints

DEFAULT_USER_AGENT = "ContactExtractor/1.0 (+https://github.com/contact-extractor/contact-extractor)"
DEFAULT_REQUEST_TIMEOUT = 15.0
DEFAULT_MAX_REDIRECTS = 5
DEFAULT_WORKERS = 4
DEFAULT_LIMIT = 5
DEFAULT_INDEX_PATH = "data/index.json"
DEFAULT_OUTPUT = "extracted_emails.csv"


@dataclass(frozen=True)
class ExtractorConfig:
    """Validated configuration used by the extraction pipeline."""

    keywords: tuple[str, ...]
    seeds: tuple[str, ...]
    output: str = DEFAULT_OUTPUT
    index_path: str = DEFAULT_INDEX_PATH
    limit: int = DEFAULT_LIMIT
    workers: int = DEFAULT_WORKERS
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    max_redirects: int = DEFAULT_MAX_REDIRECTS
    user_agent: str = DEFAULT_USER_AGENT
    show_progress: bool = True

    def __post_init__(self) -> None:
        validate_runtime_constraints(
            keywords=self.keywords,
            seeds=self.seeds,
            workers=self.workers,
            limit=self.limit,
            request_timeout=self.request_timeout,
            max_redirects=self.max_redirects,
        )
