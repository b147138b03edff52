"""Validation and runtime guardrails."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from urllib.parse import urlparse

from .errors import ConfigError, ValidationError

MIN_WORKERS = 1
MAX_WORKERS = 32
MIN_LIMIT = 1
MAX_LIMIT = 50


def is_supported_url(url: str) -> bool:
    """Allow only absolute HTTP(S) URLs with a hostname."""
    parsed = urlparse(url)
    return parsed.scheme in {"http", "https"} and bool(parsed.netloc)


def domain_from_url(url: str) -> str:
    """Extract lowercase hostname from URL."""
    return urlparse(url).netloc.lower()


def normalize_urls(urls: list[str]) -> list[str]:
    """Normalize and dedupe candidate URL list."""
    output: list[str] = []
    seen: set[str] = set()
    for raw in urls:
        value = raw.strip()
        if not is_supported_url(value):
            continue
        key = value.split("#", maxsplit=1)[0].rstrip("/")
        if key in seen:
            continue
        seen.add(key)
        output.append(value)
    return output


def normalize_keywords(keywords: Sequence[str]) -> tuple[str, ...]:
    """Trim keywords, drop empties and repeated values while keeping order."""
    output: list[str] = []
    for raw in keywords:
        value = raw.strip()
        if value and value not in output:
            output.append(value)
    return tuple(output)


def load_lines_from_file(path: str) -> list[str]:
    """Load non-empty lines from a UTF-8 text file."""
    content = Path(path).read_text(encoding="utf-8")
    return [line.strip() for line in content.splitlines() if line.strip()]


def validate_batch_request(*, task_count: int, concurrency: int, timeout: float) -> None:
    """Reject a malformed batch before any task runs."""
    if task_count < 1:
        raise ValidationError("Batch must contain at least one task.")
    if not MIN_WORKERS <= concurrency <= MAX_WORKERS:
        raise ValidationError(
            f"Concurrency must be between {MIN_WORKERS} and {MAX_WORKERS}, got {concurrency}."
        )
    if timeout <= 0:
        raise ValidationError(f"Timeout must be > 0, got {timeout}.")


def validate_runtime_constraints(
    *,
    keywords: tuple[str, ...],
    seeds: tuple[str, ...],
    workers: int,
    limit: int,
    request_timeout: float,
    max_redirects: int,
) -> None:
    """Validate CLI/runtime configuration and raise ConfigError on invalid values."""
    if not keywords and not seeds:
        raise ConfigError("Provide --keywords/--keywords-file or --urls-file.")
    if not MIN_WORKERS <= workers <= MAX_WORKERS:
        raise ConfigError(f"--workers must be between {MIN_WORKERS} and {MAX_WORKERS}.")
    if not MIN_LIMIT <= limit <= MAX_LIMIT:
        raise ConfigError(f"--limit must be between {MIN_LIMIT} and {MAX_LIMIT}.")
    if request_timeout <= 0:
        raise ConfigError("--timeout must be > 0.")
    if max_redirects < 0:
        raise ConfigError("--max-redirects must be >= 0.")
