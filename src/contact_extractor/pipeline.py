"""Core orchestration pipeline."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from tqdm import tqdm

from .aggregation import aggregate_batch
from .batch import BatchRun
from .config import DEFAULT_REQUEST_TIMEOUT, DEFAULT_WORKERS, ExtractorConfig
from .fetchers import RequestsFetcher, make_session
from .index import KeywordIndex
from .io_csv import write_rows
from .models import BatchResultRow, BatchTask, Fetcher, ProgressCallback
from .validation import domain_from_url, normalize_urls


def collect_tasks(
    config: ExtractorConfig,
    *,
    index: KeywordIndex | None,
    logger: logging.Logger,
) -> list[BatchTask]:
    """Build batch tasks from seed URLs or keyword lookups."""
    if config.seeds:
        return [
            BatchTask(group_key=domain_from_url(url), url=url)
            for url in normalize_urls(list(config.seeds))
        ]

    tasks: list[BatchTask] = []
    if index is None:
        return tasks
    for keyword in config.keywords:
        urls = normalize_urls(index.lookup(keyword, config.limit))
        logger.info("Keyword %r matched %d URLs", keyword, len(urls))
        tasks.extend(BatchTask(group_key=keyword, url=url) for url in urls)
    return tasks


def harvest_contacts(
    tasks: Sequence[BatchTask],
    *,
    fetcher: Fetcher,
    logger: logging.Logger,
    concurrency: int = DEFAULT_WORKERS,
    timeout: float = DEFAULT_REQUEST_TIMEOUT,
    progress: ProgressCallback | None = None,
) -> list[BatchResultRow]:
    """Run one batch and return rows deduplicated by (group key, email).

    Raises ValidationError before any fetch when the request is malformed.
    """
    run = BatchRun(
        tasks,
        fetcher=fetcher,
        logger=logger,
        concurrency=concurrency,
        timeout=timeout,
        progress=progress,
    )
    results = run.execute()
    rows = aggregate_batch(results)
    logger.info("Unique keyword/email rows: %d", len(rows))
    return rows


def run_pipeline(config: ExtractorConfig, *, logger: logging.Logger) -> str:
    """Build concrete dependencies, execute pipeline, and write CSV output."""
    index = None if config.seeds else KeywordIndex.load(config.index_path)
    tasks = collect_tasks(config, index=index, logger=logger)
    logger.info("Total URLs to scan: %d", len(tasks))
    if not tasks:
        logger.warning("No URLs matched; writing an empty result file.")
        write_rows(config.output, [])
        return config.output

    session = make_session(
        config.user_agent, max_redirects=config.max_redirects, pool_size=config.workers
    )
    fetcher = RequestsFetcher(session=session, logger=logger)
    try:
        with tqdm(total=len(tasks), desc="scanning pages", disable=not config.show_progress) as bar:

            def report(done: int, total: int) -> None:
                bar.update(done - bar.n)

            rows = harvest_contacts(
                tasks,
                fetcher=fetcher,
                logger=logger,
                concurrency=config.workers,
                timeout=config.request_timeout,
                progress=report,
            )
    finally:
        session.close()

    write_rows(config.output, rows)
    return config.output
