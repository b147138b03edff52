"""Bounded-concurrency batch runner."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from threading import Lock

from .aggregation import extract_contacts
from .config import DEFAULT_REQUEST_TIMEOUT, DEFAULT_WORKERS
from .document import HtmlDocument
from .errors import FetchError, HarvesterError, ParseError
from .models import BatchProgress, BatchTask, Fetcher, ProgressCallback, TaskResult
from .validation import validate_batch_request


class BatchState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"


class BatchRun:
    """One execution of a task list over a fixed pool of workers.

    Workers share a single cursor into the task list; each claims the next
    unclaimed index under a lock, so every task is processed exactly once.
    A failing task yields an empty result and never stops the batch.
    """

    def __init__(
        self,
        tasks: Sequence[BatchTask],
        *,
        fetcher: Fetcher,
        logger: logging.Logger,
        concurrency: int = DEFAULT_WORKERS,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        progress: ProgressCallback | None = None,
    ) -> None:
        validate_batch_request(task_count=len(tasks), concurrency=concurrency, timeout=timeout)
        self._tasks = tuple(tasks)
        self._fetcher = fetcher
        self._logger = logger
        self._concurrency = concurrency
        self._timeout = timeout
        self._progress = progress
        self._results: list[TaskResult | None] = [None] * len(self._tasks)
        self._cursor = 0
        self._done = 0
        self._cursor_lock = Lock()
        self._done_lock = Lock()
        self._state = BatchState.IDLE

    @property
    def state(self) -> BatchState:
        return self._state

    @property
    def progress(self) -> BatchProgress:
        with self._done_lock:
            return BatchProgress(done=self._done, total=len(self._tasks))

    def execute(self) -> list[TaskResult]:
        """Process every task and return results in original task order."""
        if self._state is not BatchState.IDLE:
            raise HarvesterError("A batch run can only be executed once.")
        self._state = BatchState.RUNNING
        worker_count = min(self._concurrency, len(self._tasks))
        self._logger.info("Processing %d URLs with %d workers", len(self._tasks), worker_count)
        with ThreadPoolExecutor(
            max_workers=worker_count, thread_name_prefix="batch-worker"
        ) as executor:
            futures = [executor.submit(self._worker) for _ in range(worker_count)]
            for future in futures:
                future.result()

        results = [result for result in self._results if result is not None]
        if len(results) != len(self._tasks):
            raise HarvesterError(
                f"Batch finished with {len(results)} results for {len(self._tasks)} tasks."
            )
        self._state = BatchState.COMPLETED
        failed = sum(1 for result in results if not result.ok)
        self._logger.info(
            "Batch completed: %d/%d tasks succeeded", len(results) - failed, len(results)
        )
        return results

    def _claim(self) -> int | None:
        with self._cursor_lock:
            if self._cursor >= len(self._tasks):
                return None
            index = self._cursor
            self._cursor += 1
            return index

    def _mark_done(self) -> None:
        with self._done_lock:
            self._done += 1
            if self._progress is None:
                return
            try:
                self._progress(self._done, len(self._tasks))
            except Exception:
                self._logger.warning("Progress callback failed", exc_info=True)

    def _worker(self) -> None:
        while True:
            index = self._claim()
            if index is None:
                return
            self._results[index] = self._process(index, self._tasks[index])
            self._mark_done()

    def _process(self, index: int, task: BatchTask) -> TaskResult:
        try:
            html = self._fetcher.fetch(task.url, self._timeout)
            contacts = extract_contacts(HtmlDocument(html, task.url))
        except (FetchError, ParseError) as exc:
            self._logger.warning("Skipping %s: %s", task.url, exc)
            return TaskResult(index=index, task=task, error=str(exc))
        except Exception as exc:
            self._logger.warning("Extraction failed for %s: %s", task.url, exc, exc_info=True)
            return TaskResult(index=index, task=task, error=f"{type(exc).__name__}: {exc}")
        self._logger.debug("Found %d contacts on %s", len(contacts), task.url)
        return TaskResult(index=index, task=task, contacts=tuple(contacts))
