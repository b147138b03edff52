"""HTTP document fetcher."""

from __future__ import annotations

import logging
import time

from requests import Response, Session
from requests.adapters import HTTPAdapter
from requests.exceptions import RequestException

from .config import DEFAULT_MAX_REDIRECTS, DEFAULT_WORKERS
from .errors import FetchError
from .validation import is_supported_url

DEFAULT_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"
DEFAULT_MAX_BYTES = 2_000_000
CHUNK_SIZE = 16_384


def make_session(
    user_agent: str,
    *,
    max_redirects: int = DEFAULT_MAX_REDIRECTS,
    pool_size: int = DEFAULT_WORKERS,
) -> Session:
    """Create a requests session shared by all batch workers."""
    session = Session()
    session.headers.update({"User-Agent": user_agent, "Accept": DEFAULT_ACCEPT})
    session.max_redirects = max_redirects
    adapter = HTTPAdapter(pool_connections=pool_size, pool_maxsize=pool_size)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


class RequestsFetcher:
    """Requests-based fetcher.

    Any HTTP response counts as a successful fetch, including error statuses;
    only transport failures raise FetchError. The body is streamed so the
    timeout bounds the whole download, not just each socket read.
    """

    def __init__(
        self,
        *,
        session: Session,
        logger: logging.Logger,
        max_bytes: int = DEFAULT_MAX_BYTES,
    ) -> None:
        self._session = session
        self._logger = logger
        self._max_bytes = max_bytes

    def fetch(self, url: str, timeout: float) -> str:
        if not is_supported_url(url):
            raise FetchError(f"Unsupported URL: {url}")
        deadline = time.monotonic() + timeout
        try:
            response = self._session.get(url, timeout=timeout, stream=True)
            try:
                body = self._read_body(response, url, deadline)
            finally:
                response.close()
        except RequestException as exc:
            self._logger.debug("Requests fetch failed for %s: %s", url, exc)
            raise FetchError(f"Fetch failed for {url}: {exc}") from exc

        if response.status_code >= 400:
            self._logger.debug("Got HTTP %d for %s, keeping body", response.status_code, url)
        encoding = response.encoding or "utf-8"
        try:
            return body.decode(encoding, errors="replace")
        except LookupError:
            return body.decode("utf-8", errors="replace")

    def _read_body(self, response: Response, url: str, deadline: float) -> bytes:
        chunks: list[bytes] = []
        size = 0
        for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
            if time.monotonic() > deadline:
                raise FetchError(f"Timed out reading {url}")
            chunks.append(chunk)
            size += len(chunk)
            if size >= self._max_bytes:
                self._logger.debug("Truncating %s at %d bytes", url, self._max_bytes)
                break
        return b"".join(chunks)[: self._max_bytes]
