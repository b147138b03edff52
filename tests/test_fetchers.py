import logging
from collections.abc import Iterator
from typing import Any

import pytest
import requests

from contact_extractor.errors import FetchError
from contact_extractor.fetchers import DEFAULT_ACCEPT, RequestsFetcher, make_session


class FakeResponse:
    def __init__(
        self,
        *,
        status_code: int = 200,
        chunks: list[bytes] | None = None,
        encoding: str | None = "utf-8",
    ) -> None:
        self.status_code = status_code
        self.encoding = encoding
        self._chunks = chunks if chunks is not None else []
        self.closed = False

    def iter_content(self, chunk_size: int = 1) -> Iterator[bytes]:
        _ = chunk_size
        yield from self._chunks

    def close(self) -> None:
        self.closed = True


class FakeSession:
    def __init__(self, response: FakeResponse | None = None, error: Exception | None = None) -> None:
        self._response = response
        self._error = error
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append((url, kwargs))
        if self._error is not None:
            raise self._error
        assert self._response is not None
        return self._response


def _fetcher(session: FakeSession, **kwargs: Any) -> RequestsFetcher:
    return RequestsFetcher(
        session=session,  # type: ignore[arg-type]
        logger=logging.getLogger("test"),
        **kwargs,
    )


def test_requests_fetcher_rejects_invalid_urls() -> None:
    session = FakeSession(FakeResponse(chunks=[b"<html/>"]))
    with pytest.raises(FetchError):
        _fetcher(session).fetch("file:///tmp/test", 5.0)
    assert session.calls == []


def test_requests_fetcher_returns_html_for_success() -> None:
    response = FakeResponse(chunks=[b"<p>Hel", b"lo</p>"])
    session = FakeSession(response)
    assert _fetcher(session).fetch("https://example.com", 5.0) == "<p>Hello</p>"
    url, kwargs = session.calls[0]
    assert url == "https://example.com"
    assert kwargs == {"timeout": 5.0, "stream": True}
    assert response.closed is True


def test_requests_fetcher_keeps_body_of_error_status() -> None:
    session = FakeSession(FakeResponse(status_code=404, chunks=[b"<a href='mailto:x@y.com'>X</a>"]))
    assert "x@y.com" in _fetcher(session).fetch("https://example.com/missing", 5.0)


def test_requests_fetcher_wraps_transport_errors() -> None:
    session = FakeSession(error=requests.ConnectionError("dns failure"))
    with pytest.raises(FetchError, match="dns failure"):
        _fetcher(session).fetch("https://example.com", 5.0)


def test_requests_fetcher_wraps_timeouts() -> None:
    session = FakeSession(error=requests.Timeout("read timed out"))
    with pytest.raises(FetchError):
        _fetcher(session).fetch("https://example.com", 1.0)


def test_requests_fetcher_enforces_total_deadline(monkeypatch: pytest.MonkeyPatch) -> None:
    ticks = [0.0, 0.5, 2.0]

    def fake_monotonic() -> float:
        return ticks.pop(0) if len(ticks) > 1 else ticks[0]

    monkeypatch.setattr("contact_extractor.fetchers.time.monotonic", fake_monotonic)
    response = FakeResponse(chunks=[b"a", b"b", b"c"])
    with pytest.raises(FetchError, match="Timed out"):
        _fetcher(FakeSession(response)).fetch("https://example.com", 1.0)
    assert response.closed is True


def test_requests_fetcher_caps_body_size() -> None:
    session = FakeSession(FakeResponse(chunks=[b"abcd", b"efgh", b"ijkl"]))
    assert _fetcher(session, max_bytes=6).fetch("https://example.com", 5.0) == "abcdef"


def test_requests_fetcher_decodes_with_fallbacks() -> None:
    latin = FakeSession(FakeResponse(chunks=["José".encode("latin-1")], encoding="ISO-8859-1"))
    assert _fetcher(latin).fetch("https://example.com", 5.0) == "José"
    unknown = FakeSession(FakeResponse(chunks=[b"plain"], encoding="no-such-codec"))
    assert _fetcher(unknown).fetch("https://example.com", 5.0) == "plain"
    missing = FakeSession(FakeResponse(chunks=[b"plain"], encoding=None))
    assert _fetcher(missing).fetch("https://example.com", 5.0) == "plain"


def test_make_session_sets_headers_and_redirect_limit() -> None:
    session = make_session("my-agent", max_redirects=3, pool_size=2)
    assert session.headers["User-Agent"] == "my-agent"
    assert session.headers["Accept"] == DEFAULT_ACCEPT
    assert session.max_redirects == 3
