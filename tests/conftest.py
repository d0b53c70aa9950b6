"""
Pytest configuration and fixtures for brotliware tests.
"""
from typing import Any, Callable, Dict, List, Optional

import pytest
from starlette.requests import Request


class ClosableBody:
    """Response body that records whether it was closed."""

    def __init__(self, chunks):
        self.chunks = list(chunks)
        self.closed = False

    def __iter__(self):
        return iter(self.chunks)

    def close(self):
        self.closed = True


class RecordingNotifier:
    """Notifier that remembers every event it was asked to instrument."""

    def __init__(self):
        self.events: List[Dict[str, Any]] = []

    def instrument(self, name, payload, block):
        self.events.append({"name": name, "payload": payload})
        return block()


@pytest.fixture
def make_request() -> Callable[..., Request]:
    """Build a Starlette request with an optional Accept-Encoding header."""

    def _make(
        path: str = "/",
        query_string: bytes = b"",
        accept_encoding: Optional[str] = "br",
    ) -> Request:
        headers = []
        if accept_encoding is not None:
            headers.append((b"accept-encoding", accept_encoding.encode("latin-1")))
        return Request({
            "type": "http",
            "method": "GET",
            "path": path,
            "query_string": query_string,
            "headers": headers,
        })

    return _make


@pytest.fixture
def closable_body() -> Callable[..., ClosableBody]:
    return ClosableBody


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def text_headers() -> Dict[str, str]:
    return {"Content-Type": "text/plain", "Content-Length": "11"}
