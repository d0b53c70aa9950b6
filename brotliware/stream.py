# stream.py
"""Lazily compressed response bodies."""
from typing import Any, Iterable, Iterator

from .codec import Codec, DeflaterOptions, compress


def close_body(body: Any) -> None:
    """Close ``body`` if it supports closing."""
    close = getattr(body, "close", None)
    if callable(close):
        close()


class BrotliStream:
    """
    Body wrapper that compresses the wrapped body when iterated.

    The whole body is buffered and compressed in one call, so iteration
    yields exactly one chunk. Nothing is read until the transport starts
    iterating. Use it as a context manager (or call ``close``) to release
    the wrapped body.
    """

    def __init__(
        self,
        body: Iterable[bytes],
        options: DeflaterOptions,
        codec: Codec = compress,
    ):
        self.body = body
        self.options = options
        self.codec = codec

    def __iter__(self) -> Iterator[bytes]:
        buffer = b"".join(self.body)
        yield self.codec(buffer, self.options)

    def close(self) -> None:
        close_body(self.body)

    def __enter__(self) -> "BrotliStream":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()
