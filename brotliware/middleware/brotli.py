# middleware/brotli.py
"""Brotli compression middleware for Starlette and FastAPI applications."""
from typing import AsyncIterator, Iterable

from starlette.concurrency import iterate_in_threadpool
from starlette.requests import Request
from starlette.responses import Response, StreamingResponse

from ..deflater import Deflater
from ..headers import header_hash
from ..stream import close_body
from .base import BrotliwareMiddleware


async def _stream_body(body: Iterable[bytes]) -> AsyncIterator[bytes]:
    # Compression happens during iteration, keep it off the event loop.
    try:
        async for chunk in iterate_in_threadpool(iter(body)):
            yield chunk
    finally:
        close_body(body)


class BrotliMiddleware(BrotliwareMiddleware):
    """
    Brotli compression middleware.

    Accepts the same options as :class:`brotliware.deflater.Deflater`
    (``condition``, ``include``, ``deflater``, ``notifier``, ``codec``).
    Responses ruled out by their status, headers or the request are handed
    back untouched, so streams such as server-sent events keep streaming.
    Any other body is drained before the decision is made, since the
    ``condition`` callable may inspect it and compression needs all of it.
    """

    def setup(self):
        self.deflater = Deflater(**self.config)

    async def after_response(self, request: Request, response: Response) -> Response:
        if not self.deflater.may_process(request, response.status_code, response.headers):
            return response

        chunks = [chunk async for chunk in response.body_iterator]

        status, headers, body = self.deflater.process(
            request, response.status_code, response.headers, chunks
        )

        compressed = StreamingResponse(_stream_body(body), status_code=status)
        compressed.raw_headers = header_hash(headers).raw
        return compressed
