# deflater.py
"""
Brotli response compression.

:class:`Deflater` holds the configuration and turns a response triple
``(status, headers, body)`` into either the same triple, a compressed one,
or a 406 response. :class:`Brotli` wraps an application that returns such
triples and is itself such an application, so it can be chained.

Example::

    app = Brotli(
        app,
        condition=lambda request, status, headers, body: sum(map(len, body)) > 512,
        include=["text/html", "application/json"],
        deflater={"quality": 9},
    )
"""
from typing import Any, Callable, Iterable, Mapping, Optional, Tuple

import logging

from .codec import ENCODING, Codec, DeflaterOptions, compress
from .eligibility import Condition, may_compress, should_compress
from .exceptions import ConfigurationError
from .headers import HeadersLike, header_hash, merge_vary
from .instrument import EVENT_NAME, Notifier, resolve_notifier
from .negotiation import select_best_encoding
from .stream import BrotliStream, close_body

logger = logging.getLogger(__name__)

SUPPORTED_ENCODINGS = (ENCODING,)

ResponseTriple = Tuple[int, Any, Iterable[bytes]]
Application = Callable[[Any], ResponseTriple]

NOT_ACCEPTABLE_MESSAGE = (
    "An acceptable encoding for the requested resource {path} could not be found."
)


def _fullpath(request: Any) -> str:
    url = request.url
    return f"{url.path}?{url.query}" if url.query else url.path


class Deflater:
    """
    Decides per response whether and how to compress it.

    Built once per application; every option is validated and frozen here
    so that nothing is re-read per request.

    Args:
        condition: Callable ``(request, status, headers, body) -> bool``
            enabling or disabling compression per response. It gets the live
            body, so the body must be re-iterable (a list, say) when the
            condition reads it, or compression sees it empty.
        include: Media types that should be compressed, None for all
        deflater: Brotli option overrides, merged over ``quality=5``
        notifier: Instrumentation backend, see :mod:`brotliware.instrument`
        codec: Function ``(bytes, DeflaterOptions) -> bytes``
    """

    def __init__(
        self,
        condition: Optional[Condition] = None,
        include: Optional[Iterable[str]] = None,
        deflater: Optional[Mapping[str, Any]] = None,
        notifier: Optional[Notifier] = None,
        codec: Codec = compress,
    ):
        if condition is not None and not callable(condition):
            raise ConfigurationError(f"'condition' must be callable, got {condition!r}")
        if not callable(codec):
            raise ConfigurationError(f"'codec' must be callable, got {codec!r}")

        self.condition = condition
        self.compressible_types = self._compressible_types(include)
        self.deflater_options = DeflaterOptions.merge(deflater)
        self.notifier = resolve_notifier(notifier)
        self.codec = codec

    @staticmethod
    def _compressible_types(include):
        if include is None:
            return None
        if isinstance(include, (str, bytes)):
            raise ConfigurationError(
                f"'include' must be a collection of content types, got {include!r}"
            )
        try:
            return frozenset(include)
        except TypeError as e:
            raise ConfigurationError(
                f"'include' must be a collection of content types, got {include!r}",
                original_exception=e,
            ) from e

    def may_process(self, request: Any, status: int, headers: HeadersLike) -> bool:
        """
        Whether :meth:`process` could compress or reject this response.

        Uses only the status, the headers and the request, never the body.
        False means :meth:`process` would pass the response through.
        """
        if request.headers.get("accept-encoding") is None:
            return False
        return may_compress(status, header_hash(headers), self.compressible_types)

    def process(
        self, request: Any, status: int, headers: HeadersLike, body: Iterable[bytes]
    ) -> ResponseTriple:
        """Compress, reject or pass through one response."""
        normalized = header_hash(headers)

        if not should_compress(
            request,
            status,
            normalized,
            body,
            include=self.compressible_types,
            condition=self.condition,
        ):
            return status, headers, body

        # A client that sent no Accept-Encoding did not negotiate, so it gets
        # the response as is rather than a 406.
        accept_encoding = request.headers.get("accept-encoding")
        if accept_encoding is None:
            logger.debug(f"No Accept-Encoding for {_fullpath(request)}, passing through")
            return status, headers, body

        encoding = select_best_encoding(SUPPORTED_ENCODINGS, accept_encoding)
        if encoding is None:
            return self._not_acceptable(request, body)

        return self.notifier.instrument(
            EVENT_NAME,
            {"request": request},
            lambda: self._deflate(status, normalized, body, encoding),
        )

    def _deflate(self, status, headers, body, encoding) -> ResponseTriple:
        merge_vary(headers)
        headers["content-encoding"] = encoding
        del headers["content-length"]
        return status, headers, BrotliStream(body, self.deflater_options, self.codec)

    def _not_acceptable(self, request, body) -> ResponseTriple:
        path = _fullpath(request)
        logger.debug(f"No acceptable encoding for {path}, responding 406")
        message = NOT_ACCEPTABLE_MESSAGE.format(path=path).encode("utf-8")
        close_body(body)
        headers = header_hash(
            {"content-type": "text/plain", "content-length": str(len(message))}
        )
        return 406, headers, [message]


class Brotli:
    """
    Application wrapper compressing the responses of ``app``.

    ``app`` must return a re-iterable body (a list of chunks, say) when a
    ``condition`` reads it.
    """

    def __init__(self, app: Application, **options):
        if not callable(app):
            raise ConfigurationError(f"'app' must be callable, got {app!r}")
        self.app = app
        self.deflater = Deflater(**options)

    def __call__(self, request: Any) -> ResponseTriple:
        status, headers, body = self.app(request)
        return self.deflater.process(request, status, headers, body)
