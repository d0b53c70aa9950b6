# headers.py
"""Header normalization and Vary merging."""
from typing import Iterable, Mapping, Tuple, Union

from starlette.datastructures import Headers, MutableHeaders

HeaderPairs = Iterable[Tuple[Union[str, bytes], Union[str, bytes]]]
HeadersLike = Union[Headers, Mapping[str, str], HeaderPairs]

VARY_TOKEN = "Accept-Encoding"


def _latin1(value: Union[str, bytes]) -> bytes:
    return value if isinstance(value, bytes) else value.encode("latin-1")


def header_hash(headers: HeadersLike) -> MutableHeaders:
    """
    Copy any supported header representation into a ``MutableHeaders``.

    The copy is case-insensitive for lookups and keeps repeated headers
    (e.g. ``set-cookie``) intact. The input is never modified.
    """
    if isinstance(headers, Headers):
        return MutableHeaders(raw=list(headers.raw))
    if isinstance(headers, Mapping):
        return MutableHeaders(headers=dict(headers))
    return MutableHeaders(
        raw=[(_latin1(k).lower(), _latin1(v)) for k, v in headers or ()]
    )


def merge_vary(headers: MutableHeaders) -> None:
    """Append Accept-Encoding to Vary unless it is already covered."""
    vary = [v.strip() for v in headers.get("vary", "").split(",")]
    vary = [v for v in vary if v]
    if "*" in vary or VARY_TOKEN in vary:
        return
    vary.append(VARY_TOKEN)
    headers["vary"] = ",".join(vary)
