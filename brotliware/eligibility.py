# eligibility.py
"""Decides whether a response may be compressed at all."""
import re
from typing import Any, Callable, FrozenSet, Iterable, Optional

from starlette.datastructures import MutableHeaders

# Statuses that never carry an entity body.
STATUS_WITH_NO_ENTITY_BODY: FrozenSet[int] = frozenset(
    list(range(100, 200)) + [204, 304]
)

_NO_TRANSFORM = re.compile(r"\bno-transform\b")
_IDENTITY = re.compile(r"\bidentity\b")

Condition = Callable[[Any, int, MutableHeaders, Iterable[bytes]], bool]


def _header_value(headers: MutableHeaders, name: str) -> Optional[str]:
    """All lines of a repeated header joined as one value, None if absent."""
    values = headers.getlist(name)
    return ", ".join(values) if values else None


def _passes_header_rules(
    status: int, headers: MutableHeaders, include: Optional[FrozenSet[str]]
) -> bool:
    if int(status) in STATUS_WITH_NO_ENTITY_BODY:
        return False

    if _NO_TRANSFORM.search(_header_value(headers, "cache-control") or ""):
        return False

    content_encoding = _header_value(headers, "content-encoding")
    if content_encoding is not None and not _IDENTITY.search(content_encoding):
        return False

    if include is not None:
        content_type = headers.get("content-type")
        if content_type is None or content_type.split(";", 1)[0] not in include:
            return False

    return True


def may_compress(
    status: int, headers: MutableHeaders, include: Optional[FrozenSet[str]] = None
) -> bool:
    """
    Run every rule that needs neither the body nor the ``condition``.

    False means :func:`should_compress` is False too, so the body can be
    left alone.
    """
    return _passes_header_rules(status, headers, include) and (
        headers.get("content-length") != "0"
    )


def should_compress(
    request: Any,
    status: int,
    headers: MutableHeaders,
    body: Iterable[bytes],
    include: Optional[FrozenSet[str]] = None,
    condition: Optional[Condition] = None,
) -> bool:
    """
    Check a response against the compression policy.

    Checks run cheapest first and the first failing one wins: no-body
    status, ``no-transform``, an existing non-identity encoding, the
    ``include`` list, the ``condition`` callable and finally an explicit
    zero ``Content-Length``. Repeated ``Cache-Control`` and
    ``Content-Encoding`` lines are read together.

    Args:
        request: Request context, handed to ``condition``
        status: Response status code
        headers: Normalized response headers
        body: Response body, handed to ``condition``
        include: Media types allowed to be compressed, None for all
        condition: Extra user predicate

    Returns:
        True if compression should be attempted
    """
    if not _passes_header_rules(status, headers, include):
        return False

    if condition is not None and not condition(request, status, headers, body):
        return False

    # Nothing to gain from an empty body.
    if headers.get("content-length") == "0":
        return False

    return True
