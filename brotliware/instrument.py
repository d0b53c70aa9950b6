# instrument.py
"""
Instrumentation hook around the compression transform.

A notifier is anything with an ``instrument(name, payload, block)`` method
that calls ``block`` exactly once and returns its result. Hosts that have a
metrics or tracing backend pass their own notifier to the middleware;
otherwise :class:`Instrument` is used.
"""
from typing import Any, Callable, Dict, Optional, Protocol, TypeVar

import logging
import time

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

T = TypeVar("T")

EVENT_NAME = "rack.brotli"


class Notifier(Protocol):
    def instrument(self, name: str, payload: Dict[str, Any], block: Callable[[], T]) -> T:
        ...


class Instrument:
    """Default notifier: runs the block and logs how long it took."""

    def instrument(self, name: str, payload: Dict[str, Any], block: Callable[[], T]) -> T:
        start = time.perf_counter()
        try:
            return block()
        finally:
            elapsed = (time.perf_counter() - start) * 1000
            logger.debug(f"{name} finished in {elapsed:.3f} ms")


def resolve_notifier(notifier: Optional[Any] = None) -> Notifier:
    """Return ``notifier`` if it is usable, or the built-in one if None.

    Raises:
        ConfigurationError: if ``notifier`` has no callable ``instrument``
    """
    if notifier is None:
        return Instrument()
    if not callable(getattr(notifier, "instrument", None)):
        raise ConfigurationError(
            f"Notifier {notifier!r} must provide an instrument(name, payload, block) method"
        )
    return notifier
