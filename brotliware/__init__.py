#main __init__.py
"""
brotliware - Brotli response compression middleware.

Compresses HTTP responses with Brotli when the client accepts ``br`` and the
response is eligible, leaving every other response untouched.
"""

__version__ = "0.1.0"

from .codec import DeflaterOptions, compress, decompress
from .deflater import Brotli, Deflater
from .exceptions import BrotliwareError, ConfigurationError
from .instrument import EVENT_NAME, Instrument, Notifier
from .middleware import BrotliMiddleware, add_brotli_middleware
from .stream import BrotliStream


def release() -> str:
    """Return the installed version."""
    return __version__


__all__ = [
    "Brotli",
    "BrotliMiddleware",
    "BrotliStream",
    "BrotliwareError",
    "ConfigurationError",
    "Deflater",
    "DeflaterOptions",
    "EVENT_NAME",
    "Instrument",
    "Notifier",
    "add_brotli_middleware",
    "compress",
    "decompress",
    "release",
]
