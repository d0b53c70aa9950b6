"""
brotliware middleware

Registers Brotli compression on Starlette and FastAPI applications.
"""
from typing import Optional
from starlette.applications import Starlette
import logging

from ..core.config import Settings, get_settings
from .base import BrotliwareMiddleware
from .brotli import BrotliMiddleware

logger = logging.getLogger(__name__)


def add_brotli_middleware(
    app: Starlette,
    settings: Optional[Settings] = None,
    **options
) -> None:
    """
    Add :class:`BrotliMiddleware` to ``app``.

    Options not given explicitly are filled from settings: ``include`` from
    ``BROTLI_INCLUDE`` and the deflater options from ``BROTLI_QUALITY``,
    ``BROTLI_LGWIN`` and ``BROTLI_MODE``. Explicit ``deflater`` entries win
    over settings.
    """
    settings = settings or get_settings()
    if not settings.BROTLI_ENABLED:
        logger.info("Brotli compression is disabled")
        return

    options.setdefault("include", settings.include())
    options["deflater"] = {**settings.deflater_options(), **(options.get("deflater") or {})}

    try:
        app.add_middleware(BrotliMiddleware, **options)
        logger.info(f"Added middleware: {BrotliMiddleware.__name__}")
    except Exception as e:
        logger.error(f"Failed to add middleware {BrotliMiddleware.__name__}: {e}")
        raise


__all__ = [
    'BrotliwareMiddleware',
    'BrotliMiddleware',
    'add_brotli_middleware',
]
