# codec.py
"""
Brotli codec used by the deflater.

The rest of the package only relies on the ``compress(buffer, options)``
signature, so any callable with that shape can be injected instead.
"""
from typing import Any, Callable, Dict, Literal, Mapping, Optional

import brotli
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import ConfigurationError

ENCODING = "br"

_MODES = {
    "generic": brotli.MODE_GENERIC,
    "text": brotli.MODE_TEXT,
    "font": brotli.MODE_FONT,
}


class DeflaterOptions(BaseModel):
    """Brotli compression options, fixed once the middleware is built."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    quality: int = Field(default=5, ge=0, le=11)
    lgwin: int = Field(default=22, ge=10, le=24)
    lgblock: int = 0
    mode: Literal["generic", "text", "font"] = "generic"

    @field_validator("lgblock")
    def validate_lgblock(cls, v):
        if v != 0 and not 16 <= v <= 24:
            raise ValueError("lgblock must be 0 or between 16 and 24")
        return v

    @classmethod
    def merge(cls, overrides: Optional[Mapping[str, Any]] = None) -> "DeflaterOptions":
        """Merge ``overrides`` over the defaults.

        Raises:
            ConfigurationError: if an override is unknown or out of range
        """
        values: Dict[str, Any] = dict(overrides or {})
        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid deflater options: {e}",
                context={"deflater": values},
                original_exception=e,
            ) from e


Codec = Callable[[bytes, DeflaterOptions], bytes]


def compress(buffer: bytes, options: DeflaterOptions) -> bytes:
    """Compress ``buffer`` in one shot with the given options."""
    return brotli.compress(
        buffer,
        mode=_MODES[options.mode],
        quality=options.quality,
        lgwin=options.lgwin,
        lgblock=options.lgblock,
    )


def decompress(buffer: bytes) -> bytes:
    return brotli.decompress(buffer)
