# core/config.py
"""
Configuration settings for brotliware.

Only the ASGI registration helper reads these; the deflater itself takes
explicit options.
"""
from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Defaults for the Brotli middleware.
    All settings can be overridden by environment variables or a .env file.
    """
    BROTLI_ENABLED: bool = True
    BROTLI_QUALITY: int = Field(default=5, ge=0, le=11)
    BROTLI_LGWIN: int = Field(default=22, ge=10, le=24)
    BROTLI_MODE: Literal["generic", "text", "font"] = "generic"
    BROTLI_INCLUDE: Optional[str] = None  # comma-separated, e.g. "text/html,application/json"

    def include(self) -> Optional[List[str]]:
        if self.BROTLI_INCLUDE is None:
            return None
        return [t.strip() for t in self.BROTLI_INCLUDE.split(",") if t.strip()]

    def deflater_options(self) -> dict:
        return {
            "quality": self.BROTLI_QUALITY,
            "lgwin": self.BROTLI_LGWIN,
            "mode": self.BROTLI_MODE,
        }

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get settings with caching."""
    return Settings()


__all__ = ["Settings", "get_settings"]
