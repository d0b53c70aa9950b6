"""
Custom exceptions for brotliware.
"""
from typing import Optional, Dict, Any


class BrotliwareError(Exception):
    """Base exception for all brotliware errors."""

    def __init__(
        self,
        message: str,
        *,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message
            context: Additional context about the error
            original_exception: The original exception that caused this error
        """
        super().__init__(message)
        self.context = context or {}
        self.original_exception = original_exception


class ConfigurationError(BrotliwareError, ValueError):
    """Raised when middleware options are invalid at construction time."""
    pass
