# middleware/base.py
"""Base middleware class for brotliware."""
from abc import ABC
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from typing import Callable


class BrotliwareMiddleware(BaseHTTPMiddleware, ABC):
    """Base class keeping construction options and a post-response hook."""

    def __init__(self, app, **kwargs):
        super().__init__(app)
        self.config = kwargs
        self.setup()

    def setup(self) -> None:
        """Override this method for middleware-specific setup."""
        pass

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Main middleware dispatch method."""
        response = await call_next(request)
        return await self.after_response(request, response)

    async def after_response(self, request: Request, response: Response) -> Response:
        """Called after the response is generated."""
        return response
