"""
=============================================================================
MIDDLEWARE BASE
=============================================================================

Middleware wraps the route dispatcher to add behaviour around every
request without touching the handlers:

    request ──► LoggingMiddleware ──► CompressionMiddleware ──► router.handle
                                                                      │
    response ◄── (logs status, size) ◄── (gzips body) ◄──────────────┘

=============================================================================
THE CONTRACT
=============================================================================

    class MyMiddleware(Middleware):
        def __call__(self, request, next):
            # before the handler
            response = next(request)
            # after the handler
            return response

=============================================================================
"""

from abc import ABC, abstractmethod
from typing import Callable, List
import logging

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


logger = logging.getLogger(__name__)


# The next middleware, or the final handler
NextHandler = Callable[[HTTPRequest], HTTPResponse]


class Middleware(ABC):
    """Abstract base class for middleware."""

    @abstractmethod
    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        """
        Process the request.

        Call next(request) to continue the chain, optionally inspect or
        modify the response, and return it.
        """

    @property
    def name(self) -> str:
        """Middleware name for logging."""
        return self.__class__.__name__


class MiddlewarePipeline:
    """
    Chains middleware around a final handler.

    First added = outermost:

        pipeline = MiddlewarePipeline()
        pipeline.add(LoggingMiddleware())      # outermost
        pipeline.add(CompressionMiddleware())  # closest to handler
        handler = pipeline.wrap(router.handle)
    """

    def __init__(self):
        self._middleware: List[Middleware] = []

    def add(self, middleware: Middleware) -> "MiddlewarePipeline":
        """Append middleware; returns self for chaining."""
        self._middleware.append(middleware)
        logger.debug(f"Added middleware: {middleware.name}")
        return self

    def wrap(self, handler: NextHandler) -> NextHandler:
        """
        Build the chain around handler.

        Given [MW1, MW2] the result calls MW1 → MW2 → handler. We wrap in
        reverse order so the first-added middleware ends up outermost.
        """
        current = handler
        for middleware in reversed(self._middleware):
            current = self._create_wrapped_handler(middleware, current)
        return current

    def _create_wrapped_handler(
        self,
        middleware: Middleware,
        next_handler: NextHandler
    ) -> NextHandler:
        def wrapped(request: HTTPRequest) -> HTTPResponse:
            return middleware(request, next_handler)
        return wrapped

    def __len__(self) -> int:
        return len(self._middleware)

    def __iter__(self):
        return iter(self._middleware)
