"""
=============================================================================
BASE MIDDLEWARE INTERFACE
=============================================================================

Defines the middleware protocol and the pipeline for chaining middleware.
Implements the Chain of Responsibility design pattern.

=============================================================================
CHAIN OF RESPONSIBILITY PATTERN
=============================================================================

Each middleware either answers the request itself (short-circuit) or passes
it on to the next handler and returns whatever comes back:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                   GUARDED PIPELINE - REQUEST FLOW                   │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Request ────────────────────────────────────────────────►         │
    │                                                                      │
    │   ┌──────────────┐    ┌──────────────┐    ┌──────────────┐          │
    │   │ ErrorCatcher │───►│   IpFilter   │───►│   Handler    │          │
    │   └──────┬───────┘    └──────┬───────┘    └──────┬───────┘          │
    │          │                   │                   │                  │
    │          ▼                   ▼                   ▼                  │
    │     [try/except]       [allow/deny]          [exec]                 │
    │     render error       403 on deny           may raise              │
    │                                                                      │
    │   ◄──────────────────────────────────────────────── Response        │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

ErrorCatcher sits OUTERMOST so that it also catches failures raised by
the middleware inside it.

=============================================================================
INTERVIEW INSIGHT: CHAIN OF RESPONSIBILITY
=============================================================================

Q: "What design pattern would you use for middleware?"
A: "Chain of Responsibility. Each middleware is a handler that can either
   process the request or delegate to the next handler. This allows:
   - Decoupling sender from receiver
   - Adding/removing handlers dynamically
   - Each handler has single responsibility"

Q: "Why must middleware be stateless per request?"
A: "One instance serves every request, possibly on many threads at once.
   Configuration is fixed at construction; anything request-scoped lives
   in local variables."

=============================================================================
"""

from abc import ABC, abstractmethod
from typing import Callable, List
import logging

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


logger = logging.getLogger(__name__)


# NextHandler is the signature for the next middleware or final handler.
# Each middleware receives one and calls it to continue the chain.
NextHandler = Callable[[HTTPRequest], HTTPResponse]


class Middleware(ABC):
    """
    Abstract base class for middleware.

    Every middleware implements __call__ with this signature:

        def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse

    Call next(request) to continue the chain, or return a response
    without calling it to short-circuit.
    """

    @abstractmethod
    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        """
        Process the request.

        Args:
            request: The incoming HTTP request
            next: The next handler in the chain

        Returns:
            HTTP response (either from next() or short-circuited)
        """

    @property
    def name(self) -> str:
        """Get the middleware name for logging."""
        return self.__class__.__name__


class MiddlewarePipeline:
    """
    Chains multiple middleware together with a final handler.

    The first middleware added is the outermost layer:

        pipeline = MiddlewarePipeline()
        pipeline.add(ErrorCatcher(...))      # outermost
        pipeline.add(IpFilter(...))          # closest to handler

        handler = pipeline.wrap(app)
        response = handler(request)

    Request flows inward (ErrorCatcher, IpFilter, app); the response flows
    back outward in reverse.
    """

    def __init__(self):
        self._middleware: List[Middleware] = []

    def add(self, middleware: Middleware) -> "MiddlewarePipeline":
        """
        Add middleware to the pipeline.

        Returns:
            Self for method chaining
        """
        self._middleware.append(middleware)
        logger.debug(f"Added middleware: {middleware.name}")
        return self

    def wrap(self, handler: NextHandler) -> NextHandler:
        """
        Wrap a handler with all middleware in the pipeline.

        Given [MW1, MW2] and handler, wrapping runs in REVERSE order so the
        result is MW1 → MW2 → handler.
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
        """Create a closure that calls middleware with the next handler."""
        def wrapped(request: HTTPRequest) -> HTTPResponse:
            return middleware(request, next_handler)

        return wrapped

    def __len__(self) -> int:
        return len(self._middleware)

    def __iter__(self):
        return iter(self._middleware)
