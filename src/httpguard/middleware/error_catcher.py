"""
=============================================================================
ERROR CATCHER MIDDLEWARE
=============================================================================

Converts any exception raised further down the chain into a proper 5xx
response, formatted for what the client asked for in its Accept header.

=============================================================================
FLOW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   next(request) ──► returns normally ──► response passed through    │
    │        │                                                             │
    │        └──► raises                                                   │
    │               │                                                      │
    │               ▼                                                      │
    │          log once (never masks the original error)                   │
    │               │                                                      │
    │               ▼                                                      │
    │          negotiate Accept ──► no binding ──────────┐                 │
    │               │                                    │                 │
    │               ▼                                    ▼                 │
    │          resolve renderer ──► fails ──────► ErrorHandler.handle()    │
    │               │                                    ▲                 │
    │               ▼                                    │                 │
    │          render ──────────► raises / empty ────────┘                 │
    │               │                                                      │
    │               ▼                                                      │
    │          response_factory.create_response(5xx)                       │
    │          + Content-Type + body                                       │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

There is no retry and no second negotiation: a renderer that fails goes
straight to the default handler, which cannot fail.

=============================================================================
CONFIGURATION
=============================================================================

    catcher = ErrorCatcher(ResponseFactory())

    # Serve RFC 7807 documents to clients that ask for them
    catcher = catcher.with_renderer("application/problem+json", "json")

    # Only ever render JSON (plus the default handler for everyone else)
    catcher = catcher.with_only_renderer("application/json", "json")

    # Drop bindings; without arguments drops all of them
    catcher = catcher.without_renderers("text/xml", "application/xml")

Each call returns a NEW ErrorCatcher. Unknown renderer keys and malformed
patterns raise immediately, at configuration time.

=============================================================================
INTERVIEW INSIGHT: ERROR MIDDLEWARE PLACEMENT
=============================================================================

Q: "Where does error-handling middleware go in the chain?"
A: "Outermost. It can only catch what is raised inside it, so everything
   that might fail, other middleware included, must be nested within."

Q: "Why must logging failures be swallowed here?"
A: "The catcher is the boundary that guarantees a response. If a broken
   log handler could raise, a client would get a dropped connection
   instead of a 500, and the original error would be lost."

=============================================================================
"""

from copy import copy
from typing import Hashable, Optional
import logging

from .base import Middleware, NextHandler
from ..errors.container import ServiceContainer
from ..errors.content import ErrorContent
from ..errors.handler import ErrorHandler
from ..errors.registry import RendererRegistry
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, ResponseFactory
from ..http.status_codes import HTTPStatus


# Namespaced logger for uncaught application errors:
#   logging.getLogger("httpguard.errors").addHandler(alerting_handler)
ERROR_LOGGER = "httpguard.errors"


DEFAULT_BINDINGS = (
    ("application/json", "json"),
    ("application/xml", "xml"),
    ("text/xml", "xml"),
    ("text/plain", "plain"),
    ("text/html", "html"),
    ("*/*", "html"),
)


class ErrorCatcher(Middleware):
    """
    Catches downstream exceptions and renders them.

    Args:
        response_factory: Creates the error response
        error_handler:    Fallback formatter; its debug flag also switches
                          negotiated renderers to verbose output
        container:        Renderer source (defaults to the built-in renderers)
        logger:           Where uncaught errors are logged
    """

    def __init__(
        self,
        response_factory: ResponseFactory,
        error_handler: Optional[ErrorHandler] = None,
        container=None,
        logger: Optional[logging.Logger] = None,
    ):
        self.response_factory = response_factory
        self.error_handler = error_handler or ErrorHandler()
        self.container = container if container is not None else ServiceContainer.with_defaults()
        self.logger = logger if logger is not None else logging.getLogger(ERROR_LOGGER)

        # Defaults the container cannot serve are left out
        self.registry = RendererRegistry(self.container, [
            (pattern, key) for pattern, key in DEFAULT_BINDINGS
            if self.container.has(key)
        ])

    # =========================================================================
    # RECONFIGURATION
    # =========================================================================

    def with_renderer(self, pattern: str, key: Hashable) -> "ErrorCatcher":
        """Return a catcher with the binding added or replaced."""
        return self._with_registry(self.registry.register(pattern, key))

    def with_only_renderer(self, pattern: str, key: Hashable) -> "ErrorCatcher":
        """Return a catcher whose only binding is this one."""
        return self._with_registry(self.registry.register_exclusive(pattern, key))

    def without_renderers(self, *patterns: str) -> "ErrorCatcher":
        """Return a catcher without the given bindings (all when none given)."""
        return self._with_registry(self.registry.clear(*patterns))

    def _with_registry(self, registry: RendererRegistry) -> "ErrorCatcher":
        catcher = copy(self)
        catcher.registry = registry
        return catcher

    # =========================================================================
    # REQUEST HANDLING
    # =========================================================================

    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        try:
            return next(request)
        except Exception as error:
            return self.handle_error(error, request)

    def handle_error(self, error: Exception, request: HTTPRequest) -> HTTPResponse:
        """Build the error response for an exception raised downstream."""
        self._log(error, request)

        content = self._render(error, request)

        response = self.response_factory.create_response(_error_status(content))
        response.set_content_type(content.content_type)
        response.set_body(content.body)
        return response

    def _render(self, error: Exception, request: HTTPRequest) -> ErrorContent:
        try:
            binding = self.registry.negotiate(request.accept)
        except Exception:
            self._warn("Accept negotiation failed")
            return self.error_handler.handle(error, request)

        if binding is None:
            return self.error_handler.handle(error, request)

        try:
            renderer = self.registry.resolve(binding.key)
        except Exception:
            self._warn(f"Renderer for {binding} could not be resolved")
            return self.error_handler.handle(error, request)

        return self.error_handler.handle_caught(error, renderer, request)

    def _log(self, error: Exception, request: HTTPRequest) -> None:
        try:
            self.logger.error(
                f"Unhandled {type(error).__name__} on {request.method} {request.path}: {error}",
                exc_info=(type(error), error, error.__traceback__),
            )
        except Exception:  # a broken logger must not replace the response
            pass

    def _warn(self, message: str) -> None:
        try:
            self.logger.warning(message, exc_info=True)
        except Exception:
            pass


def _error_status(content: ErrorContent) -> HTTPStatus:
    """The content's status when it is a 5xx, otherwise 500."""
    try:
        status = HTTPStatus(content.status)
    except (TypeError, ValueError):
        return HTTPStatus.INTERNAL_SERVER_ERROR

    if status.is_server_error:
        return status
    return HTTPStatus.INTERNAL_SERVER_ERROR
