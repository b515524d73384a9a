"""
Default error handler.

The last line of defence when negotiation finds no renderer or the chosen
renderer fails. handle() must always return content, so every failure
below it degrades to a fixed plain-text message.
"""

from typing import Optional
import logging

from .content import ErrorContent
from .renderers import DEFAULT_MESSAGE, PlainTextRenderer, ThrowableRenderer
from ..http.request import HTTPRequest


logger = logging.getLogger(__name__)

FALLBACK_CONTENT = ErrorContent(
    body=DEFAULT_MESSAGE.encode("utf-8"),
    content_type="text/plain; charset=utf-8",
)


class ErrorHandler:
    """
    Formats exceptions into error content.

    Args:
        default_renderer: Renderer used when no other renderer applies
        debug:            Use render_verbose() instead of render()

    Usage:
        handler = ErrorHandler(debug=True)
        content = handler.handle(error, request)
    """

    def __init__(self, default_renderer: Optional[ThrowableRenderer] = None, debug: bool = False):
        self.default_renderer = default_renderer or PlainTextRenderer()
        self.debug = debug

    def handle(self, error: BaseException, request: Optional[HTTPRequest] = None) -> ErrorContent:
        """Render with the default renderer. Never raises."""
        try:
            content = self._render(self.default_renderer, error, request)
        except Exception:
            _warn("Default error renderer failed")
            return FALLBACK_CONTENT

        if not is_usable(content):
            _warn("Default error renderer returned no usable content", exc_info=False)
            return FALLBACK_CONTENT
        return content

    def handle_caught(
        self,
        error: BaseException,
        renderer: ThrowableRenderer,
        request: Optional[HTTPRequest] = None
    ) -> ErrorContent:
        """
        Render with a negotiated renderer.

        Falls through to handle() if the renderer raises or produces
        anything but non-empty ErrorContent.
        """
        try:
            content = self._render(renderer, error, request)
        except Exception:
            _warn(f"Error renderer {type(renderer).__name__} failed")
            return self.handle(error, request)

        if not is_usable(content):
            return self.handle(error, request)
        return content

    def with_debug(self, debug: bool = True) -> "ErrorHandler":
        return ErrorHandler(self.default_renderer, debug)

    def _render(self, renderer: ThrowableRenderer, error, request) -> ErrorContent:
        if self.debug:
            return renderer.render_verbose(error, request)
        return renderer.render(error, request)


def is_usable(content) -> bool:
    """True for ErrorContent with a non-empty bytes body and a str content type."""
    return (
        isinstance(content, ErrorContent)
        and isinstance(content.body, bytes)
        and bool(content.body)
        and isinstance(content.content_type, str)
    )


def _warn(message: str, exc_info: bool = True) -> None:
    try:
        logger.warning(message, exc_info=exc_info)
    except Exception:  # a broken log handler must not replace the fallback
        pass
