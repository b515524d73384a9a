"""
pytest configuration and fixtures.
"""

import logging
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from httpguard.errors import ServiceContainer, ErrorHandler
from httpguard.errors.content import ErrorContent
from httpguard.errors.renderers import ThrowableRenderer
from httpguard.http import HTTPRequest, HTTPResponse, ResponseFactory


class FailingRenderer(ThrowableRenderer):
    """Renderer that always raises."""

    content_type = "application/x-failing"

    def render(self, error, request=None):
        raise RuntimeError("renderer exploded")

    def render_verbose(self, error, request=None):
        raise RuntimeError("renderer exploded")


class EmptyRenderer(ThrowableRenderer):
    """Renderer that produces no body."""

    content_type = "application/x-empty"

    def render(self, error, request=None):
        return ErrorContent(b"", self.content_type)

    def render_verbose(self, error, request=None):
        return ErrorContent(b"", self.content_type)


class InvalidRenderer(ThrowableRenderer):
    """Renderer that returns something other than ErrorContent."""

    content_type = "application/x-invalid"

    def __init__(self, output=None):
        self.output = output

    def render(self, error, request=None):
        return self.output

    def render_verbose(self, error, request=None):
        return self.output


class RaisingLogHandler(logging.Handler):
    """Log handler whose sink is down."""

    def handle(self, record):
        raise OSError("log sink down")


class BrokenLogger(logging.Logger):
    """Logger whose every call raises."""

    def __init__(self):
        super().__init__("broken")

    def error(self, *args, **kwargs):
        raise OSError("log sink unavailable")

    def warning(self, *args, **kwargs):
        raise OSError("log sink unavailable")


def _make_request(accept=None, remote_addr="127.0.0.1", **kwargs) -> HTTPRequest:
    """Build a request with an optional Accept header."""
    headers = kwargs.pop("headers", {})
    if accept is not None:
        headers["Accept"] = accept
    server_params = kwargs.pop("server_params", {})
    if remote_addr is not None:
        server_params.setdefault("REMOTE_ADDR", remote_addr)
    return HTTPRequest(headers=headers, server_params=server_params, **kwargs)


def _raising_handler(request: HTTPRequest) -> HTTPResponse:
    """Downstream handler that always fails."""
    raise ValueError("downstream failure")


def _ok_handler(request: HTTPRequest) -> HTTPResponse:
    """Downstream handler that always succeeds."""
    return ResponseFactory().create_response(200).set_body("ok")


@pytest.fixture
def factory() -> ResponseFactory:
    return ResponseFactory()


@pytest.fixture
def container() -> ServiceContainer:
    """Built-in renderers plus test doubles."""
    return (ServiceContainer.with_defaults()
        .set("failing", FailingRenderer())
        .set("empty", EmptyRenderer())
        .set("none", InvalidRenderer(None))
        .set("tuple", InvalidRenderer((b"body", "text/plain"))))


@pytest.fixture
def error_handler() -> ErrorHandler:
    return ErrorHandler()


@pytest.fixture
def sample_error() -> ValueError:
    """An exception with a real traceback."""
    try:
        raise ValueError("something <broke> & failed")
    except ValueError as e:
        return e


@pytest.fixture
def make_request():
    """Factory for requests: make_request(accept="text/html", remote_addr="1.1.1.1")."""
    return _make_request


@pytest.fixture
def raising_handler():
    return _raising_handler


@pytest.fixture
def ok_handler():
    return _ok_handler


@pytest.fixture
def broken_logger() -> BrokenLogger:
    return BrokenLogger()


@pytest.fixture
def failing_log_handler():
    """A raising handler attached to the httpguard logger for one test."""
    package_logger = logging.getLogger("httpguard")
    handler = RaisingLogHandler()
    previous = package_logger.level
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG)
    yield handler
    package_logger.removeHandler(handler)
    package_logger.setLevel(previous)
