"""
Unit tests for error renderers and the default error handler.
"""

import json
import xml.etree.ElementTree as ET

import pytest

from httpguard.errors import (
    DEFAULT_MESSAGE,
    ErrorContent,
    ErrorHandler,
    PlainTextRenderer,
    HtmlRenderer,
    JsonRenderer,
    XmlRenderer,
)
from httpguard.errors.renderers import ErrorDetails, previous_exceptions
from httpguard.http.status_codes import HTTPStatus


def chained_error():
    """A RuntimeError raised from a KeyError."""
    try:
        try:
            {}["missing"]
        except KeyError as cause:
            raise RuntimeError("wrapper failed") from cause
    except RuntimeError as e:
        return e


class TestErrorDetails:
    """Tests for exception introspection."""

    def test_from_exception(self, sample_error):
        """Test type, message and location are extracted."""
        details = ErrorDetails.from_exception(sample_error)

        assert details.type == "ValueError"
        assert details.message == "something <broke> & failed"
        assert details.file.endswith("conftest.py")
        assert details.line > 0
        assert details.trace

    def test_exception_without_traceback(self):
        """Test an exception that was never raised."""
        details = ErrorDetails.from_exception(ValueError("never raised"))

        assert details.trace == []
        assert details.file == "unknown"

    def test_previous_exceptions(self):
        """Test the cause chain is followed."""
        chain = previous_exceptions(chained_error())

        assert [type(e) for e in chain] == [KeyError]

    def test_suppressed_context(self):
        """Test 'raise ... from None' hides the context."""
        try:
            try:
                raise KeyError("inner")
            except KeyError:
                raise RuntimeError("outer") from None
        except RuntimeError as e:
            assert previous_exceptions(e) == []


class TestPlainTextRenderer:
    """Tests for PlainTextRenderer."""

    def test_render(self, sample_error):
        """Test production output is the generic message."""
        content = PlainTextRenderer().render(sample_error)

        assert content.body == DEFAULT_MESSAGE.encode()
        assert content.content_type == "text/plain; charset=utf-8"
        assert content.status == HTTPStatus.INTERNAL_SERVER_ERROR

    def test_render_verbose(self, sample_error):
        """Test verbose output names the exception."""
        body = PlainTextRenderer().render_verbose(sample_error).body.decode()

        assert "ValueError with message 'something <broke> & failed'" in body
        assert "Stack trace:" in body

    def test_render_verbose_includes_cause(self):
        """Test chained exceptions are listed."""
        body = PlainTextRenderer().render_verbose(chained_error()).body.decode()

        assert "Caused by: KeyError" in body


class TestHtmlRenderer:
    """Tests for HtmlRenderer."""

    def test_render(self, sample_error):
        """Test the generic page leaks nothing."""
        body = HtmlRenderer().render(sample_error).body.decode()

        assert "<title>Internal Server Error</title>" in body
        assert DEFAULT_MESSAGE in body
        assert "ValueError" not in body

    def test_render_verbose_escapes(self, sample_error):
        """Test exception text is HTML-escaped."""
        body = HtmlRenderer().render_verbose(sample_error).body.decode()

        assert "something &lt;broke&gt; &amp; failed" in body
        assert "<broke>" not in body
        assert 'class="call-stack"' in body

    def test_render_verbose_previous(self):
        """Test the cause chain is shown."""
        body = HtmlRenderer().render_verbose(chained_error()).body.decode()

        assert "Caused by: KeyError" in body

    def test_content_type(self, sample_error):
        """Test the HTML content type."""
        assert HtmlRenderer().render(sample_error).content_type == "text/html; charset=utf-8"


class TestJsonRenderer:
    """Tests for JsonRenderer."""

    def test_render(self, sample_error):
        """Test production output."""
        content = JsonRenderer().render(sample_error)

        assert json.loads(content.body) == {"message": DEFAULT_MESSAGE}
        assert content.content_type == "application/json; charset=utf-8"

    def test_render_verbose(self):
        """Test verbose output structure."""
        data = json.loads(JsonRenderer().render_verbose(chained_error()).body)

        assert data["type"] == "RuntimeError"
        assert data["message"] == "wrapper failed"
        assert data["line"] > 0
        assert data["trace"][0]["function"] == "chained_error"
        assert data["previous"][0]["type"] == "KeyError"


class TestXmlRenderer:
    """Tests for XmlRenderer."""

    def test_render(self, sample_error):
        """Test production output is well-formed XML."""
        content = XmlRenderer().render(sample_error)
        root = ET.fromstring(content.body)

        assert root.tag == "error"
        assert root.findtext("message") == DEFAULT_MESSAGE
        assert content.content_type == "application/xml; charset=utf-8"

    def test_render_verbose_escapes(self, sample_error):
        """Test exception text survives XML escaping."""
        root = ET.fromstring(XmlRenderer().render_verbose(sample_error).body)

        assert root.findtext("type") == "ValueError"
        assert root.findtext("message") == "something <broke> & failed"
        assert root.find("trace/frame") is not None

    def test_render_verbose_control_characters(self):
        """Test characters XML cannot carry are replaced."""
        try:
            raise ValueError("null\x00byte and bell\x07")
        except ValueError as e:
            error = e

        root = ET.fromstring(XmlRenderer().render_verbose(error).body)

        assert root.findtext("message") == "null\ufffdbyte and bell\ufffd"


class TestErrorHandler:
    """Tests for ErrorHandler."""

    def test_handle_uses_default_renderer(self, sample_error):
        """Test plain text is the default."""
        content = ErrorHandler().handle(sample_error)

        assert content.body == DEFAULT_MESSAGE.encode()
        assert content.content_type.startswith("text/plain")

    def test_handle_debug(self, sample_error):
        """Test debug mode renders verbosely."""
        content = ErrorHandler(debug=True).handle(sample_error)

        assert b"ValueError" in content.body

    def test_handle_custom_default(self, sample_error):
        """Test a custom default renderer."""
        content = ErrorHandler(JsonRenderer()).handle(sample_error)

        assert content.content_type.startswith("application/json")

    def test_handle_never_raises(self, sample_error, container):
        """Test a failing default renderer degrades to fixed text."""
        content = ErrorHandler(container.get("failing")).handle(sample_error)

        assert content.body == DEFAULT_MESSAGE.encode()
        assert content.status == HTTPStatus.INTERNAL_SERVER_ERROR

    def test_handle_empty_body(self, sample_error, container):
        """Test an empty body is never returned."""
        content = ErrorHandler(container.get("empty")).handle(sample_error)

        assert content.body == DEFAULT_MESSAGE.encode()

    def test_handle_caught(self, sample_error):
        """Test rendering with a negotiated renderer."""
        content = ErrorHandler().handle_caught(sample_error, XmlRenderer())

        assert content.content_type.startswith("application/xml")

    @pytest.mark.parametrize("key", ["none", "tuple"])
    def test_handle_invalid_content(self, sample_error, container, key):
        """Test a default renderer returning something other than ErrorContent."""
        content = ErrorHandler(container.get(key)).handle(sample_error)

        assert content == ErrorContent(DEFAULT_MESSAGE.encode(), "text/plain; charset=utf-8")

    @pytest.mark.parametrize("key", ["none", "tuple"])
    def test_handle_caught_invalid_content(self, sample_error, container, key):
        """Test a negotiated renderer returning something other than ErrorContent."""
        content = ErrorHandler(JsonRenderer()).handle_caught(sample_error, container.get(key))

        assert content.content_type.startswith("application/json")

    def test_handle_caught_falls_back(self, sample_error, container):
        """Test a failing renderer falls through to the default."""
        content = ErrorHandler().handle_caught(sample_error, container.get("failing"))

        assert content == ErrorContent(DEFAULT_MESSAGE.encode(), "text/plain; charset=utf-8")

    def test_with_debug(self):
        """Test toggling debug returns a new handler."""
        handler = ErrorHandler()

        assert handler.with_debug().debug
        assert not handler.debug
