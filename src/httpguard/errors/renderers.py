"""
=============================================================================
ERROR RENDERERS
=============================================================================

Turn an exception into a response body in one particular format.

=============================================================================
RENDERER CONTRACT
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   render(error, request)          → ErrorContent                    │
    │       Safe for production. Generic message only; never leaks        │
    │       class names, file paths or stack frames.                      │
    │                                                                      │
    │   render_verbose(error, request)  → ErrorContent                    │
    │       For debug mode. Exception type, message, location,            │
    │       traceback and the chain of previous exceptions.               │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Renderers are stateless, so one instance serves every request.

=============================================================================
AVAILABLE RENDERERS
=============================================================================

    PlainTextRenderer   text/plain         curl, logs, the fallback
    HtmlRenderer        text/html          browsers
    JsonRenderer        application/json   API clients
    XmlRenderer         application/xml    legacy API clients

=============================================================================
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from html import escape as html_escape
from typing import List, Optional
from xml.sax.saxutils import escape, quoteattr
import json
import re
import traceback

from .content import ErrorContent
from .templates import ERROR_PAGE, EXCEPTION_PAGE, CALL_STACK_ITEM, PREVIOUS_EXCEPTION
from ..http.request import HTTPRequest


DEFAULT_MESSAGE = "An internal server error occurred."


# =============================================================================
# EXCEPTION INTROSPECTION
# =============================================================================

@dataclass(frozen=True)
class Frame:
    """One traceback frame, outermost first."""

    file: str
    line: int
    function: str
    code: str


@dataclass(frozen=True)
class ErrorDetails:
    """
    Everything verbose renderers show about an exception.

    file/line point at the frame where the exception was raised
    (the innermost one), which is what a developer wants to open first.
    """

    type: str
    message: str
    file: str
    line: int
    trace: List[Frame]

    @classmethod
    def from_exception(cls, error: BaseException) -> "ErrorDetails":
        frames = [
            Frame(
                file=summary.filename,
                line=summary.lineno or 0,
                function=summary.name,
                code=(summary.line or "").strip(),
            )
            for summary in traceback.extract_tb(error.__traceback__)
        ]
        innermost = frames[-1] if frames else Frame("unknown", 0, "", "")

        return cls(
            type=f"{type(error).__module__}.{type(error).__qualname__}".removeprefix("builtins."),
            message=str(error),
            file=innermost.file,
            line=innermost.line,
            trace=frames,
        )


def previous_exceptions(error: BaseException) -> List[BaseException]:
    """
    The chain of exceptions that led to this one, nearest first.

    Follows __cause__ ("raise X from Y") and, unless suppressed,
    __context__ (an exception raised while handling another).
    Stops on cycles.
    """
    chain = []
    seen = {id(error)}
    current = _previous(error)
    while current is not None and id(current) not in seen:
        chain.append(current)
        seen.add(id(current))
        current = _previous(current)
    return chain


def _previous(error: BaseException) -> Optional[BaseException]:
    if error.__cause__ is not None:
        return error.__cause__
    if error.__suppress_context__:
        return None
    return error.__context__


# =============================================================================
# BASE CLASS
# =============================================================================

class ThrowableRenderer(ABC):
    """
    Base class for error renderers.

    Subclasses set content_type and implement both render methods.
    """

    content_type: str = "text/plain; charset=utf-8"

    @abstractmethod
    def render(self, error: BaseException, request: Optional[HTTPRequest] = None) -> ErrorContent:
        """Render a production-safe error body."""

    @abstractmethod
    def render_verbose(self, error: BaseException, request: Optional[HTTPRequest] = None) -> ErrorContent:
        """Render an error body with full exception details."""

    def _content(self, body: str) -> ErrorContent:
        return ErrorContent(body=body.encode("utf-8"), content_type=self.content_type)


# =============================================================================
# CONCRETE RENDERERS
# =============================================================================

class PlainTextRenderer(ThrowableRenderer):
    """
    Plain text output.

    Also the default renderer of ErrorHandler, because it has the fewest
    ways to fail.
    """

    content_type = "text/plain; charset=utf-8"

    def __init__(self, message: str = DEFAULT_MESSAGE):
        self.message = message

    def render(self, error, request=None):
        return self._content(self.message)

    def render_verbose(self, error, request=None):
        details = ErrorDetails.from_exception(error)
        lines = [
            f"{details.type} with message '{details.message}'",
            "",
            f"in {details.file}:{details.line}",
            "",
            "Stack trace:",
            "".join(traceback.format_tb(error.__traceback__)).rstrip(),
        ]
        for previous in previous_exceptions(error):
            prev = ErrorDetails.from_exception(previous)
            lines += ["", f"Caused by: {prev.type} with message '{prev.message}'",
                      f"in {prev.file}:{prev.line}"]
        return self._content("\n".join(lines))


class HtmlRenderer(ThrowableRenderer):
    """
    HTML error pages for browsers.

    All exception text is HTML-escaped before it reaches the templates;
    exception messages frequently contain user input.
    """

    content_type = "text/html; charset=utf-8"

    def __init__(self, title: str = "Internal Server Error", message: str = DEFAULT_MESSAGE):
        self.title = title
        self.message = message

    def render(self, error, request=None):
        return self._content(ERROR_PAGE.substitute(
            title=html_escape(self.title),
            message=html_escape(self.message),
        ))

    def render_verbose(self, error, request=None):
        details = ErrorDetails.from_exception(error)

        call_stack = "\n".join(
            CALL_STACK_ITEM.substitute(
                file=html_escape(frame.file),
                line=frame.line,
                function=html_escape(frame.function),
                code=html_escape(frame.code),
            )
            for frame in details.trace
        )

        previous = "\n".join(
            PREVIOUS_EXCEPTION.substitute(
                type=html_escape(prev.type),
                message=html_escape(prev.message),
                file=html_escape(prev.file),
                line=prev.line,
            )
            for prev in map(ErrorDetails.from_exception, previous_exceptions(error))
        )

        return self._content(EXCEPTION_PAGE.substitute(
            type=html_escape(details.type),
            message=html_escape(details.message),
            file=html_escape(details.file),
            line=details.line,
            call_stack=call_stack,
            previous=previous,
        ))


class JsonRenderer(ThrowableRenderer):
    """
    JSON error objects for API clients.

        {"message": "An internal server error occurred."}

    Verbose output adds type, file, line, trace and previous.
    """

    content_type = "application/json; charset=utf-8"

    def __init__(self, message: str = DEFAULT_MESSAGE):
        self.message = message

    def render(self, error, request=None):
        return self._content(json.dumps({"message": self.message}, ensure_ascii=False))

    def render_verbose(self, error, request=None):
        data = self._describe(error)
        data["previous"] = [self._describe(prev) for prev in previous_exceptions(error)]
        return self._content(json.dumps(data, ensure_ascii=False))

    @staticmethod
    def _describe(error: BaseException) -> dict:
        details = ErrorDetails.from_exception(error)
        return {
            "type": details.type,
            "message": details.message,
            "file": details.file,
            "line": details.line,
            "trace": [
                {"file": f.file, "line": f.line, "function": f.function}
                for f in details.trace
            ],
        }


# Characters XML 1.0 does not allow anywhere in a document, even escaped
_XML_INVALID = re.compile("[^\x09\x0a\x0d\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")


def xml_escape(value: str) -> str:
    """Escape text content, replacing characters XML cannot carry with U+FFFD."""
    return escape(_XML_INVALID.sub("\ufffd", value))


def xml_attr(value: str) -> str:
    """Quoted attribute value, sanitized like xml_escape()."""
    return quoteattr(_XML_INVALID.sub("\ufffd", value))


class XmlRenderer(ThrowableRenderer):
    """XML error documents."""

    content_type = "application/xml; charset=utf-8"

    def __init__(self, message: str = DEFAULT_MESSAGE):
        self.message = message

    def render(self, error, request=None):
        return self._content(
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            f"<error><message>{xml_escape(self.message)}</message></error>"
        )

    def render_verbose(self, error, request=None):
        details = ErrorDetails.from_exception(error)
        frames = "".join(
            f'<frame file={xml_attr(f.file)} line="{f.line}">'
            f"{xml_escape(f.function)}</frame>"
            for f in details.trace
        )
        return self._content(
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            "<error>"
            f"<type>{xml_escape(details.type)}</type>"
            f"<message>{xml_escape(details.message)}</message>"
            f"<file>{xml_escape(details.file)}</file>"
            f"<line>{details.line}</line>"
            f"<trace>{frames}</trace>"
            "</error>"
        )
