"""
=============================================================================
HTTP RESPONSE MODEL
=============================================================================

Response objects and the response factory the middleware use to create
responses they originate themselves.

=============================================================================
WHO CREATES RESPONSES?
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   Downstream handler ──► HTTPResponse (passed through untouched)    │
    │                                                                      │
    │   IpFilter           ──► factory.create_response(403)               │
    │                                                                      │
    │   ErrorCatcher       ──► factory.create_response(500)               │
    │                          + Content-Type from the renderer           │
    │                          + rendered error body                      │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Middleware never instantiate HTTPResponse directly. They receive a
ResponseFactory at construction, so an application can decide what every
generated response looks like (default headers, server name, a subclass
of HTTPResponse) in one place.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Union

from .status_codes import HTTPStatus


@dataclass
class HTTPResponse:
    """
    An HTTP response travelling back up the middleware chain.

    Headers keep the case they were set with; get_header() looks them up
    case-insensitively.
    """

    status: HTTPStatus = HTTPStatus.OK
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    version: str = "HTTP/1.1"

    @property
    def status_line(self) -> str:
        """e.g. ``HTTP/1.1 403 Forbidden``"""
        return f"{self.version} {int(self.status)} {self.status.phrase}"

    @property
    def text(self) -> str:
        """The body decoded as UTF-8 (undecodable bytes replaced)."""
        return self.body.decode("utf-8", errors="replace")

    def get_header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return default

    def set_header(self, name: str, value: str) -> "HTTPResponse":
        """
        Set a response header, replacing any existing one regardless of case.

        Returns self for method chaining.
        """
        lowered = name.lower()
        for key in [k for k in self.headers if k.lower() == lowered]:
            del self.headers[key]
        self.headers[name] = value
        return self

    def set_content_type(self, content_type: str) -> "HTTPResponse":
        return self.set_header("Content-Type", content_type)

    def set_body(self, body: Union[str, bytes]) -> "HTTPResponse":
        """Set the body; strings are encoded as UTF-8."""
        if isinstance(body, str):
            self.body = body.encode("utf-8")
        else:
            self.body = body
        return self


class ResponseFactory:
    """
    Creates empty responses for a given status.

    =========================================================================
    WHY A FACTORY?
    =========================================================================

    Middleware that originate a response (a 403 denial, a 500 error page)
    should not decide what a "blank" response looks like. The application
    hands the same factory to every middleware, so default headers such as
    Server or security headers are applied consistently.

        factory = ResponseFactory(default_headers={"Server": "edge/1.0"})
        ip_filter = IpFilter(validator, factory)

    Subclass and override create_response() to return a custom
    HTTPResponse subclass.

    =========================================================================
    """

    def __init__(self, default_headers: Optional[Dict[str, str]] = None):
        self._default_headers = dict(default_headers or {})

    def create_response(self, status: Union[HTTPStatus, int] = HTTPStatus.OK) -> HTTPResponse:
        """
        Create a response with the given status and the default headers.

        Args:
            status: HTTP status code (enum member or plain int)

        Returns:
            A new HTTPResponse with an empty body
        """
        return HTTPResponse(status=HTTPStatus(status), headers=dict(self._default_headers))

