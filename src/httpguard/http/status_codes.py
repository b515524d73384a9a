"""
=============================================================================
HTTP STATUS CODES (RFC 7231)
=============================================================================

The status codes the guard middleware produces or passes through, with
their reason phrases.

=============================================================================
WHICH CODES MATTER HERE
=============================================================================

    ┌────────┬───────────────────────────────────────────────────────────┐
    │  2xx   │ Downstream handler succeeded; passed through unchanged    │
    ├────────┼───────────────────────────────────────────────────────────┤
    │  403   │ IpFilter denied the client address                        │
    ├────────┼───────────────────────────────────────────────────────────┤
    │  5xx   │ ErrorCatcher turned an uncaught exception into a response │
    └────────┴───────────────────────────────────────────────────────────┘

The error catcher only ever emits 5xx codes. A renderer that asks for
anything else gets 500 Internal Server Error instead (see is_server_error).

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes as an integer enum.

    IntEnum members compare equal to plain ints, so
    ``HTTPStatus.FORBIDDEN == 403`` holds and the value can be used
    anywhere a numeric status is expected.
    """

    # 2xx Success
    OK = 200
    CREATED = 201
    ACCEPTED = 202
    NO_CONTENT = 204

    # 3xx Redirection
    MOVED_PERMANENTLY = 301
    FOUND = 302
    NOT_MODIFIED = 304

    # 4xx Client errors
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403                     # IpFilter denial
    NOT_FOUND = 404
    METHOD_NOT_ALLOWED = 405
    NOT_ACCEPTABLE = 406                # Can't satisfy Accept header
    TOO_MANY_REQUESTS = 429

    # 5xx Server errors
    INTERNAL_SERVER_ERROR = 500         # ErrorCatcher default
    NOT_IMPLEMENTED = 501
    BAD_GATEWAY = 502
    SERVICE_UNAVAILABLE = 503
    GATEWAY_TIMEOUT = 504

    @property
    def phrase(self) -> str:
        """Reason phrase for the status line, e.g. ``Forbidden``."""
        return _STATUS_PHRASES.get(self, "Unknown")

    @property
    def is_success(self) -> bool:
        """2xx."""
        return 200 <= self < 300

    @property
    def is_client_error(self) -> bool:
        """4xx."""
        return 400 <= self < 500

    @property
    def is_server_error(self) -> bool:
        """
        5xx.

        ErrorCatcher uses this to decide whether a renderer-supplied
        status can be sent as-is.
        """
        return 500 <= self < 600

    @property
    def is_error(self) -> bool:
        """4xx or 5xx."""
        return self >= 400


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.CREATED: "Created",
    HTTPStatus.ACCEPTED: "Accepted",
    HTTPStatus.NO_CONTENT: "No Content",
    HTTPStatus.MOVED_PERMANENTLY: "Moved Permanently",
    HTTPStatus.FOUND: "Found",
    HTTPStatus.NOT_MODIFIED: "Not Modified",
    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.UNAUTHORIZED: "Unauthorized",
    HTTPStatus.FORBIDDEN: "Forbidden",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.METHOD_NOT_ALLOWED: "Method Not Allowed",
    HTTPStatus.NOT_ACCEPTABLE: "Not Acceptable",
    HTTPStatus.TOO_MANY_REQUESTS: "Too Many Requests",
    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
    HTTPStatus.NOT_IMPLEMENTED: "Not Implemented",
    HTTPStatus.BAD_GATEWAY: "Bad Gateway",
    HTTPStatus.SERVICE_UNAVAILABLE: "Service Unavailable",
    HTTPStatus.GATEWAY_TIMEOUT: "Gateway Timeout",
}
