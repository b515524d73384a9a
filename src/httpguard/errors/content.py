"""Rendered error output shared by renderers and the error handler."""

from dataclasses import dataclass

from ..http.status_codes import HTTPStatus


@dataclass(frozen=True)
class ErrorContent:
    """
    What a renderer produced for an exception.

    Attributes:
        body:         Encoded response body
        content_type: Value for the Content-Type header
        status:       Status to send; ErrorCatcher only honours 5xx codes
    """

    body: bytes
    content_type: str
    status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR
