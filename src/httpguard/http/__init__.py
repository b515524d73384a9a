"""
=============================================================================
HTTP MODEL
=============================================================================

The request/response types the middleware operate on, plus media type
parsing and Accept header negotiation.

    ┌─────────────────────────────────────────────────────────────────────┐
    │  request.py      HTTPRequest: headers, server params, attributes    │
    │  response.py     HTTPResponse, ResponseFactory     │
    │  status_codes.py HTTPStatus enum with reason phrases                │
    │  media_types.py  MediaType grammar and validation                   │
    │  accept.py       Accept header parsing and ranking                  │
    └─────────────────────────────────────────────────────────────────────┘
"""

from .request import HTTPRequest, REMOTE_ADDR
from .response import HTTPResponse, ResponseFactory
from .status_codes import HTTPStatus
from .media_types import MediaType, InvalidPatternError
from .accept import AcceptEntry, parse_accept

__all__ = [
    # Request
    "HTTPRequest",
    "REMOTE_ADDR",

    # Response
    "HTTPResponse",
    "ResponseFactory",

    # Status codes
    "HTTPStatus",

    # Media types and negotiation
    "MediaType",
    "InvalidPatternError",
    "AcceptEntry",
    "parse_accept",
]
