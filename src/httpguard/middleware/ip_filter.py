"""
=============================================================================
IP FILTER MIDDLEWARE
=============================================================================

Allows or denies requests based on the client address.

=============================================================================
WHERE THE ADDRESS COMES FROM
=============================================================================

    attribute name configured?
        │
        ├── no  → request.server_params["REMOTE_ADDR"]
        │         (the connected peer)
        │
        └── yes → request.get_attribute(name)
                  (set by earlier middleware, e.g. one that resolved
                  X-Forwarded-For behind a trusted proxy)

A missing, empty or non-string address is DENIED. The filter fails closed:
when it cannot tell who the client is, the answer is no.

=============================================================================
USAGE
=============================================================================

    ip_filter = IpFilter(
        IpValidator(["10.0.0.0/8", "localhost"]),
        ResponseFactory(),
    )

    # Behind a proxy, read the address resolved upstream
    ip_filter = IpFilter(validator, factory, client_ip_attribute="client_ip")

A denied request gets ``response_factory.create_response(403)`` and never
reaches the next handler.

=============================================================================
"""

from typing import Callable, Optional
import logging

from .base import Middleware, NextHandler
from ..http.request import HTTPRequest, REMOTE_ADDR
from ..http.response import HTTPResponse, ResponseFactory
from ..http.status_codes import HTTPStatus


logger = logging.getLogger("httpguard.ip_filter")


class IpFilter(Middleware):
    """
    Forwards requests from allowed addresses, answers 403 to the rest.

    Args:
        validator:           Callable deciding whether an address is allowed
        response_factory:    Creates the 403 response
        client_ip_attribute: Request attribute to read the address from
                             instead of REMOTE_ADDR
    """

    def __init__(
        self,
        validator: Callable[[str], bool],
        response_factory: ResponseFactory,
        client_ip_attribute: Optional[str] = None,
    ):
        self.validator = validator
        self.response_factory = response_factory
        self.client_ip_attribute = client_ip_attribute

    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        address = self.client_address(request)

        if isinstance(address, str) and address and self.validator(address):
            return next(request)

        logger.info(f"Denied {request.method} {request.path} from {address!r}")
        return self.response_factory.create_response(HTTPStatus.FORBIDDEN)

    def client_address(self, request: HTTPRequest):
        """The candidate address, or None when it cannot be determined."""
        if self.client_ip_attribute is not None:
            return request.get_attribute(self.client_ip_attribute)
        return request.get_server_param(REMOTE_ADDR)
