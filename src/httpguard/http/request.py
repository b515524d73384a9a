"""
=============================================================================
HTTP REQUEST MODEL
=============================================================================

The request object seen by every middleware in the pipeline.

=============================================================================
THREE KINDS OF REQUEST DATA
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      WHERE REQUEST DATA LIVES                       │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │  HEADERS          What the client sent                              │
    │                   {"accept": "text/html, */*;q=0.8", ...}           │
    │                   → ErrorCatcher negotiates on "accept"             │
    │                                                                      │
    │  SERVER PARAMS    What the server knows about the connection        │
    │                   {"REMOTE_ADDR": "10.0.0.7", "REMOTE_PORT": "5123"}│
    │                   → IpFilter reads REMOTE_ADDR by default           │
    │                                                                      │
    │  ATTRIBUTES       What earlier middleware derived                   │
    │                   {"client_ip": "203.0.113.9"}                      │
    │                   → IpFilter reads a named attribute when a         │
    │                     proxy-aware middleware resolved the real IP     │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Headers are stored with LOWERCASE names. HTTP header names are
case-insensitive (RFC 7230), so normalizing once at construction
avoids .lower() at every lookup.

Attributes are added with with_attribute(), which returns a NEW request.
Middleware never mutates the request it was handed; a copy with the extra
attribute is passed to next() instead.

=============================================================================
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional

from .accept import join_values


# Server parameter holding the peer address of the TCP connection.
REMOTE_ADDR = "REMOTE_ADDR"


@dataclass
class HTTPRequest:
    """
    Represents an inbound HTTP request.

    =========================================================================
    ATTRIBUTES
    =========================================================================

        method:         HTTP method (GET, POST, ...)
        path:           Request path without query string
        version:        "HTTP/1.1" or "HTTP/1.0"
        headers:        Header name (lowercase) → value
        body:           Raw request body
        client_address: (ip, port) of the connected peer
        server_params:  Connection/environment values. REMOTE_ADDR and
                        REMOTE_PORT are filled from client_address when
                        not given explicitly.
        attributes:     Values attached by middleware earlier in the chain

    =========================================================================
    """

    method: str = "GET"
    path: str = "/"
    version: str = "HTTP/1.1"
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    client_address: tuple[str, int] = ("", 0)
    server_params: Dict[str, str] = field(default_factory=dict)
    attributes: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        self.headers = {name.lower(): value for name, value in self.headers.items()}

        host, port = self.client_address
        if host and REMOTE_ADDR not in self.server_params:
            self.server_params = {
                **self.server_params,
                REMOTE_ADDR: host,
                "REMOTE_PORT": str(port),
            }

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def accept(self) -> Optional[str]:
        """
        The raw Accept header, or None when the client sent none.

        A header given as a list of values (one per header line) is joined
        into a single comma-separated value.

        None and "" are different to content negotiation: a missing header
        means "anything", while an empty one is treated the same way only
        because it carries no preference either.
        """
        return join_values(self.headers.get("accept"))

    @property
    def remote_addr(self) -> Optional[str]:
        """The REMOTE_ADDR server parameter, if known."""
        return self.server_params.get(REMOTE_ADDR) or None

    # =========================================================================
    # ACCESSORS
    # =========================================================================

    def get_header(self, name: str, default: str = "") -> str:
        """Case-insensitive header lookup."""
        return self.headers.get(name.lower(), default)

    def get_server_param(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.server_params.get(name, default)

    def get_attribute(self, name: str, default: Any = None) -> Any:
        """
        Get a request attribute set by earlier middleware.

        Args:
            name: Attribute name
            default: Value returned when the attribute is absent

        Returns:
            Attribute value or default
        """
        return self.attributes.get(name, default)

    def with_attribute(self, name: str, value: Any) -> "HTTPRequest":
        """
        Return a copy of this request with one attribute added or replaced.

        The original request is left untouched, so a middleware can hand
        an enriched request to next() without affecting other holders of
        the original.
        """
        return replace(self, attributes={**self.attributes, name: value})

    def without_attribute(self, name: str) -> "HTTPRequest":
        """Return a copy of this request with the attribute removed."""
        attributes = {k: v for k, v in self.attributes.items() if k != name}
        return replace(self, attributes=attributes)
