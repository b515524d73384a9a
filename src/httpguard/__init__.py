"""
=============================================================================
HTTPGUARD - Error Catching and IP Filtering Middleware
=============================================================================

Two middleware for a request/response pipeline:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      HTTPGUARD ARCHITECTURE                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   1. ERROR CATCHER                                                  │
    │      - Catches any exception raised downstream                      │
    │      - Negotiates a renderer from the Accept header                 │
    │      - Plain text, HTML, JSON and XML error bodies                  │
    │      - Verbose output (traceback, chained causes) in debug mode     │
    │      - Never fails: a broken renderer falls back to plain text      │
    │                                                                      │
    │   2. IP FILTER                                                      │
    │      - Reads the client address from REMOTE_ADDR or an attribute   │
    │      - Addresses, CIDR networks, aliases, "!" negation              │
    │      - Fails closed: unknown address means 403                      │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    httpguard/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI (python -m httpguard)
    ├── app.py               # create_pipeline()
    ├── config.py            # GuardConfig dataclass
    ├── logs.py              # setup_logging(), JSON formatter
    ├── http/                # Request/response model, media types, Accept
    ├── errors/              # Renderers, container, registry, handler
    ├── middleware/          # Middleware base, ErrorCatcher, IpFilter
    └── validation/          # IpValidator

=============================================================================
QUICK START
=============================================================================

    from httpguard import GuardConfig, create_pipeline

    config = GuardConfig(allowed_ips=["private", "localhost"])
    handler = create_pipeline(config).wrap(app)

    response = handler(request)

=============================================================================
"""

__version__ = "1.0.0"

from .config import GuardConfig
from .app import create_pipeline
from .errors import (
    ErrorHandler,
    RendererNotFoundError,
    RendererRegistry,
    ServiceContainer,
)
from .http import HTTPRequest, HTTPResponse, InvalidPatternError, ResponseFactory
from .middleware import ErrorCatcher, IpFilter, MiddlewarePipeline
from .validation import IpValidator, InvalidRangeError

__all__ = [
    "__version__",
    "GuardConfig",
    "create_pipeline",
    "ErrorCatcher",
    "ErrorHandler",
    "IpFilter",
    "IpValidator",
    "MiddlewarePipeline",
    "RendererRegistry",
    "ServiceContainer",
    "HTTPRequest",
    "HTTPResponse",
    "ResponseFactory",
    "InvalidPatternError",
    "InvalidRangeError",
    "RendererNotFoundError",
]
