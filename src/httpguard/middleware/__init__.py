"""
=============================================================================
MIDDLEWARE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │  base.py           Middleware ABC, MiddlewarePipeline               │
    │  error_catcher.py  Exceptions → content-negotiated 5xx responses    │
    │  ip_filter.py      Client address allow/deny (403)                  │
    └─────────────────────────────────────────────────────────────────────┘
"""

from .base import Middleware, MiddlewarePipeline, NextHandler
from .error_catcher import ErrorCatcher, DEFAULT_BINDINGS
from .ip_filter import IpFilter

__all__ = [
    # Base
    "Middleware",
    "MiddlewarePipeline",
    "NextHandler",

    # Implementations
    "ErrorCatcher",
    "DEFAULT_BINDINGS",
    "IpFilter",
]
