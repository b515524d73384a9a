"""
=============================================================================
ERROR RENDERING
=============================================================================

Everything ErrorCatcher needs to turn an exception into a response body:

    ┌─────────────────────────────────────────────────────────────────────┐
    │  renderers.py   ThrowableRenderer + plain/html/json/xml renderers   │
    │  container.py   ServiceContainer: renderer key → renderer           │
    │  registry.py    RendererRegistry: media type pattern → key          │
    │  handler.py     ErrorHandler: the fallback that never fails         │
    └─────────────────────────────────────────────────────────────────────┘
"""

from .content import ErrorContent
from .renderers import (
    DEFAULT_MESSAGE,
    ThrowableRenderer,
    PlainTextRenderer,
    HtmlRenderer,
    JsonRenderer,
    XmlRenderer,
)
from .container import ServiceContainer, RendererNotFoundError
from .registry import RendererRegistry, RendererBinding
from .handler import ErrorHandler

__all__ = [
    "ErrorContent",
    "DEFAULT_MESSAGE",

    # Renderers
    "ThrowableRenderer",
    "PlainTextRenderer",
    "HtmlRenderer",
    "JsonRenderer",
    "XmlRenderer",

    # Lookup
    "ServiceContainer",
    "RendererNotFoundError",
    "RendererRegistry",
    "RendererBinding",

    # Fallback
    "ErrorHandler",
]
