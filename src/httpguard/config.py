"""
=============================================================================
GUARD CONFIGURATION
=============================================================================

Centralized configuration for the guarded middleware pipeline.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Code                                                           │
    │      └── GuardConfig(debug=True)                                    │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── HTTPGUARD_DEBUG=1 python app.py                            │
    │                                                                      │
    │   3. Default values (in this dataclass)                             │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
INTERVIEW QUESTIONS ABOUT CONFIGURATION
=============================================================================

Q: "Why is debug off by default?"
A: "Verbose error pages print class names, file paths and stack frames.
   Leaking those to clients in production is an information disclosure,
   so it has to be switched on explicitly."

Q: "How do you validate configuration?"
A: "Eagerly at startup, not lazily at first use. A typo in an IP range
   should stop the deploy, not silently deny every client."

=============================================================================
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional

from .validation.ip import IpValidator


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("text", "json")

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class GuardConfig:
    """
    Configuration for ErrorCatcher, IpFilter and logging.

    Development:
        GuardConfig(debug=True, log_level="DEBUG")

    Production behind a proxy:
        GuardConfig(
            allowed_ips=["10.0.0.0/8", "!10.0.0.13"],
            client_ip_attribute="client_ip",
            log_format="json",
        )
    """

    # ─────────────────────────────────────────────────────────────────────
    # ERROR RENDERING
    # ─────────────────────────────────────────────────────────────────────

    debug: bool = False
    """
    Render errors verbosely (exception type, message, traceback).
    Never enable in production.
    """

    # ─────────────────────────────────────────────────────────────────────
    # IP FILTERING
    # ─────────────────────────────────────────────────────────────────────

    allowed_ips: List[str] = field(default_factory=list)
    """
    IP ranges allowed through. Empty = no IpFilter in the pipeline.
    Entries: addresses, CIDR networks, aliases (private, localhost, ...),
    "!" to negate.
    """

    client_ip_attribute: Optional[str] = None
    """
    Request attribute holding the client address.
    None = use the REMOTE_ADDR server parameter.
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."""

    log_format: str = "text"
    """
    Log format: 'json' or 'text'.
    JSON is better for log aggregators (ELK, Datadog).
    """

    @classmethod
    def from_env(cls) -> "GuardConfig":
        """
        Create configuration from environment variables.

            HTTPGUARD_DEBUG                1/true/yes/on enables debug
            HTTPGUARD_ALLOWED_IPS          Comma-separated ranges
            HTTPGUARD_CLIENT_IP_ATTRIBUTE  Attribute name (default: unset)
            HTTPGUARD_LOG_LEVEL            Logging level (default: INFO)
            HTTPGUARD_LOG_FORMAT           text or json (default: text)
        """
        allowed_ips = [
            entry.strip()
            for entry in os.getenv("HTTPGUARD_ALLOWED_IPS", "").split(",")
            if entry.strip()
        ]

        return cls(
            debug=os.getenv("HTTPGUARD_DEBUG", "").strip().lower() in _TRUE_VALUES,
            allowed_ips=allowed_ips,
            client_ip_attribute=os.getenv("HTTPGUARD_CLIENT_IP_ATTRIBUTE") or None,
            log_level=os.getenv("HTTPGUARD_LOG_LEVEL", "INFO"),
            log_format=os.getenv("HTTPGUARD_LOG_FORMAT", "text"),
        )

    def validate(self) -> None:
        """
        Validate configuration values. Fails fast at startup.

        Raises:
            ValueError: On an unknown log level or format
            InvalidRangeError: On a malformed IP range
        """
        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Invalid log_level: {self.log_level}. Must be one of {', '.join(LOG_LEVELS)}.")

        if self.log_format not in LOG_FORMATS:
            raise ValueError(f"Invalid log_format: {self.log_format}. Must be 'text' or 'json'.")

        if self.client_ip_attribute is not None and not self.client_ip_attribute:
            raise ValueError("client_ip_attribute must not be empty")

        IpValidator(self.allowed_ips)
