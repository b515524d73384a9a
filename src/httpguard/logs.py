"""
=============================================================================
LOGGING SETUP
=============================================================================

Loggers used by the package:

    httpguard.errors      Uncaught exceptions caught by ErrorCatcher
    httpguard.ip_filter   Denied requests
    httpguard.*           Module loggers (negotiation, pipeline assembly)

Configure them individually when needed:

    logging.getLogger("httpguard.errors").addHandler(alerting_handler)
    logging.getLogger("httpguard.ip_filter").setLevel(logging.WARNING)

=============================================================================
TEXT VS JSON
=============================================================================

    text:  2024-01-15 10:30:45 [ERROR] httpguard.errors: Unhandled ...
    json:  {"timestamp": "2024-01-15T10:30:45", "level": "ERROR", ...}

JSON lines are what log aggregators (ELK, Datadog, CloudWatch) ingest
without parsing rules.

=============================================================================
"""

from datetime import datetime, timezone
import json
import logging

from .config import GuardConfig


TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class JsonFormatter(logging.Formatter):
    """Formats records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def setup_logging(config: GuardConfig) -> None:
    """Configure the root handler and the httpguard logger level."""
    level = getattr(logging, config.log_level.upper(), logging.INFO)

    if config.log_format == "json":
        handler = logging.StreamHandler()
        handler.setFormatter(JsonFormatter())
        logging.basicConfig(level=level, handlers=[handler])
    else:
        logging.basicConfig(
            level=level,
            format=TEXT_FORMAT,
            datefmt=DATE_FORMAT,
        )

    logging.getLogger("httpguard").setLevel(level)
