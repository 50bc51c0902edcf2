"""
eckey Structured Logging Configuration.

Provides consistent logging for eckey with:
- Structured JSON output for production
- Human-readable output for development
- Redaction of key material passed through ``extra``

Usage:
    from eckey.logging import get_logger, configure_logging

    # At application startup
    configure_logging(level="INFO", json_format=True)

    # In modules
    logger = get_logger(__name__)
    logger.info("Generated CSR", extra={"ski": "3f2a..."})
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

ROOT_LOGGER = "eckey"

# Field name fragments whose values are never written to a log
SENSITIVE_PATTERNS = frozenset(
    {
        "password",
        "passphrase",
        "secret",
        "private_key",
        "privatekey",
        "prv_key",
        "scalar",
        "pem",
    }
)

# Attributes every LogRecord carries; anything else came from ``extra``
_RECORD_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "exc_info",
        "exc_text",
        "thread",
        "threadName",
        "message",
        "taskName",
    }
)


def _is_sensitive_key(key: str) -> bool:
    """Check if a key name suggests sensitive data."""
    key_lower = key.lower()
    return any(pattern in key_lower for pattern in SENSITIVE_PATTERNS)


def _filter_sensitive(data: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively redact sensitive values from a dictionary."""
    filtered = {}
    for key, value in data.items():
        if _is_sensitive_key(key):
            filtered[key] = "[REDACTED]"
        elif isinstance(value, dict):
            filtered[key] = _filter_sensitive(value)
        elif isinstance(value, list):
            filtered[key] = [_filter_sensitive(item) if isinstance(item, dict) else item for item in value]
        else:
            filtered[key] = value
    return filtered


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    extra = {key: value for key, value in record.__dict__.items() if key not in _RECORD_ATTRS}
    return _filter_sensitive(extra)


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.pathname:
            log_data["location"] = {
                "file": record.pathname.split("/")[-1],
                "line": record.lineno,
                "function": record.funcName,
            }

        extra = _extra_fields(record)
        if extra:
            log_data["extra"] = extra

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class DevelopmentFormatter(logging.Formatter):
    """Human-readable formatter for development."""

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def __init__(self, use_color: bool = True):
        super().__init__()
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, "") if self.use_color else ""
        reset = self.RESET if color else ""

        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S.%f")[:-3]
        level = f"{color}{record.levelname:8}{reset}"
        name = record.name.split(".")[-1][:15].ljust(15)
        message = record.getMessage()

        extra = _extra_fields(record)
        if extra:
            message += " " + " ".join(f"{key}={value}" for key, value in extra.items())

        formatted = f"{timestamp} {level} {name} {message}"

        if record.exc_info:
            formatted += "\n" + self.formatException(record.exc_info)

        return formatted


def configure_logging(
    level: Optional[str] = None,
    json_format: Optional[bool] = None,
    stream: Any = None,
) -> None:
    """
    Configure the ``eckey`` logger hierarchy.

    Args:
        level: Log level. Default: ECKEY_LOG_LEVEL
        json_format: Use JSON output. Default: ECKEY_LOG_JSON, else True only in production
        stream: Output stream. Default: sys.stderr
    """
    from .config import settings

    if level is None:
        level = settings.LOG_LEVEL
    if json_format is None:
        json_format = settings.use_json_logs()

    root_logger = logging.getLogger(ROOT_LOGGER)
    root_logger.setLevel(getattr(logging, level.upper()))
    root_logger.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stderr)
    if json_format:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(DevelopmentFormatter(use_color=stream is None))

    root_logger.addHandler(handler)
    root_logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger under the ``eckey`` namespace.

    Library code never installs handlers on its own; call
    ``configure_logging()`` from the application to see output.
    """
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


logging.getLogger(ROOT_LOGGER).addHandler(logging.NullHandler())


__all__ = [
    "configure_logging",
    "get_logger",
    "StructuredFormatter",
    "DevelopmentFormatter",
]
