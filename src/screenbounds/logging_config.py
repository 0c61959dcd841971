"""Structured logging configuration for screenbounds.

Configurable via environment variables:
- LOG_LEVEL: Set log level (DEBUG, INFO, WARNING, ERROR). Default: INFO
- LOG_FORMAT: Set format ('text' or 'json'). Default: text

Per-frame records may carry ``frame`` and ``object_id`` extras
(``logger.debug("...", extra={"frame": n})``); both formatters render them.

Usage:
    from screenbounds.logging_config import configure_logging
    configure_logging()  # Call once at application startup
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import UTC, datetime
from typing import Any, ClassVar

PACKAGE_LOGGER = "screenbounds"

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RECORD_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "thread",
        "threadName",
        "processName",
        "process",
        "message",
        "msecs",
        "relativeCreated",
        "taskName",
    }
)

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def _extras(record: logging.LogRecord) -> dict[str, Any]:
    return {k: v for k, v in record.__dict__.items() if k not in _RECORD_ATTRS}


def _short_name(name: str) -> str:
    prefix = PACKAGE_LOGGER + "."
    return name[len(prefix) :] if name.startswith(prefix) else name


class JSONFormatter(logging.Formatter):
    """JSON lines formatter.

    Emits one object per record with timestamp, level, logger and message,
    plus source location for DEBUG/ERROR/CRITICAL and any ``extra`` fields.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        Args:
            record: Log record to format.

        Returns:
            JSON string with log data.
        """
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.levelno in (logging.DEBUG, logging.ERROR, logging.CRITICAL):
            log_data["source"] = {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        extra = _extras(record)
        if extra:
            log_data["extra"] = extra

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable formatter.

    Format: TIMESTAMP LEVEL [LOGGER] MESSAGE {key=value ...} (file:line)
    """

    LEVEL_COLORS: ClassVar[dict[str, str]] = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[1;31m",  # Bold red
    }
    RESET: ClassVar[str] = "\033[0m"

    def __init__(self, use_colors: bool = True) -> None:
        """Initialize formatter.

        Args:
            use_colors: Whether to use ANSI colors in output (only on a TTY).
        """
        super().__init__()
        self.use_colors = use_colors and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as a single text line (plus traceback if any)."""
        timestamp = datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
        level = record.levelname

        if self.use_colors:
            level_str = f"{self.LEVEL_COLORS.get(level, '')}{level:8s}{self.RESET}"
        else:
            level_str = f"{level:8s}"

        parts = [f"{timestamp} {level_str} [{_short_name(record.name)}] {record.getMessage()}"]

        extra = _extras(record)
        if extra:
            fields = " ".join(f"{k}={v}" for k, v in sorted(extra.items()))
            parts.append(f" {{{fields}}}")

        if record.levelno in (logging.DEBUG, logging.ERROR, logging.CRITICAL):
            parts.append(f" ({record.filename}:{record.lineno})")

        if record.exc_info:
            parts.append(f"\n{self.formatException(record.exc_info)}")

        return "".join(parts)


def get_log_level() -> int:
    """Read LOG_LEVEL from the environment, defaulting to INFO when unset or invalid."""
    return _LEVELS.get(os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)


def get_log_format() -> str:
    """Read LOG_FORMAT from the environment ('text' or 'json', default 'text')."""
    format_name = os.environ.get("LOG_FORMAT", "text").lower()
    return format_name if format_name in ("text", "json") else "text"


def configure_logging(
    level: int | None = None,
    format_type: str | None = None,
    use_colors: bool = True,
) -> None:
    """Configure logging for the application.

    Replaces any handlers on the ``screenbounds`` logger (so repeated calls do
    not duplicate output) and routes uvicorn's access log through the same
    handler.

    Args:
        level: Log level. If None, reads from LOG_LEVEL env var.
        format_type: 'text' or 'json'. If None, reads from LOG_FORMAT env var.
        use_colors: Whether to use colors in text format (only if stderr is TTY).
    """
    if level is None:
        level = get_log_level()
    if format_type is None:
        format_type = get_log_format()

    handler = logging.StreamHandler(sys.stderr)
    if format_type == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(TextFormatter(use_colors=use_colors))

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level)
    package_logger.handlers.clear()
    package_logger.addHandler(handler)
    package_logger.propagate = False

    uvicorn_access = logging.getLogger("uvicorn.access")
    uvicorn_access.handlers.clear()
    uvicorn_access.addHandler(handler)
    uvicorn_access.setLevel(level)
    uvicorn_access.propagate = False

    package_logger.debug(
        "Logging configured: level=%s, format=%s",
        logging.getLevelName(level),
        format_type,
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the screenbounds namespace.

    Args:
        name: Module name (typically __name__).

    Returns:
        Logger instance.
    """
    if not name.startswith(PACKAGE_LOGGER):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)
