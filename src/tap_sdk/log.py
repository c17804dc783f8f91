"""Key=value logging for requests and responses.

Every line the SDK writes is a flat ``message=... key=value`` rendering so it
can be grepped or shipped to a log pipeline without a JSON parser.  Lines go
to the ``tap_sdk`` logger unless a logger was supplied through
``configure(logger=...)``.

Usage:
    from tap_sdk.log import setup_logging

    setup_logging("info")
"""
from __future__ import annotations

import logging
import sys
from typing import Any, Optional, TextIO

from .config import get_settings

logger = logging.getLogger("tap_sdk")
logger.addHandler(logging.NullHandler())

LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "error": logging.ERROR,
}


def _format_value(value: Any) -> str:
    text = str(value)
    if not text or any(ch.isspace() or ch in '="' for ch in text):
        return '"%s"' % text.replace("\\", "\\\\").replace('"', '\\"')
    return text


def format_fields(data: dict[str, Any]) -> str:
    """Render ``data`` as space separated key=value pairs, skipping None."""
    return " ".join(
        f"{key}={_format_value(value)}" for key, value in data.items() if value is not None
    )


class KeyValueFormatter(logging.Formatter):
    """Formatter that places the level right after the message field."""

    def format(self, record: logging.LogRecord) -> str:
        fields = getattr(record, "tap_fields", None)
        if fields is None:
            return super().format(record)

        line = format_fields(
            {
                "message": getattr(record, "tap_message", record.getMessage()),
                "level": record.levelname.lower(),
                **fields,
            }
        )
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def _enabled(level: int) -> bool:
    configured = get_settings().log_level
    if configured is None:
        return True
    return level >= LEVELS[configured]


def log_internal(message: str, data: Optional[dict[str, Any]] = None, *, level: int) -> None:
    """Write one key=value line at ``level`` when the configured level allows it."""
    if not _enabled(level):
        return

    data = data or {}
    text = format_fields({"message": message, **data})
    target = get_settings().logger or logger
    if target is logger:
        target.log(level, text, extra={"tap_message": message, "tap_fields": data})
    else:
        target.log(level, text)


def log_debug(message: str, **data: Any) -> None:
    log_internal(message, data, level=logging.DEBUG)


def log_info(message: str, **data: Any) -> None:
    log_internal(message, data, level=logging.INFO)


def log_error(message: str, **data: Any) -> None:
    log_internal(message, data, level=logging.ERROR)


def setup_logging(level: Optional[str] = None, stream: Optional[TextIO] = None) -> None:
    """
    Send SDK log lines to ``stream`` (stdout by default).

    Args:
        level: Minimum level (debug, info, error). Falls back to the
            configured ``log_level``, then to info.
        stream: Output stream for the handler
    """
    level = (level or get_settings().log_level or "info").lower()
    logger.setLevel(LEVELS[level])

    for handler in logger.handlers[:]:
        if getattr(handler, "_tap_handler", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(KeyValueFormatter())
    handler._tap_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)


__all__ = [
    "KeyValueFormatter",
    "format_fields",
    "log_debug",
    "log_error",
    "log_info",
    "log_internal",
    "logger",
    "setup_logging",
]
