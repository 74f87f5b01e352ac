"""Logging setup for the co-chef service.

Every module logs through ``logging.getLogger(__name__)``; the handler lives on
the package logger and is attached once by ``setup_logging``.

- LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
- LOG_TYPE: text, json (default: text)
"""

import json
import logging
import sys
from typing import Any, Optional

from cochef.core.config import config

PACKAGE_LOGGER = "cochef"


class JSONFormatter(logging.Formatter):
    """Formatter that outputs one JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        if hasattr(record, "session_id"):
            log_data["session_id"] = record.session_id
        return json.dumps(log_data, ensure_ascii=False)


class TextFormatter(logging.Formatter):
    """Plain text with a level icon in front."""

    ICONS = {
        "DEBUG": "🔍",
        "INFO": "ℹ️",
        "WARNING": "⚠️",
        "ERROR": "❌",
        "CRITICAL": "❌",
    }

    def format(self, record: logging.LogRecord) -> str:
        icon = self.ICONS.get(record.levelname, "")
        timestamp = self.formatTime(record, "%Y-%m-%d %H:%M:%S")
        message = f"{icon} {timestamp} {record.levelname:<8} {record.name:<30} {record.getMessage()}"
        if record.exc_info:
            message += f"\n{self.formatException(record.exc_info)}"
        return message


def setup_logging(level: Optional[str] = None, log_type: Optional[str] = None) -> logging.Logger:
    """Attach a stdout handler to the package logger. Safe to call repeatedly."""
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    log_level = getattr(logging, (level or config.LOG_LEVEL).upper(), logging.INFO)
    package_logger.setLevel(log_level)

    if not package_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        package_logger.addHandler(handler)
    for handler in package_logger.handlers:
        handler.setLevel(log_level)
        handler.setFormatter(JSONFormatter() if (log_type or config.LOG_TYPE) == "json" else TextFormatter())

    # Provider SDKs are chatty at INFO
    logging.getLogger("google_genai").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    return package_logger
