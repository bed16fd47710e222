"""Logging for the Recipe Generator.

One ``recipe_generator`` logger writes to stdout, either as JSON lines or as
colored text. Set LOG_LEVEL (DEBUG, INFO, WARNING, ERROR; default INFO) and
LOG_TYPE (text or json; default text).

Session code passes context through ``extra=``. Any of ``CONTEXT_FIELDS``
found on a record is emitted with it.
"""

import json
import logging
import os
import sys
from typing import Any, Dict, Optional

CONTEXT_FIELDS = ("session_id", "status", "error_kind")


def record_context(record: logging.LogRecord) -> Dict[str, Any]:
    """Session context attached to a record, skipping fields that are unset."""
    return {field: getattr(record, field) for field in CONTEXT_FIELDS if getattr(record, field, None) is not None}


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        """Serialize a record.

        Keys: timestamp, level, logger, message, then any session context and
        the formatted traceback when the record carries one.
        """
        payload: Dict[str, Any] = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **record_context(record),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class RichTextFormatter(logging.Formatter):
    """Colored single-line output prefixed with a level icon."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
    }
    RESET = "\033[0m"

    ICONS = {
        "DEBUG": "🔍",
        "INFO": "🍳",
        "WARNING": "⚠️",
        "ERROR": "❌",
    }

    def format(self, record: logging.LogRecord) -> str:
        level = record.levelname
        session_id = record_context(record).get("session_id")
        prefix = f"[{session_id}] " if session_id else ""

        line = (
            f"{self.COLORS.get(level, self.RESET)}{self.ICONS.get(level, '')} "
            f"{self.formatTime(record, '%Y-%m-%d %H:%M:%S')} {level:<8} {record.name:<20} "
            f"{prefix}{record.getMessage()}{self.RESET}"
        )
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def get_logger(name: str, level: Optional[str] = None, log_type: Optional[str] = None) -> logging.Logger:
    """Return a configured stdout logger.

    Args:
        name: Logger name.
        level: Level name; falls back to LOG_LEVEL, then INFO.
        log_type: "json" or "text"; falls back to LOG_TYPE, then text.

    Returns:
        The logger. A logger that already has handlers is returned untouched.
    """
    named_logger = logging.getLogger(name)
    if named_logger.handlers:
        return named_logger

    level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    numeric_level = getattr(logging, level_name, logging.INFO)
    output = (log_type or os.getenv("LOG_TYPE", "text")).lower()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric_level)
    handler.setFormatter(JSONFormatter() if output == "json" else RichTextFormatter())

    named_logger.setLevel(numeric_level)
    named_logger.addHandler(handler)
    return named_logger


logger = get_logger("recipe_generator")

# google-genai logs every request at INFO
logging.getLogger("google.genai").setLevel(logging.WARNING)
