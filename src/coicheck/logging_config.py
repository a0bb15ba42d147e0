"""
Structured logging setup for coicheck.

Library modules only call logging.getLogger(__name__); handlers are attached
by configure_logging(), which the CLI calls once at startup.
"""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Optional, TextIO

# Extra attributes copied from log records into the JSON payload
EXTRA_FIELDS = (
    "attempt",
    "max_attempts",
    "wait_ms",
    "function",
    "holder_id",
    "overall_status",
    "error",
)


class JSONFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in EXTRA_FIELDS:
            if hasattr(record, name):
                log_entry[name] = getattr(record, name)
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, default=str)


def configure_logging(level: str = "INFO", stream: Optional[TextIO] = None) -> logging.Logger:
    """
    Attach a JSON stream handler to the "coicheck" logger.

    Calling it again replaces the previous handler instead of stacking.
    """
    logger = logging.getLogger("coicheck")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    for existing in list(logger.handlers):
        if getattr(existing, "_coicheck_handler", False):
            logger.removeHandler(existing)
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JSONFormatter())
    handler._coicheck_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    return logger
