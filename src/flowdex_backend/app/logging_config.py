"""Logging configuration for the Flowdex backend.

``LOG_LEVEL`` selects the level applied to the application and server
loggers; ``LOG_FORMAT=json`` switches the root handler to one JSON object per
line, including any ``extra=`` fields passed to the logging call.
"""

from __future__ import annotations
import json
import logging
import os
from datetime import UTC, datetime
from typing import Any


_DEFAULT_LOGGER_NAME = "flowdex_backend.app"
_MANAGED_LOGGERS = (
    "uvicorn",
    "uvicorn.access",
    "uvicorn.error",
    "fastapi",
    "flowdex",
    "flowdex_backend",
)
_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__.keys()
) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """Render log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        """Serialise ``record`` with its extra attributes."""
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def _resolve_level(raw: str | None) -> int:
    candidate = (raw or "INFO").strip().upper()
    level = logging.getLevelName(candidate)
    return level if isinstance(level, int) else logging.INFO


def configure_logging() -> None:
    """Apply ``LOG_LEVEL`` and ``LOG_FORMAT`` to the managed loggers."""
    level = _resolve_level(os.getenv("LOG_LEVEL"))
    use_json = os.getenv("LOG_FORMAT", "text").strip().lower() == "json"

    handler = logging.StreamHandler()
    if use_json:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
        )

    root = logging.getLogger()
    for existing in list(root.handlers):
        if getattr(existing, "_flowdex_handler", False):
            root.removeHandler(existing)
    handler._flowdex_handler = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(level)

    for name in _MANAGED_LOGGERS:
        logging.getLogger(name).setLevel(level)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger, defaulting to the backend application logger."""
    return logging.getLogger(name or _DEFAULT_LOGGER_NAME)


configure_logging()


__all__ = ["JsonFormatter", "configure_logging", "get_logger"]
