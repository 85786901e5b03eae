"""
appstorage Logging — Structured JSON or plain-text output for the
``appstorage`` logger hierarchy.

Implements:
- JsonLogFormatter: one compact JSON object per record
- configure_logging: attach stream (+ optional daily file) handlers
- storage_extra: builder for the ``extra=`` fields storage modules attach

Modules log through ``logging.getLogger("appstorage.<package>.<module>")``;
nothing is printed unless the host application (or the CLI) configures
handlers.
"""

from __future__ import annotations

import json
import logging
import logging.handlers
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from appstorage.engine.config import LoggingConfig

ROOT_LOGGER_NAME = "appstorage"
TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

# Extra record attributes promoted into JSON output
STRUCTURED_FIELDS = ("operation", "path", "option")

_HANDLER_MARKER = "_appstorage_handler"


class JsonLogFormatter(logging.Formatter):
    """Render a LogRecord as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in STRUCTURED_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                entry[key] = value
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str, separators=(",", ":"))


def storage_extra(operation: str, path: Optional[str] = None, **fields: Any) -> Dict[str, Any]:
    """Build the ``extra`` mapping for a storage log call."""
    extra: Dict[str, Any] = {"operation": operation}
    if path is not None:
        extra["path"] = path
    for key, value in fields.items():
        if value is not None:
            extra[key] = value
    return extra


def _build_formatter(config: LoggingConfig) -> logging.Formatter:
    if config.format == "json":
        return JsonLogFormatter()
    return logging.Formatter(TEXT_FORMAT)


def configure_logging(
    config: Optional[LoggingConfig] = None,
    stream: Any = None,
) -> logging.Logger:
    """
    Configure the ``appstorage`` logger from a LoggingConfig.

    Replaces handlers installed by a previous call, so it is safe to call
    more than once. When ``config.directory`` is set, a daily-rotated
    ``appstorage.log`` is written there as well.

    Returns the configured logger.
    """
    config = config or LoggingConfig()
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(config.level)

    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            root.removeHandler(handler)
            handler.close()

    formatter = _build_formatter(config)
    handlers: List[logging.Handler] = [logging.StreamHandler(stream)]

    if config.directory:
        log_dir = Path(config.directory)
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.handlers.TimedRotatingFileHandler(
                log_dir / "appstorage.log",
                when="midnight",
                backupCount=config.backup_count,
                encoding="utf-8",
                utc=True,
            )
        )

    for handler in handlers:
        handler.setFormatter(formatter)
        setattr(handler, _HANDLER_MARKER, True)
        root.addHandler(handler)

    return root
