"""
Logging Configuration for layered_config

Provides:
- The two-method logging sink consumed by ConfigLoader
- A standard-library adapter for that sink
- Structured JSON logging or human-readable text logging
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional, Protocol, runtime_checkable

LOGGER_NAME = "layered_config"

Fields = Optional[Dict[str, Any]]


@runtime_checkable
class ConfigLogger(Protocol):
    """Notification sink for loader successes and failures."""

    def info(self, message: str, fields: Fields = None) -> None:
        ...

    def error(self, message: str, error: BaseException, fields: Fields = None) -> None:
        ...


class NullLogger:
    """Sink that discards everything. Used when no logger is set."""

    def info(self, message: str, fields: Fields = None) -> None:
        pass

    def error(self, message: str, error: BaseException, fields: Fields = None) -> None:
        pass


class StdlibConfigLogger:
    """
    Adapt the sink onto a ``logging.Logger``.

    Structured fields travel as ``record.extra`` so ``JSONFormatter``
    emits them as top-level keys.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(LOGGER_NAME)

    def info(self, message: str, fields: Fields = None) -> None:
        self.logger.info(message, extra={"extra": dict(fields or {})})

    def error(self, message: str, error: BaseException, fields: Fields = None) -> None:
        payload = dict(fields or {})
        payload["error"] = str(error)
        payload["error_type"] = type(error).__name__
        self.logger.error(message, extra={"extra": payload})


# Record attribute -> JSON key
RECORD_FIELDS = {
    "levelname": "level",
    "name": "logger",
    "module": "module",
    "funcName": "function",
    "lineno": "line",
}

TEXT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """
    One JSON object per line.

    Sink fields (``record.extra``) are merged at the top level but never
    replace the record's own keys.
    """

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: Dict[str, Any] = {
            "timestamp": created.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "message": record.getMessage(),
        }
        for attribute, key in RECORD_FIELDS.items():
            entry[key] = getattr(record, attribute)
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        for key, value in getattr(record, "extra", {}).items():
            entry.setdefault(key, value)
        return json.dumps(entry, default=str)


def _reset_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def configure_logging(
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO",
    format: Literal["json", "text"] = "json",
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """
    Route the ``layered_config`` logger to stderr and, optionally, a file.

    Calling it again replaces (and closes) the handlers of the previous call.
    stdout is left to the command output.

    Args:
        level: Logging level name
        format: ``json`` (JSONFormatter) or ``text``
        log_file: Optional log file; parent directories are created

    Returns:
        The package logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    _reset_handlers(logger)
    logger.setLevel(level)

    formatter = JSONFormatter() if format == "json" else logging.Formatter(TEXT_FORMAT)
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger
