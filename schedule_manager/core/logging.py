# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Structured JSON logging — machine-parseable, one JSON line per record.

Loggers are process-wide: ``configure_logging`` re-points every logger handed
out by ``get_logger`` at the given settings, so the last app built wins.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from schedule_manager.core.config import Settings, settings

_active = {"service": settings.SERVICE_NAME, "level": settings.LOG_LEVEL}
_loggers: dict[str, logging.Logger] = {}


def _level(name: str) -> int:
    return getattr(logging, name.upper(), logging.INFO)


class JSONFormatter(logging.Formatter):
    """Emit every log record as a single JSON line tagged with the service name."""

    def __init__(self, service: str) -> None:
        super().__init__()
        self.service = service

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "service": self.service,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if hasattr(record, "request_id"):
            log_data["request_id"] = record.request_id  # type: ignore[attr-defined]
        if record.exc_info and record.exc_info[1]:
            log_data["error"] = str(record.exc_info[1])
            log_data["error_type"] = type(record.exc_info[1]).__name__
        return json.dumps(log_data, ensure_ascii=False)


def _apply(logger: logging.Logger) -> None:
    logger.setLevel(_level(_active["level"]))
    for handler in logger.handlers:
        if isinstance(handler.formatter, JSONFormatter):
            handler.formatter.service = _active["service"]


def configure_logging(app_settings: Settings) -> None:
    """Apply an app's service name and log level to all service loggers."""
    _active["service"] = app_settings.SERVICE_NAME
    _active["level"] = app_settings.LOG_LEVEL
    for logger in _loggers.values():
        _apply(logger)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a configured logger instance."""
    logger_name = name or _active["service"]
    logger = logging.getLogger(logger_name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JSONFormatter(_active["service"]))
        logger.addHandler(handler)
        logger.propagate = False
    _loggers[logger_name] = logger
    _apply(logger)
    return logger
