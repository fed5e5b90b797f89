"""
storefront/core/logging.py

Purpose: Logging configuration

- JSON lines in production, coloured single lines in development
- Per-request context (phone number, order id, payment id) attached to records
- Third-party loggers kept at WARNING
"""

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from storefront.core.config import Settings, settings as default_settings

CONTEXT_FIELDS = ("phone_number", "order_id", "payment_id")

LEVEL_COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
}
RESET = "\033[0m"

QUIET_LOGGERS = ("httpx", "httpcore", "motor", "pymongo", "passlib", "uvicorn.access")

_context: ContextVar[Dict[str, Any]] = ContextVar("storefront_log_context", default={})


def _record_context(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        field: getattr(record, field)
        for field in CONTEXT_FIELDS
        if getattr(record, field, None) is not None
    }


class ContextFilter(logging.Filter):
    """Copies the active LogContext onto each record passing the handler."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _context.get().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


class StructuredFormatter(logging.Formatter):

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}:{record.funcName}:{record.lineno}",
        }
        entry.update(_record_context(record))

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class DevelopmentFormatter(logging.Formatter):

    def format(self, record: logging.LogRecord) -> str:
        color = LEVEL_COLORS.get(record.levelname, RESET)
        clock = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        line = f"{color}[{clock}] {record.levelname:<8}{RESET} {record.name}: {record.getMessage()}"

        context = _record_context(record)
        if context:
            line += " [" + ", ".join(f"{key}={value}" for key, value in context.items()) + "]"

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)

        return line


def setup_logging(current: Optional[Settings] = None) -> logging.Logger:
    """
    Installs one stdout handler on the root logger.

    Safe to call more than once; the previous handlers are replaced.
    """
    current = current or default_settings

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(ContextFilter())
    handler.setFormatter(StructuredFormatter() if current.is_production else DevelopmentFormatter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, current.LOG_LEVEL, logging.INFO))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger = logging.getLogger("storefront")
    logger.info(f"Logging configured (environment={current.ENVIRONMENT}, level={current.LOG_LEVEL})")
    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger under the "storefront" hierarchy."""
    if name == "storefront" or name.startswith("storefront."):
        return logging.getLogger(name)
    return logging.getLogger(f"storefront.{name}")


class LogContext:
    """
    Attaches fields to every record logged inside the block, including
    from awaited coroutines. Nested blocks add to the outer context.

    Usage:
        with LogContext(order_id="order_abc", payment_id="pay_xyz"):
            logger.info("Applying verified payment")
    """

    def __init__(self, **fields):
        self.fields = fields
        self._token = None

    def __enter__(self):
        self._token = _context.set({**_context.get(), **self.fields})
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        _context.reset(self._token)
