"""
Structured Logging Utilities for Gatekeeper
Provides acting-principal propagation and structured log output
"""

import json
import logging
from contextvars import ContextVar
from datetime import datetime, UTC
from typing import Any, Dict, Optional

from .config import GatekeeperSettings

# Principal issuing the command currently being executed (set by the dispatcher)
actor_ctx: ContextVar[Optional[int]] = ContextVar("actor", default=None)

PLAIN_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class StructuredLogFormatter(logging.Formatter):
    """
    JSON formatter for structured logging with actor propagation

    Usage:
        handler = logging.StreamHandler()
        handler.setFormatter(StructuredLogFormatter())
        logger.addHandler(handler)
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON with the acting principal"""
        log_obj = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        actor = actor_ctx.get()
        if actor is not None:
            log_obj["actor"] = actor

        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        context = getattr(record, "context", None)
        if isinstance(context, dict):
            log_obj.update(context)

        return json.dumps(log_obj, default=str)


def get_logger(name: str, structured: bool = False) -> logging.Logger:
    """
    Get a logger instance with optional structured output

    Args:
        name: Logger name (usually __name__)
        structured: If True, use JSON structured output

    Returns:
        Logger instance
    """
    logger = logging.getLogger(name)

    if structured and not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(StructuredLogFormatter())
        logger.addHandler(handler)
        logger.propagate = False

    return logger


def configure_logging(settings: GatekeeperSettings) -> logging.Logger:
    """
    Configure the package logger from settings.

    Host applications that already own logging configuration can skip this;
    every module logs through logging.getLogger(__name__) regardless.
    """
    root = logging.getLogger("gatekeeper")
    root.setLevel(settings.log_level)

    if not root.handlers:
        handler = logging.StreamHandler()
        if settings.structured_logging:
            handler.setFormatter(StructuredLogFormatter())
        else:
            handler.setFormatter(logging.Formatter(PLAIN_FORMAT))
        root.addHandler(handler)

    return root


def log_with_context(
    logger: logging.Logger,
    level: str,
    message: str,
    extra: Optional[Dict[str, Any]] = None
) -> None:
    """
    Log with automatic actor context inclusion

    Usage:
        log_with_context(logger, 'info', 'Group created', {'group': 'vip'})
    """
    log_data = dict(extra or {})
    actor = actor_ctx.get()
    if actor is not None:
        log_data["actor"] = actor

    log_fn = getattr(logger, level.lower())
    log_fn(message, extra={"context": log_data})


def info_with_context(logger: logging.Logger, message: str, **kwargs) -> None:
    """Log info with actor context"""
    log_with_context(logger, "info", message, kwargs)


def warning_with_context(logger: logging.Logger, message: str, **kwargs) -> None:
    """Log warning with actor context"""
    log_with_context(logger, "warning", message, kwargs)
