# ============================================================================
# STRUCTURED LOGGING
# ============================================================================
# STATUS: Core - Structured logging with context
# PURPOSE: Consistent, queryable logging for probes and requests
# ============================================================================
"""
Structured Logging

Provides structured logging for the health service. Output is either
human-readable (development) or one JSON object per line (production,
LOG_FORMAT=json) so log shippers can index it.

Features:
- Context fields (request_id, check, category) carried across awaits
- JSON output for log aggregation
- Request log lines for the HTTP middleware

Usage:
    from core.logging import get_logger, log_context

    logger = get_logger("health.executor")

    with log_context(category="readiness"):
        logger.info("Running checks")
"""

import json
import logging
import os
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field, asdict, replace
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union


@dataclass(frozen=True)
class LogContext:
    """
    Context for structured logging.

    Stored in a ContextVar so concurrent check tasks each see their own
    fields (asyncio copies the context when a task is created).
    """
    request_id: Optional[str] = None
    method: Optional[str] = None
    path: Optional[str] = None
    category: Optional[str] = None
    check: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict, excluding None values."""
        result = {}
        for key, value in asdict(self).items():
            if value is not None and key != "extra":
                result[key] = value
        if self.extra:
            result.update(self.extra)
        return result


_current_context: ContextVar[LogContext] = ContextVar("log_context", default=LogContext())


def get_current_context() -> LogContext:
    """Get current logging context."""
    return _current_context.get()


@contextmanager
def log_context(**kwargs):
    """
    Context manager for adding logging context.

    Unknown keyword arguments are merged into ``extra``.

    Example:
        with log_context(request_id="abc", category="readiness"):
            logger.info("Aggregating")
    """
    parent = get_current_context()
    known = {k: v for k, v in kwargs.items() if k in ("request_id", "method", "path", "category", "check")}
    extra = {k: v for k, v in kwargs.items() if k not in known}
    new_context = replace(parent, **known, extra={**parent.extra, **extra})

    token = _current_context.set(new_context)
    try:
        yield new_context
    finally:
        _current_context.reset(token)


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs log records as JSON for easy parsing by log aggregators.
    """

    def __init__(self, service: Optional[str] = None, include_source: bool = True):
        super().__init__()
        self.service = service
        self.include_source = include_source

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": _utc_timestamp(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if self.service:
            log_data["service"] = self.service

        context_dict = get_current_context().to_dict()
        if context_dict:
            log_data["context"] = context_dict

        if hasattr(record, "data") and record.data:
            log_data["data"] = record.data

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if self.include_source:
            log_data["source"] = {
                "file": record.filename,
                "line": record.lineno,
                "function": record.funcName,
            }

        return json.dumps(log_data, default=str)


class HumanFormatter(logging.Formatter):
    """
    Human-readable formatter for development.

    Includes context fields inline for easy reading.
    """

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
        level = record.levelname.ljust(8)

        context = get_current_context()
        context_parts = []
        if context.request_id:
            context_parts.append(f"req={context.request_id}")
        if context.category:
            context_parts.append(f"category={context.category}")
        if context.check:
            context_parts.append(f"check={context.check}")

        context_str = f" [{', '.join(context_parts)}]" if context_parts else ""

        data_str = ""
        if hasattr(record, "data") and record.data:
            data_str = f" {record.data}"

        result = f"{timestamp} {level} {record.name}{context_str}: {record.getMessage()}{data_str}"

        if record.exc_info:
            result += f"\n{self.formatException(record.exc_info)}"

        return result


class ContextLogger(logging.LoggerAdapter):
    """
    Logger adapter that attaches structured data to log records.

    ``extra={...}`` passed at the call site is moved under ``record.data``
    so formatters can render it without clashing with LogRecord attributes.
    """

    def process(self, msg, kwargs):
        data = dict(kwargs.pop("extra", None) or {})
        kwargs["extra"] = {"data": data}
        return msg, kwargs


def get_logger(name: str) -> ContextLogger:
    """
    Get a context-aware logger.

    Args:
        name: Logger name (e.g., "health.executor")
    """
    return ContextLogger(logging.getLogger(name), {})


def configure_logging(
    level: Union[str, int] = "INFO",
    json_output: bool = False,
    service: Optional[str] = None,
) -> None:
    """
    Configure logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_output: Use JSON format (for production)
        service: Service name stamped on JSON records
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    if json_output or os.getenv("LOG_FORMAT", "").lower() == "json":
        formatter = StructuredFormatter(service=service)
    else:
        formatter = HumanFormatter()

    root = logging.getLogger()
    root.setLevel(level)

    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    root.addHandler(handler)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "LogContext",
    "StructuredFormatter",
    "HumanFormatter",
    "ContextLogger",
    "get_logger",
    "configure_logging",
    "log_context",
    "get_current_context",
]
