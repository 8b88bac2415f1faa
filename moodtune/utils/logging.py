"""
Structured logging for MoodTune.

Each record is written to stdout as one JSON object per line (or a readable
text line), with the component/operation context and any keyword fields given
to the log call.
"""
import copy
import json
import logging
import sys
import time
import traceback
from contextlib import contextmanager
from dataclasses import dataclass, asdict, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Generator


SECRET_KEYS = ('password', 'secret', 'api_key', 'access_token', 'auth')
REDACTED = "***REDACTED***"


@dataclass
class LogContext:
    """Component and operation a record belongs to."""
    component: str
    operation: str
    metadata: Dict[str, Any] = field(default_factory=dict)


class JSONFormatter(logging.Formatter):
    def format(self, record):
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage()
        }
        context = getattr(record, 'context', None)
        if context is not None:
            entry["context"] = asdict(context)
        entry.update(getattr(record, 'extra_fields', None) or {})
        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc, tb = record.exc_info
            entry["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc),
                "traceback": traceback.format_exception(exc_type, exc, tb)
            }
        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    def __init__(self):
        super().__init__("%(asctime)s %(levelname)-7s %(name)s: %(message)s")

    def format(self, record):
        line = super().format(record)
        context = getattr(record, 'context', None)
        if context is not None:
            line += f" [{context.component}.{context.operation}]"
        fields = getattr(record, 'extra_fields', None)
        if fields:
            line += " " + " ".join(f"{k}={v}" for k, v in fields.items())
        return line


def _configure(name: str, level: str, fmt: str) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter() if fmt == "json" else TextFormatter())
    logger.addHandler(handler)
    logger.propagate = False
    return logger


class StructuredLogger:
    """Logger whose records carry keyword fields and an optional operation context.

    Loggers derived with ``with_context`` or ``operation_context`` share the
    underlying handler; they only add the context to each record.
    """

    def __init__(self, name: str, level: str = "INFO", fmt: str = "json"):
        """
        Args:
            name: Logger name
            level: DEBUG, INFO, WARNING, ERROR or CRITICAL
            fmt: 'json' or 'text'
        """
        self.name = name
        self.fmt = fmt
        self.logger = _configure(name, level, fmt)
        self._context: Optional[LogContext] = None

    def log(self, level: int, message: str, exc_info: bool = False, **fields) -> None:
        self.logger.log(
            level,
            message,
            exc_info=exc_info,
            extra={'context': self._context, 'extra_fields': fields}
        )

    def debug(self, message: str, **fields) -> None:
        self.log(logging.DEBUG, message, **fields)

    def info(self, message: str, **fields) -> None:
        self.log(logging.INFO, message, **fields)

    def warning(self, message: str, **fields) -> None:
        self.log(logging.WARNING, message, **fields)

    def error(self, message: str, exc_info: bool = False, **fields) -> None:
        self.log(logging.ERROR, message, exc_info=exc_info, **fields)

    def metric(self, name: str, value: float, tags: Optional[Dict[str, str]] = None) -> None:
        """Record a numeric measurement as an INFO entry."""
        fields: Dict[str, Any] = {"metric_name": name, "metric_value": value}
        if tags:
            fields["tags"] = tags
        self.info(f"Metric: {name}", **fields)

    def with_context(self, context: LogContext) -> 'StructuredLogger':
        """Return a logger that tags every record with ``context``."""
        bound = copy.copy(self)
        bound._context = context
        return bound

    @contextmanager
    def operation_context(self, component: str, operation: str, **metadata) -> Generator['StructuredLogger', None, None]:
        """Log the start and the outcome of ``operation``, with its duration.

        Yields a logger bound to the operation. An exception escaping the block
        is logged with its traceback and re-raised.
        """
        log = self.with_context(LogContext(component, operation, metadata))
        log.info(f"Starting operation: {operation}", operation_status="started")
        started = time.perf_counter()
        try:
            yield log
        except Exception as e:
            log.error(
                f"Failed operation: {operation}",
                exc_info=True,
                operation_status="failed",
                duration_seconds=time.perf_counter() - started,
                error_type=type(e).__name__,
                error_message=str(e)
            )
            raise
        log.info(
            f"Completed operation: {operation}",
            operation_status="completed",
            duration_seconds=time.perf_counter() - started
        )

    def log_config(self, config: Dict[str, Any], exclude_secrets: bool = True) -> None:
        self.info("Configuration loaded", config=redact_secrets(config) if exclude_secrets else config)


def _is_secret(key: str) -> bool:
    key = key.lower()
    return any(marker in key for marker in SECRET_KEYS)


def redact_secrets(data: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of ``data`` with values under secret-looking keys masked, recursively."""
    redacted = {}
    for key, value in data.items():
        if _is_secret(key):
            redacted[key] = REDACTED if value is not None else None
        elif isinstance(value, dict):
            redacted[key] = redact_secrets(value)
        else:
            redacted[key] = value
    return redacted


def get_logger(name: str, level: str = "INFO", fmt: str = "json") -> StructuredLogger:
    return StructuredLogger(name, level, fmt)
