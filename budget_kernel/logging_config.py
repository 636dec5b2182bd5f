"""
Structured JSON logging for the budget kernel.

Every record under the ``budget_kernel`` logger is written as one JSON
object per line.  Fields bound with ``LogContext.bind()`` (the HTTP request
id, the kind and key of the entity being created) are merged into every
record logged while the binding is active, in this thread or task.

Usage::

    logger = get_logger("services.budget_ledger")
    with LogContext.bind(entity_kind="fund", entity_key="F1"):
        logger.info("entity_created", extra={"seq": 3})
"""

__all__ = [
    "StructuredFormatter",
    "LogContext",
    "get_logger",
    "configure_logging",
    "reset_logging",
]

import json
import logging
import sys
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, date, datetime
from enum import Enum
from typing import Any

from budget_kernel.exceptions import BudgetKernelError

LOGGER_ROOT = "budget_kernel"

# ---------------------------------------------------------------------------
# Context
# ---------------------------------------------------------------------------

CONTEXT_FIELDS = ("request_id", "entity_kind", "entity_key")

_context: ContextVar[dict[str, str] | None] = ContextVar(
    "budget_log_context", default=None
)


class LogContext:
    """Request-scoped fields merged into every log record."""

    @staticmethod
    def get_all() -> dict[str, str]:
        return dict(_context.get() or {})

    @staticmethod
    def clear() -> None:
        _context.set(None)

    @staticmethod
    @contextmanager
    def bind(**fields: str | None) -> Iterator[None]:
        """
        Add *fields* for the duration of the block, then restore the
        previous context.  None values leave a field unchanged.

        Raises:
            ValueError: a field name outside CONTEXT_FIELDS.
        """
        unknown = sorted(set(fields) - set(CONTEXT_FIELDS))
        if unknown:
            raise ValueError(f"Unknown log context fields: {', '.join(unknown)}")
        merged = LogContext.get_all()
        merged.update({k: v for k, v in fields.items() if v is not None})
        token = _context.set(merged)
        try:
            yield
        finally:
            _context.reset(token)


# ---------------------------------------------------------------------------
# Formatter
# ---------------------------------------------------------------------------

# Attributes every LogRecord has; anything else came in through ``extra``.
_RECORD_ATTRS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None))
) | {"message", "taskName"}


def _json_default(obj: Any) -> Any:
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    # UUID, Decimal and anything else
    return str(obj)


class StructuredFormatter(logging.Formatter):
    """One JSON object per record: envelope, context, extra, exception."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(LogContext.get_all())

        for key, value in vars(record).items():
            if key not in _RECORD_ATTRS and key not in payload:
                payload[key] = value

        if record.exc_info and record.exc_info[1] is not None:
            payload.update(self._exception_fields(record.exc_info[1]))
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=_json_default)

    @staticmethod
    def _exception_fields(exc: BaseException) -> dict[str, Any]:
        fields: dict[str, Any] = {
            "exc_type": type(exc).__name__,
            "exc_message": str(exc),
        }
        if isinstance(exc, BudgetKernelError):
            fields["exc_code"] = exc.code
            for key, value in exc.to_details().items():
                fields[f"exc_{key}"] = value
        return fields


# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------


def get_logger(name: str) -> logging.Logger:
    """Logger *name* under the budget_kernel namespace."""
    return logging.getLogger(f"{LOGGER_ROOT}.{name}")


_configured = False
_lock = threading.Lock()


def configure_logging(
    *,
    level: int | str = logging.INFO,
    handler: logging.Handler | None = None,
) -> None:
    """
    Attach a JSON handler to the budget_kernel logger.

    Only the first call has an effect until reset_logging().  *level* takes
    a number or a name such as ``"DEBUG"``; *handler* defaults to stderr.
    """
    global _configured
    with _lock:
        if _configured:
            return
        _configured = True

    root = logging.getLogger(LOGGER_ROOT)
    root.setLevel(level)
    root.propagate = False

    handler = handler or logging.StreamHandler(sys.stderr)
    handler.setFormatter(StructuredFormatter())
    root.addHandler(handler)


def reset_logging() -> None:
    """Remove handlers and allow configure_logging() again.  Tests only."""
    global _configured
    with _lock:
        _configured = False
    root = logging.getLogger(LOGGER_ROOT)
    root.handlers.clear()
    root.setLevel(logging.WARNING)
