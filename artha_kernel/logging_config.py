"""
JSON-lines logging for the Artha core.

Every module logs through ``get_logger("<area>.<module>")`` which hangs
off the ``artha`` logger.  Messages are snake_case event names; the data
goes in ``extra={...}``.  ``configure_logging()`` attaches one handler
whose formatter writes each record as a single JSON object, merging in
the request-scoped fields held by LogContext.
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
from contextvars import ContextVar
from datetime import UTC, date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

ROOT_LOGGER_NAME = "artha"

_CONTEXT_FIELDS = ("correlation_id", "actor_id", "request_id")

_context: ContextVar[dict[str, str]] = ContextVar("artha_log_context", default={})


class LogContext:
    """
    Request-scoped fields copied onto every log line.

    Backed by a single ContextVar, so values follow asyncio tasks and
    threads without leaking between them.  ``actor_id`` is the signed-in
    user whose invoices are being aggregated.
    """

    @staticmethod
    def set(
        *,
        correlation_id: str | None = None,
        actor_id: str | None = None,
        request_id: str | None = None,
    ) -> None:
        """Update the given fields; None leaves a field untouched."""
        updates = {
            "correlation_id": correlation_id,
            "actor_id": actor_id,
            "request_id": request_id,
        }
        merged = dict(_context.get())
        merged.update({k: v for k, v in updates.items() if v is not None})
        _context.set(merged)

    @staticmethod
    def get_all() -> dict[str, str]:
        current = _context.get()
        return {name: current[name] for name in _CONTEXT_FIELDS if name in current}

    @staticmethod
    def clear() -> None:
        _context.set({})

    @staticmethod
    def bind(**fields: str | None) -> "_BoundContext":
        """
        Scope fields to a ``with`` block.

        Usage::

            with LogContext.bind(request_id=req.id):
                service.dashboard_stats(invoices, proposals)
        """
        unknown = set(fields) - set(_CONTEXT_FIELDS)
        if unknown:
            raise TypeError(f"unknown log context field(s): {sorted(unknown)}")
        return _BoundContext(fields)


class _BoundContext:

    def __init__(self, fields: dict[str, str | None]):
        self._fields = {k: v for k, v in fields.items() if v is not None}
        self._token = None

    def __enter__(self) -> type[LogContext]:
        self._token = _context.set({**_context.get(), **self._fields})
        return LogContext

    def __exit__(self, *exc_info: Any) -> None:
        _context.reset(self._token)


# Attributes every LogRecord carries; anything else came from ``extra``.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "taskName"}

# Error attributes already surfaced as exc_type / exc_code.
_SKIPPED_EXC_ATTRS = frozenset({"args", "code"})


def _to_json(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    return str(value)


def _exception_fields(exc: BaseException) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "exc_type": type(exc).__name__,
        "exc_message": str(exc),
    }
    code = getattr(exc, "code", None)
    if code is not None:
        fields["exc_code"] = code
    # field / value / reason and friends from ArthaError subclasses
    for name, value in vars(exc).items():
        if name.startswith("_") or name in _SKIPPED_EXC_ATTRS:
            continue
        fields[f"exc_{name}"] = value
    return fields


class StructuredFormatter(logging.Formatter):
    """
    One JSON object per record.

    Key order: ts, level, logger, message, context fields, extras, then
    exception details.  Extras never overwrite the fixed keys.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **LogContext.get_all(),
        }
        entry.update(
            (k, v)
            for k, v in record.__dict__.items()
            if k not in _RESERVED_ATTRS and k not in entry
        )

        if record.exc_info and record.exc_info[1] is not None:
            entry.update(_exception_fields(record.exc_info[1]))
            entry["traceback"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=_to_json)


def get_logger(name: str) -> logging.Logger:
    """Logger named ``artha.<name>``, e.g. ``get_logger("engines.tax")``."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


_state_lock = threading.Lock()
_handler_installed = False


def configure_logging(
    *,
    level: int = logging.INFO,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """
    Install the JSON handler on the ``artha`` logger.

    Only the first call has any effect until ``reset_logging()``.  Records
    do not propagate to the root logger, so host applications keep their
    own formatting.
    """
    global _handler_installed
    with _state_lock:
        if _handler_installed:
            return
        _handler_installed = True

    target = handler or logging.StreamHandler(stream or sys.stderr)
    target.setFormatter(StructuredFormatter())

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level)
    root.propagate = False
    root.addHandler(target)


def reset_logging() -> None:
    """Drop the handler and restore stdlib defaults. Used by tests."""
    global _handler_installed
    with _state_lock:
        _handler_installed = False
    root = logging.getLogger(ROOT_LOGGER_NAME)
    for h in list(root.handlers):
        root.removeHandler(h)
    root.setLevel(logging.WARNING)
    root.propagate = True
