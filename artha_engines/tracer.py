"""
artha_engines.tracer -- ARTHA_ENGINE_TRACE records for engine calls.

Each public engine function is decorated with ``@traced_engine``.  After
the call returns, one INFO record is logged with the engine name and
version, how long the call took, and a fingerprint of the arguments
named in ``fingerprint_fields``.  Two calls with equal inputs log the
same fingerprint, whether the arguments were passed by position or by
keyword.

The decorator only logs.  It does not catch, retry or alter results; if
the engine raises, nothing is traced.

Usage:
    @traced_engine("tax", "1.0", fingerprint_fields=("amount", "tax_type"))
    def calculate_invoice_tax(amount, tax_type, mode, has_npwp=True):
        ...
"""

from __future__ import annotations

import dataclasses
import functools
import hashlib
import inspect
import time
from collections.abc import Callable, Mapping
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from artha_kernel.logging_config import get_logger

logger = get_logger("engines.tracer")

TRACE_MESSAGE = "ARTHA_ENGINE_TRACE"
FINGERPRINT_LENGTH = 16


def _canonicalize(value: Any) -> str:
    """
    Stable text form of an argument.

    Enums hash like their value, so ``TaxType.PPH23`` and ``"pph23"``
    share a fingerprint.  Record dataclasses are expanded field by field.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, Enum):
        return _canonicalize(value.value)
    if isinstance(value, (str, int, float, Decimal)):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Mapping):
        pairs = sorted((str(k), _canonicalize(v)) for k, v in value.items())
        return "{" + ",".join(f"{k}:{v}" for k, v in pairs) + "}"
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return _canonicalize({
            f.name: getattr(value, f.name) for f in dataclasses.fields(value)
        })
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(map(_canonicalize, value)) + "]"
    return str(value)


def compute_input_fingerprint(
    fingerprint_fields: tuple[str, ...],
    arguments: Mapping[str, Any],
) -> str:
    """SHA-256 over ``name=value`` pairs, first 16 hex chars. Absent names hash as null."""
    text = "|".join(
        f"{name}={_canonicalize(arguments.get(name))}" for name in fingerprint_fields
    )
    return hashlib.sha256(text.encode("utf-8")).hexdigest()[:FINGERPRINT_LENGTH]


def traced_engine(
    engine_name: str,
    engine_version: str,
    fingerprint_fields: tuple[str, ...] = (),
) -> Callable:
    """Wrap an engine function so each successful call logs a trace record."""

    def decorator(func: Callable) -> Callable:
        signature = inspect.signature(func)

        def fingerprint(args: tuple, kwargs: dict) -> str:
            if not fingerprint_fields:
                return ""
            try:
                arguments = signature.bind_partial(*args, **kwargs).arguments
            except TypeError:
                # the call itself will raise with the proper message
                arguments = kwargs
            return compute_input_fingerprint(fingerprint_fields, arguments)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            started = time.perf_counter()
            result = func(*args, **kwargs)
            elapsed_ms = (time.perf_counter() - started) * 1000

            logger.info(TRACE_MESSAGE, extra={
                "trace_type": TRACE_MESSAGE,
                "engine_name": engine_name,
                "engine_version": engine_version,
                "function": func.__qualname__,
                "input_fingerprint": fingerprint(args, kwargs),
                "duration_ms": round(elapsed_ms, 2),
            })
            return result

        return wrapper

    return decorator
