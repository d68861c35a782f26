"""
Values -- tax vocabularies and boundary coercion helpers.

Responsibility:
    Defines the tax type and calculation mode vocabularies shared by records
    and the tax engine, plus the helpers every value object uses to turn
    loosely typed input (strings, floats, ISO timestamps) into Decimal,
    enum and datetime values.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - Amounts are Decimal, never float; floats are converted through str().
    - Amounts are finite and non-negative.
    - Enum values outside the vocabulary are rejected, not defaulted.

Failure modes:
    - NegativeAmountError, InvalidInputError, UnknownEnumValueError,
      InvalidTimestampError (see artha_kernel.exceptions).
"""

from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, TypeVar

from artha_kernel.exceptions import (
    InvalidInputError,
    InvalidTimestampError,
    NegativeAmountError,
    UnknownEnumValueError,
)

E = TypeVar("E", bound=Enum)


class TaxType(str, Enum):
    """Indonesian withholding tax applied to an invoice."""

    PPH21 = "pph21"  # Individual / freelancer income
    PPH23 = "pph23"  # Payment for services
    NONE = "none"


class TaxMode(str, Enum):
    """Whether the entered amount already contains the tax."""

    INCLUDE = "include"  # Amount is gross; tax is backed out of it
    EXCLUDE = "exclude"  # Amount is the base; tax is added on top


def to_amount(value: Any, field: str = "amount") -> Decimal:
    """
    Convert a numeric input to a non-negative Decimal.

    Floats go through ``str()`` so that 0.1 stays 0.1.

    Raises:
        InvalidInputError: value is None, a bool, not numeric, NaN or infinite.
        NegativeAmountError: value is below zero.
    """
    if value is None or isinstance(value, bool):
        raise InvalidInputError(field, value, "amount is required")
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value).strip())
        except (InvalidOperation, ValueError) as e:
            raise InvalidInputError(field, value, "not a number") from e
    if not amount.is_finite():
        raise InvalidInputError(field, value, "amount must be finite")
    if amount < 0:
        raise NegativeAmountError(field, value)
    return amount


def coerce_enum(enum_cls: type[E], value: Any, field: str) -> E:
    """Return the member of ``enum_cls`` matching ``value`` (case-insensitive)."""
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        for member in enum_cls:
            if member.value == normalized:
                return member
    raise UnknownEnumValueError(field, value, [m.value for m in enum_cls])


def to_datetime(value: Any, field: str = "created_at") -> datetime:
    """
    Parse a timestamp from the data API.

    Accepts ``datetime``, ``date`` (midnight), or an ISO-8601 string,
    including the ``Z`` suffix.

    Raises:
        InvalidTimestampError: value is missing or cannot be parsed.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if isinstance(value, str) and value.strip():
        try:
            return datetime.fromisoformat(value.strip())
        except ValueError as e:
            raise InvalidTimestampError(field, value) from e
    raise InvalidTimestampError(field, value, "timestamp is required")


def to_date(value: Any, field: str) -> date | None:
    """Parse an optional calendar date (``None`` and empty strings pass through)."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return to_datetime(value, field).date()
