"""
Typed Exception Hierarchy for the Artha calculation core.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

The engines in this repository are pure arithmetic over data handed in by an
external data service. When that data is wrong the failure must be precise:
callers decide whether to skip a malformed row, show an error, or abort an
aggregation, and they cannot do that by parsing message strings.

Every error therefore:
  1. Has a TYPED exception class (catch by type, not message)
  2. Has a CODE attribute (machine-readable, API-safe)
  3. Carries structured DATA (field, offending value, reason)

Example:
    try:
        record = parse_invoice(row)
    except NegativeAmountError as e:
        log.warning("negative_amount", extra={"field": e.field, "value": e.value})
    except InvalidInputError as e:
        api_response(code=e.code, field=e.field)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    ArthaError (base)
    |
    +-- InvalidInputError
    |   +-- NegativeAmountError
    |   +-- InvalidTimestampError
    |   +-- UnknownEnumValueError
    |   +-- InvalidNPWPError
    |
    +-- ConfigurationError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                  | When Raised
----------------|-----------------------|------------------------------------------
Input           | INVALID_INPUT         | Value cannot be interpreted
                | NEGATIVE_AMOUNT       | Amount below zero
                | INVALID_TIMESTAMP     | Missing or unparseable timestamp
                | UNKNOWN_ENUM_VALUE    | Status / tax type / mode not recognized
                | INVALID_NPWP          | Tax ID is not 15 digits
----------------|-----------------------|------------------------------------------
Configuration   | CONFIGURATION_ERROR   | Rate table missing or malformed

A zero previous-period value in a trend calculation is NOT an error: the
trend is defined to be 0%.
"""

from typing import Any, Iterable


class ArthaError(Exception):
    """
    Base exception for all Artha core errors.

    All subclasses have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "ARTHA_ERROR"


# Input-related exceptions


class InvalidInputError(ArthaError):
    """A value handed to the core cannot be used as given."""

    code: str = "INVALID_INPUT"

    def __init__(self, field: str, value: Any, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field} {value!r}: {reason}")


class NegativeAmountError(InvalidInputError):
    """Amount is below zero."""

    code: str = "NEGATIVE_AMOUNT"

    def __init__(self, field: str, value: Any):
        super().__init__(field, value, "amount cannot be negative")


class InvalidTimestampError(InvalidInputError):
    """Timestamp is missing or cannot be parsed."""

    code: str = "INVALID_TIMESTAMP"

    def __init__(self, field: str, value: Any, reason: str = "not an ISO-8601 timestamp"):
        super().__init__(field, value, reason)


class UnknownEnumValueError(InvalidInputError):
    """Enum value (status, tax type, mode) is not part of the vocabulary."""

    code: str = "UNKNOWN_ENUM_VALUE"

    def __init__(self, field: str, value: Any, allowed: Iterable[str]):
        self.allowed = tuple(allowed)
        super().__init__(
            field, value, f"expected one of {', '.join(self.allowed)}"
        )


class InvalidNPWPError(InvalidInputError):
    """NPWP does not contain exactly 15 digits."""

    code: str = "INVALID_NPWP"

    def __init__(self, value: Any, digit_count: int):
        self.digit_count = digit_count
        super().__init__(
            "npwp", value, f"expected 15 digits, got {digit_count}"
        )


# Configuration exceptions


class ConfigurationError(ArthaError):
    """Rate table or other configuration is missing or malformed."""

    code: str = "CONFIGURATION_ERROR"

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Configuration error in {source}: {reason}")
