"""
NPWP (Nomor Pokok Wajib Pajak) formatting and validation.

The Indonesian tax ID is 15 digits, displayed as ``XX.XXX.XXX.X-XXX.XXX``.
Validity is the digit count only; no checksum is applied.

Usage:
    from artha_engines.npwp import format_npwp, validate_npwp

    format_npwp("012345678901234")  # '01.234.567.8-901.234'
    format_npwp("0123")             # '01.23'
    validate_npwp("01.234.567.8-901.234")  # True
"""

from __future__ import annotations

import re

from artha_kernel.exceptions import InvalidNPWPError

NPWP_LENGTH = 15

# (group size, separator placed before the group)
_MASK: tuple[tuple[int, str], ...] = (
    (2, ""),
    (3, "."),
    (3, "."),
    (1, "."),
    (3, "-"),
    (3, "."),
)

_NON_DIGIT = re.compile(r"[^0-9]")


def strip_non_digits(value: str) -> str:
    """Remove every character that is not 0-9."""
    return _NON_DIGIT.sub("", value or "")


def format_npwp(value: str) -> str:
    """
    Apply the display mask to the digits of ``value``.

    Partial input yields only the groups that have digits; digits past the
    fifteenth are dropped.  Re-formatting the output gives the same string.
    """
    digits = strip_non_digits(value)[:NPWP_LENGTH]
    out: list[str] = []
    pos = 0
    for size, separator in _MASK:
        group = digits[pos:pos + size]
        if not group:
            break
        out.append(separator + group)
        pos += size
    return "".join(out)


def validate_npwp(value: str) -> bool:
    """True when ``value`` holds exactly 15 digits once separators are removed."""
    return len(strip_non_digits(value)) == NPWP_LENGTH


def normalize_npwp(value: str) -> str:
    """
    Return the 15 bare digits of a valid NPWP.

    Raises:
        InvalidNPWPError: the digit count is not 15.
    """
    digits = strip_non_digits(value)
    if len(digits) != NPWP_LENGTH:
        raise InvalidNPWPError(value, len(digits))
    return digits
