"""
Currency -- how many decimals an invoice amount is settled in.

Tax results are computed at full Decimal precision and only rounded at
presentation time (``TaxComputationResult.rounded``), using the table
below.  The figures are settlement precision, not ISO 4217 minor units:
Rupiah has two minor units on paper but is invoiced in whole Rupiah.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import ClassVar


@dataclass(frozen=True)
class CurrencyInfo:
    code: str
    decimal_places: int
    name: str


def _table(*rows: tuple[str, int, str]) -> dict[str, CurrencyInfo]:
    return {code: CurrencyInfo(code, places, name) for code, places, name in rows}


def _normalize(code: object) -> str | None:
    if not isinstance(code, str):
        return None
    return code.strip().upper() or None


class CurrencyRegistry:
    """Lookup of settlement precision by currency code (case-insensitive)."""

    _KNOWN: ClassVar[dict[str, CurrencyInfo]] = _table(
        ("IDR", 0, "Indonesian Rupiah"),
        # Clients abroad usually pay in one of these
        ("USD", 2, "US Dollar"),
        ("SGD", 2, "Singapore Dollar"),
        ("AUD", 2, "Australian Dollar"),
        ("EUR", 2, "Euro"),
        ("GBP", 2, "British Pound"),
        ("MYR", 2, "Malaysian Ringgit"),
        ("JPY", 0, "Japanese Yen"),
        ("KRW", 0, "South Korean Won"),
        ("KWD", 3, "Kuwaiti Dinar"),
    )

    DEFAULT_DECIMAL_PLACES: ClassVar[int] = 2

    @classmethod
    def is_valid(cls, code: str) -> bool:
        return cls.get_info(code) is not None

    @classmethod
    def get_info(cls, code: str) -> CurrencyInfo | None:
        key = _normalize(code)
        return cls._KNOWN.get(key) if key else None

    @classmethod
    def get_decimal_places(cls, code: str) -> int:
        """Settlement decimals; unknown codes fall back to two."""
        info = cls.get_info(code)
        if info is None:
            return cls.DEFAULT_DECIMAL_PLACES
        return info.decimal_places

    @classmethod
    def round(cls, amount: Decimal, code: str) -> Decimal:
        """Half-up rounding, so Rp 19,607.50 settles as Rp 19,608."""
        quantum = Decimal(1).scaleb(-cls.get_decimal_places(code))
        return amount.quantize(quantum, rounding=ROUND_HALF_UP)
