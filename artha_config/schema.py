"""
Configuration Schema (``artha_config.schema``).

Responsibility
--------------
Frozen dataclasses describing the statutory withholding rate table.  The
defaults are the rates in force under PP 58/2023 and PMK 141/2015; a YAML
file can replace any of them without code changes.

Invariants enforced
-------------------
* All rates are percentages (2 means 2 %), non-negative Decimals.
* The deemed-profit ratio lies in (0, 1].
* PPh 21 brackets start at 0, are contiguous and ascending, and only the
  last bracket is unbounded.

Failure modes
-------------
* ``ConfigurationError`` on any violated invariant.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from artha_kernel.domain.currency import CurrencyRegistry
from artha_kernel.exceptions import ConfigurationError


@dataclass(frozen=True)
class TaxBracket:
    """One band of the Pasal 17 progressive schedule."""

    lower: Decimal
    upper: Decimal | None  # None = unbounded
    rate: Decimal  # percent

    def __post_init__(self) -> None:
        if self.lower < 0:
            raise ConfigurationError("pph21_brackets", "bracket lower bound cannot be negative")
        if self.upper is not None and self.upper <= self.lower:
            raise ConfigurationError(
                "pph21_brackets",
                f"bracket upper bound {self.upper} must exceed lower bound {self.lower}",
            )
        if self.rate < 0:
            raise ConfigurationError("pph21_brackets", "bracket rate cannot be negative")

    @property
    def width(self) -> Decimal | None:
        """Size of the band, None if unbounded."""
        if self.upper is None:
            return None
        return self.upper - self.lower


# Pasal 17 UU PPh as amended by PP 58/2023
DEFAULT_PPH21_BRACKETS: tuple[TaxBracket, ...] = (
    TaxBracket(Decimal("0"), Decimal("60000000"), Decimal("5")),
    TaxBracket(Decimal("60000000"), Decimal("250000000"), Decimal("15")),
    TaxBracket(Decimal("250000000"), Decimal("500000000"), Decimal("25")),
    TaxBracket(Decimal("500000000"), Decimal("5000000000"), Decimal("30")),
    TaxBracket(Decimal("5000000000"), None, Decimal("35")),
)


@dataclass(frozen=True)
class TaxRateConfig:
    """
    Statutory rate table for the tax engine.

    Override at instantiation or load from YAML:

        config = TaxRateConfig(pph23_rate_with_npwp=Decimal("2.5"))
        config = load_tax_rate_config(Path("rates.yaml"))

    ``pph21_base_rate`` replaces the progressive schedule with a flat rate
    when set; leave it ``None`` to use ``pph21_brackets``.
    """

    pph21_base_rate: Decimal | None = None
    pph21_surcharge: Decimal = Decimal("20")
    pph21_deemed_profit_ratio: Decimal = Decimal("0.5")
    pph21_brackets: tuple[TaxBracket, ...] = field(default=DEFAULT_PPH21_BRACKETS)
    pph23_rate_with_npwp: Decimal = Decimal("2")
    pph23_rate_without_npwp: Decimal = Decimal("4")
    currency: str = "IDR"

    def __post_init__(self) -> None:
        for name in (
            "pph21_surcharge",
            "pph23_rate_with_npwp",
            "pph23_rate_without_npwp",
        ):
            if getattr(self, name) < 0:
                raise ConfigurationError(name, "rate cannot be negative")

        if self.pph21_base_rate is not None and self.pph21_base_rate < 0:
            raise ConfigurationError("pph21_base_rate", "rate cannot be negative")

        ratio = self.pph21_deemed_profit_ratio
        if ratio <= 0 or ratio > 1:
            raise ConfigurationError(
                "pph21_deemed_profit_ratio", f"must be in (0, 1], got {ratio}"
            )

        if not CurrencyRegistry.is_valid(self.currency):
            raise ConfigurationError("currency", f"unsupported currency {self.currency!r}")

        self._validate_brackets()

    def _validate_brackets(self) -> None:
        brackets = self.pph21_brackets
        if not brackets:
            if self.pph21_base_rate is None:
                raise ConfigurationError(
                    "pph21_brackets", "brackets are required when pph21_base_rate is not set"
                )
            return

        if brackets[0].lower != 0:
            raise ConfigurationError("pph21_brackets", "first bracket must start at 0")
        for prev, nxt in zip(brackets, brackets[1:]):
            if prev.upper is None:
                raise ConfigurationError(
                    "pph21_brackets", "only the last bracket may be unbounded"
                )
            if prev.upper != nxt.lower:
                raise ConfigurationError(
                    "pph21_brackets",
                    f"brackets must be contiguous: {prev.upper} != {nxt.lower}",
                )
        if brackets[-1].upper is not None:
            raise ConfigurationError("pph21_brackets", "last bracket must be unbounded")

    @property
    def surcharge_multiplier(self) -> Decimal:
        """Factor applied to PPh 21 when the earner has no NPWP (1.20 by default)."""
        return 1 + self.pph21_surcharge / 100

    def pph23_rate(self, has_npwp: bool) -> Decimal:
        """PPh 23 percentage for the NPWP status."""
        return self.pph23_rate_with_npwp if has_npwp else self.pph23_rate_without_npwp


DEFAULT_TAX_RATE_CONFIG = TaxRateConfig()
