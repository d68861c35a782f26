"""
Tax Engine - Indonesian withholding tax (PPh 21 / PPh 23) for invoices.

Pure functions with no I/O.  Statutory rates come from a TaxRateConfig
(defaults: PP 58/2023 brackets, 2 % / 4 % PPh 23) passed as a parameter.

Rules:
    pph23  DPP = base.            tax = DPP x 2 % (4 % without NPWP)
    pph21  DPP = 50 % of base.    tax = Pasal 17 schedule on DPP
                                  (x 1.20 without NPWP), or a flat
                                  ``pph21_base_rate`` when configured
    none   pass-through, no tax

Modes:
    exclude  the amount is the base; tax is added on top
             (gross = base + tax, net = base).
    include  the amount is gross; the base is solved exactly from
             base + tax(base) = amount (net = base, tax = amount - base).

Amounts stay unrounded Decimals; call ``result.rounded()`` at the display
boundary to get whole Rupiah.

Usage:
    from decimal import Decimal
    from artha_engines.tax import calculate_invoice_tax

    result = calculate_invoice_tax(Decimal("1000000"), "pph23", "exclude")
    result.tax_amount    # Decimal('20000')
    result.gross_amount  # Decimal('1020000')
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Any

from artha_config.schema import DEFAULT_TAX_RATE_CONFIG, TaxRateConfig
from artha_engines.tracer import traced_engine
from artha_kernel.domain.currency import CurrencyRegistry
from artha_kernel.domain.values import TaxMode, TaxType, coerce_enum, to_amount
from artha_kernel.exceptions import InvalidInputError
from artha_kernel.logging_config import get_logger

logger = get_logger("engines.tax")

_ZERO = Decimal("0")
_ONE = Decimal("1")
_HUNDRED = Decimal("100")


@dataclass(frozen=True)
class TaxComputationResult:
    """
    Outcome of one invoice tax calculation.

    ``tax_rate`` is the effective percentage applied to ``dpp``, so
    ``tax_amount == dpp * tax_rate / 100`` and
    ``net_amount + tax_amount == gross_amount`` (except for the stand-alone
    PPh 23 withholding, where the tax is deducted from the gross).
    """

    gross_amount: Decimal
    dpp: Decimal  # Dasar Pengenaan Pajak
    tax_rate: Decimal  # percent of dpp
    tax_amount: Decimal
    net_amount: Decimal
    tax_type: TaxType
    mode: TaxMode
    has_npwp: bool
    is_applicable: bool = True
    currency: str = "IDR"

    def rounded(self, currency: str | None = None) -> TaxComputationResult:
        """
        Copy with every amount rounded half-up to the currency's precision.

        The amount the caller entered stays fixed (gross in include mode,
        net in exclude mode) and the other is derived from the rounded
        tax, so the sum identity survives rounding.
        """
        code = currency or self.currency

        def r(value: Decimal) -> Decimal:
            return CurrencyRegistry.round(value, code)

        tax = r(self.tax_amount)
        if self.mode is TaxMode.INCLUDE:
            gross = r(self.gross_amount)
            net = gross - tax
        else:
            net = r(self.net_amount)
            gross = net + tax
        if not self.is_applicable:
            gross = net = r(self.gross_amount)
        return replace(
            self,
            gross_amount=gross,
            dpp=r(self.dpp),
            tax_amount=tax,
            net_amount=net,
            currency=code,
        )


@dataclass(frozen=True)
class TaxBracketLine:
    """Tax computed inside one Pasal 17 bracket."""

    lower: Decimal
    upper: Decimal  # capped at the DPP for the last bracket used
    rate: Decimal  # percent
    taxable_amount: Decimal
    tax_amount: Decimal


@dataclass(frozen=True)
class PPh21Result:
    """Detailed PPh 21 breakdown for a freelancer's gross income."""

    gross_income: Decimal
    dpp: Decimal
    brackets: tuple[TaxBracketLine, ...]
    base_tax: Decimal
    npwp_surcharge: Decimal
    total_tax: Decimal
    net_income: Decimal
    has_npwp: bool

    @property
    def effective_rate(self) -> Decimal:
        """Total tax as a percentage of gross income."""
        if self.gross_income == 0:
            return _ZERO
        return self.total_tax / self.gross_income * _HUNDRED


# ---------------------------------------------------------------------------
# Schedule
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class _Segment:
    lower: Decimal
    upper: Decimal | None
    rate: Decimal  # fraction, surcharge included


def _schedule(tax_type: TaxType, has_npwp: bool, config: TaxRateConfig) -> tuple[_Segment, ...]:
    """Piecewise-linear withholding schedule over DPP."""
    if tax_type is TaxType.PPH23:
        return (_Segment(_ZERO, None, config.pph23_rate(has_npwp) / _HUNDRED),)

    multiplier = _ONE if has_npwp else config.surcharge_multiplier
    if config.pph21_base_rate is not None:
        return (_Segment(_ZERO, None, config.pph21_base_rate / _HUNDRED * multiplier),)
    return tuple(
        _Segment(b.lower, b.upper, b.rate / _HUNDRED * multiplier)
        for b in config.pph21_brackets
    )


def _deemed_ratio(tax_type: TaxType, config: TaxRateConfig) -> Decimal:
    if tax_type is TaxType.PPH21:
        return config.pph21_deemed_profit_ratio
    return _ONE


def _withhold(dpp: Decimal, schedule: tuple[_Segment, ...]) -> Decimal:
    tax = _ZERO
    for seg in schedule:
        if dpp <= seg.lower:
            break
        top = dpp if seg.upper is None else min(dpp, seg.upper)
        tax += (top - seg.lower) * seg.rate
    return tax


def _solve_base(gross: Decimal, ratio: Decimal, schedule: tuple[_Segment, ...]) -> Decimal:
    """
    Invert ``base + withhold(base * ratio) = gross``.

    The left side is strictly increasing and linear inside each segment,
    so the segment is found by comparing against the gross value at each
    segment's lower edge, then solved in closed form.
    """
    chosen = schedule[0]
    tax_below = _ZERO
    cumulative = _ZERO
    for seg in schedule:
        gross_at_lower = seg.lower / ratio + cumulative
        if gross_at_lower > gross:
            break
        chosen, tax_below = seg, cumulative
        if seg.upper is not None:
            cumulative += (seg.upper - seg.lower) * seg.rate
    return (gross - tax_below + chosen.rate * chosen.lower) / (_ONE + chosen.rate * ratio)


def _require_bool_npwp(has_npwp: Any) -> bool:
    if not isinstance(has_npwp, bool):
        raise InvalidInputError("has_npwp", has_npwp, "must be a bool")
    return has_npwp


def _effective_rate(tax: Decimal, dpp: Decimal) -> Decimal:
    if dpp == 0:
        return _ZERO
    return tax / dpp * _HUNDRED


def _pass_through(amount: Decimal, tax_type: TaxType, mode: TaxMode, has_npwp: bool,
                  currency: str) -> TaxComputationResult:
    return TaxComputationResult(
        gross_amount=amount,
        dpp=amount,
        tax_rate=_ZERO,
        tax_amount=_ZERO,
        net_amount=amount,
        tax_type=tax_type,
        mode=mode,
        has_npwp=has_npwp,
        is_applicable=False,
        currency=currency,
    )


# ---------------------------------------------------------------------------
# Public functions
# ---------------------------------------------------------------------------


@traced_engine("tax", "1.0", fingerprint_fields=("amount", "tax_type", "mode", "has_npwp"))
def calculate_invoice_tax(
    amount: Any,
    tax_type: TaxType | str,
    mode: TaxMode | str,
    has_npwp: bool = True,
    config: TaxRateConfig | None = None,
) -> TaxComputationResult:
    """
    Calculate withholding tax for an invoice amount.

    Args:
        amount: Non-negative amount; gross in include mode, base in exclude.
        tax_type: pph21, pph23 or none.
        mode: include or exclude.
        has_npwp: Whether the earner holds an NPWP.
        config: Rate table (default: statutory rates).

    Raises:
        InvalidInputError: negative or non-numeric amount, unknown
            tax type or mode.
    """
    amount = to_amount(amount, "amount")
    tax_type = coerce_enum(TaxType, tax_type, "tax_type")
    mode = coerce_enum(TaxMode, mode, "mode")
    has_npwp = _require_bool_npwp(has_npwp)
    config = config or DEFAULT_TAX_RATE_CONFIG

    if tax_type is TaxType.NONE or amount == 0:
        logger.debug("tax_not_applicable", extra={
            "tax_type": tax_type.value,
            "amount": str(amount),
        })
        return _pass_through(amount, tax_type, mode, has_npwp, config.currency)

    schedule = _schedule(tax_type, has_npwp, config)
    ratio = _deemed_ratio(tax_type, config)

    if mode is TaxMode.EXCLUDE:
        base = amount
        dpp = base * ratio
        tax = _withhold(dpp, schedule)
        gross = base + tax
    else:
        gross = amount
        base = _solve_base(gross, ratio, schedule)
        dpp = base * ratio
        tax = gross - base

    result = TaxComputationResult(
        gross_amount=gross,
        dpp=dpp,
        tax_rate=_effective_rate(tax, dpp),
        tax_amount=tax,
        net_amount=base,
        tax_type=tax_type,
        mode=mode,
        has_npwp=has_npwp,
        currency=config.currency,
    )

    logger.info("invoice_tax_calculated", extra={
        "tax_type": tax_type.value,
        "mode": mode.value,
        "has_npwp": has_npwp,
        "dpp": str(dpp),
        "tax_amount": str(tax),
        "gross_amount": str(gross),
    })
    return result


@traced_engine("tax.pph21", "1.0", fingerprint_fields=("gross_income", "has_npwp"))
def calculate_pph21(
    gross_income: Any,
    has_npwp: bool = True,
    config: TaxRateConfig | None = None,
) -> PPh21Result:
    """
    PPh 21 for freelance income with a per-bracket breakdown.

    The tax is withheld from the income: ``net_income = gross - total_tax``.
    With a flat ``pph21_base_rate`` configured the breakdown holds a single
    unbounded line.
    """
    gross = to_amount(gross_income, "gross_income")
    has_npwp = _require_bool_npwp(has_npwp)
    config = config or DEFAULT_TAX_RATE_CONFIG
    dpp = gross * config.pph21_deemed_profit_ratio

    if config.pph21_base_rate is not None:
        bands = ((_ZERO, None, config.pph21_base_rate),)
    else:
        bands = tuple((b.lower, b.upper, b.rate) for b in config.pph21_brackets)

    lines: list[TaxBracketLine] = []
    base_tax = _ZERO
    for lower, upper, rate in bands:
        if dpp <= lower:
            break
        top = dpp if upper is None else min(dpp, upper)
        taxable = top - lower
        line_tax = taxable * rate / _HUNDRED
        lines.append(TaxBracketLine(
            lower=lower,
            upper=top,
            rate=rate,
            taxable_amount=taxable,
            tax_amount=line_tax,
        ))
        base_tax += line_tax

    surcharge = _ZERO if has_npwp else base_tax * config.pph21_surcharge / _HUNDRED
    total = base_tax + surcharge

    logger.debug("pph21_calculated", extra={
        "dpp": str(dpp),
        "bracket_count": len(lines),
        "total_tax": str(total),
        "has_npwp": has_npwp,
    })

    return PPh21Result(
        gross_income=gross,
        dpp=dpp,
        brackets=tuple(lines),
        base_tax=base_tax,
        npwp_surcharge=surcharge,
        total_tax=total,
        net_income=gross - total,
        has_npwp=has_npwp,
    )


@traced_engine("tax.pph23", "1.0", fingerprint_fields=("amount", "has_npwp"))
def calculate_pph23(
    amount: Any,
    has_npwp: bool = True,
    config: TaxRateConfig | None = None,
) -> TaxComputationResult:
    """
    PPh 23 withheld by the client from an invoice amount.

    Withholding is subtracted, not added: ``gross = dpp = amount`` and
    ``net = amount - tax``.
    """
    amount = to_amount(amount, "amount")
    has_npwp = _require_bool_npwp(has_npwp)
    config = config or DEFAULT_TAX_RATE_CONFIG
    rate = config.pph23_rate(has_npwp)
    tax = amount * rate / _HUNDRED
    return TaxComputationResult(
        gross_amount=amount,
        dpp=amount,
        tax_rate=rate,
        tax_amount=tax,
        net_amount=amount - tax,
        tax_type=TaxType.PPH23,
        mode=TaxMode.INCLUDE,
        has_npwp=has_npwp,
        is_applicable=amount > 0,
        currency=config.currency,
    )


class TaxCalculator:
    """
    Tax functions bound to one rate table.

    Pure - no I/O.  Useful when a caller loads a custom rate file once and
    runs many calculations against it.
    """

    def __init__(self, config: TaxRateConfig | None = None) -> None:
        self.config = config or DEFAULT_TAX_RATE_CONFIG

    def calculate(
        self,
        amount: Any,
        tax_type: TaxType | str,
        mode: TaxMode | str = TaxMode.EXCLUDE,
        has_npwp: bool = True,
    ) -> TaxComputationResult:
        return calculate_invoice_tax(amount, tax_type, mode, has_npwp, self.config)

    def pph21(self, gross_income: Any, has_npwp: bool = True) -> PPh21Result:
        return calculate_pph21(gross_income, has_npwp, self.config)

    def pph23(self, amount: Any, has_npwp: bool = True) -> TaxComputationResult:
        return calculate_pph23(amount, has_npwp, self.config)

    def rate_for(self, tax_type: TaxType | str, has_npwp: bool = True) -> Decimal:
        """
        Nominal rate percentage for a tax type.

        PPh 23 returns the statutory rate; PPh 21 returns the flat base rate
        when configured, else the first bracket rate, with the NPWP surcharge
        applied.
        """
        tax_type = coerce_enum(TaxType, tax_type, "tax_type")
        has_npwp = _require_bool_npwp(has_npwp)
        if tax_type is TaxType.NONE:
            return _ZERO
        if tax_type is TaxType.PPH23:
            return self.config.pph23_rate(has_npwp)
        nominal = self.config.pph21_base_rate
        if nominal is None:
            nominal = self.config.pph21_brackets[0].rate
        return nominal if has_npwp else nominal * self.config.surcharge_multiplier
