"""
Tax Summary - annual and monthly withholding recap for SPT preparation.

Pure functions with no I/O.  Aggregates the PPh amount recorded on each
invoice; it does not recompute tax.

Rules:
    - Only paid invoices contribute income and tax.
    - An invoice belongs to the month of its issue date, or of its
      creation timestamp when no issue date was recorded.
    - net income = gross income - PPh 21 - PPh 23.

Usage:
    from artha_engines.tax_summary import build_tax_summary

    summary = build_tax_summary(invoices, year=2024)
    summary.annual.total_pph23_withheld
    summary.months[2].invoice_count   # March
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import tzinfo
from decimal import Decimal

from artha_engines.tracer import traced_engine
from artha_kernel.domain.records import InvoiceRecord
from artha_kernel.domain.values import TaxType
from artha_kernel.exceptions import InvalidInputError
from artha_kernel.logging_config import get_logger

logger = get_logger("engines.tax_summary")

_ZERO = Decimal("0")


@dataclass(frozen=True)
class TaxPeriodSummary:
    """Recap row for one month, or for the whole year when ``tax_month`` is None."""

    tax_year: int
    tax_month: int | None
    total_gross_income: Decimal = _ZERO
    total_pph21_paid: Decimal = _ZERO
    total_pph23_withheld: Decimal = _ZERO
    total_net_income: Decimal = _ZERO
    invoice_count: int = 0

    @property
    def total_tax(self) -> Decimal:
        return self.total_pph21_paid + self.total_pph23_withheld

    def add(self, invoice: InvoiceRecord) -> TaxPeriodSummary:
        """Return a new row with ``invoice`` folded in."""
        pph21 = invoice.pph_amount if invoice.tax_type is TaxType.PPH21 else _ZERO
        pph23 = invoice.pph_amount if invoice.tax_type is TaxType.PPH23 else _ZERO
        return TaxPeriodSummary(
            tax_year=self.tax_year,
            tax_month=self.tax_month,
            total_gross_income=self.total_gross_income + invoice.amount,
            total_pph21_paid=self.total_pph21_paid + pph21,
            total_pph23_withheld=self.total_pph23_withheld + pph23,
            total_net_income=self.total_net_income + invoice.amount - pph21 - pph23,
            invoice_count=self.invoice_count + 1,
        )


@dataclass(frozen=True)
class TaxYearSummary:
    """A year's recap: the annual row, twelve monthly rows, invoice counts."""

    year: int
    annual: TaxPeriodSummary
    months: tuple[TaxPeriodSummary, ...]
    total_invoices: int
    paid_invoices: int
    invoices_with_tax: int

    @property
    def total_tax(self) -> Decimal:
        return self.annual.total_tax

    def month(self, month: int) -> TaxPeriodSummary:
        """Row for a 1-based month number."""
        if not 1 <= month <= 12:
            raise InvalidInputError("month", month, "must be between 1 and 12")
        return self.months[month - 1]


@traced_engine("tax_summary", "1.0", fingerprint_fields=("year", "tz"))
def build_tax_summary(
    invoices: Iterable[InvoiceRecord],
    year: int,
    tz: tzinfo | None = None,
) -> TaxYearSummary:
    """
    Recap withholding tax for ``year``.

    Invoices without an issue date are placed by creation day.  Pass the
    dashboard's zone as ``tz`` so an invoice created just after midnight
    local time lands in the same month the dashboard shows it in.

    Raises:
        InvalidInputError: year is not a positive int.
    """
    if isinstance(year, bool) or not isinstance(year, int) or year < 1:
        raise InvalidInputError("year", year, "must be a positive integer")

    annual = TaxPeriodSummary(tax_year=year, tax_month=None)
    months = [TaxPeriodSummary(tax_year=year, tax_month=m) for m in range(1, 13)]
    total = paid = with_tax = 0

    for invoice in invoices:
        day = invoice.tax_date_in(tz)
        if day.year != year:
            continue
        total += 1
        if invoice.tax_type is not TaxType.NONE:
            with_tax += 1
        if not invoice.is_revenue:
            continue
        paid += 1
        annual = annual.add(invoice)
        months[day.month - 1] = months[day.month - 1].add(invoice)

    logger.info("tax_summary_built", extra={
        "year": year,
        "paid_invoices": paid,
        "total_pph21": str(annual.total_pph21_paid),
        "total_pph23": str(annual.total_pph23_withheld),
    })

    return TaxYearSummary(
        year=year,
        annual=annual,
        months=tuple(months),
        total_invoices=total,
        paid_invoices=paid,
        invoices_with_tax=with_tax,
    )
