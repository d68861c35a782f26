"""
artha_services.tax_service -- Tax calculation and recap for callers.

Responsibility:
    Bind a rate table (from artha_config unless one is given) to the tax
    engine, and build the tax recap for a year, defaulting to the
    clock's current year.

Architecture position:
    Services -- composes artha_config and artha_engines.tax/tax_summary.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from artha_config import get_tax_rate_config
from artha_config.schema import TaxRateConfig
from artha_engines.tax import PPh21Result, TaxCalculator, TaxComputationResult
from artha_engines.tax_summary import TaxYearSummary, build_tax_summary
from artha_kernel.domain.clock import Clock, SystemClock
from artha_kernel.domain.records import InvoiceRecord
from artha_kernel.domain.values import TaxMode, TaxType


class TaxService:
    """
    Invoice tax and yearly recap.

    ``calculate`` returns amounts rounded to the rate table's currency
    (whole Rupiah by default) unless ``rounded=False``.
    """

    def __init__(self, clock: Clock | None = None, config: TaxRateConfig | None = None):
        self._clock = clock or SystemClock()
        self._calculator = TaxCalculator(config or get_tax_rate_config())

    @property
    def config(self) -> TaxRateConfig:
        return self._calculator.config

    def calculate(
        self,
        amount: Any,
        tax_type: TaxType | str,
        mode: TaxMode | str = TaxMode.EXCLUDE,
        has_npwp: bool = True,
        rounded: bool = True,
    ) -> TaxComputationResult:
        result = self._calculator.calculate(amount, tax_type, mode, has_npwp)
        return result.rounded() if rounded else result

    def pph21(self, gross_income: Any, has_npwp: bool = True) -> PPh21Result:
        return self._calculator.pph21(gross_income, has_npwp)

    def summary(self, invoices: Iterable[InvoiceRecord], year: int | None = None) -> TaxYearSummary:
        now = self._clock.now()
        if year is None:
            year = now.year
        return build_tax_summary(invoices, year, now.tzinfo)
