"""Tests for the annual / monthly withholding recap."""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from artha_engines.tax_summary import TaxPeriodSummary, build_tax_summary
from artha_kernel.exceptions import InvalidInputError
from tests.conftest import make_invoice


class TestBuildTaxSummary:

    def setup_method(self):
        self.invoices = [
            make_invoice(datetime(2024, 1, 10), 10_000_000, "paid",
                         tax_type="pph21", pph_amount=250_000),
            make_invoice(datetime(2024, 3, 2), 1_000_000, "paid",
                         tax_type="pph23", pph_amount=20_000),
            # issued in February although created in March
            make_invoice(datetime(2024, 3, 5), 2_000_000, "paid",
                         tax_type="pph23", pph_amount=40_000, issue_date=date(2024, 2, 28)),
            make_invoice(datetime(2024, 3, 6), 5_000_000, "paid"),
            make_invoice(datetime(2024, 4, 1), 3_000_000, "sent",
                         tax_type="pph23", pph_amount=60_000),
            make_invoice(datetime(2023, 12, 31), 9_000_000, "paid",
                         tax_type="pph21", pph_amount=100_000),
        ]

    def test_annual_totals(self):
        summary = build_tax_summary(self.invoices, 2024)
        annual = summary.annual
        assert annual.tax_month is None
        assert annual.total_gross_income == Decimal("18000000")
        assert annual.total_pph21_paid == Decimal("250000")
        assert annual.total_pph23_withheld == Decimal("60000")
        assert annual.total_net_income == Decimal("17690000")
        assert annual.invoice_count == 4
        assert summary.total_tax == Decimal("310000")

    def test_invoice_counts(self):
        summary = build_tax_summary(self.invoices, 2024)
        assert summary.total_invoices == 5
        assert summary.paid_invoices == 4
        assert summary.invoices_with_tax == 4

    def test_monthly_rows(self):
        summary = build_tax_summary(self.invoices, 2024)
        assert len(summary.months) == 12
        assert [m.tax_month for m in summary.months] == list(range(1, 13))
        assert summary.month(1).total_pph21_paid == Decimal("250000")
        assert summary.month(2).total_pph23_withheld == Decimal("40000")
        assert summary.month(3).total_gross_income == Decimal("6000000")
        assert summary.month(3).invoice_count == 2
        assert summary.month(4).invoice_count == 0

    def test_monthly_rows_sum_to_annual(self):
        summary = build_tax_summary(self.invoices, 2024)
        assert sum((m.total_net_income for m in summary.months), Decimal("0")) == (
            summary.annual.total_net_income
        )

    def test_other_year(self):
        summary = build_tax_summary(self.invoices, 2023)
        assert summary.annual.total_pph21_paid == Decimal("100000")
        assert summary.month(12).invoice_count == 1

    def test_empty_year(self):
        summary = build_tax_summary([], 2025)
        assert summary.total_tax == Decimal("0")
        assert summary.paid_invoices == 0

    @pytest.mark.parametrize("year", [0, -1, "2024", True, 2024.0])
    def test_rejects_bad_year(self, year):
        with pytest.raises(InvalidInputError):
            build_tax_summary([], year)

    def test_creation_day_read_in_given_zone(self):
        wib = timezone(timedelta(hours=7))
        # 31 Jan 20:00 UTC is 1 Feb 03:00 WIB
        invoices = [make_invoice(datetime(2024, 1, 31, 20, 0, tzinfo=timezone.utc), 1_000_000,
                                 "paid", tax_type="pph23", pph_amount=20_000)]
        assert build_tax_summary(invoices, 2024).month(1).invoice_count == 1
        local = build_tax_summary(invoices, 2024, tz=wib)
        assert local.month(1).invoice_count == 0
        assert local.month(2).total_pph23_withheld == Decimal("20000")

    def test_year_boundary_in_given_zone(self):
        wib = timezone(timedelta(hours=7))
        invoices = [make_invoice(datetime(2023, 12, 31, 18, 0, tzinfo=timezone.utc), 500, "paid")]
        assert build_tax_summary(invoices, 2024, tz=wib).paid_invoices == 1
        assert build_tax_summary(invoices, 2023, tz=wib).paid_invoices == 0

    def test_month_bounds(self):
        summary = build_tax_summary([], 2024)
        with pytest.raises(InvalidInputError):
            summary.month(13)

    def test_logged(self, captured_logs):
        build_tax_summary(self.invoices, 2024)
        event = next(r for r in captured_logs() if r["message"] == "tax_summary_built")
        assert event["paid_invoices"] == 4
        assert event["total_pph21"] == "250000"


class TestTaxPeriodSummary:

    def test_add_returns_new_row(self):
        row = TaxPeriodSummary(tax_year=2024, tax_month=3)
        inv = make_invoice(datetime(2024, 3, 1), 1_000_000, "paid",
                           tax_type="pph23", pph_amount=20_000)
        added = row.add(inv)
        assert row.invoice_count == 0
        assert added.invoice_count == 1
        assert added.total_net_income == Decimal("980000")
        assert added.total_tax == Decimal("20000")
