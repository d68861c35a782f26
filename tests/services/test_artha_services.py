"""
Tests for the clock-driven service façades.

Services only supply ``now`` and the rate table; the figures themselves
are covered by the engine tests, so these check the wiring.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from artha_config import ENV_VAR
from artha_config.schema import TaxRateConfig
from artha_kernel.domain.clock import DeterministicClock
from artha_services import DashboardService, ProposalStatsService, TaxService
from tests.conftest import make_invoice, make_proposal


class TestDashboardService:

    def setup_method(self):
        self.invoices = [
            make_invoice(datetime(2024, 3, 2), 5_000_000, "paid", invoice_number="INV-1"),
            make_invoice(datetime(2024, 2, 2), 4_000_000, "paid"),
        ]
        self.proposals = [make_proposal(datetime(2024, 3, 3), 1_000_000, "approved")]

    def test_trends_use_clock(self, deterministic_clock):
        service = DashboardService(deterministic_clock)
        result = service.trends(self.invoices)
        assert result.now == deterministic_clock.now()
        assert result.trends["revenue"] == 25

    def test_clock_moves_buckets(self, deterministic_clock):
        service = DashboardService(deterministic_clock)
        deterministic_clock.set_time(datetime(2024, 4, 2))
        result = service.trends(self.invoices)
        assert result.current["revenue"] == Decimal("0")
        assert result.previous["revenue"] == Decimal("5000000")

    def test_stats(self, deterministic_clock):
        stats = DashboardService(deterministic_clock).stats(self.invoices, self.proposals)
        assert stats.total_revenue == Decimal("9000000")
        assert stats.acceptance_rate == 100

    def test_revenue_chart(self, deterministic_clock):
        chart = DashboardService(deterministic_clock).revenue_chart(self.invoices, months=2)
        assert [(p.month, p.revenue) for p in chart] == [
            (2, Decimal("4000000")), (3, Decimal("5000000")),
        ]

    def test_export_report_csv(self, deterministic_clock, captured_logs):
        filename, text = DashboardService(deterministic_clock).export_report_csv(
            self.invoices, self.proposals,
        )
        assert filename == "artha-report-2024-03-15.csv"
        assert "INV-1,5000000,2024-03-02,paid" in text
        assert any(r["message"] == "monthly_report_exported" for r in captured_logs())

    def test_default_clock_is_system(self):
        result = DashboardService().trends([])
        assert result.now.tzinfo is not None


class TestProposalStatsService:

    def test_stats(self, deterministic_clock):
        proposals = [make_proposal(datetime(2024, 3, 14), 2_000_000, "sent")]
        stats = ProposalStatsService(deterministic_clock).stats(proposals)
        assert stats.new_this_week == 1
        assert stats.pipeline_value == Decimal("2000000")


class TestTaxService:

    def test_rounded_by_default(self, deterministic_clock):
        r = TaxService(deterministic_clock).calculate(Decimal("1000000"), "pph23", "include")
        assert r.tax_amount == Decimal("19608")
        assert r.net_amount == Decimal("980392")

    def test_unrounded_on_request(self, deterministic_clock):
        r = TaxService(deterministic_clock).calculate(
            Decimal("1000000"), "pph23", "include", rounded=False,
        )
        assert r.tax_amount != Decimal("19608")

    def test_explicit_config(self):
        service = TaxService(config=TaxRateConfig(pph23_rate_with_npwp=Decimal("3")))
        assert service.calculate(Decimal("100"), "pph23").tax_amount == Decimal("3")

    def test_config_from_environment(self, tmp_path, monkeypatch):
        path = tmp_path / "rates.yaml"
        path.write_text("pph23_rate_with_npwp: 2.5\n")
        monkeypatch.setenv(ENV_VAR, str(path))
        service = TaxService()
        assert service.config.pph23_rate_with_npwp == Decimal("2.5")

    def test_pph21(self):
        assert TaxService().pph21(Decimal("10000000")).total_tax == Decimal("250000")

    def test_summary_defaults_to_clock_year(self, deterministic_clock):
        invoices = [
            make_invoice(datetime(2024, 1, 5), 1_000_000, "paid",
                         tax_type="pph23", pph_amount=20_000),
            make_invoice(datetime(2023, 1, 5), 1_000_000, "paid",
                         tax_type="pph23", pph_amount=20_000),
        ]
        summary = TaxService(deterministic_clock).summary(invoices)
        assert summary.year == 2024
        assert summary.paid_invoices == 1

    def test_summary_uses_clock_zone(self):
        wib = timezone(timedelta(hours=7))
        clock = DeterministicClock(datetime(2024, 2, 10, 9, 0, tzinfo=wib))
        invoices = [make_invoice(datetime(2024, 1, 31, 20, 0, tzinfo=timezone.utc), 100, "paid")]
        summary = TaxService(clock).summary(invoices)
        assert summary.month(2).invoice_count == 1
        assert summary.month(1).invoice_count == 0

    @pytest.mark.parametrize("year", [2023, 2024])
    def test_summary_explicit_year(self, deterministic_clock, year):
        assert TaxService(deterministic_clock).summary([], year).year == year
