"""
artha_services.dashboard_service -- Clock-driven façade over the dashboard engines.

Responsibility:
    Supply "now" from an injected Clock and delegate to the pure engines
    in artha_engines.period, artha_engines.dashboard and
    artha_engines.report.  Contains no arithmetic of its own.

Architecture position:
    Services -- the only layer that reads the clock.

Usage:
    from artha_kernel.domain.clock import SystemClock
    from artha_services import DashboardService

    service = DashboardService(SystemClock())
    trends = service.trends(invoices + proposals)
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from artha_engines.dashboard import DashboardStats, MonthlyRevenue, compute_dashboard_stats, revenue_series
from artha_engines.period import Metric, PeriodTrends, compute_trends
from artha_engines.report import MonthlyReport, build_monthly_report, render_csv
from artha_kernel.domain.clock import Clock, SystemClock
from artha_kernel.domain.records import FinancialRecord, InvoiceRecord, ProposalRecord
from artha_kernel.logging_config import get_logger

logger = get_logger("services.dashboard")


class DashboardService:
    """Dashboard figures as of the clock's current time."""

    def __init__(self, clock: Clock | None = None):
        self._clock = clock or SystemClock()

    def trends(
        self,
        records: Iterable[FinancialRecord],
        metrics: Sequence[Metric] | None = None,
    ) -> PeriodTrends:
        return compute_trends(records, self._clock.now(), metrics)

    def stats(
        self,
        invoices: Sequence[InvoiceRecord],
        proposals: Sequence[ProposalRecord],
    ) -> DashboardStats:
        return compute_dashboard_stats(invoices, proposals, self._clock.now())

    def revenue_chart(self, invoices: Sequence[InvoiceRecord], months: int = 6) -> list[MonthlyRevenue]:
        return revenue_series(invoices, self._clock.now(), months)

    def monthly_report(
        self,
        invoices: Iterable[InvoiceRecord],
        proposals: Iterable[ProposalRecord],
    ) -> MonthlyReport:
        return build_monthly_report(invoices, proposals, self._clock.now())

    def export_report_csv(
        self,
        invoices: Iterable[InvoiceRecord],
        proposals: Iterable[ProposalRecord],
    ) -> tuple[str, str]:
        """Return ``(filename, csv_text)`` for this month's report."""
        report = self.monthly_report(invoices, proposals)
        logger.info("monthly_report_exported", extra={"filename": report.filename})
        return report.filename, render_csv(report)
