"""
Monthly Report - the current month's paid invoices and proposals as CSV.

The report covers the calendar month containing ``now`` and has three
sections: PAID INVOICES, PROPOSALS, SUMMARY.  ``render_csv`` returns text;
writing it anywhere is the caller's business.

Usage:
    from artha_engines.report import build_monthly_report, render_csv

    report = build_monthly_report(invoices, proposals, now)
    Path(report.filename).write_text(render_csv(report))
"""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from artha_engines.period import align_to, month_window
from artha_kernel.domain.records import InvoiceRecord, ProposalRecord
from artha_kernel.exceptions import InvalidInputError
from artha_kernel.logging_config import get_logger

logger = get_logger("engines.report")


@dataclass(frozen=True)
class MonthlyReport:
    """Current-month records and the summary figures derived from them."""

    generated_at: datetime
    paid_invoices: tuple[InvoiceRecord, ...]
    proposals: tuple[ProposalRecord, ...]

    @property
    def title(self) -> str:
        return f"Artha Monthly Report - {self.generated_at:%B %Y}"

    @property
    def filename(self) -> str:
        return f"artha-report-{self.generated_at:%Y-%m-%d}.csv"

    @property
    def total_revenue(self) -> Decimal:
        return sum((inv.amount for inv in self.paid_invoices), Decimal("0"))

    @property
    def approved_proposals(self) -> int:
        return sum(1 for p in self.proposals if p.is_accepted)

    @property
    def pending_proposals(self) -> int:
        return sum(1 for p in self.proposals if p.is_awaiting)


def build_monthly_report(
    invoices: Iterable[InvoiceRecord],
    proposals: Iterable[ProposalRecord],
    now: datetime,
) -> MonthlyReport:
    """Collect this month's paid invoices and proposals (by creation date)."""
    if not isinstance(now, datetime):
        raise InvalidInputError("now", now, "must be a datetime")
    window = month_window(now)

    paid = tuple(
        inv for inv in invoices
        if inv.is_revenue and window.contains(align_to(inv.created_at, now))
    )
    props = tuple(
        p for p in proposals if window.contains(align_to(p.created_at, now))
    )
    logger.info("monthly_report_built", extra={
        "month": window.label,
        "paid_invoice_count": len(paid),
        "proposal_count": len(props),
    })
    return MonthlyReport(generated_at=now, paid_invoices=paid, proposals=props)


def _amount(value: Decimal) -> str:
    return f"{value:f}"


def render_csv(report: MonthlyReport) -> str:
    """
    Render the report as CSV text with ``\\n`` line endings.

    Invoice dates are given in ``generated_at``'s zone, the same zone
    used to pick the month.
    """
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")

    writer.writerow([report.title])
    writer.writerow([])

    writer.writerow(["PAID INVOICES"])
    writer.writerow(["Invoice Number", "Amount", "Date", "Status"])
    for inv in report.paid_invoices:
        writer.writerow([
            inv.invoice_number or "",
            _amount(inv.amount),
            align_to(inv.created_at, report.generated_at).date().isoformat(),
            inv.status.value,
        ])
    writer.writerow(["Total Paid", _amount(report.total_revenue), "", ""])
    writer.writerow([])

    writer.writerow(["PROPOSALS"])
    writer.writerow(["Title", "Amount", "Status", "Client"])
    for p in report.proposals:
        writer.writerow([
            p.title or "",
            _amount(p.amount),
            p.status.value,
            p.client_name or "Unknown",
        ])
    writer.writerow([])

    writer.writerow(["SUMMARY"])
    writer.writerow(["Total Revenue", _amount(report.total_revenue)])
    writer.writerow(["Total Proposals", len(report.proposals)])
    writer.writerow(["Approved Proposals", report.approved_proposals])
    writer.writerow(["Pending Proposals", report.pending_proposals])

    return buf.getvalue()
